"""Common response schemas used across the API.

Every endpoint answers with one of two envelopes: ``ApiResponse`` on
success and ``ErrorResponse`` on failure. Keys are camelCase on the wire.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class APIModel(BaseModel):
    """Base for all API schemas: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(APIModel, Generic[T]):
    """Standard success envelope.

    Attributes:
        status_code: HTTP status code echoed in the body
        data: Payload of the response
        message: Human-readable summary of what happened
        success: Always True
    """

    status_code: int = 200
    data: T
    message: str = "Success"
    success: bool = True


class ErrorDetail(APIModel):
    """Detailed error information for a specific field or issue."""

    field: str | None = Field(None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(APIModel):
    """Standard failure envelope.

    Attributes:
        status_code: HTTP status code echoed in the body
        kind: Error kind (e.g. 'NotFound', 'Forbidden')
        message: Human-readable error message
        errors: Per-field details, empty for general errors
        success: Always False
    """

    status_code: int
    kind: str
    message: str
    errors: list[ErrorDetail] = Field(default_factory=list)
    success: bool = False
    data: None = None


class MessageData(APIModel):
    """Payload for operations that return only a confirmation."""

    detail: str | None = None
