"""Pydantic request/response schemas."""

from vidtube.schemas.common import ApiResponse, APIModel, ErrorDetail, ErrorResponse

__all__ = ["APIModel", "ApiResponse", "ErrorDetail", "ErrorResponse"]
