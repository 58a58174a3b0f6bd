"""Page/limit helpers. Pages are 1-indexed; no total count is computed."""

from collections.abc import Sequence
from typing import TypeVar

from vidtube.errors import BadRequestError

T = TypeVar("T")


def page_offset(page: int, limit: int) -> int:
    """Number of items to skip for ``page`` of size ``limit``."""
    if page < 1:
        raise BadRequestError("page must be at least 1")
    if limit < 1:
        raise BadRequestError("limit must be at least 1")
    return (page - 1) * limit


def paginate(page: int, limit: int, data: Sequence[T]) -> list[T]:
    """Slice ``data`` to one page.

    A page past the end yields a short or empty list, never an error:
    ``paginate(3, 10, range(25))`` is items 20..24.
    """
    skip = page_offset(page, limit)
    return list(data[skip : skip + limit])
