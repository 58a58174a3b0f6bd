"""Page/limit query parameters shared by list endpoints."""

from dataclasses import dataclass

from fastapi import Query

from vidtube.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT


@dataclass
class PageParams:
    page: int
    limit: int


def get_page_params(
    page: int = Query(1, ge=1, description="1-indexed page number"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT, description="Items per page"),
) -> PageParams:
    return PageParams(page=page, limit=limit)
