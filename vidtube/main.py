"""Main FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidtube import __version__
from vidtube.config import get_settings
from vidtube.errors import AppError
from vidtube.rate_limiter import limiter
from vidtube.routers import (
    comments,
    dashboard,
    likes,
    playlists,
    subscriptions,
    tweets,
    users,
    videos,
)
from vidtube.schemas.common import ErrorDetail, ErrorResponse

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Status codes raised by the framework itself (unknown route, wrong method...)
HTTP_ERROR_KINDS = {
    status.HTTP_401_UNAUTHORIZED: "Unauthenticated",
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "NotFound",
    status.HTTP_409_CONFLICT: "Conflict",
}

# Create FastAPI app
app = FastAPI(
    title="VidTube API",
    description="Video sharing backend: channels, videos, comments, likes, playlists and tweets",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add rate limiter to app state
app.state.limiter = limiter

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(
    status_code: int, kind: str, message: str, errors: list[ErrorDetail] | None = None
) -> JSONResponse:
    body = ErrorResponse(
        status_code=status_code, kind=kind, message=message, errors=errors or []
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


def _validation_details(errors: list[dict], skip_location: bool) -> list[ErrorDetail]:
    details = []
    for error in errors:
        loc = error.get("loc", ())
        if skip_location:
            loc = loc[1:]  # drop "body" / "query" / "path"
        details.append(
            ErrorDetail(field=".".join(str(part) for part in loc) or None, message=error["msg"])
        )
    return details


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    errors = [ErrorDetail.model_validate(e) for e in exc.errors]
    return _error_response(exc.status_code, exc.kind, exc.message, errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "BadRequest",
        "Invalid request data",
        _validation_details(exc.errors(), skip_location=True),
    )


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Form fields are validated inside the endpoint; report them like body errors."""
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "BadRequest",
        "Invalid request data",
        _validation_details(exc.errors(), skip_location=False),
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return _error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "TooManyRequests",
        f"Rate limit exceeded: {exc.detail}",
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = HTTP_ERROR_KINDS.get(exc.status_code, "BadRequest")
    return _error_response(exc.status_code, kind, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal", "Something went wrong"
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "VidTube API", "version": __version__, "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(users.router, prefix=API_PREFIX)
app.include_router(videos.router, prefix=API_PREFIX)
app.include_router(comments.router, prefix=API_PREFIX)
app.include_router(likes.router, prefix=API_PREFIX)
app.include_router(subscriptions.router, prefix=API_PREFIX)
app.include_router(playlists.router, prefix=API_PREFIX)
app.include_router(tweets.router, prefix=API_PREFIX)
app.include_router(dashboard.router, prefix=API_PREFIX)

# Stored media (avatars, videos, thumbnails) served from the media root
app.mount(
    settings.media_url_prefix,
    StaticFiles(directory=settings.media_root, check_dir=False),
    name="media",
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("vidtube.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
