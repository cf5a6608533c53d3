"""FastAPI application factory for the file tree API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from filebrowser import __version__
from filebrowser.api.rate_limit import RateLimiter
from filebrowser.api.routes import client_address, error_response, router
from filebrowser.config import Settings, get_settings
from filebrowser.errors import (
    AccessDenied,
    Conflict,
    FileTreeError,
    InvalidName,
    MalformedRequest,
    NotADirectory,
    NotAFile,
    NotFound,
)
from filebrowser.filesystem.client import FileTreeService

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins
ERROR_STATUS: list[tuple[type[FileTreeError], int]] = [
    (AccessDenied, 403),
    (NotAFile, 400),
    (NotADirectory, 400),
    (NotFound, 404),
    (InvalidName, 400),
    (Conflict, 409),
    (MalformedRequest, 400),
]


def status_for(error: FileTreeError) -> int:
    """Map an error kind to its HTTP status code."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return 400


async def file_tree_error_handler(request: Request, exc: FileTreeError):
    status_code = status_for(exc)
    logger.warning(f"[ERROR] {client_address(request)} -> {request.method} {request.url.path}: {exc}")
    return error_response(status_code, str(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        logger.info(f"[404] {client_address(request)} -> {request.method} {request.url.path}")
        return error_response(404, f"Route not found: {request.url.path}")
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    missing = sorted(
        {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
    )
    message = f"Invalid or missing parameters: {', '.join(missing)}" if missing else "Invalid request"
    return error_response(400, message)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"[ERROR] {client_address(request)} -> {request.method} {request.url.path} failed")
    return error_response(500, "Internal server error")


def create_app(settings: Settings | None = None, service: FileTreeService | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use (loaded from the environment when omitted)
        service: File tree service (created on settings.root_dir when omitted)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    service = service or FileTreeService(settings.root_dir, create=True)

    app = FastAPI(
        title="filebrowser",
        description="Browse, upload, download, rename and delete files under one root directory.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.service = service
    app.state.limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window=settings.rate_limit_window,
    )

    # Must be added before CORSMiddleware so that 429 responses get CORS headers
    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next):
        if request.method == "OPTIONS" or not request.url.path.startswith("/api/"):
            return await call_next(request)

        ip = client_address(request)
        info = app.state.limiter.check(ip)
        if not info.allowed:
            logger.warning(f"[RATE_LIMIT] {ip} -> blocked")
            return error_response(429, "Too many requests. Please try again later.", info.headers())

        logger.debug(f"[REQUEST] {ip} -> {request.method} {request.url.path}")
        response = await call_next(request)
        response.headers.update(info.headers())
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.add_exception_handler(FileTreeError, file_tree_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(router)
    return app
