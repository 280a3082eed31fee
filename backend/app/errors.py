"""Application error taxonomy and the FastAPI handlers that map it to responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that carry their own HTTP status and client-safe message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class UpstreamGatewayError(AppError):
    """The completion API could not be reached or answered with a non-2xx status."""

    status_code = 502


class UpstreamPayloadError(AppError):
    """The completion API answered, but its content was not the JSON we asked for.

    ``kind`` is one of ``empty``, ``no_json``, ``malformed_json`` or
    ``unexpected_shape``. ``raw_content`` keeps the offending text for logs
    and is never sent back to the client.
    """

    status_code = 500

    def __init__(self, message: str, kind: str, raw_content: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.raw_content = raw_content


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
        return JSONResponse(status_code=409, content={"detail": "Resource conflicts with an existing record"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
        content = {"detail": "Internal Server Error"}
        if settings.is_development:
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content)
