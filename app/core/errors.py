"""
Application errors and the centralized exception handlers.

Endpoints raise AppError / NotFoundError; the handlers registered by
register_exception_handlers() turn every failure into the same envelope:

    {"status": "fail" | "error", "message": "..."}

4xx responses use "fail", 5xx responses use "error". Errors raised with
is_operational=False (and any unhandled exception) never expose their
message to the client unless SHOW_ERROR_DETAILS is enabled.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"


class AppError(Exception):
    """An error with an HTTP status and a user-facing message."""

    def __init__(self, message: str, status_code: int = 400, is_operational: bool = True):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.is_operational = is_operational

    @property
    def status(self) -> str:
        return "fail" if self.status_code < 500 else "error"


class NotFoundError(AppError):
    def __init__(self, message: str = "not found"):
        super().__init__(message, status_code=404)


def error_body(status_code: int, message: str, errors: Optional[Any] = None) -> Dict[str, Any]:
    body = {
        "status": "fail" if status_code < 500 else "error",
        "message": message,
    }
    if errors is not None:
        body["errors"] = errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    message = exc.message
    if not exc.is_operational:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        if not settings.SHOW_ERROR_DETAILS:
            message = GENERIC_ERROR_MESSAGE
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(error_body(status.HTTP_400_BAD_REQUEST, "invalid request data", errors)),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    message = str(exc) if settings.SHOW_ERROR_DETAILS else GENERIC_ERROR_MESSAGE
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
