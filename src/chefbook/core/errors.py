"""Application error taxonomy and its mapping onto the JSON response envelope."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class UnauthorizedError(AppError):
    status_code = 403
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized access", details: Optional[Any] = None) -> None:
        super().__init__(message, details)


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None) -> None:
        super().__init__(message, details)


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"

    def __init__(self, message: str = "Resource conflict", details: Optional[Any] = None) -> None:
        super().__init__(message, details)


_STATUS_CODES = {
    400: ValidationError.code,
    403: UnauthorizedError.code,
    404: NotFoundError.code,
    409: ConflictError.code,
}


def error_body(code: str, message: str, details: Optional[Any] = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return {"success": False, "error": error}


def code_for_status(status_code: int) -> str:
    if status_code in _STATUS_CODES:
        return _STATUS_CODES[status_code]
    if 400 <= status_code < 500:
        return ValidationError.code
    return AppError.code


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, exc.details),
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError  # noqa: ARG001
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_body(
            ValidationError.code,
            "Request data validation failed",
            exc.errors(),
        ),
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: ARG001
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code_for_status(exc.status_code), message),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_body(AppError.code, "Internal server error"),
    )


def register_error_handlers(application: FastAPI) -> None:
    application.add_exception_handler(AppError, handle_app_error)
    application.add_exception_handler(RequestValidationError, handle_request_validation_error)
    application.add_exception_handler(StarletteHTTPException, handle_http_exception)
    application.add_exception_handler(Exception, handle_unexpected_error)
