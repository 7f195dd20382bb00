from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("device_manager.errors")

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


class DeviceError(Exception):
    """Base class for every error the device service raises on purpose."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DeviceError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidFieldError(ValidationError):
    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(f"Invalid value '{value}' for field '{field}': {reason}")
        self.field = field
        self.value = value
        self.reason = reason


class BadRequestError(ValidationError):
    pass


class ImmutableFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' cannot be changed after the device is created.")
        self.field = field


class AlreadyExistsError(DeviceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, serial_number: Any) -> None:
        super().__init__(f"Device with Serial Number {serial_number} already exists.")
        self.serial_number = serial_number


class NotFoundError(DeviceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, serial_number: Any) -> None:
        super().__init__(f"Device with Serial Number {serial_number} was not found.")
        self.serial_number = serial_number


class DuplicateKeyError(DeviceError):
    """Raised by the gateway when storage rejects a second row for a serial number."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, serial_number: Any) -> None:
        super().__init__(f"Duplicate key for Serial Number {serial_number}.")
        self.serial_number = serial_number


class UnexpectedError(DeviceError):
    def __init__(self, message: str = UNEXPECTED_ERROR_MESSAGE) -> None:
        super().__init__(message)


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"error": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def device_error_handler(request: Request, exc: DeviceError):
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("request.failed", exc_info=exc, extra={"extra_data": {"path": request.url.path}})
        return ErrorEnvelope(status_code=exc.status_code, message=UNEXPECTED_ERROR_MESSAGE)
    logger.warning(
        exc.message,
        extra={"extra_data": {"path": request.url.path, "error_type": type(exc).__name__}},
    )
    return ErrorEnvelope(status_code=exc.status_code, message=exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        extra={"extra_data": {"path": request.url.path, "errors": errors}},
    )
    return ErrorEnvelope(
        status_code=status.HTTP_400_BAD_REQUEST,
        message="Request validation failed",
        details=errors,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    return ErrorEnvelope(status_code=exc.status_code, message=message, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("request.failed", exc_info=exc, extra={"extra_data": {"path": request.url.path}})
    return ErrorEnvelope(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, message=UNEXPECTED_ERROR_MESSAGE)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(DeviceError, device_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
