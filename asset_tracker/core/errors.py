from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("asset_tracker.errors")


class AssetTrackerError(Exception):
    """Base class for failures that map onto a specific HTTP answer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "error"

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class RecordValidationError(AssetTrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(". ".join(self.errors), details={"errors": self.errors})


class DuplicateKeyError(AssetTrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_key"

    def __init__(self, message: str = "Duplicate asset ID") -> None:
        super().__init__(message)


class NotFoundError(AssetTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class AuthError(AssetTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class InvalidCredentialsError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class ForbiddenError(AssetTrackerError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def domain_exception_handler(request: Request, exc: AssetTrackerError):
    return ErrorEnvelope(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


def _describe_validation_error(error: dict[str, Any]) -> str:
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    field = ".".join(location)
    message = error.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [_describe_validation_error(error) for error in exc.errors()]
    return ErrorEnvelope(
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message=". ".join(messages) or "Validation failed",
        details={"errors": messages},
    )


async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "request.failed",
        extra={"extra_data": {"method": request.method, "path": request.url.path}},
    )
    return ErrorEnvelope(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="server_error",
        message="Server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AssetTrackerError, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)


__all__ = [
    "AssetTrackerError",
    "AuthError",
    "DuplicateKeyError",
    "ErrorEnvelope",
    "ForbiddenError",
    "InvalidCredentialsError",
    "NotFoundError",
    "RecordValidationError",
    "register_exception_handlers",
]
