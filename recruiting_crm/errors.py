"""Structured error helpers for API responses."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.message = message
        self.details = details
        self.payload = build_error_payload(self.code, message, details)


class InvalidArgument(AppError):
    """Malformed filter, pagination or body."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_argument"


class NotFound(AppError):
    """Tenant-scoped entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class DuplicateApplication(AppError):
    """An active application already exists for this candidate and position."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_application"


class WriteFailed(AppError):
    """Storage-layer failure during create/update/delete."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "write_failed"


class ConcurrentModification(WriteFailed):
    """Another request updated the same row between our read and write."""

    status_code = status.HTTP_409_CONFLICT
    code = "concurrent_modification"


class AutomationDeliveryFailed(Exception):
    """Automation event could not be delivered. Logged, never surfaced."""


class AuditWriteFailed(Exception):
    """Audit record could not be written. Logged, never surfaced."""


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as invalid_argument with the standard shape."""
    payload = build_error_payload(
        InvalidArgument.code,
        "Request validation failed",
        {"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)
