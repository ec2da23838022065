"""
Custom exception hierarchy for meowpair.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class AppException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(AppException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            details={"field": field} if field else {},
        )


class AuthError(AppException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Missing or invalid credentials."):
        super().__init__(message=message)


class NotFoundError(AppException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, key: Any):
        super().__init__(
            message=f"{resource} {key} not found.",
            details={"resource": resource, "key": str(key)},
        )


class ItemUnavailableError(AppException):
    http_status = status.HTTP_409_CONFLICT
    code = "ITEM_UNAVAILABLE"

    def __init__(self, item_id: int):
        super().__init__(
            message=f"Marketplace item {item_id} is not available for purchase.",
            details={"item_id": item_id},
        )


class CreationExhaustedError(AppException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "CREATION_EXHAUSTED"

    def __init__(self, attempts: int, address: str | None = None):
        super().__init__(
            message=f"Unable to allocate a unique fid after {attempts} attempts.",
            details={"attempts": attempts, "address": address} if address else {"attempts": attempts},
        )


class StoreError(AppException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORE_ERROR"

    def __init__(self, message: str = "Internal server error.", detail: str | None = None):
        super().__init__(
            message=message,
            details={"error": detail} if detail else {},
        )


class MarketplaceUnavailableError(AppException):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "MARKETPLACE_UNAVAILABLE"

    def __init__(self, reason: str):
        super().__init__(message=f"Marketplace unavailable: {reason}")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.code, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 400 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
