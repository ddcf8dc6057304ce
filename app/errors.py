"""Structured errors shared by the API and the client."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": message, "code": code}
    if details is not None:
        payload["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    status_code = 500
    code = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details

    @property
    def payload(self) -> Dict[str, Any]:
        return build_error_payload(self.code, self.message, self.details)


class TransientServiceError(AppError):
    """Injected or real backend failure. Retryable by re-issuing the same intent."""

    status_code = 503
    code = "transient_failure"


class NotFoundError(AppError):
    """Referenced record no longer exists. Not retryable."""

    status_code = 404
    code = "not_found"


class ValidationError(AppError):
    """Request rejected before any mutation was attempted."""

    status_code = 422
    code = "validation_error"


class MutationInProgressError(ValidationError):
    """A new optimistic move was started while a previous one is unsettled."""

    code = "mutation_in_progress"


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Reshape FastAPI's validation errors into the common error body."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=build_error_payload(ValidationError.code, message),
    )


def error_for_status(status_code: int, message: str) -> AppError:
    """Map an HTTP status back to the matching error class (used by the client)."""
    if status_code == 404:
        return NotFoundError(message)
    if status_code in (400, 409, 422):
        return ValidationError(message, status_code=status_code)
    if status_code >= 500:
        return TransientServiceError(message, status_code=status_code)
    return AppError(message, status_code=status_code)
