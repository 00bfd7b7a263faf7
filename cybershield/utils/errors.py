"""Error taxonomy and standardized error payloads."""
from typing import Any

from fastapi import HTTPException, status


def error_response(code: str, message: str, errors: list[str] | None = None) -> dict[str, Any]:
    """Return a standardized error payload."""

    payload: dict[str, Any] = {"success": False, "code": code, "message": message}
    if errors:
        payload["errors"] = errors
    return payload


class ApiError(HTTPException):
    """HTTP error carrying a standardized payload as its detail."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "ERROR"
    default_message: str = "Unexpected error."

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: list[str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(
            status_code=self.status_code,
            detail=error_response(self.code, self.message, errors),
            headers=headers,
        )


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Invalid data."


class DuplicateEmail(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "DUPLICATE_EMAIL"
    default_message = "Email is already registered."


class InvalidCredentials(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials."


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Invalid or expired token."


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found."


class RateLimited(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"
    default_message = "Too many requests, please try again later."

    def __init__(self, message: str | None = None, *, retry_after: int | None = None) -> None:
        headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
        self.retry_after = retry_after
        super().__init__(message, headers=headers)


class PersistenceFailure(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "PERSISTENCE_FAILURE"
    default_message = "Error processing the request."


__all__ = [
    "error_response",
    "ApiError",
    "ValidationFailed",
    "DuplicateEmail",
    "InvalidCredentials",
    "Unauthorized",
    "NotFound",
    "RateLimited",
    "PersistenceFailure",
]
