"""Application-level exception types.

Every failure a request can end in is one of these errors. Each subclass
carries the HTTP status it maps to, so handlers and the exception handler
agree on a single ``{"error": message}`` contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for logs.

    Fields are optional; only what is relevant to a given failure is set.
    """

    hint: str
    max_bytes: int
    actual_bytes: int
    retry_after: int
    provider: str
    scope: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message returned to the client.
        details: Optional structured details for debugging/observability.
        headers: Optional extra response headers (e.g. Retry-After).
    """

    code: str
    message: str
    details: ErrorDetails | None = None
    headers: dict[str, str] | None = None

    status_code: ClassVar[int] = 400

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request fields fail validation."""

    status_code = 400


class AuthenticationAppError(AppError):
    """Raised when the admin token or actor id is missing or wrong."""

    status_code = 401


class OriginNotAllowedError(AppError):
    """Raised when the Origin header is not on the allow-list."""

    status_code = 403


class PayloadTooLargeError(AppError):
    """Raised when a JSON body exceeds the endpoint ceiling."""

    status_code = 413


class UnsupportedMediaTypeError(AppError):
    """Raised when a write request is not application/json."""

    status_code = 415


class RateLimitAppError(AppError):
    """Raised when a client exhausts its request budget for a scope."""

    status_code = 429


class ServiceUnavailableAppError(AppError):
    """Raised when a required collaborator or configuration is missing."""

    status_code = 503


class StorageAppError(ServiceUnavailableAppError):
    """Raised when the letter persistence backend fails."""
