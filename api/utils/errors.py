# utils/errors.py
"""
Error types for the devotional core and standardized API error responses.

Domain errors:
- InvalidReference: malformed scripture reference; raised to the caller
- FetchFailure: network/HTTP failure, carried as a value inside FetchResult
- GenerationFailure: image provider failure, always absorbed into a placeholder

API errors follow the format: {"error": "error_code", "detail": "optional message"}
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from flask import jsonify

T = TypeVar("T")


# -----------------------------------------------------------------------------
# Domain Errors
# -----------------------------------------------------------------------------

class DevotionalError(Exception):
    """Base exception for devotional core errors."""
    pass


class InvalidReference(DevotionalError, ValueError):
    """Raised when a scripture reference string cannot be parsed."""
    pass


@dataclass(frozen=True)
class FetchFailure:
    """A failed external fetch. Always retryable by the caller."""
    source: str
    target: str
    reason: str
    status: Optional[int] = None

    def __str__(self) -> str:
        status = f" (HTTP {self.status})" if self.status else ""
        return f"{self.source} fetch of {self.target} failed{status}: {self.reason}"


@dataclass(frozen=True)
class GenerationFailure:
    """A failed image generation call; the caller receives a placeholder instead."""
    reason: str
    status: Optional[int] = None


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Outcome of one external call: either a value or a FetchFailure.

    Network operations return this instead of raising so that partial
    successes can be aggregated without unwinding.
    """
    value: Optional[T] = None
    failure: Optional[FetchFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, source: str, target: str, reason: str,
               status: Optional[int] = None) -> "FetchResult[T]":
        return cls(failure=FetchFailure(source, target, reason, status))


# -----------------------------------------------------------------------------
# Standard HTTP Error Responses
# -----------------------------------------------------------------------------

def error_response(
    code: str,
    status: int = 400,
    detail: Optional[str] = None,
    **extra
):
    """
    Create a standardized error response.

    Args:
        code: Machine-readable error code (snake_case)
        status: HTTP status code
        detail: Human-readable explanation (optional)
        **extra: Additional fields to include in response

    Returns:
        Tuple of (jsonify response, status code)
    """
    payload = {"error": code}
    if detail:
        payload["detail"] = detail
    payload.update(extra)
    return jsonify(payload), status


# Not Found (404)
def not_found(resource: str = "resource", detail: str = None):
    """Requested resource does not exist."""
    return error_response("not_found", 404, detail or f"{resource} not found")


# Validation (400)
def missing_field(field: str):
    """Required field is missing."""
    return error_response(f"{field}_required", 400, f"Missing required field: {field}")


def invalid_field(field: str, detail: str = None):
    """Field value is invalid."""
    return error_response(f"invalid_{field}", 400, detail)


# Service Unavailable (503)
def upstream_unavailable(detail: str = None):
    """An external collaborator failed and nothing cached can be served."""
    return error_response("upstream_unavailable", 503, detail)
