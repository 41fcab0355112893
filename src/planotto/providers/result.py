"""Uniform result type returned by every provider call."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Coarse failure category of a provider call."""

    NOT_CONFIGURED = "not_configured"
    RATE_LIMITED = "rate_limited"
    BAD_INPUT = "bad_input"
    UNAVAILABLE = "unavailable"  # auth / availability (401, 403)
    SERVICE_ERROR = "service_error"  # anything else, transport included
    INVALID_RESPONSE = "invalid_response"
    TIMEOUT = "timeout"
    JOB_FAILED = "job_failed"


# User-facing sentences. Status codes, provider names and raw bodies never
# appear here; they go to the log.
USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NOT_CONFIGURED: "The recognition service is temporarily unavailable.",
    ErrorKind.RATE_LIMITED: "The recognition service is overloaded. Please try again later.",
    ErrorKind.BAD_INPUT: "Could not process the photo for recognition.",
    ErrorKind.UNAVAILABLE: "The recognition service is temporarily unavailable.",
    ErrorKind.SERVICE_ERROR: "The recognition service is temporarily unavailable.",
    ErrorKind.INVALID_RESPONSE: "The recognition service returned an invalid response.",
    ErrorKind.TIMEOUT: "The service did not finish in time. Please try again.",
    ErrorKind.JOB_FAILED: "The service could not complete the request.",
}


def error_kind_for_status(status_code: int) -> ErrorKind:
    """Map an HTTP status to one of the coarse user-facing categories."""
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if status_code in (400, 422):
        return ErrorKind.BAD_INPUT
    if status_code in (401, 403):
        return ErrorKind.UNAVAILABLE
    return ErrorKind.SERVICE_ERROR


@dataclass(frozen=True)
class ProviderResult:
    """
    Outcome of one provider call.

    Callers branch only on `success`. On failure `error_message` is always
    one of USER_MESSAGES and `error_kind` says which.
    """

    success: bool
    payload: Any = None
    error_message: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def ok(cls, payload: Any = None) -> "ProviderResult":
        return cls(success=True, payload=payload)

    @classmethod
    def fail(cls, kind: ErrorKind) -> "ProviderResult":
        return cls(success=False, error_message=USER_MESSAGES[kind], error_kind=kind)
