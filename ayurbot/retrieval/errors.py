"""Failure taxonomy for the chat pipeline.

Every exception that escapes the pipeline is mapped to exactly one
``ErrorCategory``; the mapping is total, ``GENERIC`` being the catch-all.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

TRANSIENT_STATUS = 503
FORBIDDEN_STATUS = 403
RATE_LIMITED_STATUS = 429


class StageTimeoutError(RuntimeError):
    """A pipeline stage did not complete within its time budget."""

    def __init__(self, stage: str, timeout: float) -> None:
        super().__init__(f"{stage} timed out after {timeout:.1f}s")
        self.stage = stage
        self.timeout = timeout


class RetryExhaustedError(RuntimeError):
    """Retry loop finished without producing a result."""


class ErrorCategory(str, Enum):
    CONFIGURATION = "configuration"
    CAPACITY = "capacity"
    GENERIC = "generic"


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    category: ErrorCategory
    status_code: int
    body: Dict[str, Any]


def status_of(exc: BaseException) -> Optional[int]:
    """Best-effort HTTP-style status attached to an exception."""

    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def is_transient(exc: BaseException) -> bool:
    """True when the upstream signalled temporary unavailability."""

    return status_of(exc) == TRANSIENT_STATUS


def classify_error(exc: BaseException) -> ClassifiedError:
    message = str(exc)
    lowered = message.lower()
    status = status_of(exc)

    if "api key" in lowered or status == FORBIDDEN_STATUS:
        return ClassifiedError(
            category=ErrorCategory.CONFIGURATION,
            status_code=500,
            body={
                "error": "Configuration issue with AI service",
                "details": "API key problem",
            },
        )

    if "quota" in lowered or status == RATE_LIMITED_STATUS:
        return ClassifiedError(
            category=ErrorCategory.CAPACITY,
            status_code=503,
            body={
                "error": "Service temporarily unavailable due to quota limits",
                "details": "Try again later",
            },
        )

    return ClassifiedError(
        category=ErrorCategory.GENERIC,
        status_code=500,
        body={
            "error": "Chat service temporarily unavailable",
            "details": message or "Unknown error",
            "errorType": type(exc).__name__,
        },
    )


class ChatFailure(Exception):
    """Carries a classified pipeline failure up to the HTTP layer."""

    def __init__(self, classified: ClassifiedError) -> None:
        super().__init__(classified.body.get("error"))
        self.classified = classified
