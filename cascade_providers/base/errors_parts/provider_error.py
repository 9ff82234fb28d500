"""
Structured provider error exception type.

Wraps a single provider failure with a normalized `ErrorCode` and an explicit
``retryable`` tag. The retry policy branches on that tag only; it never
inspects status codes or messages itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider key where the error originated (e.g., ``"gemini"``).
        status: HTTP status of the failed response, ``None`` when no response
            was received or the failure happened while parsing a 2xx body.
        body: Raw response body text for non-2xx responses.
        retryable: Kind tag consumed by the retry policy (``True`` for 429 and
            5xx responses).
    """

    code: ErrorCode
    message: str
    provider: str
    status: Optional[int] = None
    body: Optional[str] = None
    retryable: bool = False

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
