"""
Error classification helpers mapping HTTP outcomes to normalized ErrorCode values.

Implements status-to-code mapping, the retry eligibility rule and the
constructors the adapter uses to turn a failed exchange into a tagged
:class:`ProviderError`.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def classify_status(status: int) -> ErrorCode:
    """Map an HTTP status to an :class:`ErrorCode`.

    Unlisted 5xx statuses map to ``SERVER_ERROR``; anything else unlisted is
    ``UNKNOWN``.
    """
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if status >= 500:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


def is_retryable_status(status: Optional[int]) -> bool:
    """Return True for rate limiting (429) and server-side (>= 500) failures."""
    if status is None:
        return False
    return status == 429 or status >= 500


def from_http_status(provider: str, status: int, body: str) -> ProviderError:
    """Build the tagged error for a non-2xx response."""
    return ProviderError(
        code=classify_status(status),
        message=f"API call to {provider} failed with status {status}: {body}",
        provider=provider,
        status=status,
        body=body,
        retryable=is_retryable_status(status),
    )


def from_transport_error(provider: str, exc: Exception) -> ProviderError:
    """Build the tagged error for a request that never produced a response.

    Transport failures carry no status and are therefore never retried; the
    cascade moves on to the next provider instead.
    """
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        code = ErrorCode.TIMEOUT
    elif isinstance(exc, httpx.TransportError):
        code = ErrorCode.UNAVAILABLE
    else:
        code = ErrorCode.UNKNOWN
    return ProviderError(
        code=code,
        message=f"API call to {provider} failed: {exc.__class__.__name__}: {exc}",
        provider=provider,
    )


def parse_error(provider: str) -> ProviderError:
    """Build the non-retryable error for a response that does not match the schema."""
    return ProviderError(
        code=ErrorCode.VALIDATION,
        message=f"Could not parse a valid response from {provider}.",
        provider=provider,
    )


__all__ = [
    "classify_status",
    "is_retryable_status",
    "from_http_status",
    "from_transport_error",
    "parse_error",
    "_HTTP_STATUS_MAP",
]
