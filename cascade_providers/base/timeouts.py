"""Timeout configuration and deadline helpers for provider calls.

TimeoutConfig
    Dataclass capturing normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and whenever they change. Supported environment variables (all
    optional):
        CASCADE_HTTP_TIMEOUT_SECONDS
        CASCADE_CONNECT_TIMEOUT_SECONDS

Deadline
    Tracks the remaining budget of a caller-supplied deadline across every
    attempt of one cascade invocation.
"""
from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar

from ..config.defaults import DEFAULT_CONNECT_TIMEOUT_SECONDS, DEFAULT_HTTP_TIMEOUT_SECONDS

T = TypeVar("T")


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Read/write/pool timeout of a single request.
        connect_timeout_seconds: Timeout for establishing the connection.
    """

    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse an environment variable as a positive float, else ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(
        [
            os.getenv("CASCADE_HTTP_TIMEOUT_SECONDS", ""),
            os.getenv("CASCADE_CONNECT_TIMEOUT_SECONDS", ""),
        ]
    )
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float("CASCADE_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS),
        connect_timeout_seconds=_parse_env_float(
            "CASCADE_CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT_SECONDS
        ),
    )
    _ENV_GUARD = guard
    return _CACHED


class Deadline:
    """Wall-clock budget shared by every attempt of one invocation.

    A ``Deadline(None)`` never expires and adds no overhead.
    """

    def __init__(self, seconds: Optional[float]) -> None:
        if seconds is not None and seconds <= 0:
            raise ValueError("deadline_seconds must be positive")
        self._loop = asyncio.get_running_loop()
        self._timed_out = False
        self._expires_at = None if seconds is None else self._loop.time() + seconds

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._loop.time())

    def expired(self) -> bool:
        if self._timed_out:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` within the remaining budget.

        Raises:
            asyncio.TimeoutError: When the budget runs out first; the awaitable
                is cancelled.
        """
        remaining = self.remaining()
        if remaining is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=remaining)
        except asyncio.TimeoutError:
            # The loop may fire slightly early; a timeout always ends the budget.
            self._timed_out = True
            raise


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "Deadline",
]
