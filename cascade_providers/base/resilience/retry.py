from __future__ import annotations

import asyncio
import functools
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from ...config.defaults import INITIAL_BACKOFF_SECONDS, MAX_ATTEMPTS, MAX_JITTER_SECONDS
from ..errors import ProviderError
from ..logging import LogContext, get_logger, normalized_log_event

T = TypeVar("T")

logger = get_logger("cascade.retry")

Sleeper = Callable[[float], Awaitable[None]]


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = MAX_ATTEMPTS
    initial_backoff: float = INITIAL_BACKOFF_SECONDS  # seconds, doubled per attempt
    max_jitter: float = MAX_JITTER_SECONDS  # upper bound (exclusive) of the random offset
    attempt_logger: AttemptLogger | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def delay_for(self, attempt: int, rand: Callable[[], float] = random.random) -> float:
        """Return the sleep before the attempt following ``attempt`` (0-based)."""
        return self.initial_backoff * (2**attempt) + rand() * self.max_jitter


DEFAULT_RETRY_CONFIG = RetryConfig()


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    *,
    sleep: Sleeper = asyncio.sleep,
    rand: Callable[[], float] = random.random,
) -> T:
    """Await ``operation`` under the standardized retry policy.

    - Retries only errors tagged ``retryable`` (429 and 5xx)
    - Exponential backoff ``initial_backoff * 2**attempt`` plus jitter
    - Non-retryable errors propagate immediately
    - After the last attempt the last error propagates unchanged
    """
    last_exc: Optional[ProviderError] = None
    for attempt in range(config.max_attempts):
        try:
            result = await operation()
        except ProviderError as e:
            last_exc = e
            has_next = attempt + 1 < config.max_attempts
            delay = config.delay_for(attempt, rand) if (e.retryable and has_next) else None
            if config.attempt_logger:
                config.attempt_logger(
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    delay=delay,
                    error=e,
                )
            if delay is None:
                raise
            normalized_log_event(
                logger,
                "retry.scheduled",
                LogContext(provider=e.provider),
                phase="retry",
                attempt=attempt,
                error_code=e.code.value,
                level=logging.WARNING,
                status=e.status,
                delay_ms=round(delay * 1000),
            )
            await sleep(delay)
            continue
        if config.attempt_logger:
            config.attempt_logger(
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay=None,
                error=None,
            )
        return result
    # Unreachable: the final attempt either returns or raises above.
    raise RuntimeError("retry: reached terminal state without result") from last_exc


def async_retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Return a decorator applying :func:`run_with_retry` to a coroutine function."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await run_with_retry(lambda: func(*args, **kwargs), config)

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "run_with_retry",
    "async_retry",
]
