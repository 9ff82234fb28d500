"""Resilience primitives: retry policy and provider cascade."""

from .retry import DEFAULT_RETRY_CONFIG, RetryConfig, async_retry, run_with_retry
from .fallback import ProviderInvoker, run_cascade

__all__ = [
    "DEFAULT_RETRY_CONFIG",
    "RetryConfig",
    "async_retry",
    "run_with_retry",
    "ProviderInvoker",
    "run_cascade",
]
