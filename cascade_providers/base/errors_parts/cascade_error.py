"""
Aggregate error raised when the whole provider cascade is exhausted.

The message is fixed and deliberately names no provider. Per-provider details
stay available on the instance for diagnostics but are never part of ``str()``.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .provider_error import ProviderError

ALL_PROVIDERS_FAILED_MESSAGE = (
    "All AI providers failed. Please check your API keys, network connection, "
    "and provider status."
)


class AllProvidersFailedError(Exception):
    """Every provider in the cascade was either skipped or failed.

    Attributes:
        failures: Read-only mapping of provider id to the last
            :class:`ProviderError` it produced, in cascade order.
        skipped: Provider ids that were skipped for lacking a credential.
    """

    def __init__(
        self,
        failures: Optional[Mapping[str, ProviderError]] = None,
        skipped: Iterable[str] = (),
    ) -> None:
        super().__init__(ALL_PROVIDERS_FAILED_MESSAGE)
        self.failures = MappingProxyType(dict(failures or {}))
        self.skipped = tuple(skipped)


__all__ = ["AllProvidersFailedError", "ALL_PROVIDERS_FAILED_MESSAGE"]
