"""Provider cascade: ordered fallback across providers.

Purpose
-------
Walk a fixed priority list of providers and return the first successful
answer. Providers are tried strictly one at a time; there is no fan-out.

Fallback semantics
------------------
- A provider without a non-empty credential is skipped. A skip is logged as
  ``cascade.skip`` and is not a failure.
- A provider whose invocation raises :class:`ProviderError` (after its own
  retries, or immediately for non-retryable errors) is recorded as failed and
  the cascade moves on. One provider's failure never aborts the cascade.
- The first success returns immediately; later providers are never called.
- When the list is exhausted, :class:`AllProvidersFailedError` is raised. Its
  message names no provider; per-provider errors are attached for diagnostics.

State
-----
All bookkeeping is local to one call, so concurrent cascades on the same
credentials never interfere.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Sequence

from ..errors import AllProvidersFailedError, ProviderError
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import ChatResult
from ..registry import CASCADE_ORDER, ProviderDescriptor, get_descriptor

ProviderInvoker = Callable[[ProviderDescriptor, str], Awaitable[str]]

logger = get_logger("cascade.fallback")


def credential_for(credentials: Mapping[str, Optional[str]], provider: str) -> Optional[str]:
    """Return the usable credential for ``provider`` or ``None``.

    Missing entries, non-string values and whitespace-only strings are all
    unusable.
    """
    value = credentials.get(provider)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


async def run_cascade(
    credentials: Mapping[str, Optional[str]],
    invoke: ProviderInvoker,
    *,
    order: Sequence[str] = CASCADE_ORDER,
) -> ChatResult:
    """Try each provider in ``order`` until one succeeds.

    Parameters
    ----------
    credentials:
        Provider id to secret. Read only.
    invoke:
        Coroutine function ``(descriptor, api_key) -> text``. It is expected to
        apply the retry policy and to raise :class:`ProviderError` on failure.
    order:
        Provider ids in priority order.

    Returns
    -------
    ChatResult
        The text and identifier of the first provider that succeeded.

    Raises
    ------
    AllProvidersFailedError
        Every provider was skipped or failed.
    """
    failures: Dict[str, ProviderError] = {}
    skipped: List[str] = []

    for name in order:
        descriptor = get_descriptor(name)
        ctx = LogContext(provider=name, model=descriptor.model)
        api_key = credential_for(credentials, name)
        if api_key is None:
            skipped.append(name)
            normalized_log_event(
                logger,
                "cascade.skip",
                ctx,
                phase="skip",
                level=logging.WARNING,
                reason="API key not provided",
            )
            continue

        normalized_log_event(logger, "cascade.attempt", ctx, phase="start")
        try:
            content = await invoke(descriptor, api_key)
        except ProviderError as e:
            failures[name] = e
            normalized_log_event(
                logger,
                "cascade.provider_failed",
                ctx,
                phase="error",
                error_code=e.code.value,
                level=logging.ERROR,
                status=e.status,
                retryable=e.retryable,
                message=e.message,
            )
            continue

        normalized_log_event(
            logger,
            "cascade.success",
            ctx,
            phase="finalize",
            chars=len(content),
        )
        return ChatResult(content=content, provider=name)

    normalized_log_event(
        logger,
        "cascade.exhausted",
        None,
        phase="exhausted",
        level=logging.ERROR,
        failed=list(failures),
        skipped=skipped,
    )
    raise AllProvidersFailedError(failures=failures, skipped=skipped)


__all__ = ["ProviderInvoker", "credential_for", "run_cascade"]
