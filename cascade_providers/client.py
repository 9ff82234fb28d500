"""Multi-provider chat client with retries and ordered fallback.

Usage::

    client = CascadeClient({"cerebras": "csk-...", "gemini": "AIza..."})
    result = await client.chat([Message("user", "hello")])
    result.content, result.provider

Control flow per call: cascade controller -> (per provider) retry policy ->
provider adapter -> one POST. Only exhaustion of the whole cascade reaches the
caller, as :class:`AllProvidersFailedError`.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from types import MappingProxyType
from typing import Any, AsyncIterator, Callable, Iterable, Mapping, Optional, Sequence, Union

import httpx

from .base.adapter import invoke_provider
from .base.dto import coerce_messages
from .base.errors import ErrorCode, ProviderError
from .base.http import build_async_client
from .base.models import ChatResult, Message
from .base.registry import CASCADE_ORDER, ProviderDescriptor, validate_order
from .base.resilience import DEFAULT_RETRY_CONFIG, RetryConfig, run_cascade, run_with_retry
from .base.resilience.fallback import credential_for
from .base.resilience.retry import Sleeper
from .base.timeouts import Deadline
from .config import load_credentials

MessageLike = Union[Message, Mapping[str, Any]]


class CascadeClient:
    """Fault-tolerant chat client over the fixed provider cascade.

    Parameters
    ----------
    credentials:
        Provider id to secret. Values are stripped, then copied and frozen
        at construction; empty, missing or non-string entries are dropped and
        the cascade skips that provider.
    http_client:
        Optional caller-owned ``httpx.AsyncClient``. It is never closed here.
    retry_config:
        Retry policy applied to each provider independently.
    order:
        Provider priority; defaults to :data:`CASCADE_ORDER`.
    transport:
        Transport for internally created clients (tests use ``httpx.MockTransport``).
    sleep:
        Backoff sleeper, ``asyncio.sleep`` by default.

    Raises
    ------
    UnknownProviderError
        ``order`` names a provider that is not in the table.
    """

    def __init__(
        self,
        credentials: Mapping[str, Optional[str]],
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        order: Sequence[str] = CASCADE_ORDER,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._credentials = MappingProxyType(
            {name: key for name in credentials if (key := credential_for(credentials, name))}
        )
        self._http_client = http_client
        self._owned_client: Optional[httpx.AsyncClient] = None
        self._retry_config = retry_config
        self._order = validate_order(tuple(order))
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_env(cls, overrides: Optional[Mapping[str, Optional[str]]] = None, **kwargs: Any) -> "CascadeClient":
        """Build a client whose credentials come from :func:`load_credentials`."""
        return cls(load_credentials(overrides), **kwargs)

    @property
    def credentials(self) -> Mapping[str, Optional[str]]:
        return self._credentials

    @property
    def order(self) -> Sequence[str]:
        return self._order

    async def __aenter__(self) -> "CascadeClient":
        if self._http_client is None and self._owned_client is None:
            self._owned_client = build_async_client(self._transport)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the internally owned HTTP client, if any."""
        if self._owned_client is not None:
            client, self._owned_client = self._owned_client, None
            await client.aclose()

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
        elif self._owned_client is not None:
            yield self._owned_client
        else:
            async with build_async_client(self._transport) as client:
                yield client

    async def chat(
        self,
        messages: Iterable[MessageLike],
        *,
        deadline_seconds: Optional[float] = None,
    ) -> ChatResult:
        """Return the first successful completion across the cascade.

        Parameters
        ----------
        messages:
            Conversation in order. ``Message`` instances or ``{"role",
            "content"}`` mappings; an empty conversation is forwarded as-is.
        deadline_seconds:
            Optional budget for the whole call. Once spent, the in-flight
            request is cancelled and every remaining provider fails with a
            non-retryable ``TIMEOUT`` error. A retry backoff that would not
            fit in the remaining budget is skipped and fails the provider.

        Returns
        -------
        ChatResult
            ``content`` and the ``provider`` that produced it.

        Raises
        ------
        AllProvidersFailedError
            Every provider was skipped or failed.
        pydantic.ValidationError
            A mapping message has an unknown role or non-string content.
        """
        conversation = coerce_messages(messages)
        deadline = Deadline(deadline_seconds)
        async with self._client() as client:
            invoke = self._make_invoker(client, conversation, deadline)
            return await run_cascade(self._credentials, invoke, order=self._order)

    def _make_invoker(
        self,
        client: httpx.AsyncClient,
        conversation: Sequence[Message],
        deadline: Deadline,
    ) -> Callable[[ProviderDescriptor, str], Any]:
        async def attempt(descriptor: ProviderDescriptor, api_key: str) -> str:
            if deadline.expired():
                raise _deadline_error(descriptor.name)
            try:
                return await deadline.run(invoke_provider(client, descriptor, conversation, api_key))
            except asyncio.TimeoutError as exc:
                raise _deadline_error(descriptor.name) from exc

        async def invoke(descriptor: ProviderDescriptor, api_key: str) -> str:
            async def backoff(delay: float) -> None:
                # A backoff that would outlive the budget ends this provider now.
                remaining = deadline.remaining()
                if remaining is not None and delay >= remaining:
                    raise _deadline_error(descriptor.name)
                await self._sleep(delay)

            return await run_with_retry(
                lambda: attempt(descriptor, api_key),
                self._retry_config,
                sleep=backoff,
            )

        return invoke


def _deadline_error(provider: str) -> ProviderError:
    return ProviderError(
        code=ErrorCode.TIMEOUT,
        message=f"Deadline exceeded before {provider} answered",
        provider=provider,
    )


def chat_sync(
    credentials: Mapping[str, Optional[str]],
    messages: Iterable[MessageLike],
    **kwargs: Any,
) -> ChatResult:
    """Run :meth:`CascadeClient.chat` from synchronous code.

    Must not be called from inside a running event loop.
    """
    deadline_seconds = kwargs.pop("deadline_seconds", None)
    client = CascadeClient(credentials, **kwargs)
    return asyncio.run(client.chat(messages, deadline_seconds=deadline_seconds))


__all__ = ["CascadeClient", "MessageLike", "chat_sync"]
