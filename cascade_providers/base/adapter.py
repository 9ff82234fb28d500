"""Provider adapter: one dispatch function for every provider in the table.

Translates a conversation into the wire request of the dialect named by the
provider's descriptor, performs a single POST, and translates the response
back into normalized text. Dialect modules only build bodies and read
payloads; the network exchange and error tagging live here.

Failure modes
-------------
- Non-2xx response: :class:`ProviderError` carrying ``status`` and the raw
  body text, ``retryable`` for 429 and 5xx.
- No response (connect error, read timeout): non-retryable
  ``UNAVAILABLE``/``TIMEOUT`` error.
- 2xx with a body that is not JSON or does not match the dialect's schema:
  non-retryable ``VALIDATION`` error naming the provider.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, NamedTuple, Sequence, Tuple

import httpx

from .. import gemini, openai_style
from .errors import ProviderError, from_http_status, from_transport_error, parse_error
from .logging import LogContext, get_logger, log_event
from .models import Message
from .registry import Dialect, ProviderDescriptor

logger = get_logger("cascade.adapter")

# Upper bound on response text copied into a log line.
LOG_BODY_LIMIT = 500


class DialectHandlers(NamedTuple):
    build_auth: Callable[[str], Tuple[Dict[str, str], Dict[str, str]]]
    build_body: Callable[[ProviderDescriptor, Sequence[Message]], Dict[str, Any]]
    extract_text: Callable[[ProviderDescriptor, Any], str]


DIALECTS: Mapping[Dialect, DialectHandlers] = MappingProxyType(
    {
        Dialect.OPENAI_CHAT: DialectHandlers(
            openai_style.build_auth, openai_style.build_body, openai_style.extract_text
        ),
        Dialect.GEMINI_NATIVE: DialectHandlers(
            gemini.build_auth, gemini.build_body, gemini.extract_text
        ),
    }
)


@dataclass(frozen=True)
class PreparedRequest:
    """Everything needed to send one provider request."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)


def build_request(descriptor: ProviderDescriptor, messages: Sequence[Message], api_key: str) -> PreparedRequest:
    """Build the dialect-specific request for ``descriptor``."""
    handlers = DIALECTS[descriptor.dialect]
    auth_headers, params = handlers.build_auth(api_key)
    headers = {"Content-Type": "application/json", **auth_headers}
    return PreparedRequest(
        url=descriptor.url,
        headers=headers,
        params=params,
        body=handlers.build_body(descriptor, messages),
    )


def extract_text(descriptor: ProviderDescriptor, payload: Any) -> str:
    """Read the normalized text out of a decoded response payload."""
    try:
        return DIALECTS[descriptor.dialect].extract_text(descriptor, payload)
    except ProviderError:
        log_event(
            logger,
            "adapter.parse_error",
            LogContext(provider=descriptor.name, model=descriptor.model),
            level=logging.ERROR,
            payload=json.dumps(payload, ensure_ascii=False, default=str)[:LOG_BODY_LIMIT],
        )
        raise


async def invoke_provider(
    client: httpx.AsyncClient,
    descriptor: ProviderDescriptor,
    messages: Sequence[Message],
    api_key: str,
) -> str:
    """Send one request to ``descriptor`` and return the normalized text.

    Raises:
        ProviderError: Tagged failure; see the module docstring.
    """
    request = build_request(descriptor, messages, api_key)
    try:
        response = await client.post(
            request.url,
            headers=request.headers,
            params=request.params or None,
            json=request.body,
        )
    except httpx.HTTPError as exc:
        raise from_transport_error(descriptor.name, exc) from exc

    if not response.is_success:
        raise from_http_status(descriptor.name, response.status_code, response.text)

    try:
        payload = response.json()
    except ValueError as exc:
        log_event(
            logger,
            "adapter.parse_error",
            LogContext(provider=descriptor.name, model=descriptor.model),
            level=logging.ERROR,
            body=response.text[:LOG_BODY_LIMIT],
        )
        raise parse_error(descriptor.name) from exc
    return extract_text(descriptor, payload)


__all__ = [
    "DIALECTS",
    "DialectHandlers",
    "LOG_BODY_LIMIT",
    "PreparedRequest",
    "build_request",
    "extract_text",
    "invoke_provider",
]
