"""OpenAI-compatible chat dialect.

Used by every provider whose descriptor names ``Dialect.OPENAI_CHAT``. The
credential travels as a bearer token and the conversation is forwarded
message-for-message with roles unchanged.

Request::

    POST {base_url}/chat/completions
    Authorization: Bearer <key>
    {"model": ..., "messages": [{"role", "content"}...],
     "max_tokens": 32768, "temperature": 0.7}

Response::

    {"choices": [{"message": {"content": "..."}}]}
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from ..base.errors import parse_error
from ..base.models import Message
from ..base.registry import ProviderDescriptor
from ..config.defaults import DEFAULT_TEMPERATURE, MAX_OUTPUT_TOKENS


def build_auth(api_key: str) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Return ``(headers, query_params)`` carrying the credential."""
    return {"Authorization": f"Bearer {api_key}"}, {}


def build_body(descriptor: ProviderDescriptor, messages: Sequence[Message]) -> Dict[str, Any]:
    payload_messages: List[Dict[str, Any]] = [m.to_dict() for m in messages]
    return {
        "model": descriptor.model,
        "messages": payload_messages,
        "max_tokens": MAX_OUTPUT_TOKENS,
        "temperature": DEFAULT_TEMPERATURE,
    }


def extract_text(descriptor: ProviderDescriptor, payload: Any) -> str:
    """Return ``choices[0].message.content``.

    A missing ``choices`` list is a schema violation. An empty list, a choice
    without ``message``, or a ``null`` content are well-formed "no text"
    answers and yield ``""``.

    Raises:
        ProviderError: Non-retryable ``VALIDATION`` error naming the provider.
    """
    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not isinstance(choices, list):
        raise parse_error(descriptor.name)
    if not choices:
        return ""
    first = choices[0]
    if first is None:
        return ""
    if not isinstance(first, dict):
        raise parse_error(descriptor.name)
    message = first.get("message")
    if message is None:
        return ""
    if not isinstance(message, dict):
        raise parse_error(descriptor.name)
    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise parse_error(descriptor.name)
    return content


__all__ = ["build_auth", "build_body", "extract_text"]
