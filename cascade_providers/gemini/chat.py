"""Gemini-native ``generateContent`` dialect.

The credential is sent as the ``key`` query parameter and no Authorization
header is set. Each message becomes a ``content`` entry whose text is wrapped
in a single part; the ``assistant`` role is renamed to Gemini's ``model``
while ``user`` and ``system`` pass through unchanged.

Request::

    POST {base_url}/models/<model>:generateContent?key=<key>
    {"contents": [{"role": ..., "parts": [{"text": ...}]}...],
     "generationConfig": {"maxOutputTokens": 32768, "temperature": 0.7}}

Response::

    {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
"""
from __future__ import annotations

from typing import Any, Dict, Sequence, Tuple

from ..base.errors import parse_error
from ..base.models import Message
from ..base.registry import ProviderDescriptor
from ..config.defaults import DEFAULT_TEMPERATURE, MAX_OUTPUT_TOKENS

ROLE_MAP = {"assistant": "model"}


def to_gemini_role(role: str) -> str:
    return ROLE_MAP.get(role, role)


def build_auth(api_key: str) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Return ``(headers, query_params)`` carrying the credential."""
    return {}, {"key": api_key}


def build_body(descriptor: ProviderDescriptor, messages: Sequence[Message]) -> Dict[str, Any]:
    return {
        "contents": [
            {"role": to_gemini_role(m.role), "parts": [{"text": m.content}]}
            for m in messages
        ],
        "generationConfig": {
            "maxOutputTokens": MAX_OUTPUT_TOKENS,
            "temperature": DEFAULT_TEMPERATURE,
        },
    }


def extract_text(descriptor: ProviderDescriptor, payload: Any) -> str:
    """Return ``candidates[0].content.parts[0].text``.

    A missing ``candidates`` list, or a ``content`` object without a
    ``parts`` list, is a schema violation. Empty lists, a candidate without
    ``content`` (e.g. a safety block) and ``null`` text yield ``""``.

    Raises:
        ProviderError: Non-retryable ``VALIDATION`` error naming the provider.
    """
    candidates = payload.get("candidates") if isinstance(payload, dict) else None
    if not isinstance(candidates, list):
        raise parse_error(descriptor.name)
    if not candidates or candidates[0] is None:
        return ""
    first = candidates[0]
    if not isinstance(first, dict):
        raise parse_error(descriptor.name)
    content = first.get("content")
    if content is None:
        return ""
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise parse_error(descriptor.name)
    if not parts or parts[0] is None:
        return ""
    part = parts[0]
    if not isinstance(part, dict):
        raise parse_error(descriptor.name)
    text = part.get("text")
    if text is None:
        return ""
    if not isinstance(text, str):
        raise parse_error(descriptor.name)
    return text


__all__ = ["ROLE_MAP", "to_gemini_role", "build_auth", "build_body", "extract_text"]
