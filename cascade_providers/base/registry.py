"""Static provider table and cascade priority.

Every provider is a row in a read-only table keyed by its identifier. A row
names the dialect the adapter must speak; there is no class per provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..config import defaults as d


class Dialect(str, Enum):
    """Request/response shape family spoken by a provider."""

    OPENAI_CHAT = "openai-compatible"
    GEMINI_NATIVE = "gemini-native"


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static configuration of one provider.

    Attributes:
        name: Provider identifier, also the credential map key.
        base_url: API root without trailing slash.
        endpoint: Path appended to ``base_url``.
        dialect: Wire dialect used to build the request and read the response.
        model: Model identifier sent in the body; ``None`` when the model is
            part of ``endpoint``.
    """

    name: str
    base_url: str
    endpoint: str
    dialect: Dialect
    model: Optional[str] = None

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.endpoint}"


def _openai(name: str, base_url: str, model: str) -> ProviderDescriptor:
    return ProviderDescriptor(name, base_url, d.OPENAI_CHAT_ENDPOINT, Dialect.OPENAI_CHAT, model)


PROVIDERS: Mapping[str, ProviderDescriptor] = MappingProxyType(
    {
        "cerebras": _openai("cerebras", d.CEREBRAS_BASE_URL, d.CEREBRAS_DEFAULT_MODEL),
        "gemini": ProviderDescriptor(
            "gemini",
            d.GEMINI_BASE_URL,
            f"/models/{d.GEMINI_DEFAULT_MODEL}:generateContent",
            Dialect.GEMINI_NATIVE,
        ),
        "deepseek": _openai("deepseek", d.DEEPSEEK_BASE_URL, d.DEEPSEEK_DEFAULT_MODEL),
        "openrouter": _openai("openrouter", d.OPENROUTER_BASE_URL, d.OPENROUTER_DEFAULT_MODEL),
        "mistral": _openai("mistral", d.MISTRAL_BASE_URL, d.MISTRAL_DEFAULT_MODEL),
        "together": _openai("together", d.TOGETHER_BASE_URL, d.TOGETHER_DEFAULT_MODEL),
        "groq": _openai("groq", d.GROQ_BASE_URL, d.GROQ_DEFAULT_MODEL),
    }
)

# Priority order: primary, mandatory backup, then the high-rate-limit providers.
CASCADE_ORDER: Tuple[str, ...] = (
    "cerebras",
    "gemini",
    "deepseek",
    "openrouter",
    "mistral",
    "together",
    "groq",
)


class UnknownProviderError(ValueError):
    """Raised when a provider id is not present in :data:`PROVIDERS`."""


def get_descriptor(name: str) -> ProviderDescriptor:
    try:
        return PROVIDERS[name]
    except KeyError:
        raise UnknownProviderError(f"Unknown provider '{name}'") from None


def validate_order(order: Tuple[str, ...]) -> Tuple[str, ...]:
    """Return ``order`` as a tuple after checking every id is known."""
    order = tuple(order)
    for name in order:
        get_descriptor(name)
    return order


__all__ = [
    "Dialect",
    "ProviderDescriptor",
    "PROVIDERS",
    "CASCADE_ORDER",
    "UnknownProviderError",
    "get_descriptor",
    "validate_order",
]
