"""cascade_providers.config.env
============================

Centralized environment variable mapping and helpers for provider credentials.

Purpose
-------
- Provide a single source of truth for mapping provider identifiers to their
  environment variable names (canonical and aliases).
- Offer small utilities to look up provider API keys consistently.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Gemini also accepts
  ``GOOGLE_API_KEY``; aliases are listed in ``ENV_ALIASES`` with the canonical
  name first to establish precedence.
- Helpers never raise on unknown providers or unset variables; they return
  ``None`` and let callers decide.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "cerebras": "CEREBRAS_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "together": "TOGETHER_API_KEY",
    "groq": "GROQ_API_KEY",
}


# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True when ``val`` looks like a template value rather than a key.

    Recognizes values containing ``placeholder``, ``changeme`` or
    ``your_api_key`` (case-insensitive), which commonly ship in ``.env.example``
    files.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "your_api_key" in v


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a provider.

    The canonical name is yielded first, followed by any aliases.
    """
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a provider from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        candidate; ``(None, None)`` when nothing usable is set.
    """
    for name in get_env_var_candidates(provider):
        val = (os.environ.get(name) or "").strip()
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_provider_key",
]
