"""Configuration layer: credential resolution.

Goals
-----
* Build the credential map handed to ``CascadeClient`` from the usual places.
* Merge sources in a predictable order (later wins):
    1. Optional external config file (JSON or YAML) pointed to by
       ``CASCADE_CONFIG_FILE``, section ``credentials``
    2. Environment variables (``ENV_MAP`` names, plus a light ``.env`` loader)
    3. In-code overrides passed to the helper
* Drop placeholder and empty values so the cascade skips those providers.

External Config File (Optional)
-------------------------------
JSON is tried first; YAML is used when JSON parsing fails::

    credentials:
      cerebras: csk-...
      gemini: AIza...

Public API
----------
* load_credentials(overrides: dict | None = None) -> dict[str, str]
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .env import ENV_MAP, is_placeholder, resolve_provider_key

CONFIG_FILE_ENV_VAR = "CASCADE_CONFIG_FILE"

_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Existing
    environment variables win unless they hold a placeholder.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE, _FILE_CACHE_PATH
    path = os.getenv(CONFIG_FILE_ENV_VAR) or ""
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    data: Any = {}
    p = Path(path) if path else None
    if p is not None and p.is_file():
        text = p.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    _FILE_CACHE_PATH = path
    return _FILE_CACHE


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or is_placeholder(value):
        return None
    return value


def load_credentials(overrides: Optional[Mapping[str, Optional[str]]] = None) -> Dict[str, str]:
    """Return the merged credential map for every known provider.

    Merge order (later wins): config file -> environment -> ``overrides``.
    An override of ``""`` or ``None`` removes the provider from the map,
    which makes the cascade skip it.
    """
    _load_dotenv_once()
    creds: Dict[str, str] = {}

    section = _load_external_config().get("credentials")
    if isinstance(section, dict):
        for name, value in section.items():
            if name in ENV_MAP and (cleaned := _clean(value)):
                creds[name] = cleaned

    for name in ENV_MAP:
        value, _ = resolve_provider_key(name)
        if value:
            creds[name] = value

    for name, value in (overrides or {}).items():
        cleaned = _clean(value)
        if cleaned:
            creds[name] = cleaned
        else:
            creds.pop(name, None)

    return creds


def reset_config_cache() -> None:
    """Forget cached file and ``.env`` state (used by tests)."""
    global _FILE_CACHE, _FILE_CACHE_PATH, _DOTENV_LOADED
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None
    _DOTENV_LOADED = False


__all__ = [
    "CONFIG_FILE_ENV_VAR",
    "load_credentials",
    "reset_config_cache",
]
