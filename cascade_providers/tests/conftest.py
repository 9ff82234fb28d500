"""Pytest configuration for the cascade test suite.

Fixtures keep every test offline: providers are served by ``FakeProviders``
and backoff sleeps are recorded instead of awaited.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator

import pytest

from cascade_providers.base.logging import BASE_LOGGER_NAME, configure_logger, get_logger
from cascade_providers.config import reset_config_cache
from cascade_providers.config.env import ENV_ALIASES, ENV_MAP
from cascade_providers.tests.utils import FAKE_API_KEYS, FakeProviders, ListHandler, RecordingSleep


@pytest.fixture()
def fake_providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def api_keys() -> Dict[str, str]:
    return dict(FAKE_API_KEYS)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Remove provider env vars and point config lookups at an empty directory."""
    for name in ENV_MAP.values():
        monkeypatch.delenv(name, raising=False)
    for aliases in ENV_ALIASES.values():
        for name in aliases:
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("CASCADE_CONFIG_FILE", raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def log_records() -> Iterator[ListHandler]:
    """Collect every record reaching the shared ``cascade`` logger."""
    base = get_logger(BASE_LOGGER_NAME)
    handler = ListHandler()
    base.addHandler(handler)
    previous = base.level
    base.setLevel(logging.DEBUG)
    yield handler
    base.removeHandler(handler)
    configure_logger(level=previous)
