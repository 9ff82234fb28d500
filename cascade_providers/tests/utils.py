"""Shared testing utilities for cascade tests.

Purpose:
    Provide an offline fake of the seven provider endpoints on top of
    ``httpx.MockTransport`` so tests can script per-provider responses and
    count how often each endpoint was hit.

Exports:
    - FAKE_API_KEYS: a credential for every provider
    - openai_ok(text) / gemini_ok(text): success payload builders
    - FakeProviders: scripted transport with per-URL call logs
    - RecordingSleep: async sleep replacement that records delays
    - ListHandler: logging handler collecting formatted messages
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Union

import httpx

from cascade_providers.base.registry import PROVIDERS

FAKE_API_KEYS: Dict[str, str] = {
    "cerebras": "fake-cerebras-key",
    "gemini": "fake-gemini-key",
    "deepseek": "fake-deepseek-key",
    "openrouter": "fake-openrouter-key",
    "mistral": "fake-mistral-key",
    "together": "fake-together-key",
    "groq": "fake-groq-key",
}

Handler = Callable[[httpx.Request], httpx.Response]
Scripted = Union[httpx.Response, Handler, List[httpx.Response]]


def openai_ok(text: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": text}}]})


def gemini_ok(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def status(code: int, text: str = "") -> httpx.Response:
    return httpx.Response(code, text=text)


def _fresh(response: httpx.Response) -> httpx.Response:
    # Scripted responses may be served many times; hand out a copy each time.
    return httpx.Response(response.status_code, headers=response.headers, content=response.content)


def _endpoint(request: httpx.Request) -> str:
    url = request.url
    return f"{url.scheme}://{url.host}{url.path}"


class FakeProviders:
    """Scripted stand-in for every provider endpoint.

    By default each provider answers successfully with ``"Response from <name>"``.
    ``script(name, ...)`` replaces that with a fixed response, a handler, or a
    list of responses consumed one per call (the last one repeats).
    """

    def __init__(self) -> None:
        self._by_url = {d.url: name for name, d in PROVIDERS.items()}
        self._scripts: Dict[str, Scripted] = {}
        self.requests: Dict[str, List[httpx.Request]] = {name: [] for name in PROVIDERS}
        for name, descriptor in PROVIDERS.items():
            if descriptor.dialect.value == "gemini-native":
                self._scripts[name] = gemini_ok(f"Response from {name}")
            else:
                self._scripts[name] = openai_ok(f"Response from {name}")
        self.transport = httpx.MockTransport(self._handle)

    def script(self, name: str, scripted: Scripted) -> None:
        self._scripts[name] = scripted

    def fail_all(self, code: int = 500) -> None:
        for name in PROVIDERS:
            self.script(name, status(code))

    def calls(self, name: str) -> int:
        return len(self.requests[name])

    def body(self, name: str, index: int = 0) -> Any:
        return json.loads(self.requests[name][index].content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        name = self._by_url.get(_endpoint(request))
        if name is None:
            return httpx.Response(404, text=f"no fake for {request.url}")
        self.requests[name].append(request)
        scripted = self._scripts[name]
        if isinstance(scripted, list):
            idx = min(len(self.requests[name]), len(scripted)) - 1
            return _fresh(scripted[idx])
        if callable(scripted):
            return scripted(request)
        return _fresh(scripted)


class RecordingSleep:
    """Async replacement for ``asyncio.sleep`` that returns immediately."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ListHandler(logging.Handler):
    """Capture log messages into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())

    def events(self) -> List[Dict[str, Any]]:
        """Return the JSON payloads emitted by ``log_event``."""
        out: List[Dict[str, Any]] = []
        for msg in self.messages:
            try:
                payload = json.loads(msg)
            except ValueError:
                continue
            if isinstance(payload, dict):
                out.append(payload)
        return out
