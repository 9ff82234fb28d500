"""Async HTTP client construction for provider calls.

Purpose:
    Provide one place where ``httpx.AsyncClient`` instances are configured so
    that timeouts derive exclusively from :func:`get_timeout_config` and no
    numeric literals leak into the adapter.

External dependencies:
    - ``httpx`` for the asynchronous HTTP client.

Lifecycle:
    - ``CascadeClient`` either borrows a caller-owned client or builds one
      here and closes it when the call (or the ``async with`` block) ends.
    - ``transport`` exists for tests, which pass ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import get_timeout_config


def build_timeout() -> httpx.Timeout:
    cfg = get_timeout_config()
    return httpx.Timeout(cfg.http_timeout_seconds, connect=cfg.connect_timeout_seconds)


def build_async_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` configured with the shared timeouts.

    Parameters:
        transport: Optional transport override (e.g. ``httpx.MockTransport``).

    Returns:
        An unopened client; callers own it and must close it.
    """
    if transport is not None:
        return httpx.AsyncClient(timeout=build_timeout(), transport=transport)
    return httpx.AsyncClient(timeout=build_timeout())


__all__ = ["build_async_client", "build_timeout"]
