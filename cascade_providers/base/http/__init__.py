"""HTTP utilities package for provider calls."""

from .client import build_async_client, build_timeout

__all__ = ["build_async_client", "build_timeout"]
