"""OpenAI-compatible chat dialect (bearer token, ``/chat/completions``)."""

from .chat import build_auth, build_body, extract_text

__all__ = ["build_auth", "build_body", "extract_text"]
