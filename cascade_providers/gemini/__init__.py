"""Gemini-native ``generateContent`` dialect (query-string key)."""

from .chat import ROLE_MAP, build_auth, build_body, extract_text, to_gemini_role

__all__ = ["ROLE_MAP", "build_auth", "build_body", "extract_text", "to_gemini_role"]
