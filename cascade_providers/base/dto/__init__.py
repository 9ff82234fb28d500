"""Validated inbound DTOs (pydantic)."""

from .chat import MessageDTO, coerce_messages

__all__ = ["MessageDTO", "coerce_messages"]
