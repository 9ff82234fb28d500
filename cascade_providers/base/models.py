"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``cascade_providers.base.models_parts``.
"""

from .models_parts.message import Message, Role
from .models_parts.chat_result import ChatResult

__all__ = [
    "Message",
    "Role",
    "ChatResult",
]
