"""One-class-per-file DTO implementations re-exported by ``base.models``."""

from .message import Message, Role
from .chat_result import ChatResult

__all__ = ["Message", "Role", "ChatResult"]
