"""
Message DTO used across dialects.

Defines the `Message` dataclass and the `Role` literal representing the sender
role. A conversation is an ordered list of messages; adapters translate it
message-for-message and never reorder it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal


# Message roles accepted by every provider in the cascade.
Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class Message:
    """A chat message in provider-agnostic form.

    Attributes:
        role: The role of the message author (``"system"``, ``"user"`` or
            ``"assistant"``).
        content: Plain text of the message.
    """

    role: Role
    content: str

    def to_dict(self) -> Dict[str, Any]:
        """Return the OpenAI-style ``{"role", "content"}`` mapping."""
        return {"role": self.role, "content": self.content}


__all__ = [
    "Message",
    "Role",
]
