"""
ChatResult DTO representing the normalized outcome of a cascade call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ChatResult:
    """Text produced by the first provider that succeeded.

    Attributes:
        content: Normalized completion text (may be empty).
        provider: Identifier of the provider that produced ``content``.
    """

    content: str
    provider: str

    def to_dict(self) -> Dict[str, str]:
        return {"content": self.content, "provider": self.provider}


__all__ = [
    "ChatResult",
]
