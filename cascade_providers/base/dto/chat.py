"""
Pydantic DTOs and validators for inbound conversations.

Purpose
-------
Callers may hand the client plain mappings (for example decoded JSON from a
UI) instead of :class:`~cascade_providers.base.models.Message` instances. This
module validates such mappings before they reach any adapter so that an
invalid role is rejected locally instead of being sent to a provider.

External dependencies: Pydantic only (no network calls).

Failure modes
-------------
Validation either succeeds or raises ``pydantic.ValidationError``. Content is
not required to be non-empty and an empty conversation is accepted; whether
those are valid is left to the providers.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, StrictStr, TypeAdapter

from ..models import Message, Role


class MessageDTO(BaseModel):
    """Represents one chat message in mapping form.

    Rules:
        - ``role`` must be one of ``Role``.
        - ``content`` must be a string (empty strings are allowed).
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: StrictStr

    def to_message(self) -> Message:
        return Message(role=self.role, content=self.content)


_CONVERSATION = TypeAdapter(List[MessageDTO])


def coerce_messages(messages: Iterable[Union[Message, Mapping[str, Any]]]) -> List[Message]:
    """Return ``messages`` as a list of :class:`Message`, preserving order.

    ``Message`` instances pass through untouched; mappings are validated with
    :class:`MessageDTO`.

    Raises:
        pydantic.ValidationError: When a mapping has an unknown role or
            non-string content.
    """
    items = list(messages)
    if all(isinstance(m, Message) for m in items):
        return items  # type: ignore[return-value]
    raw = [m.to_dict() if isinstance(m, Message) else dict(m) for m in items]
    return [dto.to_message() for dto in _CONVERSATION.validate_python(raw)]


__all__ = [
    "Role",
    "MessageDTO",
    "coerce_messages",
]
