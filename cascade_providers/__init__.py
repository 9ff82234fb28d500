"""cascade_providers package

Fault-tolerant chat completion over an ordered cascade of AI providers.

Purpose:
    Send a conversation to the highest-priority provider that has a
    credential, retry transient failures with exponential backoff, and fall
    through to the next provider when one is exhausted. Two wire dialects are
    supported: OpenAI-compatible chat and Gemini-native ``generateContent``.

Public API (re-exported):
    - Version: ``__version__``
    - Client: :class:`CascadeClient`, :func:`chat_sync`
    - Models: :class:`Message`, :class:`ChatResult`
    - Exceptions: :class:`AllProvidersFailedError`, :class:`ProviderError`,
      :class:`ErrorCode`
    - Registry: ``PROVIDERS``, ``CASCADE_ORDER``, :class:`Dialect`
    - Config: :func:`load_credentials`
"""

from .base.errors import AllProvidersFailedError, ErrorCode, ProviderError
from .base.models import ChatResult, Message
from .base.registry import CASCADE_ORDER, PROVIDERS, Dialect, ProviderDescriptor
from .base.resilience import RetryConfig
from .client import CascadeClient, chat_sync
from .config import load_credentials

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CascadeClient",
    "chat_sync",
    "Message",
    "ChatResult",
    "AllProvidersFailedError",
    "ProviderError",
    "ErrorCode",
    "RetryConfig",
    "PROVIDERS",
    "CASCADE_ORDER",
    "Dialect",
    "ProviderDescriptor",
    "load_credentials",
]
