"""
Cascade Base Package

Exports the provider-agnostic building blocks used by ``CascadeClient``:

- Models (DTOs): ``Message`` and ``ChatResult``
- Errors: the ``ErrorCode`` taxonomy, ``ProviderError`` and the aggregate
  ``AllProvidersFailedError``
- Registry: the static provider table and cascade order
- Timeouts: ``TimeoutConfig`` and ``Deadline``
"""

from .errors import (
    ALL_PROVIDERS_FAILED_MESSAGE,
    AllProvidersFailedError,
    ErrorCode,
    ProviderError,
)
from .models import ChatResult, Message, Role
from .registry import (
    CASCADE_ORDER,
    PROVIDERS,
    Dialect,
    ProviderDescriptor,
    UnknownProviderError,
    get_descriptor,
)
from .timeouts import Deadline, TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "Role",
    "Message",
    "ChatResult",
    # Errors
    "ErrorCode",
    "ProviderError",
    "AllProvidersFailedError",
    "ALL_PROVIDERS_FAILED_MESSAGE",
    # Registry
    "Dialect",
    "ProviderDescriptor",
    "PROVIDERS",
    "CASCADE_ORDER",
    "UnknownProviderError",
    "get_descriptor",
    # Timeouts
    "TimeoutConfig",
    "get_timeout_config",
    "Deadline",
]
