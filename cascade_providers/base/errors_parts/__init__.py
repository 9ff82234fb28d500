"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `cascade_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .cascade_error import AllProvidersFailedError, ALL_PROVIDERS_FAILED_MESSAGE
from .classification import (
    classify_status,
    is_retryable_status,
    from_http_status,
    from_transport_error,
    parse_error,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "AllProvidersFailedError",
    "ALL_PROVIDERS_FAILED_MESSAGE",
    "classify_status",
    "is_retryable_status",
    "from_http_status",
    "from_transport_error",
    "parse_error",
]
