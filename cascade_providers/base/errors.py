"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``cascade_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.cascade_error import AllProvidersFailedError, ALL_PROVIDERS_FAILED_MESSAGE
from .errors_parts.classification import (
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
