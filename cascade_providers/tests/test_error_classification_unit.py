from __future__ import annotations

import httpx
import pytest

from cascade_providers.base.errors import (
    ALL_PROVIDERS_FAILED_MESSAGE,
    AllProvidersFailedError,
    ErrorCode,
    ProviderError,
    classify_status,
    from_http_status,
    from_transport_error,
    is_retryable_status,
    parse_error,
)


@pytest.mark.parametrize(
    "status,code",
    [
        (400, ErrorCode.VALIDATION),
        (401, ErrorCode.AUTH),
        (403, ErrorCode.AUTH),
        (404, ErrorCode.NOT_FOUND),
        (429, ErrorCode.RATE_LIMIT),
        (500, ErrorCode.SERVER_ERROR),
        (502, ErrorCode.TRANSIENT),
        (503, ErrorCode.UNAVAILABLE),
        (504, ErrorCode.TIMEOUT),
        (507, ErrorCode.SERVER_ERROR),
        (418, ErrorCode.UNKNOWN),
    ],
)
def test_classify_status(status, code):
    assert classify_status(status) is code


def test_retryable_statuses():
    assert is_retryable_status(429)
    assert is_retryable_status(500)
    assert is_retryable_status(599)
    assert not is_retryable_status(400)
    assert not is_retryable_status(401)
    assert not is_retryable_status(403)
    assert not is_retryable_status(None)


def test_from_http_status_carries_status_and_body():
    err = from_http_status("cerebras", 503, "overloaded")
    assert err.status == 503
    assert err.body == "overloaded"
    assert err.retryable is True
    assert err.code is ErrorCode.UNAVAILABLE
    assert err.message == "API call to cerebras failed with status 503: overloaded"


def test_from_http_status_client_error_not_retryable():
    err = from_http_status("groq", 401, "Unauthorized")
    assert err.retryable is False
    assert err.code is ErrorCode.AUTH


def test_transport_errors_are_not_retryable():
    timeout = from_transport_error("mistral", httpx.ReadTimeout("slow"))
    assert timeout.code is ErrorCode.TIMEOUT
    assert timeout.status is None
    assert timeout.retryable is False

    refused = from_transport_error("mistral", httpx.ConnectError("refused"))
    assert refused.code is ErrorCode.UNAVAILABLE
    assert refused.retryable is False


def test_parse_error_names_provider():
    err = parse_error("gemini")
    assert err.code is ErrorCode.VALIDATION
    assert err.retryable is False
    assert err.message == "Could not parse a valid response from gemini."


def test_aggregate_error_message_is_fixed_and_names_no_provider():
    failures = {"cerebras": ProviderError(code=ErrorCode.SERVER_ERROR, message="boom", provider="cerebras")}
    err = AllProvidersFailedError(failures=failures, skipped=["gemini"])
    assert str(err) == ALL_PROVIDERS_FAILED_MESSAGE
    assert "cerebras" not in str(err)
    assert err.failures["cerebras"].message == "boom"
    assert err.skipped == ("gemini",)
    with pytest.raises(TypeError):
        err.failures["x"] = failures["cerebras"]  # type: ignore[index]
