"""End-to-end behavior of ``CascadeClient`` against scripted providers."""
from __future__ import annotations

import asyncio
import json
import time

import httpx
import pytest
from pydantic import ValidationError

from cascade_providers import (
    AllProvidersFailedError,
    CascadeClient,
    ChatResult,
    ErrorCode,
    Message,
    chat_sync,
)
from cascade_providers.base.errors import ALL_PROVIDERS_FAILED_MESSAGE
from cascade_providers.base.registry import CASCADE_ORDER, UnknownProviderError
from cascade_providers.tests.utils import (
    FAKE_API_KEYS,
    FakeProviders,
    RecordingSleep,
    gemini_ok,
    openai_ok,
    status,
)

HELLO = [Message("user", "hello")]


def _client(keys, fake: FakeProviders, sleep: RecordingSleep, **kwargs) -> CascadeClient:
    return CascadeClient(keys, transport=fake.transport, sleep=sleep, **kwargs)


@pytest.mark.asyncio
async def test_primary_provider_answers(api_keys, fake_providers, recording_sleep):
    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert result.content == "Response from cerebras"
    assert result.provider == "cerebras"
    for name in CASCADE_ORDER[1:]:
        assert fake_providers.calls(name) == 0


@pytest.mark.asyncio
async def test_primary_failure_falls_back_to_gemini(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", status(500, "boom"))

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert result.content == "Response from gemini"
    assert result.provider == "gemini"
    assert fake_providers.calls("cerebras") == 3
    assert fake_providers.calls("deepseek") == 0


@pytest.mark.asyncio
async def test_two_failures_reach_third_provider(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", status(500))
    fake_providers.script("gemini", status(500))

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert result.provider == "deepseek"
    assert result.content == "Response from deepseek"


@pytest.mark.asyncio
async def test_all_providers_failing_raises_fixed_message(api_keys, fake_providers, recording_sleep):
    fake_providers.fail_all(500)

    with pytest.raises(AllProvidersFailedError) as ei:
        await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert str(ei.value) == ALL_PROVIDERS_FAILED_MESSAGE
    assert list(ei.value.failures) == list(CASCADE_ORDER)
    for name in CASCADE_ORDER:
        assert fake_providers.calls(name) == 3
        assert ei.value.failures[name].status == 500


@pytest.mark.asyncio
async def test_missing_key_is_skipped_without_request(api_keys, fake_providers, recording_sleep):
    api_keys["cerebras"] = ""

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert result.provider == "gemini"
    assert fake_providers.calls("cerebras") == 0


@pytest.mark.asyncio
async def test_rate_limit_then_success_stays_on_provider(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", [status(429), openai_ok("second try")])

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert result.provider == "cerebras"
    assert result.content == "second try"
    assert fake_providers.calls("cerebras") == 2
    assert fake_providers.calls("gemini") == 0
    assert len(recording_sleep.delays) == 1
    assert 2.0 <= recording_sleep.delays[0] < 3.0


@pytest.mark.asyncio
async def test_auth_failure_is_not_retried(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", status(401, "bad key"))

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert fake_providers.calls("cerebras") == 1
    assert result.provider == "gemini"
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_only_some_keys_configured(fake_providers, recording_sleep):
    keys = {"cerebras": "a", "deepseek": "c"}
    fake_providers.script("cerebras", status(500))
    fake_providers.script("deepseek", openai_ok("ok"))

    result = await _client(keys, fake_providers, recording_sleep).chat(HELLO)

    assert result.content == "ok"
    assert result.provider == "deepseek"
    assert fake_providers.calls("cerebras") == 3
    assert fake_providers.calls("gemini") == 0
    assert fake_providers.calls("deepseek") == 1


@pytest.mark.asyncio
async def test_gemini_round_trip_preserves_order_and_text(fake_providers, recording_sleep):
    conversation = [
        Message("system", "be brief"),
        Message("user", "hi"),
        Message("assistant", "hello"),
        Message("user", "bye"),
    ]
    fake_providers.script("gemini", gemini_ok("  exact text\n"))

    result = await _client({"gemini": "gk"}, fake_providers, recording_sleep).chat(conversation)

    assert result.content == "  exact text\n"
    body = fake_providers.body("gemini")
    assert [c["role"] for c in body["contents"]] == ["system", "user", "model", "user"]
    assert [c["parts"][0]["text"] for c in body["contents"]] == ["be brief", "hi", "hello", "bye"]


@pytest.mark.asyncio
async def test_parse_error_falls_through_without_retry(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", httpx.Response(200, json={"unexpected": True}))

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert result.provider == "gemini"
    assert fake_providers.calls("cerebras") == 1


@pytest.mark.asyncio
async def test_empty_choice_list_is_an_empty_answer(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", httpx.Response(200, json={"choices": []}))

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    assert result == ChatResult(content="", provider="cerebras")


@pytest.mark.asyncio
async def test_no_credentials_at_all(fake_providers, recording_sleep):
    with pytest.raises(AllProvidersFailedError) as ei:
        await _client({}, fake_providers, recording_sleep).chat(HELLO)

    assert ei.value.skipped == CASCADE_ORDER
    assert sum(len(reqs) for reqs in fake_providers.requests.values()) == 0


@pytest.mark.asyncio
async def test_mapping_messages_are_validated_before_any_request(api_keys, fake_providers, recording_sleep):
    client = _client(api_keys, fake_providers, recording_sleep)

    with pytest.raises(ValidationError):
        await client.chat([{"role": "wizard", "content": "hi"}])

    assert sum(len(reqs) for reqs in fake_providers.requests.values()) == 0


@pytest.mark.asyncio
async def test_mapping_messages_are_accepted(api_keys, fake_providers, recording_sleep):
    client = _client(api_keys, fake_providers, recording_sleep)

    result = await client.chat([{"role": "user", "content": "hi"}])

    assert result.provider == "cerebras"
    assert fake_providers.body("cerebras")["messages"] == [{"role": "user", "content": "hi"}]


@pytest.mark.asyncio
async def test_empty_conversation_is_forwarded(api_keys, fake_providers, recording_sleep):
    result = await _client(api_keys, fake_providers, recording_sleep).chat([])

    assert result.provider == "cerebras"
    assert fake_providers.body("cerebras")["messages"] == []


@pytest.mark.asyncio
async def test_deadline_cancels_and_fails_remaining_providers(api_keys, fake_providers, recording_sleep):
    async def slow(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return openai_ok("too late")

    fake_providers.script("cerebras", slow)

    with pytest.raises(AllProvidersFailedError) as ei:
        await _client(api_keys, fake_providers, recording_sleep).chat(HELLO, deadline_seconds=0.05)

    failures = ei.value.failures
    assert set(failures) == set(CASCADE_ORDER)
    assert all(err.code is ErrorCode.TIMEOUT for err in failures.values())
    assert all(err.retryable is False for err in failures.values())
    assert fake_providers.calls("cerebras") == 1
    assert fake_providers.calls("gemini") == 0
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_deadline_shorter_than_backoff_skips_the_sleep(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", status(503))

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO, deadline_seconds=0.3)

    assert result.provider == "gemini"
    assert fake_providers.calls("cerebras") == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_deadline_returns_promptly_with_real_backoff(fake_providers):
    fake_providers.script("cerebras", status(503))
    client = CascadeClient({"cerebras": "k"}, transport=fake_providers.transport)

    started = time.monotonic()
    with pytest.raises(AllProvidersFailedError) as ei:
        await client.chat(HELLO, deadline_seconds=0.3)

    assert time.monotonic() - started < 1.0
    assert fake_providers.calls("cerebras") == 1
    assert ei.value.failures["cerebras"].code is ErrorCode.TIMEOUT
    assert ei.value.failures["cerebras"].retryable is False


@pytest.mark.asyncio
async def test_backoff_within_deadline_still_retries(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", [status(429), openai_ok("after backoff")])

    result = await _client(api_keys, fake_providers, recording_sleep).chat(HELLO, deadline_seconds=30)

    assert result.content == "after backoff"
    assert len(recording_sleep.delays) == 1


@pytest.mark.asyncio
async def test_non_positive_deadline_is_rejected(api_keys, fake_providers, recording_sleep):
    with pytest.raises(ValueError):
        await _client(api_keys, fake_providers, recording_sleep).chat(HELLO, deadline_seconds=0)


@pytest.mark.asyncio
async def test_concurrent_calls_do_not_interfere(api_keys, fake_providers, recording_sleep):
    def cerebras(request: httpx.Request) -> httpx.Response:
        text = json.loads(request.content)["messages"][-1]["content"]
        if text == "fail":
            return status(503)
        return openai_ok(f"echo {text}")

    fake_providers.script("cerebras", cerebras)
    client = _client(api_keys, fake_providers, recording_sleep)

    failing, passing = await asyncio.gather(
        client.chat([Message("user", "fail")]),
        client.chat([Message("user", "pass")]),
    )

    assert failing.provider == "gemini"
    assert passing.provider == "cerebras"
    assert passing.content == "echo pass"
    assert fake_providers.calls("cerebras") == 4


@pytest.mark.asyncio
async def test_caller_owned_http_client_is_left_open(api_keys, fake_providers, recording_sleep):
    async with httpx.AsyncClient(transport=fake_providers.transport) as http_client:
        client = CascadeClient(api_keys, http_client=http_client, sleep=recording_sleep)
        await client.chat(HELLO)
        await client.aclose()
        assert not http_client.is_closed


@pytest.mark.asyncio
async def test_context_manager_reuses_one_connection_pool(api_keys, fake_providers, recording_sleep):
    async with _client(api_keys, fake_providers, recording_sleep) as client:
        first = await client.chat(HELLO)
        second = await client.chat(HELLO)

    assert first.provider == second.provider == "cerebras"
    assert fake_providers.calls("cerebras") == 2


def test_credentials_are_frozen_at_construction(api_keys, fake_providers, recording_sleep):
    client = _client(api_keys, fake_providers, recording_sleep)
    api_keys["cerebras"] = "changed"

    assert client.credentials["cerebras"] == FAKE_API_KEYS["cerebras"]
    with pytest.raises(TypeError):
        client.credentials["cerebras"] = "x"  # type: ignore[index]


def test_credentials_are_stripped_and_unusable_entries_dropped(fake_providers, recording_sleep):
    client = _client(
        {"cerebras": "  csk-1 \n", "gemini": "", "deepseek": "   ", "groq": 123},  # type: ignore[dict-item]
        fake_providers,
        recording_sleep,
    )

    assert dict(client.credentials) == {"cerebras": "csk-1"}


@pytest.mark.asyncio
async def test_non_string_credential_is_skipped(fake_providers, recording_sleep):
    keys = {"cerebras": 123, "gemini": "gk"}

    result = await _client(keys, fake_providers, recording_sleep).chat(HELLO)

    assert result.provider == "gemini"
    assert fake_providers.calls("cerebras") == 0


def test_unknown_provider_in_order_is_rejected(api_keys):
    with pytest.raises(UnknownProviderError):
        CascadeClient(api_keys, order=("cerebras", "nope"))


@pytest.mark.asyncio
async def test_custom_order(api_keys, fake_providers, recording_sleep):
    client = _client(api_keys, fake_providers, recording_sleep, order=("groq", "cerebras"))

    result = await client.chat(HELLO)

    assert client.order == ("groq", "cerebras")
    assert result.provider == "groq"


def test_chat_sync(api_keys, fake_providers, recording_sleep):
    fake_providers.script("cerebras", status(500))

    result = chat_sync(
        api_keys,
        [{"role": "user", "content": "hi"}],
        transport=fake_providers.transport,
        sleep=recording_sleep,
    )

    assert result.provider == "gemini"
    assert len(recording_sleep.delays) == 2


@pytest.mark.asyncio
async def test_from_env_reads_environment(clean_env, monkeypatch, fake_providers, recording_sleep):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "env-deepseek")

    client = CascadeClient.from_env(transport=fake_providers.transport, sleep=recording_sleep)
    result = await client.chat(HELLO)

    assert dict(client.credentials) == {"deepseek": "env-deepseek"}
    assert result.provider == "deepseek"
    assert fake_providers.requests["deepseek"][0].headers["Authorization"] == "Bearer env-deepseek"


@pytest.mark.asyncio
async def test_events_are_logged_without_credentials(api_keys, fake_providers, recording_sleep, log_records):
    api_keys["deepseek"] = ""
    fake_providers.script("cerebras", status(500))
    fake_providers.script("gemini", status(400, "bad request"))
    fake_providers.script("openrouter", openai_ok("fine"))

    await _client(api_keys, fake_providers, recording_sleep).chat(HELLO)

    events = [e["event"] for e in log_records.events()]
    assert events.count("retry.scheduled") == 2
    assert events.count("cascade.provider_failed") == 2
    assert "cascade.skip" in events
    assert events[-1] == "cascade.success"
    joined = "\n".join(log_records.messages)
    for key in FAKE_API_KEYS.values():
        assert key not in joined
