"""Unit tests for the Anthropic completion wrapper."""
from types import SimpleNamespace

import httpx
import pytest
from anthropic import APIConnectionError, AuthenticationError

from app.services.completion_client import (
    DATA_ANALYSIS_OPTIONS,
    INSIGHTS_OPTIONS,
    CompletionClient,
    CompletionOptions,
)
from app.services.errors import ConfigurationError, UpstreamEmptyResponseError, UpstreamServiceError


@pytest.mark.asyncio
async def test_missing_key_fails_before_any_request(monkeypatch: pytest.MonkeyPatch):
    def explode(*args, **kwargs):
        raise AssertionError("Anthropic client must not be built without a key")

    monkeypatch.setattr("app.services.completion_client.Anthropic", explode)
    client = CompletionClient(api_key=None, model="claude-test")

    assert client.is_configured is False
    with pytest.raises(ConfigurationError):
        await client.complete("hola", INSIGHTS_OPTIONS)


def test_client_is_built_from_key(monkeypatch: pytest.MonkeyPatch):
    created = {}

    class DummyAnthropic:
        def __init__(self, api_key: str):
            created["api_key"] = api_key
            self.messages = SimpleNamespace()

    monkeypatch.setattr("app.services.completion_client.Anthropic", DummyAnthropic)

    client = CompletionClient(api_key="sk-test", model="claude-test")

    assert client.is_configured is True
    assert created["api_key"] == "sk-test"


@pytest.mark.asyncio
async def test_json_mode_prefills_and_restores_brace(scripted_client):
    client = scripted_client('"patterns": []}')

    text = await client.complete("analizá", DATA_ANALYSIS_OPTIONS, step=1)

    assert text == '{"patterns": []}'
    call = client.messages.calls[0]
    assert call["model"] == "claude-test"
    assert call["temperature"] == 0.3
    assert call["max_tokens"] == 2048
    assert call["messages"] == [
        {"role": "user", "content": "analizá"},
        {"role": "assistant", "content": "{"},
    ]


@pytest.mark.asyncio
async def test_json_mode_keeps_full_object_untouched(scripted_client):
    client = scripted_client('{"alerts": []}')

    assert await client.complete("analizá", DATA_ANALYSIS_OPTIONS) == '{"alerts": []}'


@pytest.mark.asyncio
async def test_text_mode_sends_single_user_turn(scripted_client):
    client = scripted_client("## 📊 Resumen de Datos")

    text = await client.complete("generá", INSIGHTS_OPTIONS, step=2)

    assert text == "## 📊 Resumen de Datos"
    call = client.messages.calls[0]
    assert call["temperature"] == 0.7
    assert call["messages"] == [{"role": "user", "content": "generá"}]


@pytest.mark.asyncio
async def test_multiple_text_blocks_are_joined():
    response = SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="Hola "),
            SimpleNamespace(type="tool_use"),
            SimpleNamespace(type="text", text="guitarrista"),
        ]
    )
    messages = SimpleNamespace(create=lambda **kwargs: response)
    client = CompletionClient(api_key="k", model="m", client=SimpleNamespace(messages=messages))

    assert await client.complete("x", CompletionOptions()) == "Hola guitarrista"


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [None, "", "   \n"])
async def test_empty_reply_is_reported_with_step(scripted_client, reply):
    client = scripted_client(reply)

    with pytest.raises(UpstreamEmptyResponseError) as excinfo:
        await client.complete("x", INSIGHTS_OPTIONS, step=2)

    assert excinfo.value.step == 2
    assert "step 2" in excinfo.value.message


def test_settings_drive_sampling_options(monkeypatch: pytest.MonkeyPatch):
    settings = SimpleNamespace(
        anthropic_api_key=None,
        anthropic_model="claude-custom",
        ai_max_tokens=1024,
        data_analysis_temperature=0.2,
        insights_temperature=0.9,
    )
    monkeypatch.setattr("app.services.completion_client.get_settings", lambda: settings)

    client = CompletionClient.from_settings()

    assert client.model == "claude-custom"
    assert client.data_analysis_options == CompletionOptions(max_tokens=1024, temperature=0.2, force_json=True)
    assert client.insights_options == CompletionOptions(max_tokens=1024, temperature=0.9)


MESSAGES_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


@pytest.mark.asyncio
async def test_connection_failure_becomes_upstream_service_error(scripted_client):
    client = scripted_client(APIConnectionError(request=MESSAGES_REQUEST))

    with pytest.raises(UpstreamServiceError) as excinfo:
        await client.complete("x", DATA_ANALYSIS_OPTIONS, step=1)

    assert excinfo.value.step == 1
    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "AI service request failed: Connection error."
    assert isinstance(excinfo.value.__cause__, APIConnectionError)


@pytest.mark.asyncio
async def test_rejected_key_keeps_sdk_message(scripted_client):
    error = AuthenticationError(
        "invalid x-api-key",
        response=httpx.Response(401, request=MESSAGES_REQUEST),
        body=None,
    )
    client = scripted_client(error)

    with pytest.raises(UpstreamServiceError) as excinfo:
        await client.complete("x", INSIGHTS_OPTIONS, step=2)

    assert excinfo.value.detail == "invalid x-api-key"
    assert excinfo.value.step == 2
