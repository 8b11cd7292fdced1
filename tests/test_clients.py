"""Tests for the completion client."""

import json

import httpx
import pytest

from knowledge_clone.core import (
    AuthError,
    ConversationMessage,
    Credentials,
    MessageRole,
    NetworkError,
    ProviderName,
    ServiceError,
)
from knowledge_clone.providers import OpenAICompletionClient


def _completion_body(content: str = "The answer.") -> dict:
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 3, "total_tokens": 13},
    }


def _client(handler) -> OpenAICompletionClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAICompletionClient(http_client=http_client)


def _messages() -> list[ConversationMessage]:
    return [
        ConversationMessage(role=MessageRole.SYSTEM, content="You are helpful."),
        ConversationMessage(role=MessageRole.USER, content="Hello"),
    ]


@pytest.fixture
def openai_credentials():
    return Credentials(provider=ProviderName.EMBEDDING, key="sk-test")


@pytest.mark.asyncio
async def test_complete_sends_expected_request(openai_credentials):
    """Request carries model, messages, budget, temperature and the per-call key."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion_body())

    client = _client(handler)

    content = await client.complete(_messages(), 300, openai_credentials)

    assert content == "The answer."
    assert seen["url"] == "https://api.openai.com/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "gpt-4o-mini"
    assert seen["body"]["max_tokens"] == 300
    assert seen["body"]["temperature"] == 0.7
    assert seen["body"]["messages"] == [
        {"role": "system", "content": "You are helpful."},
        {"role": "user", "content": "Hello"},
    ]
    assert client.get_request_count() == 1


@pytest.mark.asyncio
async def test_key_is_taken_per_call():
    keys = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers["authorization"])
        return httpx.Response(200, json=_completion_body())

    client = _client(handler)

    await client.complete(_messages(), 10, Credentials(provider=ProviderName.EMBEDDING, key="first"))
    await client.complete(_messages(), 10, Credentials(provider=ProviderName.EMBEDDING, key="second"))

    assert keys == ["Bearer first", "Bearer second"]


@pytest.mark.asyncio
async def test_model_override(openai_credentials):
    models = []

    def handler(request: httpx.Request) -> httpx.Response:
        models.append(json.loads(request.content)["model"])
        return httpx.Response(200, json=_completion_body())

    client = _client(handler)

    await client.complete(_messages(), 10, openai_credentials, model="gpt-4o")

    assert models == ["gpt-4o"]


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 403])
async def test_auth_failures(openai_credentials, status_code):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"error": {"message": "Incorrect API key provided"}})

    client = _client(handler)

    with pytest.raises(AuthError) as exc_info:
        await client.complete(_messages(), 10, openai_credentials)

    assert exc_info.value.provider == "openai"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 429, 500, 503])
async def test_service_failures(openai_credentials, status_code):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"error": {"message": "Something went wrong"}})

    client = _client(handler)

    with pytest.raises(ServiceError) as exc_info:
        await client.complete(_messages(), 10, openai_credentials)

    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
async def test_transport_failure(openai_credentials):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = _client(handler)

    with pytest.raises(NetworkError):
        await client.complete(_messages(), 10, openai_credentials)


@pytest.mark.asyncio
async def test_empty_choices(openai_credentials):
    def handler(request: httpx.Request) -> httpx.Response:
        body = _completion_body()
        body["choices"] = []
        return httpx.Response(200, json=body)

    client = _client(handler)

    with pytest.raises(ServiceError):
        await client.complete(_messages(), 10, openai_credentials)


@pytest.mark.asyncio
async def test_blank_key_is_rejected_before_sending():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_completion_body())

    client = _client(handler)

    with pytest.raises(AuthError):
        await client.complete(_messages(), 10, Credentials(provider=ProviderName.EMBEDDING, key="  "))

    assert calls == []


def test_reset_metrics():
    client = OpenAICompletionClient()
    client._track_request()

    client.reset_metrics()

    assert client.get_request_count() == 0
