import json

import httpx
import pytest

from brewbook.app.core.config import Settings
from brewbook.app.core.errors import LLMError
from brewbook.app.services.llm_client import LLMClient, strip_code_fence


def make_settings(**overrides):
    values = {"OPENAI_API_KEY": "sk-test", "LLM_BASE_URL": "http://llm.test"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_client(handler, settings=None):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LLMClient(settings or make_settings(), client=http)


def test_strip_code_fence():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('{"a": 1}') == '{"a": 1}'
    assert strip_code_fence("") == ""


@pytest.mark.asyncio
async def test_chat_json_sends_json_mode_request():
    seen = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"content": '{"recipes": []}'}}], "usage": {"total_tokens": 17}},
        )

    completion = await make_client(handler).chat_json("system", "user", temperature=0.5, max_tokens=100)
    assert seen["url"] == "http://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["response_format"] == {"type": "json_object"}
    assert seen["body"]["messages"][0] == {"role": "system", "content": "system"}
    assert seen["body"]["temperature"] == 0.5
    assert completion.content == '{"recipes": []}'
    assert completion.tokens_used == 17
    assert completion.model == "gpt-4o"


@pytest.mark.asyncio
async def test_organization_header_is_sent_when_configured():
    seen = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        seen["org"] = request.headers.get("OpenAI-Organization")
        return httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2]}]})

    client = make_client(handler, make_settings(OPENAI_ORG_ID="org-123"))
    assert await client.embed("latte") == [0.1, 0.2]
    assert seen["org"] == "org-123"


@pytest.mark.asyncio
async def test_generate_image_returns_url():
    async def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert body["model"] == "dall-e-3"
        return httpx.Response(200, json={"data": [{"url": "https://img.test/1.png"}]})

    assert await make_client(handler).generate_image("a latte") == "https://img.test/1.png"


@pytest.mark.asyncio
async def test_generate_image_without_data_returns_empty():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": []})

    assert await make_client(handler).generate_image("a latte") == ""


@pytest.mark.asyncio
async def test_error_body_raises():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"type": "rate_limit", "message": "slow down"}})

    with pytest.raises(LLMError, match="rate_limit"):
        await make_client(handler).embed("latte")


@pytest.mark.asyncio
async def test_transport_error_raises():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(LLMError):
        await make_client(handler).chat_json("s", "u")


@pytest.mark.asyncio
async def test_missing_embedding_raises():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": []})

    with pytest.raises(LLMError, match="missing vector"):
        await make_client(handler).embed("latte")


@pytest.mark.asyncio
async def test_missing_api_key_raises():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    settings = Settings(_env_file=None, LLM_BASE_URL="http://llm.test", OPENAI_API_KEY="")
    with pytest.raises(LLMError, match="OPENAI_API_KEY"):
        await make_client(handler, settings).embed("latte")
