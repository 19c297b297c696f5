"""Integration tests for the Gemini and OpenRouter generators with stubbed transports."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import OpenAIError

from fluentpath.ai import GeminiGenerator, OpenRouterGenerator, Provider

GEMINI_BASE = "https://gemini.test/v1beta"


def _gemini(handler) -> GeminiGenerator:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiGenerator(base_url=GEMINI_BASE, client=client)


def _openrouter(create: AsyncMock) -> tuple[OpenRouterGenerator, MagicMock]:
    factory = MagicMock()
    client = factory.return_value
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    client.chat.completions.create = create
    return OpenRouterGenerator(base_url="https://openrouter.test/api/v1", client_factory=factory), factory


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestGemini:
    @pytest.mark.asyncio
    async def test_successful_generation(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"candidates": [{"content": {"parts": [{"text": "Hello learner"}]}}]}
            )

        generator = _gemini(handler)
        result = await generator.generate("g-key", "gemini-2.5-flash", "Say hi")
        await generator.aclose()

        assert result.success is True
        assert result.text == "Hello learner"
        assert result.provider == Provider.GEMINI
        assert seen["url"] == f"{GEMINI_BASE}/models/gemini-2.5-flash:generateContent?key=g-key"
        assert seen["body"] == {"contents": [{"parts": [{"text": "Say hi"}]}]}

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        result = await _gemini(handler).generate("", "gemini-2.5-flash", "Say hi")
        assert result.success is False
        assert result.error_message == "API key is missing."

    @pytest.mark.asyncio
    async def test_http_error(self):
        result = await _gemini(lambda request: httpx.Response(403, json={"error": "denied"})).generate(
            "bad-key", "gemini-2.5-flash", "Say hi"
        )
        assert result.success is False
        assert result.error_message == "An error occurred with the gemini API: HTTP 403"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await _gemini(handler).generate("g-key", "gemini-2.5-flash", "Say hi")
        assert result.success is False
        assert result.error_message.startswith("An error occurred with the gemini API:")

    @pytest.mark.asyncio
    async def test_unexpected_payload(self):
        result = await _gemini(lambda request: httpx.Response(200, json={"candidates": []})).generate(
            "g-key", "gemini-2.5-flash", "Say hi"
        )
        assert result.error_message == "Failed to get a valid response from Gemini."


class TestOpenRouter:
    @pytest.mark.asyncio
    async def test_successful_generation(self):
        create = AsyncMock(return_value=_completion("Improved sentence."))
        generator, factory = _openrouter(create)

        result = await generator.generate("or-key", "openai/gpt-4o-mini", "Fix: me go")

        assert result.success is True
        assert result.text == "Improved sentence."
        assert factory.call_args.kwargs["api_key"] == "or-key"
        assert factory.call_args.kwargs["base_url"] == "https://openrouter.test/api/v1"
        create.assert_awaited_once_with(
            model="openai/gpt-4o-mini",
            messages=[{"role": "user", "content": "Fix: me go"}],
        )

    @pytest.mark.asyncio
    async def test_client_closed_after_each_call(self):
        generator, factory = _openrouter(AsyncMock(return_value=_completion("ok")))
        await generator.generate("or-key", "openai/gpt-4o-mini", "hi")
        await generator.generate("or-key", "openai/gpt-4o-mini", "hi again")
        assert factory.return_value.__aexit__.await_count == 2

    @pytest.mark.asyncio
    async def test_client_closed_after_sdk_error(self):
        generator, factory = _openrouter(AsyncMock(side_effect=OpenAIError("rate limited")))
        await generator.generate("or-key", "openai/gpt-4o-mini", "hi")
        factory.return_value.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_key(self):
        create = AsyncMock()
        generator, factory = _openrouter(create)
        result = await generator.generate("", "openai/gpt-4o-mini", "hi")
        assert result.error_message == "API key is missing."
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_sdk_error(self):
        generator, _ = _openrouter(AsyncMock(side_effect=OpenAIError("rate limited")))
        result = await generator.generate("or-key", "openai/gpt-4o-mini", "hi")
        assert result.success is False
        assert "rate limited" in result.error_message

    @pytest.mark.asyncio
    async def test_empty_completion(self):
        generator, _ = _openrouter(AsyncMock(return_value=_completion("")))
        result = await generator.generate("or-key", "openai/gpt-4o-mini", "hi")
        assert result.error_message == "Failed to get a valid response from OpenRouter."
