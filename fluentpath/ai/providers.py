"""
Generative-text providers.

Both variants take the caller's API key per call: keys belong to learners,
not to the process. Errors are returned as failed GenerationResults with a
message fit to show the learner.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import httpx
from openai import AsyncOpenAI, OpenAIError

from fluentpath.ai.types import GenerationResult, Provider
from fluentpath.config import Settings, get_settings
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)


class TextGenerator(ABC):
    """One prompt in, one completion out."""

    provider: Provider

    @abstractmethod
    async def generate(self, api_key: str, model: str, prompt: str) -> GenerationResult:
        ...

    async def aclose(self) -> None:
        return None


class GeminiGenerator(TextGenerator):
    """Google Generative Language REST API (`models/{model}:generateContent`)."""

    provider = Provider.GEMINI

    def __init__(
        self,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def generate(self, api_key: str, model: str, prompt: str) -> GenerationResult:
        if not api_key:
            return GenerationResult.failed("API key is missing.", self.provider, model)

        url = f"{self.base_url}/models/{model}:generateContent"
        payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        logger.info("Calling Gemini", extra={"model": model, "prompt_chars": len(prompt)})
        try:
            resp = await self._client.post(url, params={"key": api_key}, json=payload)
            resp.raise_for_status()
            data = resp.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Gemini request failed",
                extra={"model": model, "status_code": exc.response.status_code},
            )
            return GenerationResult.failed(
                f"An error occurred with the gemini API: HTTP {exc.response.status_code}",
                self.provider,
                model,
            )
        except httpx.RequestError as exc:
            logger.warning("Gemini request error: %s", exc, extra={"model": model})
            return GenerationResult.failed(
                f"An error occurred with the gemini API: {exc}", self.provider, model
            )
        except (KeyError, IndexError, TypeError, ValueError):
            logger.warning("Unexpected Gemini response shape", extra={"model": model})
            return GenerationResult.failed(
                "Failed to get a valid response from Gemini.", self.provider, model
            )

        return GenerationResult(success=True, text=text, provider=self.provider, model=model)

    async def aclose(self) -> None:
        await self._client.aclose()


class OpenRouterGenerator(TextGenerator):
    """OpenRouter chat completions through the OpenAI-compatible SDK."""

    provider = Provider.OPENROUTER

    def __init__(
        self,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 60.0,
        client_factory: Callable[..., AsyncOpenAI] = AsyncOpenAI,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._client_factory = client_factory

    async def generate(self, api_key: str, model: str, prompt: str) -> GenerationResult:
        if not api_key:
            return GenerationResult.failed("API key is missing.", self.provider, model)

        logger.info("Calling OpenRouter", extra={"model": model, "prompt_chars": len(prompt)})
        # One client per call, closed on exit.
        async with self._client_factory(
            api_key=api_key, base_url=self.base_url, timeout=self.timeout
        ) as client:
            try:
                completion = await client.chat.completions.create(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                )
            except OpenAIError as exc:
                logger.warning("OpenRouter request failed: %s", exc, extra={"model": model})
                return GenerationResult.failed(
                    f"An error occurred with the openrouter API: {exc}", self.provider, model
                )

        text = completion.choices[0].message.content if completion.choices else None
        if not text:
            return GenerationResult.failed(
                "Failed to get a valid response from OpenRouter.", self.provider, model
            )
        return GenerationResult(success=True, text=text, provider=self.provider, model=model)


def build_generators(settings: Optional[Settings] = None) -> Dict[Provider, TextGenerator]:
    """One generator per provider, configured from settings."""
    settings = settings or get_settings()
    return {
        Provider.GEMINI: GeminiGenerator(
            base_url=settings.gemini_base_url,
            timeout=settings.ai_request_timeout_seconds,
        ),
        Provider.OPENROUTER: OpenRouterGenerator(
            base_url=settings.openrouter_base_url,
            timeout=settings.ai_request_timeout_seconds,
        ),
    }
