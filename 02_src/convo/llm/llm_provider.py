"""Generation backends: OpenAI Responses API over httpx, Anthropic SDK."""

import os
from typing import Any, Protocol

import anthropic
import httpx

from ..config import EngineConfig
from ..logging_config import get_logger

logger = get_logger(__name__)


class ILLMProvider(Protocol):
    """Abstraction for generation backend access."""

    async def generate(
        self,
        model: str,
        messages: list[dict],  # [{"role": "user", "content": "..."}]
        system: str | None = None,
        max_output_tokens: int = 500,
    ) -> Any:
        """Issue one generation call and return the raw backend response."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class OpenAIResponsesProvider:
    """OpenAI Responses API provider."""

    BASE_URL = "https://api.openai.com/v1/responses"

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 60.0,
    ):
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def generate(
        self,
        model: str,
        messages: list[dict],
        system: str | None = None,
        max_output_tokens: int = 500,
    ) -> dict:
        """POST to /v1/responses and return the decoded JSON body."""
        input_items = [{"role": "system", "content": system}] if system else []
        input_items.extend(messages)
        payload = {
            "model": model,
            "input": input_items,
            "max_output_tokens": max_output_tokens,
        }
        logger.debug(f"OpenAI request: model={model}, input_count={len(input_items)}")

        response = await self._client.post(
            self.BASE_URL,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
        )

        if response.status_code >= 300:
            logger.error(f"OpenAI error {response.status_code}: {response.text[:500]}")
            raise RuntimeError(f"OpenAI API error: {response.status_code}")

        return response.json()

    async def close(self) -> None:
        await self._client.aclose()


class AnthropicProvider:
    """Anthropic Claude API provider."""

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)

    async def generate(
        self,
        model: str,
        messages: list[dict],
        system: str | None = None,
        max_output_tokens: int = 500,
    ) -> Any:
        """Generate completion using Claude API."""
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": max_output_tokens,
        }
        if system:
            kwargs["system"] = system

        try:
            return await self._client.messages.create(**kwargs)
        except Exception as e:
            # Re-raise for handling by caller
            raise RuntimeError(f"LLM API error: {e}") from e

    async def close(self) -> None:
        await self._client.close()


def create_provider(config: EngineConfig) -> ILLMProvider:
    """Build the provider selected by LLM_PROVIDER."""
    if config.llm_provider == "anthropic":
        return AnthropicProvider(api_key=config.anthropic_api_key or None)
    if config.llm_provider == "openai":
        return OpenAIResponsesProvider(api_key=config.openai_api_key or None)
    raise ValueError(f"Unknown LLM_PROVIDER: {config.llm_provider}")
