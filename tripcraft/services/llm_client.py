"""
LLM Client - Unified interface for OpenAI-compatible chat completion gateways.
Supports Lovable AI, OpenAI, OpenRouter, and Ollama, plus an offline mock.
"""
from openai import AsyncOpenAI
from typing import Optional
import logging
import openai

from ..config import get_llm_config
from ..errors import CreditsExhaustedError, GenerationFailedError, RateLimitedError

logger = logging.getLogger(__name__)


class LLMClient:
    """Async LLM client with OpenAI-compatible API. One call, no retries."""

    def __init__(self, config: Optional[dict] = None, client: Optional[AsyncOpenAI] = None):
        config = config or get_llm_config()
        self.provider = config["provider"]
        self.model = config["model"]
        self.temperature = config["temperature"]
        self.max_tokens = config.get("max_tokens")
        self._mock = None

        if client is not None:
            self.client = client
        elif self.provider == "mock":
            from .mock_llm import MockLLMClient
            self._mock = MockLLMClient()
            self.model = self._mock.model
            self.client = None
        elif not config.get("api_key"):
            logger.error(f"API key is not configured for provider '{self.provider}'")
            self.client = None
        else:
            kwargs = {
                "api_key": config["api_key"],
                "base_url": config["base_url"],
                "max_retries": 0,
            }
            if config.get("timeout") is not None:
                kwargs["timeout"] = config["timeout"]
            self.client = AsyncOpenAI(**kwargs)

        logger.info(f"LLM client ready: provider={self.provider}, model={self.model}")

    async def chat(
        self,
        messages: list[dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Override default temperature
            max_tokens: Override default max tokens

        Returns:
            The assistant's response content (may be empty)

        Raises:
            RateLimitedError: upstream answered 429
            CreditsExhaustedError: upstream answered 402
            GenerationFailedError: no API key, or any other upstream or
                connection failure
        """
        if self._mock is not None:
            return await self._mock.chat(messages, temperature, max_tokens)
        if self.client is None:
            logger.error("API key is not configured")
            raise GenerationFailedError()

        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
        }
        if max_tokens or self.max_tokens:
            kwargs["max_tokens"] = max_tokens or self.max_tokens

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            if e.status_code == 429:
                logger.error("Rate limit exceeded")
                raise RateLimitedError() from e
            if e.status_code == 402:
                logger.error("Payment required")
                raise CreditsExhaustedError() from e
            logger.error(f"AI gateway error: {e.status_code} {e.message}")
            raise GenerationFailedError() from e
        except openai.APIError as e:
            logger.error(f"AI gateway unreachable: {e}")
            raise GenerationFailedError() from e

        if not response.choices:
            logger.error("AI gateway returned no choices")
            raise GenerationFailedError()
        return response.choices[0].message.content or ""


# Global LLM client instance
llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the global LLM client."""
    global llm_client
    if llm_client is None:
        llm_client = LLMClient()
    return llm_client
