"""Adapter implementations for LLM providers."""

import logging

from openai import AsyncOpenAI

from ..settings import (
    ANTHROPIC_API_KEY,
    ANTHROPIC_MODEL,
    OPENAI_API_KEY,
    OPENAI_ENDPOINT,
    OPENAI_MODEL,
)
from .protocols import LLMProvider

logger = logging.getLogger(__name__)


class OpenAIAdapter(LLMProvider):
    """
    Adapter for the OpenAI chat completions API.

    Works against any OpenAI-compatible endpoint (OpenAI itself, proxies,
    OpenRouter, local servers) by overriding ``base_url``.

    Usage:
        async with OpenAIAdapter() as llm:
            response = await llm.complete("What is machine learning?")
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize the OpenAI adapter.

        Args:
            api_key: Optional API key. If not provided, uses OPENAI_API_KEY env var.
            model: Model to use. Defaults to OPENAI_MODEL (o3-mini).
            base_url: API endpoint. Defaults to OPENAI_ENDPOINT.
            timeout: Per-request timeout in seconds.
        """
        self.api_key = api_key or OPENAI_API_KEY
        self.model = model or OPENAI_MODEL
        self.base_url = base_url or OPENAI_ENDPOINT
        self.timeout = timeout
        self._client: AsyncOpenAI | None = None

        if not self.api_key:
            raise ValueError("OpenAI API key required. Set OPENAI_API_KEY in .env")

        logger.info(f"OpenAI adapter initialized with model: {self.model}")

    async def __aenter__(self) -> "OpenAIAdapter":
        self._client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            max_retries=2,
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client:
            await self._client.close()
            self._client = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with' context manager."
            )
        return self._client

    @property
    def is_reasoning_model(self) -> bool:
        """o-series models reject temperature and take a reasoning effort instead."""
        return self.model.startswith("o")

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> str:
        """Generate a completion for a simple prompt."""
        messages: list[dict] = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        messages.append({"role": "user", "content": prompt})

        logger.info(f"Completing prompt ({len(prompt)} chars) with {self.model}")
        logger.debug(f"Temperature: {temperature}, max_tokens: {max_tokens}")

        kwargs: dict = {"model": self.model, "messages": messages}
        if self.is_reasoning_model:
            kwargs["reasoning_effort"] = "medium"
            if max_tokens:
                kwargs["max_completion_tokens"] = max_tokens
        else:
            kwargs["temperature"] = temperature
            if max_tokens:
                kwargs["max_tokens"] = max_tokens

        response = await self.client.chat.completions.create(**kwargs)

        result = response.choices[0].message.content or ""
        logger.info(f"Completion received ({len(result)} chars)")
        logger.debug(f"Usage: {response.usage}")

        return result


class AnthropicAdapter(LLMProvider):
    """
    Adapter for Anthropic API (direct).

    Uses the Anthropic Python SDK directly for Claude models.

    Usage:
        async with AnthropicAdapter() as llm:
            response = await llm.complete("What is machine learning?")
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize the Anthropic adapter.

        Args:
            api_key: Optional API key. If not provided, uses ANTHROPIC_API_KEY env var.
            model: Model to use. Defaults to ANTHROPIC_MODEL.
            timeout: Per-request timeout in seconds.
        """
        self.api_key = api_key or ANTHROPIC_API_KEY
        self.model = model or ANTHROPIC_MODEL
        self.timeout = timeout
        self._client = None

        if not self.api_key:
            raise ValueError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY in .env"
            )

        logger.info(f"Anthropic adapter initialized with model: {self.model}")

    async def __aenter__(self) -> "AnthropicAdapter":
        import anthropic

        self._client = anthropic.AsyncAnthropic(
            api_key=self.api_key,
            max_retries=2,
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client:
            await self._client.close()
            self._client = None

    @property
    def client(self):
        if self._client is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with' context manager."
            )
        return self._client

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> str:
        """Generate a completion for a simple prompt."""
        logger.info(f"Completing prompt ({len(prompt)} chars) with {self.model}")
        logger.debug(f"Temperature: {temperature}, max_tokens: {max_tokens}")

        message = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens or 8192,
            system=system_prompt or "",
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )

        result = "".join(
            block.text for block in message.content if block.type == "text"
        )
        logger.info(f"Completion received ({len(result)} chars)")
        logger.debug(
            f"Usage: input={message.usage.input_tokens}, output={message.usage.output_tokens}"
        )

        return result
