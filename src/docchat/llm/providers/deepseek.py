from typing import Any

from openai import AsyncOpenAI

from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse
from .openai import create_chat_completion


class DeepSeekProvider(LLMProvider):
    """DeepSeek LLM provider implementation using OpenAI-compatible API.

    Hidden design decisions:
    - DeepSeek API client initialization (via OpenAI SDK)
    - Message format conversion
    - Authentication mechanism
    """

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek-chat",
        base_url: str = "https://api.deepseek.com",
        timeout: float | None = None,
        **client_kwargs: Any
    ):
        """Initialize DeepSeek provider.

        Args:
            api_key: DeepSeek API key
            model: Default model to use ('deepseek-chat' or 'deepseek-reasoner')
            base_url: DeepSeek API base URL (default: https://api.deepseek.com)
            timeout: Optional per-request timeout in seconds
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        client_kwargs.setdefault("max_retries", 0)
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 1.0,
        max_tokens: int | None = None,
        top_p: float | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion using DeepSeek."""
        return await create_chat_completion(
            self._client,
            messages,
            model or self._model,
            temperature,
            max_tokens,
            top_p,
            **kwargs
        )

    async def close(self) -> None:
        """Close the DeepSeek client."""
        await self._client.close()
