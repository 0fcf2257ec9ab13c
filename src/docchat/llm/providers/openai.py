from typing import Any

import openai
from loguru import logger
from openai import AsyncOpenAI

from ..base import LLMProvider
from ..errors import ProviderStatusError, ProviderTransportError
from ..models import ChatMessage, LLMResponse


def _error_message(body: object) -> str | None:
    """Pull the human-readable message out of an error response body.

    The SDK hands us either the inner ``error`` object of a JSON body, the
    whole JSON body, or raw text when the body did not parse.
    """
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if message is None and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
    return str(message) if message else None


async def create_chat_completion(
    client: AsyncOpenAI,
    messages: list[ChatMessage],
    model: str,
    temperature: float,
    max_tokens: int | None,
    top_p: float | None,
    **kwargs: Any
) -> LLMResponse:
    """Run one Chat Completions request and normalise its outcome.

    Shared by every OpenAI-compatible provider.

    Raises:
        ProviderStatusError: Non-2xx status from the endpoint
        ProviderTransportError: Connection failure or client-side timeout
    """
    request_params: dict[str, Any] = {
        "model": model,
        "messages": [msg.to_api() for msg in messages],
        "temperature": temperature,
        **kwargs
    }
    if max_tokens is not None:
        request_params["max_tokens"] = max_tokens
    if top_p is not None:
        request_params["top_p"] = top_p

    try:
        completion = await client.chat.completions.create(**request_params)
    except openai.APIStatusError as e:
        raise ProviderStatusError(e.status_code, _error_message(e.body)) from e
    except openai.APIConnectionError as e:
        # APITimeoutError is a subclass, so timeouts land here too
        raise ProviderTransportError(str(e) or type(e).__name__) from e

    usage = None
    if completion.usage:
        usage = {
            "prompt_tokens": completion.usage.prompt_tokens,
            "completion_tokens": completion.usage.completion_tokens,
            "total_tokens": completion.usage.total_tokens
        }

    if not completion.choices or completion.choices[0].message is None:
        logger.debug("Completion for {} returned no choices", model)
        return LLMResponse(content=None, model=completion.model or model, usage=usage)

    message = completion.choices[0].message
    return LLMResponse(
        content=message.content or None,
        role=message.role or "assistant",
        model=completion.model or model,
        usage=usage
    )


class OpenAIProvider(LLMProvider):
    """OpenAI LLM provider implementation.

    Hidden design decisions:
    - OpenAI API client initialization
    - Message format conversion
    - Mapping SDK exceptions onto provider errors
    - Authentication mechanism

    SDK-level retries are disabled; retrying belongs to the completion client.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        base_url: str | None = None,
        organization: str | None = None,
        timeout: float | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (sent as a bearer token)
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
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
            organization=organization,
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
        """Generate a chat completion using OpenAI.

        Args:
            messages: Full request transcript
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            top_p: Nucleus sampling bound
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            LLMResponse with generated content (None when the choice was empty)
        """
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
        """Close the OpenAI client.

        Note: Uses the OpenAI SDK's async context manager for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()
