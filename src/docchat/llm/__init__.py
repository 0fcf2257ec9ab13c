from .base import LLMProvider
from .errors import ProviderError, ProviderStatusError, ProviderTransportError
from .factory import create_llm_provider
from .models import ChatMessage, LLMResponse, Role
from .providers import DeepSeekProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "ChatMessage",
    "LLMResponse",
    "Role",
    "ProviderError",
    "ProviderStatusError",
    "ProviderTransportError",
    "DeepSeekProvider",
    "OpenAIProvider",
]
