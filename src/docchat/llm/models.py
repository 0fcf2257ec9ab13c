from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Role of a chat message sender."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """Represents a chat message in a conversation."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: Role = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")

    def to_api(self) -> dict[str, str]:
        """Render the message in the wire format expected by chat endpoints."""
        return {"role": str(self.role), "content": self.content}


class LLMResponse(BaseModel):
    """Response from an LLM provider.

    ``content`` is None when the endpoint answered successfully but the
    first choice carried no usable assistant message.
    """

    model_config = ConfigDict(frozen=True)

    content: str | None = Field(default=None, description="Generated text content")
    role: str = Field(default="assistant", description="Role reported for the first choice")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
