"""Data models for attached documents."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Per-document cap applied at ingestion; the combined context is not capped
MAX_DOCUMENT_CHARS = 3000


class DocumentItem(BaseModel):
    """A text document attached to a conversation."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Display name, usually the file name")
    type: str = Field(default="text/plain", description="MIME-like content label")
    content: str = Field(default="", description="Document text, truncated on creation")

    @field_validator("content")
    @classmethod
    def _truncate(cls, value: str) -> str:
        return value[:MAX_DOCUMENT_CHARS]
