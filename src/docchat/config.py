"""Application configuration and logging setup.

Centralizes environment variables and defaults. Values come from the
process environment, optionally seeded from a ``.env`` file.
"""

import os
import sys
from pathlib import Path
from typing import Any, Literal, TextIO
from urllib.parse import urlparse

from dotenv import find_dotenv, load_dotenv
from loguru import logger
from pydantic import BaseModel, Field

DEFAULT_DATA_DIR = Path.home() / ".docchat"
DEFAULT_API_HOST = "api.openai.com"


class AppConfig(BaseModel):
    """Runtime configuration."""

    provider: Literal["openai", "deepseek"] = Field(default="openai", description="LLM provider: openai or deepseek")
    model: str = Field(default="gpt-3.5-turbo", description="Model identifier sent with each request")
    base_url: str | None = Field(default=None, description="Custom API base URL")
    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="Directory for the local database")
    store: Literal["sqlite", "memory"] = Field(default="sqlite", description="Store backend: sqlite or memory")
    max_retries: int = Field(default=5, ge=0, description="Retries after the first attempt")
    base_delay: float = Field(default=1.0, gt=0, description="Backoff base delay in seconds")
    attempt_timeout: float = Field(default=60.0, gt=0, description="Per-attempt timeout in seconds")
    connectivity_host: str = Field(default=DEFAULT_API_HOST, description="Host probed for connectivity")
    log_level: str = Field(default="WARNING", description="Minimum log level")

    @property
    def database_path(self) -> Path:
        return self.data_dir / "docchat.db"

    @classmethod
    def from_env(cls, **overrides: Any) -> "AppConfig":
        """Build configuration from environment variables.

        Environment variables:
            DOCCHAT_PROVIDER: LLM provider (default: openai)
            DOCCHAT_MODEL: Model name (default: gpt-3.5-turbo)
            DOCCHAT_BASE_URL: Custom API base URL
            DOCCHAT_DATA_DIR: Data directory (default: ~/.docchat)
            DOCCHAT_STORE: sqlite or memory (default: sqlite)
            DOCCHAT_MAX_RETRIES: Retry budget (default: 5)
            DOCCHAT_BASE_DELAY: Backoff base delay in seconds (default: 1.0)
            DOCCHAT_ATTEMPT_TIMEOUT: Per-attempt timeout in seconds (default: 60)
            DOCCHAT_CONNECTIVITY_HOST: Host to probe (default: API host)
            DOCCHAT_LOG_LEVEL: Log level (default: WARNING)
        """
        load_dotenv(find_dotenv(usecwd=True))

        base_url = os.getenv("DOCCHAT_BASE_URL") or None
        default_host = urlparse(base_url).hostname if base_url else None

        values: dict[str, Any] = {
            "provider": os.getenv("DOCCHAT_PROVIDER", "openai").lower(),
            "model": os.getenv("DOCCHAT_MODEL", "gpt-3.5-turbo"),
            "base_url": base_url,
            "data_dir": Path(os.getenv("DOCCHAT_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser(),
            "store": os.getenv("DOCCHAT_STORE", "sqlite").lower(),
            "max_retries": int(os.getenv("DOCCHAT_MAX_RETRIES", "5")),
            "base_delay": float(os.getenv("DOCCHAT_BASE_DELAY", "1.0")),
            "attempt_timeout": float(os.getenv("DOCCHAT_ATTEMPT_TIMEOUT", "60")),
            "connectivity_host": os.getenv(
                "DOCCHAT_CONNECTIVITY_HOST", default_host or DEFAULT_API_HOST
            ),
            "log_level": os.getenv("DOCCHAT_LOG_LEVEL", "WARNING").upper(),
        }
        values.update(overrides)
        return cls(**values)


def configure_logging(level: str = "WARNING", sink: TextIO | Any = sys.stderr) -> int:
    """Route loguru output to a single sink.

    Returns:
        The handler id, for callers that want to remove it later
    """
    logger.remove()
    return logger.add(sink, level=level.upper())
