"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "trace": DEBUG,
        "debug": DEBUG,
        "info": INFO,
        "success": INFO,
        "warning": WARNING,
        "error": ERROR,
        "critical": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string (including loguru level names) to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Connectivity probe configuration
CONNECTIVITY_PROBE_INTERVAL = 15.0  # Seconds between probes of the API host

# Notification timeouts
NOTIFY_TIMEOUT = 3  # Seconds a toast stays visible

USAGE_HINTS = """[b]How to use this app:[/b]

  - Enter your API key in the sidebar.
  - Upload documents or input text (max 3,000 characters per document) to analyze.
  - Type your question below and press [b]Send[/b] (or Ctrl+J).
  - The assistant will respond based on the provided context.
  - An internet connection is required to get responses.
  - Only one message can be sent per chat.
  - After receiving a response, start a [b]New Chat[/b] (Ctrl+N); the chat is saved.
  - Select a saved chat to rename it or view its details; press Delete to remove it."""
