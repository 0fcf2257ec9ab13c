"""Error taxonomy surfaced by the completion client.

Every error carries the text shown to the user, whether it ends the
request (``terminal``) and how long a UI should keep it on screen
(``clear_after``; None means until the user does something else).
"""

UNKNOWN_ERROR = "Unknown error"


class CompletionError(Exception):
    """Base class for completion outcomes that are not a plain success."""

    terminal: bool = True
    clear_after: float | None = None

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(CompletionError):
    """A precondition on the request failed; nothing was sent."""

    clear_after = 3.0

    EMPTY_PROMPT = "Please enter a message to send."
    NO_DOCUMENTS = "Please upload a document or input text before sending a message."
    NO_API_KEY = "Please enter an API key first"


class ConnectivityError(CompletionError):
    """The connectivity signal reported offline; nothing was sent."""

    clear_after = 5.0

    def __init__(self, message: str = "No internet connection. Please check your connection and try again."):
        super().__init__(message)


class RetryableServerError(CompletionError):
    """A retryable failure; informational, another attempt follows."""

    terminal = False

    def __init__(
        self,
        status: int | None,
        detail: str | None,
        attempt: int,
        delay: float,
        max_retries: int,
    ):
        self.status = status
        self.detail = detail
        self.attempt = attempt
        self.delay = delay
        self.max_retries = max_retries
        if status is None:
            cause = f"Network error: {detail or UNKNOWN_ERROR}"
        else:
            cause = f"Server error {status}: {detail or UNKNOWN_ERROR}"
        super().__init__(
            f"{cause}. Retrying in {delay:g}s "
            f"(retry {attempt + 1} of {max_retries})..."
        )


class FatalServerError(CompletionError):
    """A non-retryable failure. ``status`` is None for unexpected client errors."""

    def __init__(self, status: int | None, detail: str | None = None):
        self.status = status
        self.detail = detail
        if status is None:
            super().__init__(f"Error: {detail or UNKNOWN_ERROR}")
        else:
            super().__init__(f"API error {status}: {detail or UNKNOWN_ERROR}")


class RetriesExhaustedError(CompletionError):
    """Every attempt in the retry budget failed."""

    def __init__(self, attempts: int, last_error: str | None = None):
        self.attempts = attempts
        self.last_error = last_error
        message = f"Request failed after {attempts} attempts (max retries exceeded)"
        if last_error:
            message = f"{message}. Last error: {last_error}"
        super().__init__(message)


class NoAssistantContentError(CompletionError):
    """The endpoint answered but the response carried no assistant message."""

    def __init__(self, message: str = "No response from assistant."):
        super().__init__(message)
