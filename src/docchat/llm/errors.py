"""Transport-neutral provider errors.

Providers translate SDK-specific failures into these so callers can
classify a failure without knowing which client library produced it.
"""


class ProviderError(Exception):
    """Base class for provider failures."""


class ProviderStatusError(ProviderError):
    """The endpoint answered with a non-2xx HTTP status."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error {status_code}: {message or 'Unknown error'}")


class ProviderTransportError(ProviderError):
    """The request never produced an HTTP response (DNS, reset, timeout...)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
