"""UI-visible request status.

Hides how loading / retrying / error indicators are stored and how
interested views are told about changes.
"""

from collections.abc import Callable
from dataclasses import dataclass

from .errors import CompletionError


@dataclass
class CompletionStatus:
    loading: bool = False
    retrying: bool = False
    error: str | None = None
    error_clear_after: float | None = None
    error_token: int = 0


StatusListener = Callable[[CompletionStatus], None]


class StatusTracker:
    """Owns a CompletionStatus and notifies listeners on every change.

    Each new error bumps ``error_token``. Views that auto-clear an error
    after ``error_clear_after`` seconds pass the token back to
    ``clear_error`` so a timer started for an older error never erases a
    newer one.
    """

    def __init__(self) -> None:
        self._status = CompletionStatus()
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> CompletionStatus:
        return self._status

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._status)

    def begin(self) -> None:
        """A request sequence started."""
        self._status.loading = True
        self._status.retrying = False
        self._status.error = None
        self._status.error_clear_after = None
        self._notify()

    def report(self, error: CompletionError) -> int:
        """Show an error (or retry notice). Returns its token."""
        self._status.error = error.message
        self._status.error_clear_after = error.clear_after
        self._status.retrying = not error.terminal
        self._status.error_token += 1
        self._notify()
        return self._status.error_token

    def finish(self) -> None:
        """The request sequence reached a terminal state."""
        self._status.loading = False
        self._status.retrying = False
        self._notify()

    def clear_error(self, token: int | None = None) -> bool:
        """Clear the current error if ``token`` is None or still current."""
        if self._status.error is None:
            return False
        if token is not None and token != self._status.error_token:
            return False
        self._status.error = None
        self._status.error_clear_after = None
        self._notify()
        return True
