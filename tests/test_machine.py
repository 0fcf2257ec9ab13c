"""Unit tests for the retry state machine."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from docchat.completion import (
    RetryPhase,
    RetryState,
    backoff_delay,
    is_retryable_status,
    next_state,
)
from docchat.completion.errors import (
    FatalServerError,
    NoAssistantContentError,
    RetriesExhaustedError,
    RetryableServerError,
)
from docchat.completion.machine import (
    AppendAssistant,
    AttemptAborted,
    AttemptEmpty,
    AttemptFailed,
    AttemptSucceeded,
    Finish,
    InvalidTransition,
    PerformAttempt,
    ReportError,
    ReportRetry,
    Start,
    Wait,
    WaitElapsed,
)


def _attempting(attempt: int = 0, max_retries: int = 5) -> RetryState:
    return RetryState(phase=RetryPhase.ATTEMPTING, attempt=attempt, max_retries=max_retries)


class TestBackoff:
    """Tests for the backoff schedule."""

    def test_default_schedule(self):
        """Test the 1s, 2s, 4s, 8s, 16s schedule."""
        assert [backoff_delay(n) for n in range(5)] == [1.0, 2.0, 4.0, 8.0, 16.0]

    def test_negative_attempt_rejected(self):
        """Test that a negative attempt index fails."""
        with pytest.raises(ValueError):
            backoff_delay(-1)

    @given(
        st.integers(min_value=0, max_value=20),
        st.floats(min_value=0.01, max_value=10.0, allow_nan=False),
    )
    def test_delay_doubles(self, attempt: int, base: float):
        """Property test: each delay is twice the previous one."""
        assert backoff_delay(attempt + 1, base) == pytest.approx(2 * backoff_delay(attempt, base))


class TestRetryableStatus:
    """Tests for status classification."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 599])
    def test_retryable(self, status: int):
        assert is_retryable_status(status)

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422, 600])
    def test_not_retryable(self, status: int):
        assert not is_retryable_status(status)

    @given(st.integers(min_value=400, max_value=499).filter(lambda s: s != 429))
    def test_client_errors_are_fatal(self, status: int):
        """Property test: 4xx other than 429 never retries."""
        state, effects = next_state(_attempting(), AttemptFailed(status=status, message="bad"))
        assert state.phase is RetryPhase.FATAL_ERROR
        assert not any(isinstance(e, PerformAttempt) for e in effects)


class TestTransitions:
    """Tests for next_state."""

    def test_start(self):
        """Test that Start issues the first attempt."""
        state, effects = next_state(RetryState(), Start())

        assert state.phase is RetryPhase.ATTEMPTING
        assert state.attempt == 0
        assert effects == [PerformAttempt(0)]

    def test_success(self):
        """Test that a successful attempt appends the reply and finishes."""
        state, effects = next_state(_attempting(), AttemptSucceeded(content="hi"))

        assert state.phase is RetryPhase.SUCCESS
        assert effects == [AppendAssistant("hi"), Finish()]

    def test_empty_success_reports_no_content(self):
        """Test that a 2xx without assistant content is terminal, not retried."""
        state, effects = next_state(_attempting(), AttemptEmpty())

        assert state.phase is RetryPhase.SUCCESS
        assert isinstance(state.error, NoAssistantContentError)
        assert isinstance(effects[0], ReportError)
        assert effects[-1] == Finish()

    def test_retryable_failure_waits(self):
        """Test that a 429 schedules a wait of base * 2^attempt."""
        state, effects = next_state(_attempting(attempt=2), AttemptFailed(status=429, message="slow down"))

        assert state.phase is RetryPhase.RETRY_WAIT
        assert state.delay == 4.0
        assert isinstance(effects[0], ReportRetry)
        assert effects[1] == Wait(4.0)
        assert "retry 3 of 5" in effects[0].error.message

    def test_transport_failure_is_retryable(self):
        """Test that a failure without status is retried."""
        state, effects = next_state(_attempting(), AttemptFailed(status=None, message="reset"))

        assert state.phase is RetryPhase.RETRY_WAIT
        assert isinstance(state.error, RetryableServerError)
        assert state.error.message.startswith("Network error: reset")

    def test_wait_elapsed_increments_attempt(self):
        """Test that the next attempt follows the wait."""
        waiting = RetryState(phase=RetryPhase.RETRY_WAIT, attempt=1, delay=2.0)
        state, effects = next_state(waiting, WaitElapsed())

        assert state.phase is RetryPhase.ATTEMPTING
        assert state.attempt == 2
        assert state.delay is None
        assert effects == [PerformAttempt(2)]

    def test_exhausted_after_max_retries(self):
        """Test that a retryable failure on the last attempt exhausts the budget."""
        state, effects = next_state(_attempting(attempt=5), AttemptFailed(status=503, message="down"))

        assert state.phase is RetryPhase.EXHAUSTED
        assert isinstance(state.error, RetriesExhaustedError)
        assert state.error.attempts == 6
        assert "max retries" in state.error.message
        assert effects[-1] == Finish()

    def test_fatal_status(self):
        """Test that a 401 ends the request immediately."""
        state, _ = next_state(_attempting(), AttemptFailed(status=401, message="Invalid key"))

        assert state.phase is RetryPhase.FATAL_ERROR
        assert isinstance(state.error, FatalServerError)
        assert state.error.message == "API error 401: Invalid key"

    def test_aborted_attempt_is_fatal(self):
        """Test that an unexpected failure is not retried."""
        state, _ = next_state(_attempting(), AttemptAborted(message="boom"))

        assert state.phase is RetryPhase.FATAL_ERROR
        assert state.error.message == "Error: boom"

    @pytest.mark.parametrize("phase", [RetryPhase.SUCCESS, RetryPhase.FATAL_ERROR, RetryPhase.EXHAUSTED])
    def test_terminal_phases_reject_events(self, phase: RetryPhase):
        """Test that terminal phases accept nothing."""
        with pytest.raises(InvalidTransition):
            next_state(RetryState(phase=phase), Start())

    def test_wait_elapsed_outside_wait_rejected(self):
        with pytest.raises(InvalidTransition):
            next_state(_attempting(), WaitElapsed())

    @given(st.integers(min_value=0, max_value=10))
    def test_total_attempts_bounded(self, max_retries: int):
        """Property test: always-failing requests make exactly max_retries + 1 attempts."""
        state, effects = next_state(RetryState(max_retries=max_retries), Start())
        attempts = 0
        while not state.phase.is_terminal:
            if state.phase is RetryPhase.ATTEMPTING:
                attempts += 1
                state, effects = next_state(state, AttemptFailed(status=500, message="x"))
            else:
                state, effects = next_state(state, WaitElapsed())

        assert state.phase is RetryPhase.EXHAUSTED
        assert attempts == max_retries + 1
        assert state.attempts_made == max_retries + 1
