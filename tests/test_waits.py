# tests/test_waits.py
"""
Tests for timeout and retry wrappers.
"""

import threading
import time

import pytest

from uiauto_ax.exceptions import (AccessibilityError, RetryExhaustedError,
                                  TimeoutError, ValidationError)
from uiauto_ax.timinglogger import TIMING_LOGGER
from uiauto_ax.waits import with_retry, with_timeout, with_timeout_and_retry


@pytest.fixture
def gate():
    event = threading.Event()
    yield event
    event.set()


class Flaky:
    """Fails with a distinct error on each call until ``succeed_on``."""

    def __init__(self, succeed_on, result="done"):
        self.succeed_on = succeed_on
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls < self.succeed_on:
            raise ValueError(f"attempt {self.calls}")
        return self.result


class TestWithTimeout:
    """Tests for with_timeout."""

    def test_returns_result_of_fast_operation(self):
        """Should return the operation's value."""
        assert with_timeout(1.0, lambda: 42) == 42

    def test_propagates_operation_exception(self):
        """Should re-raise the operation's own error unchanged."""
        def boom():
            raise KeyError("missing")

        with pytest.raises(KeyError):
            with_timeout(1.0, boom)

    def test_hanging_operation_times_out(self, gate):
        """Should raise TimeoutError close to the deadline."""
        start = time.monotonic()
        with pytest.raises(TimeoutError) as exc_info:
            with_timeout(0.3, gate.wait, description="hang")
        elapsed = time.monotonic() - start

        assert elapsed < 1.5
        assert exc_info.value.timeout == 0.3
        assert exc_info.value.description == "hang"
        assert exc_info.value.elapsed_time >= 0.25
        assert "Elapsed" in str(exc_info.value)

    def test_late_result_is_discarded(self, gate):
        """An abandoned operation finishing later must not affect the caller."""
        finished = threading.Event()

        def slow():
            gate.wait()
            finished.set()
            return "late"

        with pytest.raises(TimeoutError):
            with_timeout(0.2, slow)
        gate.set()
        assert finished.wait(2.0)

    @pytest.mark.parametrize("duration", [0, -1, 301])
    def test_rejects_invalid_duration(self, duration):
        """Should raise ValidationError before running the operation."""
        called = []
        with pytest.raises(ValidationError):
            with_timeout(duration, lambda: called.append(1))
        assert called == []


class TestWithRetry:
    """Tests for with_retry."""

    @pytest.mark.parametrize("k", [1, 2, 3])
    def test_success_at_attempt_k_calls_exactly_k_times(self, k):
        """Should stop at the first success."""
        op = Flaky(succeed_on=k)
        assert with_retry(3, 0.01, op) == "done"
        assert op.calls == k

    def test_raises_last_attempt_error_after_n_calls(self):
        """Should re-raise the error of attempt N."""
        op = Flaky(succeed_on=10)
        with pytest.raises(ValueError) as exc_info:
            with_retry(3, 0.01, op)
        assert op.calls == 3
        assert str(exc_info.value) == "attempt 3"

    def test_timeout_on_last_attempt_becomes_retry_exhausted(self):
        """Should wrap a final TimeoutError in RetryExhaustedError."""
        def op():
            raise TimeoutError("slow", description="op", timeout=0.1)

        with pytest.raises(RetryExhaustedError) as exc_info:
            with_retry(2, 0.01, op, description="op")
        assert exc_info.value.attempt_count == 2
        assert isinstance(exc_info.value.last_error, TimeoutError)

    def test_validation_error_is_not_retried(self):
        """Caller bugs should surface on the first attempt."""
        calls = []

        def op():
            calls.append(1)
            raise ValidationError("role", "empty")

        with pytest.raises(ValidationError):
            with_retry(5, 0.01, op)
        assert len(calls) == 1

    def test_permission_error_is_not_retried(self):
        """Missing permissions should surface on the first attempt."""
        calls = []

        def op():
            calls.append(1)
            raise AccessibilityError()

        with pytest.raises(AccessibilityError):
            with_retry(5, 0.01, op)
        assert len(calls) == 1

    def test_only_listed_exceptions_are_retried(self):
        """Errors outside ``exceptions`` propagate immediately."""
        op = Flaky(succeed_on=3)
        with pytest.raises(ValueError):
            with_retry(3, 0.01, op, exceptions=(KeyError,))
        assert op.calls == 1

    @pytest.mark.parametrize("attempts,delay", [(0, 0.1), (11, 0.1), (2, 0), (2, 11)])
    def test_rejects_invalid_parameters(self, attempts, delay):
        """Should validate attempts and delay."""
        with pytest.raises(ValidationError):
            with_retry(attempts, delay, lambda: None)


class TestWithTimeoutAndRetry:
    """Tests for with_timeout_and_retry."""

    def test_timeout_applies_per_attempt(self, gate):
        """A hanging first attempt should be abandoned and the second one used."""
        calls = []

        def op():
            calls.append(1)
            if len(calls) == 1:
                gate.wait()
            return "second"

        assert with_timeout_and_retry(0.2, 2, 0.01, op) == "second"
        assert len(calls) == 2

    def test_every_attempt_hangs(self, gate):
        """Should raise RetryExhaustedError wrapping the last timeout."""
        with pytest.raises(RetryExhaustedError) as exc_info:
            with_timeout_and_retry(0.1, 2, 0.01, gate.wait, description="stuck")
        assert isinstance(exc_info.value.last_error, TimeoutError)
        assert exc_info.value.last_error.description == "stuck"


class TestTimingEvents:
    """Tests for timing log events."""

    def test_events_recorded_when_enabled(self, gate):
        """Should record start and expiry events."""
        TIMING_LOGGER.configure(console=False)
        TIMING_LOGGER.enable()

        with_timeout(1.0, lambda: None, description="quick")
        with pytest.raises(TimeoutError):
            with_timeout(0.1, gate.wait, description="stuck")

        events = [(e["event"], e["description"]) for e in TIMING_LOGGER.history()]
        assert ("timeout_start", "quick") in events
        assert ("timeout_success", "quick") in events
        assert ("timeout_expired", "stuck") in events

    def test_nothing_recorded_when_disabled(self):
        """Disabled logger should keep no history."""
        with_retry(2, 0.01, Flaky(succeed_on=2))
        assert TIMING_LOGGER.history() == []
