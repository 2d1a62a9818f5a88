# uiauto_ax/waits.py
"""
@file waits.py
@brief Timeout and retry wrappers for calls into the accessibility provider.

The provider offers no cancellation primitive, so a timeout abandons the
caller's wait and leaves the call running on a daemon worker thread whose
result is discarded.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent import futures
from typing import Callable, Optional, Tuple, TypeVar

from .exceptions import (AccessibilityError, RetryExhaustedError, TimeoutError,
                         ValidationError)
from .timinglogger import TIMING_LOGGER
from .validation import (validate_retry_count, validate_retry_delay,
                         validate_timeout)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Caller bugs and missing permissions never get better by retrying.
NON_RETRYABLE = (ValidationError, AccessibilityError)


def _now() -> float:
    """Monotonic time source for timeout calculations."""
    return time.monotonic()


def _run_into(future: futures.Future, operation: Callable[[], T]) -> None:
    if not future.set_running_or_notify_cancel():
        return
    try:
        result = operation()
    except BaseException as e:
        future.set_exception(e)
    else:
        future.set_result(result)


def with_timeout(
    duration: float,
    operation: Callable[[], T],
    description: str = "operation",
) -> T:
    """
    Run ``operation`` and wait at most ``duration`` seconds for it.

    The operation runs on its own daemon thread; the caller observes either
    its result (or exception) or the deadline, whichever comes first.

    @param duration Timeout in seconds
    @param operation Zero-argument callable
    @param description Used in error messages and timing events
    @return The operation's result
    @throws TimeoutError if the deadline elapses first
    """
    validate_timeout(duration)

    future: futures.Future = futures.Future()
    worker = threading.Thread(
        target=_run_into,
        args=(future, operation),
        name=f"uiauto-ax-timeout:{description}"[:60],
        daemon=True,
    )
    start_time = _now()
    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(event="timeout_start", description=description, metadata={"timeout_s": duration})
    worker.start()

    try:
        result = future.result(timeout=duration)
    except futures.TimeoutError:
        elapsed = _now() - start_time
        future.cancel()
        if TIMING_LOGGER.is_enabled():
            TIMING_LOGGER.log(
                event="timeout_expired",
                description=description,
                status="error",
                metadata={"timeout_s": duration, "elapsed_s": round(elapsed, 3)},
            )
        error = TimeoutError(
            f"Operation '{description}' timed out after {duration} seconds",
            description=description,
            timeout=duration,
        )
        error.elapsed_time = elapsed
        raise error from None

    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="timeout_success",
            description=description,
            status="success",
            metadata={"elapsed_s": round(_now() - start_time, 3)},
        )
    return result


def with_retry(
    max_attempts: int,
    delay: float,
    operation: Callable[[], T],
    description: str = "operation",
    exceptions: Tuple[type, ...] = (Exception,),
) -> T:
    """
    Invoke ``operation`` up to ``max_attempts`` times.

    Returns the first success. After the last failed attempt, that attempt's
    own exception is re-raised; if it was a timeout a RetryExhaustedError
    wrapping it is raised instead. Validation and permission errors are
    never retried.

    @param max_attempts Maximum number of invocations (>= 1)
    @param delay Sleep between attempts in seconds
    @param operation Zero-argument callable
    @param description Used in log messages and timing events
    @param exceptions Exception types that count as a retryable failure
    """
    validate_retry_count(max_attempts)
    validate_retry_delay(delay)

    start_time = _now()
    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="retry_start",
            description=description,
            metadata={"max_attempts": max_attempts, "delay_s": delay},
        )

    last_exception: Optional[BaseException] = None
    for attempt in range(1, max_attempts + 1):
        try:
            result = operation()
        except NON_RETRYABLE:
            raise
        except exceptions as e:
            last_exception = e
            if attempt < max_attempts:
                logger.info(
                    f"Attempt {attempt} of '{description}' failed: "
                    f"{type(e).__name__}: {e}. Retrying in {delay} seconds..."
                )
                if TIMING_LOGGER.is_enabled():
                    TIMING_LOGGER.log(
                        event="retry_wait",
                        description=description,
                        metadata={"attempt": attempt, "sleep_s": delay},
                    )
                time.sleep(delay)
            continue

        if TIMING_LOGGER.is_enabled():
            TIMING_LOGGER.log(
                event="retry_success",
                description=description,
                status="success",
                metadata={"attempts": attempt, "elapsed_s": round(_now() - start_time, 3)},
            )
        return result

    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="retry_exhausted",
            description=description,
            status="error",
            metadata={"attempts": max_attempts, "elapsed_s": round(_now() - start_time, 3)},
        )

    if isinstance(last_exception, TimeoutError):
        raise RetryExhaustedError(description, max_attempts, last_exception) from last_exception
    raise last_exception


def with_timeout_and_retry(
    timeout: float,
    max_attempts: int,
    delay: float,
    operation: Callable[[], T],
    description: str = "operation",
) -> T:
    """
    Retry ``operation`` with a timeout applied to each individual attempt.
    """
    validate_timeout(timeout)
    return with_retry(
        max_attempts,
        delay,
        lambda: with_timeout(timeout, operation, description=description),
        description=description,
    )
