"""Bounded retry loop used while probes initialize.

Backends are not always reachable when the application starts (a database
sidecar may still be booting, a table may already exist).  ``retry`` keeps
calling an operation until it succeeds, until the error is classified as
acceptable, or until the time budget runs out.

``max_duration`` caps the *total* wall-clock time across all attempts: an
attempt still running when the budget ends is abandoned.  The wait between
attempts also ends early when the shared ``cancelled`` event is set, which
is how process shutdown stops an in-flight retry.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Optional

from testapp.core.exceptions import RetryCancelledError, RetryTimeoutError
from testapp.core.logging import ContextualLogger, logger


@dataclass(frozen=True)
class RetryConfig:
    """Time budget for a retried operation.

    Attributes:
        max_duration: Ceiling on total elapsed time, in seconds.
        poll_interval: Wait between attempts, in seconds. Must be positive.
        cancelled: Shutdown signal; when set, waiting stops immediately.
    """

    max_duration: float
    poll_interval: float
    cancelled: Optional[asyncio.Event] = None

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.max_duration < 0:
            raise ValueError(f"max_duration must not be negative, got {self.max_duration}")


def never(exc: Exception) -> bool:
    """Acceptable-error predicate that accepts nothing."""
    return False


async def _sleep_unless_cancelled(cancelled: Optional[asyncio.Event], delay: float) -> bool:
    """Sleep for ``delay`` seconds; return True if ``cancelled`` fired first."""
    if cancelled is None:
        await asyncio.sleep(delay)
        return False
    try:
        await asyncio.wait_for(cancelled.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return False
    return True


async def retry(
    operation: Callable[[], Awaitable[object]],
    *,
    config: RetryConfig,
    acceptable: Callable[[Exception], bool] = never,
    description: str = "operation",
    log: Optional[ContextualLogger] = None,
) -> None:
    """Run ``operation`` until it succeeds or the budget in ``config`` is spent.

    Args:
        operation: Zero-argument callable returning an awaitable.
        config: Time budget and shutdown signal.
        acceptable: Predicate for errors that count as success
            (e.g. "already exists").
        description: Human-readable name used in log lines and errors.
        log: Logger to report attempts on; defaults to the module logger.

    Raises:
        RetryTimeoutError: The budget was exhausted. The last error is
            chained as ``__cause__``.
        RetryCancelledError: ``config.cancelled`` was set while waiting.
    """
    log = log or logger.with_context(operation="retry")
    start = time.monotonic()
    attempt = 0
    last_error: Optional[Exception] = None

    while True:
        if config.cancelled is not None and config.cancelled.is_set():
            raise RetryCancelledError(
                _cancelled(description, attempt, last_error), last_error
            ) from last_error

        attempt += 1
        remaining = config.max_duration - (time.monotonic() - start)
        try:
            await asyncio.wait_for(operation(), timeout=remaining if remaining > 0 else None)
            if attempt > 1:
                log.info(f"{description} succeeded after {attempt} attempts")
            return
        except Exception as e:
            if acceptable(e):
                log.info(f"{description}: accepted error on attempt {attempt}: {e}")
                return
            last_error = e

        elapsed = time.monotonic() - start
        remaining = config.max_duration - elapsed
        if remaining <= 0:
            message = _gave_up(elapsed, config, last_error)
            raise RetryTimeoutError(message, last_error) from last_error

        wait = min(config.poll_interval, remaining)
        log.warning(
            f"{description} failed (attempt {attempt}), retrying in {wait:.1f}s: "
            f"{_describe(last_error)}"
        )

        if await _sleep_unless_cancelled(config.cancelled, wait):
            raise RetryCancelledError(
                _cancelled(description, attempt, last_error), last_error
            ) from last_error

        if wait >= remaining:
            elapsed = time.monotonic() - start
            message = _gave_up(elapsed, config, last_error)
            raise RetryTimeoutError(message, last_error) from last_error


def _gave_up(elapsed: float, config: RetryConfig, last_error: Optional[Exception]) -> str:
    return (
        f"gave up retrying after {elapsed:.1f}s (max {config.max_duration:g}s): "
        f"last error: {_describe(last_error)}"
    )


def _cancelled(description: str, attempts: int, last_error: Optional[Exception]) -> str:
    return (
        f"{description}: retry cancelled after {attempts} attempts: "
        f"last error: {_describe(last_error)}"
    )


def _describe(error: Optional[Exception]) -> str:
    if error is None:
        return "none"
    return str(error) or type(error).__name__
