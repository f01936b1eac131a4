"""Base probe class."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from testapp.core.exceptions import ProbeOperationError
from testapp.core.logging import ContextualLogger, logger
from testapp.core.protocols.probe_metrics import ProbeMetrics

T = TypeVar("T")


class BaseProbe:
    """Shared plumbing for Testable implementations.

    Subclasses set ``name`` and implement ``init``, ``test`` and ``cleanup``.
    ``_instrumented`` wraps every backend read/write so that each attempt
    records exactly one latency observation (success) or one failure
    increment (error).
    """

    def __init__(self, name: str, metrics: ProbeMetrics) -> None:
        self._name = name
        self._metrics = metrics
        self.logger: ContextualLogger = logger.with_context(probe=name)

    @property
    def name(self) -> str:
        return self._name

    async def _instrumented(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        *,
        error: str,
    ) -> T:
        """Await ``call()`` and record its latency or failure under ``operation``.

        Args:
            operation: Metric label for this backend operation.
            call: Zero-argument callable performing the backend request.
            error: Message prefix used when the call fails.

        Raises:
            ProbeOperationError: ``call()`` raised; the cause is chained.
            asyncio.CancelledError: Re-raised after counting the failure.
        """
        start = time.perf_counter()
        try:
            result = await call()
        except asyncio.CancelledError:
            # Abandoned mid-call, usually by the round-trip timeout.
            self._metrics.inc_failure(operation)
            raise
        except Exception as e:
            self._metrics.inc_failure(operation)
            raise ProbeOperationError(self._name, error, e) from e

        latency = time.perf_counter() - start
        self._metrics.observe_latency(operation, latency)
        self.logger.debug(f"{operation} took {latency * 1000:.1f} ms")
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"
