"""Round-trip verification.

Each request gets a fresh random value; the probe writes it, reads it back,
and the result is classified as success, mismatch or error.  A mismatch
means the backend answered but returned something else: a stale value, or
another request's value when two tests hit the same probe concurrently
(requests are not isolated from each other).
"""

import asyncio
import secrets
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from testapp.core.protocols.testable import Testable


class RoundTripOutcome(str, Enum):
    """Classification of a single round trip."""

    success = "success"
    mismatch = "mismatch"
    error = "error"


@dataclass(frozen=True)
class RoundTripRecord:
    """Result of one verification, discarded once the response is written."""

    probe: str
    expected: str
    observed: Optional[str]
    latency: float
    outcome: RoundTripOutcome
    error: Optional[str] = None

    def describe(self) -> str:
        """Response body text for this outcome (empty on success)."""
        if self.outcome is RoundTripOutcome.error:
            return f"{self.probe} test: error: {self.error}"
        if self.outcome is RoundTripOutcome.mismatch:
            return (
                f"{self.probe} test: data mismatch, expected: {self.expected} "
                f"got: {self.observed}"
            )
        return ""


def generate_expected_value() -> str:
    """Return a short random value (4 hex characters)."""
    return secrets.token_hex(2)


async def run_round_trip(
    probe: Testable, expected: str, *, timeout: Optional[float] = None
) -> RoundTripRecord:
    """Ask ``probe`` to round-trip ``expected`` and classify the result.

    Args:
        probe: The probe under test.
        expected: Value to write.
        timeout: Ceiling for the whole round trip in seconds; ``None`` waits
            indefinitely.
    """
    start = time.perf_counter()
    try:
        observed = await asyncio.wait_for(probe.test(expected), timeout=timeout)
    except asyncio.TimeoutError:
        return RoundTripRecord(
            probe=probe.name,
            expected=expected,
            observed=None,
            latency=time.perf_counter() - start,
            outcome=RoundTripOutcome.error,
            error=f"timed out after {timeout}s",
        )
    except Exception as e:
        return RoundTripRecord(
            probe=probe.name,
            expected=expected,
            observed=None,
            latency=time.perf_counter() - start,
            outcome=RoundTripOutcome.error,
            error=str(e) or type(e).__name__,
        )

    latency = time.perf_counter() - start
    outcome = RoundTripOutcome.success if observed == expected else RoundTripOutcome.mismatch
    return RoundTripRecord(
        probe=probe.name,
        expected=expected,
        observed=observed,
        latency=latency,
        outcome=outcome,
    )
