"""Unit tests for round-trip verification."""

import asyncio
import re

import pytest

from testapp.core.exceptions import ProbeOperationError
from testapp.probes.verification import (
    RoundTripOutcome,
    generate_expected_value,
    run_round_trip,
)


class _EchoProbe:
    name = "echo"

    async def init(self):
        pass

    async def test(self, value: str) -> str:
        return value

    async def cleanup(self):
        pass


class _StaleProbe(_EchoProbe):
    name = "stale"

    async def test(self, value: str) -> str:
        return "zzzz"


class _FailingProbe(_EchoProbe):
    name = "failing"

    async def test(self, value: str) -> str:
        raise ProbeOperationError(self.name, "unable to write to bucket b", "refused")


class _HangingProbe(_EchoProbe):
    name = "hanging"

    async def test(self, value: str) -> str:
        await asyncio.sleep(10)
        return value


def test_expected_value_is_four_hex_characters():
    values = {generate_expected_value() for _ in range(50)}

    assert all(re.fullmatch(r"[0-9a-f]{4}", v) for v in values)
    assert len(values) > 1


class TestRunRoundTrip:
    @pytest.mark.asyncio
    async def test_success(self):
        record = await run_round_trip(_EchoProbe(), "a1b2", timeout=1.0)

        assert record.outcome is RoundTripOutcome.success
        assert record.observed == "a1b2"
        assert record.latency >= 0
        assert record.describe() == ""

    @pytest.mark.asyncio
    async def test_mismatch(self):
        record = await run_round_trip(_StaleProbe(), "a1b2", timeout=1.0)

        assert record.outcome is RoundTripOutcome.mismatch
        assert record.describe() == "stale test: data mismatch, expected: a1b2 got: zzzz"

    @pytest.mark.asyncio
    async def test_error(self):
        record = await run_round_trip(_FailingProbe(), "a1b2", timeout=1.0)

        assert record.outcome is RoundTripOutcome.error
        assert record.observed is None
        assert record.describe() == "failing test: error: unable to write to bucket b: refused"

    @pytest.mark.asyncio
    async def test_timeout_is_an_error(self):
        record = await run_round_trip(_HangingProbe(), "a1b2", timeout=0.05)

        assert record.outcome is RoundTripOutcome.error
        assert record.describe() == "hanging test: error: timed out after 0.05s"
