"""Round-trip test endpoints, one per registered probe."""

from collections.abc import Sequence
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from testapp.core.logging import logger
from testapp.core.protocols.testable import Testable
from testapp.probes.registry import probe_route
from testapp.probes.verification import (
    RoundTripOutcome,
    generate_expected_value,
    run_round_trip,
)


def _test_handler(probe: Testable, timeout: Optional[float]):
    log = logger.with_context(probe=probe.name, operation="round_trip")

    async def handler() -> PlainTextResponse:
        record = await run_round_trip(probe, generate_expected_value(), timeout=timeout)
        if record.outcome is RoundTripOutcome.success:
            log.debug(f"{probe.name} test passed in {record.latency * 1000:.1f} ms")
            return PlainTextResponse("", status_code=200)

        body = record.describe()
        log.warning(body)
        return PlainTextResponse(body, status_code=500)

    handler.__name__ = f"test_{probe.name}"
    return handler


def build_probe_router(probes: Sequence[Testable], *, timeout: Optional[float]) -> APIRouter:
    """Create a router exposing ``GET /{name}/test`` for every probe.

    Args:
        probes: Initialized probes; names must be unique.
        timeout: Ceiling for each round trip in seconds.
    """
    router = APIRouter(tags=["probes"])
    for probe in probes:
        router.add_api_route(
            probe_route(probe.name),
            _test_handler(probe, timeout),
            methods=["GET"],
            response_class=PlainTextResponse,
            summary=f"Round-trip a random value through {probe.name}",
        )
    return router
