"""Probe registry: turns candidate probes into live, routable probes.

A probe that fails to construct or initialize is logged and dropped; it
never takes the rest of the application down with it.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Optional

from testapp.core.logging import logger
from testapp.core.protocols.testable import Testable

ProbeFactory = Callable[[], Awaitable[Testable]]


@dataclass(frozen=True)
class ProbeCandidate:
    """A backend the configuration asked for, not yet constructed."""

    name: str
    factory: ProbeFactory


@dataclass
class ProbeRegistration:
    """Outcome of bringing one candidate up."""

    name: str
    probe: Optional[Testable]
    registered: bool
    error: Optional[str] = None

    @property
    def route_path(self) -> str:
        return probe_route(self.name)


def probe_route(name: str) -> str:
    """Route path serving the round-trip test for probe ``name``."""
    return f"/{name}/test"


class ProbeRegistry:
    """Owns every probe for the lifetime of the process.

    ``start()`` constructs and initializes candidates in order;
    ``shutdown()`` releases registered probes in reverse order.  The shared
    ``cancelled`` event is set on shutdown so retries still waiting inside
    ``init()`` stop immediately.
    """

    def __init__(self, cancelled: Optional[asyncio.Event] = None) -> None:
        self.cancelled = cancelled or asyncio.Event()
        self._registrations: list[ProbeRegistration] = []
        self._shut_down = False
        self._logger = logger.with_context(context_base="probe_registry")

    @property
    def registrations(self) -> list[ProbeRegistration]:
        """Every candidate seen by ``start()``, including dropped ones."""
        return list(self._registrations)

    @property
    def registered(self) -> list[Testable]:
        """Probes that initialized successfully, in registration order."""
        return [r.probe for r in self._registrations if r.registered and r.probe is not None]

    async def start(self, candidates: Sequence[ProbeCandidate]) -> list[Testable]:
        """Construct and initialize every candidate, dropping failures.

        Once ``cancelled`` is set, the remaining candidates are skipped.

        Returns:
            The successfully initialized probes.
        """
        for candidate in candidates:
            if self.cancelled.is_set():
                self._logger.warning(f"shutdown requested, not starting probe {candidate.name}")
                self._registrations.append(
                    ProbeRegistration(
                        candidate.name, None, registered=False, error="shutdown requested"
                    )
                )
                continue
            self._registrations.append(await self._bring_up(candidate))

        names = [p.name for p in self.registered]
        self._logger.info(f"registered {len(names)} probe(s): {', '.join(names) or 'none'}")
        return self.registered

    async def _bring_up(self, candidate: ProbeCandidate) -> ProbeRegistration:
        log = self._logger.with_context(probe=candidate.name)

        try:
            probe = await candidate.factory()
        except Exception as e:
            log.error(f"could not construct probe {candidate.name}: {e}")
            return ProbeRegistration(candidate.name, None, registered=False, error=str(e))

        try:
            await probe.init()
        except Exception as e:
            log.error(f"could not initialize probe {candidate.name}: {e}")
            # The probe may hold a half-open client; release it now since it
            # will not take part in the shutdown fan-out.
            await self._cleanup(probe)
            return ProbeRegistration(probe.name, probe, registered=False, error=str(e))

        log.info(f"probe {probe.name} ready at {probe_route(probe.name)}")
        return ProbeRegistration(probe.name, probe, registered=True)

    async def shutdown(self) -> list[Exception]:
        """Cancel pending retries and clean up every registered probe.

        Every cleanup runs even if an earlier one fails.  Safe to call more
        than once.

        Returns:
            Errors raised by cleanups (already logged).
        """
        self.cancelled.set()
        if self._shut_down:
            return []
        self._shut_down = True

        errors: list[Exception] = []
        for probe in reversed(self.registered):
            error = await self._cleanup(probe)
            if error is not None:
                errors.append(error)
        return errors

    async def _cleanup(self, probe: Testable) -> Optional[Exception]:
        try:
            await probe.cleanup()
        except Exception as e:
            self._logger.error(f"cleanup of probe {probe.name} failed: {e}")
            return e
        return None
