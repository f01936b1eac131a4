"""FastAPI application.

Probes are brought up in the lifespan: the test routes for every probe that
initialized are mounted before the first request is served, and all probes
are released when the server shuts down.
"""

import asyncio
import signal
import time
from collections.abc import Iterator, Sequence
from contextlib import asynccontextmanager, contextmanager
from typing import Optional

from fastapi import FastAPI

from testapp.adapters.metrics_renderer import PrometheusMetricsRenderer
from testapp.adapters.probe_metrics import PrometheusProbeMetrics
from testapp.api.v1.endpoints import diagnostics
from testapp.api.v1.endpoints import metrics as metrics_endpoint
from testapp.api.v1.endpoints.probes import build_probe_router
from testapp.core.config import Settings
from testapp.core.config import settings as default_settings
from testapp.core.logging import logger
from testapp.core.protocols.metrics_renderer import MetricsRenderer
from testapp.core.protocols.probe_metrics import ProbeMetrics
from testapp.probes.factory import build_candidates
from testapp.probes.registry import ProbeCandidate, ProbeRegistry

_log = logger.with_context(context_base="app")

_SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


@contextmanager
def cancel_on_signals(
    cancelled: asyncio.Event, signals: Sequence[int] = _SHUTDOWN_SIGNALS
) -> Iterator[None]:
    """Set ``cancelled`` if a shutdown signal arrives while the block runs.

    Probe init happens inside lifespan startup, where the server does not
    react to signals yet.  Handlers already installed (the server's own) are
    still called on delivery and are restored on exit, so the server shuts
    down as soon as startup returns.

    Outside the main thread signal handlers cannot be installed and the
    block runs unguarded.
    """
    loop = asyncio.get_running_loop()
    installed = []
    for sig in signals:
        previous = signal.getsignal(sig)
        try:
            loop.add_signal_handler(sig, _on_shutdown_signal, cancelled, sig, previous)
        except (NotImplementedError, RuntimeError, ValueError) as e:
            _log.debug(f"cannot watch signal {sig} during startup: {e}")
            continue
        installed.append((sig, previous))
    try:
        yield
    finally:
        for sig, previous in installed:
            loop.remove_signal_handler(sig)
            if previous is not None:
                signal.signal(sig, previous)


def _on_shutdown_signal(cancelled: asyncio.Event, sig: int, previous) -> None:
    _log.info(f"received {signal.Signals(sig).name} during startup, cancelling probe init")
    cancelled.set()
    if callable(previous) and previous is not signal.default_int_handler:
        previous(sig, None)


def record_start_metrics(metrics: ProbeMetrics, settings: Settings, now: float) -> None:
    """Publish start time and, when the deploy start is known, the lead time."""
    metrics.set_gauge("start_timestamp", now)
    if settings.DEPLOY_START_TIMESTAMP is not None:
        metrics.set_gauge("deploy_timestamp", settings.DEPLOY_START_TIMESTAMP)
        metrics.set_gauge("lead_time_seconds", now - settings.DEPLOY_START_TIMESTAMP)


def create_app(
    settings: Optional[Settings] = None,
    *,
    metrics: Optional[ProbeMetrics] = None,
    renderer: Optional[MetricsRenderer] = None,
    candidates: Optional[Sequence[ProbeCandidate]] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration; defaults to the environment.
        metrics: Probe metrics sink; defaults to a fresh Prometheus registry.
        renderer: ``/metrics`` renderer; defaults to rendering ``metrics``.
        candidates: Probes to bring up; defaults to whatever ``settings``
            configures.
    """
    settings = settings or default_settings

    if metrics is None:
        prometheus = PrometheusProbeMetrics()
        metrics = prometheus
        renderer = renderer or PrometheusMetricsRenderer.from_metrics(prometheus)
    if renderer is None:
        raise ValueError("a renderer is required when custom metrics are supplied")

    registry = ProbeRegistry()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        record_start_metrics(metrics, settings, time.time())

        to_start = candidates
        if to_start is None:
            to_start = build_candidates(settings, metrics, registry.cancelled)
        with cancel_on_signals(registry.cancelled):
            probes = await registry.start(to_start)
        app.include_router(build_probe_router(probes, timeout=settings.PROBE_TEST_TIMEOUT))

        _log.info(f"testapp {settings.VERSION} (rev: {settings.REVISION}) started")
        try:
            yield
        finally:
            if settings.GRACEFUL_SHUTDOWN_WAIT > 0:
                _log.info(f"waiting {settings.GRACEFUL_SHUTDOWN_WAIT}s before shutting down")
                await asyncio.sleep(settings.GRACEFUL_SHUTDOWN_WAIT)
            errors = await registry.shutdown()
            _log.info(f"shutdown complete ({len(errors)} cleanup error(s))")

    app = FastAPI(
        title="testapp",
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.probe_metrics = metrics
    app.state.metrics_renderer = renderer
    app.state.probe_registry = registry

    app.include_router(diagnostics.router)
    app.include_router(metrics_endpoint.router)
    return app
