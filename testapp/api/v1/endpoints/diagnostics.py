"""Diagnostic endpoints used when debugging a deployment by hand."""

import asyncio
import socket

import aiohttp
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from testapp.core.config import Settings
from testapp.core.logging import logger

router = APIRouter(tags=["diagnostics"], default_response_class=PlainTextResponse)

_log = logger.with_context(context_base="diagnostics")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/ping")
async def ping(
    delay: float = Query(0.0, ge=0.0, description="Seconds to wait before replying"),
    settings: Settings = Depends(get_settings),
):
    """Liveness check; optionally waits ``delay`` seconds first."""
    if delay > 0:
        await asyncio.sleep(delay)
    return settings.PING_RESPONSE


@router.get("/version")
async def version(settings: Settings = Depends(get_settings)):
    return f"{settings.VERSION} (rev: {settings.REVISION})"


@router.get("/hostname")
async def hostname():
    return socket.gethostname()


@router.get("/log")
async def log_info():
    """Emit an info line so log shipping can be verified."""
    _log.info("this is a test log line")
    return ""


@router.get("/logerror")
async def log_error():
    """Emit an error line so error alerting can be verified."""
    _log.error("this is a test error log line")
    return ""


@router.get("/connect")
async def connect(settings: Settings = Depends(get_settings)):
    """GET ``CONNECT_URL`` to check outbound connectivity from the pod."""
    timeout = aiohttp.ClientTimeout(total=settings.PROBE_TEST_TIMEOUT)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(settings.CONNECT_URL) as response:
                body = await response.text()
                status = response.status
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        _log.error(f"error performing http get to {settings.CONNECT_URL}: {e}")
        return PlainTextResponse("error performing http get", status_code=502)

    return f"HTTP status: {status}, body:\n{body}"


@router.get("/probes", response_class=JSONResponse)
async def list_probes(request: Request):
    """List every configured probe and whether it registered."""
    registry = request.app.state.probe_registry
    return [
        {
            "name": r.name,
            "route": r.route_path,
            "registered": r.registered,
            "error": r.error,
        }
        for r in registry.registrations
    ]
