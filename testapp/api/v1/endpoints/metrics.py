"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Request, Response

from testapp.core.protocols.metrics_renderer import MetricsRenderer

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics(request: Request) -> Response:
    """Serialize the probe metrics registry in Prometheus text format."""
    renderer: MetricsRenderer = request.app.state.metrics_renderer
    return Response(content=renderer.generate(), media_type=renderer.content_type)
