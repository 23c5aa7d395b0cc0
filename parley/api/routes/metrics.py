"""Prometheus metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response

from parley.observability.metrics import get_content_type, get_metrics

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose metrics in Prometheus text format for scraping."""
    return Response(
        content=get_metrics(),
        media_type=get_content_type(),
    )
