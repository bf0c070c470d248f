"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose ingest_requests_total, ingest_latency_ms and classification_total."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
