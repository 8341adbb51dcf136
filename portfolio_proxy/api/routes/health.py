from fastapi import APIRouter, HTTPException

from ... import __version__
from ...config import settings
from ...models import HealthResponse
from ...observability.metrics import metrics_endpoint

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """health check endpoint"""
    return HealthResponse(
        status="ok",
        service=settings.service_name,
        version=__version__,
        recognition_provider=settings.recognition_provider,
    )


@router.get("/metrics")
async def metrics():
    """prometheus metrics endpoint"""
    if not settings.enable_metrics:
        raise HTTPException(status_code=404, detail="metrics disabled")
    return metrics_endpoint()
