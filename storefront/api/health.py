"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from storefront.infrastructure.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="storefront-catalog",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, str]:
    """Check if categories have been published.

    Returns:
        Readiness status; "degraded" while serving fallback data.
    """
    store = request.app.state.store
    if not store.is_loaded:
        return {"status": "loading"}
    if store.degraded:
        return {"status": "degraded"}
    return {"status": "ready"}
