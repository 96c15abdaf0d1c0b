"""
Health routes — liveness probe endpoint.
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from garage.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint. Never touches Shopify."""
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())
