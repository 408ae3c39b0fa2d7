"""
Health Check API Routes

Liveness endpoint for load balancers and monitoring.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from ...core.config import settings
from ...core.observability import get_correlation_id

router = APIRouter()


@router.get("/health", summary="Service health")
async def get_health_status() -> dict[str, Any]:
    """
    Get service health.

    The engine is stateless, so being able to answer is being healthy.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "correlation_id": get_correlation_id() or None,
    }
