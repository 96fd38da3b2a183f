from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from planmate.api.dependencies import get_context
from planmate.core.context import AppContext
from planmate.core.logging import SERVICE_NAME

router = APIRouter()


@router.get("/health")
async def health_check(context: AppContext = Depends(get_context)):
    """Application health check endpoint"""
    store_ok = await context.stores.health.ping()

    return {
        "status": "healthy" if store_ok else "unhealthy",
        "timestamp": datetime.now(timezone.utc),
        "store": {
            "backend": context.settings.store_backend,
            "status": "connected" if store_ok else "disconnected"
        },
        "service": SERVICE_NAME
    }


@router.get("/health/ready")
async def readiness_check(context: AppContext = Depends(get_context)):
    """Kubernetes readiness probe endpoint"""
    if not await context.stores.health.ping():
        raise HTTPException(
            status_code=503,
            detail="Service not ready - data store unreachable"
        )

    return {"status": "ready"}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes liveness probe endpoint"""
    return {"status": "alive", "timestamp": datetime.now(timezone.utc)}
