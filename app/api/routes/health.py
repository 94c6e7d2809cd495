'''
Health checks: a plain liveness check and a fuller check that also
reports on the history key-value store and the in-memory history mirror.
'''
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request
from app.api.deps import get_history
from app.core.config import settings
from app.services.history import HistoryStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

@router.get("/health")
async def health():
    """
    Simple health check endpoint for deployment checks.
    Does not require database connectivity.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "API is running",
        "service": "mindmosaic-api"
    }

@router.get("/health/full")
async def health_full(request: Request, history: HistoryStore = Depends(get_history)):
    """
    Verifies the store backing the history as well. A disconnected store is reported as degraded,
    not unhealthy: history keeps working from memory.
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected",
        "history_results": len(history.results),
        "active_sessions": len(request.app.state.registry),
        "oracle_configured": bool(settings.GEMINI_API_KEY),
        "service": "mindmosaic-api"
    }
    if not history.store_available():
        logger.error("History store health check failed")
        health_status["status"] = "degraded"
        health_status["database"] = "disconnected"
    return health_status
