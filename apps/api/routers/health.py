"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core.database import Database, get_database
from core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/health")
async def health(database: Database = Depends(get_database)):
    """Liveness plus database connectivity."""
    try:
        await database.ping()
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return JSONResponse(status_code=500, content={"status": "error", "db": "down"})
    return {"status": "ok", "db": "up", "timestamp": datetime.utcnow().isoformat()}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes liveness probe endpoint."""
    return {"status": "alive"}
