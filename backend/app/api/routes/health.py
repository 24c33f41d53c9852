"""
Health check endpoints.

Provides basic health and status information about the server.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import inspect, text
from datetime import datetime

from app.database import get_db
from app.config import get_settings

router = APIRouter()
settings = get_settings()

REQUIRED_TABLES = ("users", "microposts", "relationships", "attendances")


@router.get("/health")
async def health_check(db: Session = Depends(get_db)) -> dict:
    """
    Basic health check endpoint.

    Returns:
        dict: Server status information including version.

    Example response:
        {
            "status": "healthy",
            "version": "0.1.0",
            "timestamp": "2026-10-19T12:00:00Z",
            "database": "connected"
        }
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.VERSION,
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "database": db_status,
    }


@router.get("/health/ready")
async def readiness_check(db: Session = Depends(get_db)) -> dict:
    """
    Readiness check for the service.

    The service is ready once the database answers and every table
    the feed depends on exists.

    Returns:
        dict: Readiness status with per-check results.
    """
    checks = {}
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "ok"
        existing = set(inspect(db.get_bind()).get_table_names())
        missing = [name for name in REQUIRED_TABLES if name not in existing]
        checks["tables"] = "ok" if not missing else f"missing: {', '.join(missing)}"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    return {
        "ready": all(status == "ok" for status in checks.values()),
        "checks": checks,
    }
