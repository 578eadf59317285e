"""Health check API endpoints."""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request
import structlog

from .. import __version__
from ..core.config import settings

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint",
)
async def health_check() -> Dict[str, str]:
    """Basic health check.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
        "version": __version__,
    }


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check that the engine and case catalog are loaded",
)
async def readiness_check(request: Request) -> Dict[str, Any]:
    """Readiness of the engine and the catalog.

    Returns:
        Readiness status for each component
    """
    checks: Dict[str, Any] = {}

    engine = getattr(request.app.state, "engine", None)
    if engine is not None:
        checks["engine"] = {
            "status": "ready",
            "relevance_weights": engine.config.relevance_weights.model_dump(),
        }
    else:
        checks["engine"] = {"status": "not_loaded"}

    catalog = getattr(request.app.state, "catalog", None)
    if catalog is not None:
        checks["catalog"] = {
            "status": "ready",
            "cases": len(catalog),
            "rejected": len(catalog.rejected),
        }
    else:
        checks["catalog"] = {"status": "not_loaded"}

    ready = all(check["status"] == "ready" for check in checks.values())
    if not ready:
        logger.warning("Readiness check failed", checks=checks)

    return {
        "ready": ready,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if service is alive",
)
async def liveness_check() -> Dict[str, str]:
    return {
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
