"""
Health check endpoints.

Provides endpoints for monitoring application health and status.
"""

from typing import Any, Dict

from fastapi import APIRouter

from config.constants import TABLES
from config.database import get_supabase_client_optional
from config.settings import get_settings


router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "service": "binder-api",
    }


@router.get("/health/detailed")
def detailed_health_check() -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks:
    - Configuration loaded
    - Supabase connection (one-row read of the candidate relation)
    """
    settings = get_settings()

    supabase_status = "unknown"
    supabase_error = None
    try:
        client = get_supabase_client_optional()
        if client:
            result = client.table(TABLES.CANDIDATES).select("id").limit(1).execute()
            supabase_status = "connected" if result.data else "empty"
        else:
            supabase_status = "not_configured"
    except Exception as e:
        supabase_status = "error"
        supabase_error = str(e)

    return {
        "status": "healthy" if supabase_status == "connected" else "degraded",
        "service": "binder-api",
        "environment": settings.environment,
        "checks": {
            "config": "ok",
            "auth": "ok" if settings.supabase_jwt_secret else "not_configured",
            "supabase": {
                "status": supabase_status,
                "error": supabase_error,
            },
        },
    }


@router.get("/ready")
def readiness_check() -> Dict[str, str]:
    """Kubernetes-style readiness check."""
    client = get_supabase_client_optional()
    if client is None:
        return {"status": "not_ready", "reason": "database_not_configured"}

    return {"status": "ready"}


@router.get("/live")
def liveness_check() -> Dict[str, str]:
    """Kubernetes-style liveness check."""
    return {"status": "alive"}
