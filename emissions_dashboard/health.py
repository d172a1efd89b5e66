"""Health check endpoints with dependency checking.

Provides health checks for:
- Store connectivity (read/write and read-only endpoints)
- Analysis service configuration
- Application status
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from emissions_dashboard import __version__
from emissions_dashboard.config import Settings
from emissions_dashboard.database import get_db, get_read_db
from emissions_dashboard.dependencies import get_settings
from emissions_dashboard.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)

SERVICE_NAME = "emissions-dashboard"


def check_database(db: Session) -> Dict[str, Any]:
    """Check database connectivity.

    Args:
        db: Database session.

    Returns:
        Dict with status and optional error message.
    """
    try:
        # Simple query to verify connection
        db.execute(text("SELECT 1"))
        return {"healthy": True, "message": "Database connected"}
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"healthy": False, "message": f"Database error: {str(e)}"}


def check_analysis_service(settings: Settings) -> Dict[str, Any]:
    """Check the analysis service is configured.

    The service is not called: a real analysis reads whole documents.
    """
    if not settings.analysis_url.startswith(("http://", "https://")):
        return {"healthy": False, "message": "Analysis service URL is not an http(s) URL"}
    return {"healthy": True, "message": "Analysis service configured"}


@router.get("/health")
def health_check() -> Dict[str, Any]:
    """Basic health check - just app status."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": __version__}


@router.get("/health/detailed")
def detailed_health_check(
    db: Session = Depends(get_db),
    read_db: Session = Depends(get_read_db),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Detailed health check with dependency status.

    Returns:
        Health status for the store endpoints and the analysis service.
    """
    checks = {
        "database": check_database(db),
        "read_database": check_database(read_db),
        "analysis_service": check_analysis_service(settings),
    }

    all_healthy = all(check["healthy"] for check in checks.values())
    overall_status = "healthy" if all_healthy else "degraded"

    logger.info(
        "health_check_performed",
        status=overall_status,
        database=checks["database"]["healthy"],
        read_database=checks["read_database"]["healthy"],
        analysis_service=checks["analysis_service"]["healthy"],
    )

    return {
        "status": overall_status,
        "service": SERVICE_NAME,
        "version": __version__,
        "checks": checks,
    }


@router.get("/health/ready")
def readiness_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Kubernetes-style readiness probe.

    Returns 200 if app can serve traffic, 503 otherwise.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"ready": True}
    except Exception:
        raise HTTPException(status_code=503, detail={"ready": False, "reason": "Database unavailable"})


@router.get("/health/live")
def liveness_check() -> Dict[str, Any]:
    """Kubernetes-style liveness probe."""
    return {"alive": True}
