"""Health check endpoint."""
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text

from kriminalitas.api.dependencies import get_store
from kriminalitas.api.models import HealthResponse
from kriminalitas.models.base import Store
from kriminalitas.utils.config import settings
from kriminalitas.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(store: Store = Depends(get_store)):
    """Report configuration and database status."""
    services_status = {}
    overall_healthy = True

    try:
        _ = settings.database.url
        services_status["configuration"] = "healthy"
    except Exception as e:
        services_status["configuration"] = f"error: {str(e)}"
        overall_healthy = False

    try:
        _check_database(store)
        services_status["database"] = "healthy"
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        services_status["database"] = f"warning: {str(e)}"
        overall_healthy = False

    status = "healthy" if overall_healthy else "degraded"

    if not overall_healthy:
        logger.warning("Health check failed", services=services_status)

    return HealthResponse(
        status=status, timestamp=datetime.now(), services=services_status
    )


def _check_database(store: Store) -> None:
    with store.transaction() as session:
        session.execute(text("SELECT 1"))
