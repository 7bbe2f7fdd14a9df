"""Health check endpoint (served without the /api/v1 prefix)."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from topic_feedback_service.config import settings
from topic_feedback_service.database import get_db
from topic_feedback_service.logging_config import get_logger
from topic_feedback_service.schemas.health import HealthResponse

router = APIRouter(tags=["health"])
logger = get_logger(__name__)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service and topic model database status",
)
def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """Report service status, version and database connectivity.

    Always answers 200; a failed SELECT 1 turns the status to "degraded"
    so monitoring can tell a dead process from a missing database.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("health.database_unavailable", error=str(e))
        return HealthResponse(
            status="degraded",
            version=settings.app_version,
            database="disconnected",
        )

    return HealthResponse(status="ok", version=settings.app_version, database="connected")
