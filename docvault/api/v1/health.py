"""Health check endpoint with database connectivity check."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from docvault.core.config import settings
from docvault.core.database import check_db_connected, get_db
from docvault.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """Service status, the answering host and whether the database is reachable."""
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        hostname=settings.HOSTNAME_LABEL,
        database="connected" if check_db_connected(db) else "disconnected",
    )
