"""Health routes - Liveness and readiness checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from transit_tracker.api.deps import get_db
from transit_tracker.schemas.api import HealthResponse
from transit_tracker.services.data_service import DataService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(response: Response, db: Session = Depends(get_db)):
    """
    Liveness endpoint for the platform and Docker health checks.

    Reports database connectivity and the status of the last feed pull.
    Returns 503 if the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        response.status_code = 503
        return HealthResponse(status="degraded", database=f"down: {e}", last_pull_status=None)

    last_run = DataService(db).get_latest_pull_run()

    return HealthResponse(
        status="ok",
        database="ok",
        last_pull_status=last_run.status if last_run else None,
        last_pull_at=last_run.started_at if last_run else None,
    )


@router.get("/ready")
def readiness(response: Response, db: Session = Depends(get_db)):
    """
    Readiness probe - checks if the service can serve traffic.

    Returns 200 if ready, 503 if database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready", "timestamp": datetime.now(timezone.utc).isoformat()}
    except SQLAlchemyError as e:
        response.status_code = 503
        return {"status": "not_ready", "error": str(e), "timestamp": datetime.now(timezone.utc).isoformat()}
