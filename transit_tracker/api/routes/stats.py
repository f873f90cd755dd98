"""Stats routes - Pull observability."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from transit_tracker.api.deps import get_db
from transit_tracker.schemas.api import StatsResponse
from transit_tracker.services.data_service import DataService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=list[StatsResponse])
def get_pull_stats(
    status: Optional[Literal["running", "success", "failure"]] = Query(None, description="Filter by status"),
    limit: int = Query(10, ge=1, le=50, description="Number of runs to return"),
    db: Session = Depends(get_db),
):
    """
    Get recent feed pull statistics.

    Shows parsed/skipped entity counts, upserts, deactivations and errors.
    """
    runs = DataService(db).get_pull_runs(status=status, limit=limit)

    return [
        StatsResponse(
            run_id=str(run.run_id),
            status=run.status,
            records_parsed=run.records_parsed,
            records_skipped=run.records_skipped,
            timestamp_anomalies=run.timestamp_anomalies,
            records_upserted=run.records_upserted,
            records_deactivated=run.records_deactivated,
            error_message=run.error_message,
            started_at=run.started_at,
            ended_at=run.ended_at,
        )
        for run in runs
    ]
