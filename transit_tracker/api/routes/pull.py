"""Pull routes - Trigger a feed pull on demand."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from transit_tracker.api.deps import get_db, get_feed_source
from transit_tracker.core.logging import get_logger
from transit_tracker.ingestion.base import BaseSource
from transit_tracker.schemas.api import PullTriggerResponse
from transit_tracker.services.pull_service import PULL_LOCK, PullService

router = APIRouter(prefix="/pull", tags=["pull"])
log = get_logger("pull_routes")


@router.post("/run", response_model=PullTriggerResponse)
async def trigger_pull(
    db: Session = Depends(get_db),
    source: BaseSource = Depends(get_feed_source),
):
    """
    Run one feed pull now.

    Fetches the feed, decodes it, upserts present vehicles and marks absent
    ones inactive. Returns 409 while another pull is in flight.
    """
    if PULL_LOCK.locked():
        raise HTTPException(status_code=409, detail="A feed pull is already running")

    log.info("Feed pull triggered manually")
    async with PULL_LOCK:
        try:
            result = await PullService(db, source=source).run()
        except Exception as exc:  # noqa: BLE001
            log.error(f"Manual pull failed: {exc}")
            return PullTriggerResponse(success=False, error=str(exc))

    return PullTriggerResponse(
        success=result["success"],
        records_parsed=result["records_parsed"],
        records_skipped=result["records_skipped"],
        records_upserted=result["records_upserted"],
        records_deactivated=result["records_deactivated"],
        error=result["error"],
    )
