"""One feed pull: fetch, decode, reconcile, and record the run."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from transit_tracker.core.errors import ReconciliationError
from transit_tracker.core.logging import get_logger
from transit_tracker.ingestion.base import BaseSource
from transit_tracker.ingestion.decoder import DecodeResult, FeedDecoder
from transit_tracker.ingestion.gtfs_source import build_default_source
from transit_tracker.models.runs import PullRun
from transit_tracker.services.reconciliation import ReconciliationEngine, ReconciliationResult

log = get_logger("pull_service")

# Held for the duration of a pull; the scheduler and the manual trigger
# both skip rather than queue when it is taken.
PULL_LOCK = asyncio.Lock()


class PullService:
    """Runs a single pull of the vehicle positions feed.

    Responsibilities:
    - Fetch the raw feed bytes from the configured source
    - Decode them into validated vehicle records
    - Reconcile the records with vehicle_positions
    - Track every attempt in pull_runs
    """

    def __init__(
        self,
        db: Session,
        source: Optional[BaseSource] = None,
        decoder: Optional[FeedDecoder] = None,
    ):
        self.db = db
        self.source = source or build_default_source()
        self.decoder = decoder or FeedDecoder()

    async def run(self) -> Dict[str, Any]:
        run = PullRun(status="running", started_at=datetime.now(timezone.utc))
        self.db.add(run)
        self.db.commit()
        self.db.refresh(run)

        try:
            payload = await self.source.fetch()
            if not payload:
                log.warning("No data received from API")
                self._finish(run, "success", meta={"reason": "empty_payload"})
                return self._summary(run)

            decoded = self.decoder.decode(payload, now=datetime.now(timezone.utc))
            self._record_decode(run, decoded)

            if not decoded.ok:
                # Nothing is written for an unreadable feed; the next pull supersedes it.
                self._finish(run, "failure", error=str(decoded.error))
                return self._summary(run)

            if not decoded.records:
                log.warning("No vehicle positions found in the API response")
                self._finish(run, "success", meta={"reason": "no_vehicle_positions"})
                return self._summary(run)

            result = ReconciliationEngine(self.db).reconcile(decoded.records)
            self._record_reconcile(run, result)
            self._finish(run, "success")

            log.info(f"Successfully processed {len(decoded.records)} vehicle positions")
            return self._summary(run)

        except Exception as exc:  # noqa: BLE001
            self.db.rollback()
            run.status = "failure"
            run.error_message = str(exc)
            if isinstance(exc, ReconciliationError):
                run.records_upserted = exc.upserted
            run.ended_at = datetime.now(timezone.utc)
            try:
                self.db.add(run)
                self.db.commit()
            except SQLAlchemyError as record_exc:
                self.db.rollback()
                log.warning(f"Could not record failed pull run: {record_exc}")
            log.error(f"Error fetching or processing data: {exc}")
            raise

    # -------------------------------------------------------------------------
    # Run bookkeeping
    # -------------------------------------------------------------------------
    @staticmethod
    def _record_decode(run: PullRun, decoded: DecodeResult) -> None:
        run.records_parsed = len(decoded.records)
        run.records_skipped = decoded.skipped
        run.timestamp_anomalies = decoded.timestamp_anomalies
        if decoded.timestamp_anomalies:
            log.warning(f"{decoded.timestamp_anomalies} vehicle timestamps replaced with ingestion time")

    @staticmethod
    def _record_reconcile(run: PullRun, result: ReconciliationResult) -> None:
        run.records_upserted = result.upserted
        run.records_deactivated = result.deactivated

    def _finish(
        self,
        run: PullRun,
        status: str,
        error: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        run.status = status
        run.error_message = error
        run.meta = meta
        run.ended_at = datetime.now(timezone.utc)
        self.db.commit()

    @staticmethod
    def _summary(run: PullRun) -> Dict[str, Any]:
        return {
            "success": run.status == "success",
            "run_id": str(run.run_id),
            "records_parsed": run.records_parsed or 0,
            "records_skipped": run.records_skipped or 0,
            "timestamp_anomalies": run.timestamp_anomalies or 0,
            "records_upserted": run.records_upserted or 0,
            "records_deactivated": run.records_deactivated or 0,
            "error": run.error_message,
        }
