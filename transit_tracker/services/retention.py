"""Retention cleanup for vehicles that stopped reporting.

Runs on its own schedule and never as part of reconciliation: rows are only
removed once they have been inactive and unseen for the configured window.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from transit_tracker.core.logging import get_logger
from transit_tracker.models.vehicle import VehiclePosition

log = get_logger("retention")


class RetentionService:
    def __init__(self, db: Session):
        self.db = db

    def purge_inactive(self, older_than_days: int, now: Optional[datetime] = None) -> int:
        """Delete inactive rows whose last_seen is older than the window."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=older_than_days)

        stmt = (
            delete(VehiclePosition)
            .where(
                VehiclePosition.is_active.is_(False),
                VehiclePosition.last_seen < cutoff,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            deleted = self.db.execute(stmt).rowcount or 0
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        log.info(f"Retention removed {deleted} inactive vehicles last seen before {cutoff.isoformat()}")
        return deleted
