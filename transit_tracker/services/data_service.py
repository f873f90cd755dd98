"""Data Service - Query logic for read endpoints."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from transit_tracker.models.runs import PullRun
from transit_tracker.models.vehicle import VehiclePosition


class DataService:
    """Handles all data query operations - reads from DB only, no writes."""

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # Vehicle Queries
    # -------------------------------------------------------------------------
    def get_vehicles(
        self,
        active: Optional[bool] = None,
        route_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[VehiclePosition]:
        """Get stored vehicle positions with optional filtering."""
        stmt = self._filtered(select(VehiclePosition), active, route_id)
        stmt = stmt.order_by(VehiclePosition.vehicle_id.asc()).limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def get_vehicle(self, vehicle_id: str) -> Optional[VehiclePosition]:
        stmt = select(VehiclePosition).where(VehiclePosition.vehicle_id == vehicle_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_vehicle_count(self, active: Optional[bool] = None, route_id: Optional[str] = None) -> int:
        stmt = self._filtered(select(func.count()).select_from(VehiclePosition), active, route_id)
        return self.db.execute(stmt).scalar() or 0

    @staticmethod
    def _filtered(stmt, active: Optional[bool], route_id: Optional[str]):
        if active is not None:
            stmt = stmt.where(VehiclePosition.is_active.is_(active))
        if route_id:
            stmt = stmt.where(VehiclePosition.route_id == route_id)
        return stmt

    # -------------------------------------------------------------------------
    # Pull Runs
    # -------------------------------------------------------------------------
    def get_pull_runs(self, status: Optional[str] = None, limit: int = 10) -> List[PullRun]:
        """Get recent pull runs, newest first."""
        stmt = select(PullRun)
        if status:
            stmt = stmt.where(PullRun.status == status)
        stmt = stmt.order_by(PullRun.started_at.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def get_latest_pull_run(self) -> Optional[PullRun]:
        stmt = select(PullRun).order_by(PullRun.started_at.desc()).limit(1)
        return self.db.execute(stmt).scalar_one_or_none()
