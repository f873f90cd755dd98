"""Latest known position of every vehicle seen in the feed.

One row per vehicle_id. Rows are upserted on every pull that contains the
vehicle and flipped to inactive when a pull omits it; they are never
deleted by reconciliation (see services.retention for cleanup).
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, func, true
from sqlalchemy.orm import Mapped, mapped_column

from transit_tracker.models.base import Base


class VehiclePosition(Base):
    __tablename__ = "vehicle_positions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    vehicle_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    trip_id: Mapped[str] = mapped_column(String, nullable=False)
    route_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    latitude: Mapped[float] = mapped_column(Numeric(10, 7), nullable=False)
    longitude: Mapped[float] = mapped_column(Numeric(10, 7), nullable=False)

    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    congestion: Mapped[str | None] = mapped_column(String, nullable=True)
    stop_id: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str | None] = mapped_column(String, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
        index=True,
    )

    last_seen: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"<VehiclePosition {self.vehicle_id} @ {self.latitude},{self.longitude} ({state})>"
