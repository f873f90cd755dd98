"""Validated vehicle record produced by the feed decoder."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_YEAR = 2000
MAX_YEAR = 2050
UNKNOWN_ID = "unknown"


class VehicleRecord(BaseModel):
    """One vehicle's latest known state, as written to vehicle_positions."""

    model_config = ConfigDict(frozen=True)

    vehicle_id: str
    trip_id: str = UNKNOWN_ID
    route_id: str = UNKNOWN_ID
    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)
    timestamp: datetime
    congestion: Optional[str] = None
    stop_id: Optional[str] = None
    status: Optional[str] = None
    is_active: bool = True
    last_seen: datetime

    @field_validator("vehicle_id")
    @classmethod
    def _vehicle_id_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("vehicle_id must not be empty")
        return value

    @field_validator("trip_id", "route_id", mode="before")
    @classmethod
    def _default_unknown(cls, value: Optional[str]) -> str:
        return value or UNKNOWN_ID

    @field_validator("stop_id", mode="before")
    @classmethod
    def _empty_stop_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("timestamp", "last_seen")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("timestamp")
    @classmethod
    def _plausible_year(cls, value: datetime) -> datetime:
        if not MIN_YEAR <= value.year <= MAX_YEAR:
            raise ValueError(f"timestamp year {value.year} outside [{MIN_YEAR}, {MAX_YEAR}]")
        return value

    def to_row(self) -> dict:
        """Column mapping for vehicle_positions upserts."""
        return self.model_dump()
