from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class VehicleOut(BaseModel):
    """Stored vehicle position as exposed by the API."""

    model_config = ConfigDict(from_attributes=True)

    vehicle_id: str
    trip_id: str
    route_id: str
    latitude: float
    longitude: float
    timestamp: datetime
    congestion: Optional[str] = None
    stop_id: Optional[str] = None
    status: Optional[str] = None
    is_active: bool
    last_seen: datetime


class VehiclesResponse(BaseModel):
    request_id: str
    api_latency_ms: int
    total_count: int
    data: list[VehicleOut]


class HealthResponse(BaseModel):
    status: str
    database: str
    last_pull_status: str | None
    last_pull_at: datetime | None = None


class StatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    run_id: str
    status: str
    records_parsed: int
    records_skipped: int
    timestamp_anomalies: int
    records_upserted: int
    records_deactivated: int
    error_message: str | None = None
    started_at: datetime
    ended_at: datetime | None


class PullTriggerResponse(BaseModel):
    success: bool
    records_parsed: int = 0
    records_skipped: int = 0
    records_upserted: int = 0
    records_deactivated: int = 0
    error: str | None = None
