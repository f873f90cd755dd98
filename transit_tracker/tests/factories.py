"""Builders for GTFS-Realtime payloads and vehicle records used in tests."""

from datetime import datetime
from typing import Optional

from google.transit import gtfs_realtime_pb2

from transit_tracker.ingestion.base import BaseSource
from transit_tracker.schemas.vehicle import VehicleRecord

_UNSET = object()


class FeedBuilder:
    """Accumulates entities and serializes them as one FeedMessage."""

    def __init__(self, header_timestamp: int = 1714564800):
        self.feed = gtfs_realtime_pb2.FeedMessage()
        self.feed.header.gtfs_realtime_version = "2.0"
        self.feed.header.timestamp = header_timestamp

    def vehicle(
        self,
        vehicle_id: Optional[str] = "v1",
        latitude=_UNSET,
        longitude=_UNSET,
        timestamp: Optional[int] = None,
        trip_id: Optional[str] = None,
        route_id: Optional[str] = None,
        current_status: Optional[int] = None,
        congestion_level: Optional[int] = None,
        stop_id: Optional[str] = None,
        with_position: bool = True,
    ) -> "FeedBuilder":
        entity = self.feed.entity.add()
        entity.id = f"entity-{len(self.feed.entity)}"
        position_msg = entity.vehicle

        if vehicle_id is not None:
            position_msg.vehicle.id = vehicle_id
        if with_position:
            position_msg.position.SetInParent()
            if latitude is not None:
                position_msg.position.latitude = -33.8688 if latitude is _UNSET else latitude
            if longitude is not None:
                position_msg.position.longitude = 151.2093 if longitude is _UNSET else longitude
        if timestamp is not None:
            position_msg.timestamp = timestamp
        if trip_id is not None:
            position_msg.trip.trip_id = trip_id
        if route_id is not None:
            position_msg.trip.route_id = route_id
        if current_status is not None:
            position_msg.current_status = current_status
        if congestion_level is not None:
            position_msg.congestion_level = congestion_level
        if stop_id is not None:
            position_msg.stop_id = stop_id
        return self

    def alert(self) -> "FeedBuilder":
        """An entity that carries no vehicle telemetry"""
        entity = self.feed.entity.add()
        entity.id = f"entity-{len(self.feed.entity)}"
        entity.alert.header_text.translation.add(text="Detour on route 10")
        return self

    def build(self) -> bytes:
        return self.feed.SerializePartialToString()


def make_record(vehicle_id: str, now: datetime, **overrides) -> VehicleRecord:
    fields = dict(
        vehicle_id=vehicle_id,
        trip_id=f"trip-{vehicle_id}",
        route_id="route-10",
        latitude=-33.8688,
        longitude=151.2093,
        timestamp=now,
        congestion="RUNNING_SMOOTHLY",
        stop_id="stop-1",
        status="IN_TRANSIT_TO",
        last_seen=now,
    )
    fields.update(overrides)
    return VehicleRecord(**fields)


class StaticSource(BaseSource):
    """Source that returns a fixed payload"""

    name = "static"

    def __init__(self, payload: bytes):
        self.payload = payload
        self.calls = 0

    async def fetch(self) -> bytes:
        self.calls += 1
        return self.payload


class FailingSource(BaseSource):
    """Source that fails like an unreachable upstream"""

    name = "failing"

    async def fetch(self) -> bytes:
        raise ConnectionError("Simulated fetch failure")
