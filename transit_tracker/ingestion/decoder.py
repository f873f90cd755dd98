"""GTFS-Realtime vehicle position decoder.

Turns one binary FeedMessage into validated VehicleRecord objects. Entities
that cannot describe a located vehicle are dropped and counted, never
raised; a payload that is not a FeedMessage at all yields an empty result
carrying a FeedDecodeError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2
from pydantic import ValidationError

from transit_tracker.core.errors import FeedDecodeError
from transit_tracker.core.logging import get_logger
from transit_tracker.ingestion.enums import congestion_level_to_string, vehicle_status_to_string
from transit_tracker.ingestion.timestamps import normalize_timestamp
from transit_tracker.schemas.vehicle import VehicleRecord

log = get_logger("ingestion.decoder")


@dataclass
class DecodeResult:
    records: List[VehicleRecord] = field(default_factory=list)
    entities: int = 0
    skipped: int = 0
    timestamp_anomalies: int = 0
    error: Optional[FeedDecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FeedDecoder:
    """Decodes vehicle positions out of a GTFS-Realtime feed payload."""

    def decode(self, payload: bytes, now: Optional[datetime] = None) -> DecodeResult:
        now = now or datetime.now(timezone.utc)
        result = DecodeResult()

        feed = gtfs_realtime_pb2.FeedMessage()
        try:
            feed.ParseFromString(payload)
        except (DecodeError, TypeError) as exc:
            result.error = FeedDecodeError(f"Error parsing GTFS data: {exc}")
            log.error(str(result.error))
            return result

        for entity in feed.entity:
            result.entities += 1
            record = self._parse_entity(entity, now, result)
            if record is None:
                result.skipped += 1
                continue
            result.records.append(record)

        if result.skipped > 0:
            log.info(f"Skipped {result.skipped} vehicle entries with missing required data")
        log.info(f"Parsed {len(result.records)} valid vehicle positions from GTFS data")
        return result

    def _parse_entity(
        self,
        entity: gtfs_realtime_pb2.FeedEntity,
        now: datetime,
        result: DecodeResult,
    ) -> Optional[VehicleRecord]:
        if not entity.HasField("vehicle"):
            return None
        vehicle = entity.vehicle
        if not vehicle.HasField("position"):
            return None

        vehicle_id = vehicle.vehicle.id if vehicle.HasField("vehicle") else ""
        if not vehicle_id:
            return None

        position = vehicle.position
        if not (position.HasField("latitude") and position.HasField("longitude")):
            return None

        raw_timestamp = vehicle.timestamp if vehicle.HasField("timestamp") else None
        timestamp, anomalous = normalize_timestamp(raw_timestamp, now)
        if anomalous:
            result.timestamp_anomalies += 1
            log.warning(f"Invalid timestamp value detected: {raw_timestamp}, using current time instead")

        trip = vehicle.trip if vehicle.HasField("trip") else None

        try:
            return VehicleRecord(
                vehicle_id=vehicle_id,
                trip_id=trip.trip_id if trip else None,
                route_id=trip.route_id if trip else None,
                latitude=position.latitude,
                longitude=position.longitude,
                timestamp=timestamp,
                congestion=congestion_level_to_string(
                    vehicle.congestion_level if vehicle.HasField("congestion_level") else None
                ),
                stop_id=vehicle.stop_id if vehicle.HasField("stop_id") else None,
                status=vehicle_status_to_string(
                    vehicle.current_status if vehicle.HasField("current_status") else None
                ),
                is_active=True,
                last_seen=now,
            )
        except ValidationError as exc:
            log.debug(f"Dropping entity {entity.id or '?'} for vehicle {vehicle_id}: {exc}")
            return None
