"""Feed decoding tests"""

from datetime import datetime, timezone

import pytest

from transit_tracker.core.errors import FeedDecodeError
from transit_tracker.ingestion.decoder import FeedDecoder
from transit_tracker.tests.factories import FeedBuilder


class TestFeedDecoder:
    @pytest.fixture
    def decoder(self):
        return FeedDecoder()

    def test_full_entity(self, decoder, now):
        payload = (
            FeedBuilder()
            .vehicle(
                "bus-42",
                latitude=-33.5,
                longitude=151.25,
                timestamp=1714564790,
                trip_id="trip-7",
                route_id="route-333",
                current_status=1,
                congestion_level=3,
                stop_id="200060",
            )
            .build()
        )

        result = decoder.decode(payload, now=now)

        assert result.ok
        assert result.skipped == 0
        assert len(result.records) == 1
        record = result.records[0]
        assert record.vehicle_id == "bus-42"
        assert record.trip_id == "trip-7"
        assert record.route_id == "route-333"
        assert record.latitude == pytest.approx(-33.5)
        assert record.longitude == pytest.approx(151.25)
        assert record.timestamp == datetime.fromtimestamp(1714564790, tz=timezone.utc)
        assert record.status == "STOPPED_AT"
        assert record.congestion == "CONGESTION"
        assert record.stop_id == "200060"
        assert record.is_active is True
        assert record.last_seen == now

    def test_entity_without_position_is_skipped(self, decoder, now):
        """3 entities, one lacking position -> 2 records, 1 skipped"""
        payload = (
            FeedBuilder()
            .vehicle("v1")
            .vehicle("v2", with_position=False)
            .vehicle("v3")
            .build()
        )

        result = decoder.decode(payload, now=now)

        assert [r.vehicle_id for r in result.records] == ["v1", "v3"]
        assert result.skipped == 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"vehicle_id": None},
            {"vehicle_id": ""},
            {"vehicle_id": "   "},
            {"latitude": None},
            {"longitude": None},
            {"latitude": 91.0},
            {"longitude": -180.5},
            {"latitude": 4.0e9},
            {"latitude": float("nan")},
            {"longitude": float("inf")},
        ],
    )
    def test_incomplete_entities_are_skipped(self, decoder, now, kwargs):
        payload = FeedBuilder().vehicle("ok").vehicle(**kwargs).build()

        result = decoder.decode(payload, now=now)

        assert [r.vehicle_id for r in result.records] == ["ok"]
        assert result.skipped == 1
        assert len(result.records) + result.skipped == result.entities

    def test_entity_without_vehicle_is_skipped(self, decoder, now):
        payload = FeedBuilder().vehicle("v1").alert().build()

        result = decoder.decode(payload, now=now)

        assert len(result.records) == 1
        assert result.skipped == 1
        assert result.entities == 2

    def test_seconds_timestamp(self, decoder, now):
        payload = FeedBuilder().vehicle("v1", timestamp=1700000000).build()

        record = decoder.decode(payload, now=now).records[0]

        assert int(record.timestamp.timestamp() * 1000) == 1700000000 * 1000

    def test_implausible_timestamp_falls_back_to_ingestion_time(self, decoder, now, log_messages):
        payload = FeedBuilder().vehicle("v1", timestamp=253402300799000000).build()

        result = decoder.decode(payload, now=now)

        assert result.records[0].timestamp == now
        assert result.timestamp_anomalies == 1
        assert any("253402300799000000" in message for message in log_messages)

    def test_missing_timestamp_uses_ingestion_time_without_warning(self, decoder, now, log_messages):
        result = decoder.decode(FeedBuilder().vehicle("v1").build(), now=now)

        assert result.records[0].timestamp == now
        assert result.timestamp_anomalies == 0
        assert log_messages == []

    def test_absent_optional_fields(self, decoder, now):
        result = decoder.decode(FeedBuilder().vehicle("v1").build(), now=now)

        record = result.records[0]
        assert record.trip_id == "unknown"
        assert record.route_id == "unknown"
        assert record.congestion is None
        assert record.status is None
        assert record.stop_id is None

    def test_zero_codes_are_translated_when_present(self, decoder, now):
        """An explicit code 0 is a value, not an absent field"""
        payload = FeedBuilder().vehicle("v1", current_status=0, congestion_level=0).build()

        record = decoder.decode(payload, now=now).records[0]

        assert record.status == "INCOMING_AT"
        assert record.congestion == "UNKNOWN_CONGESTION_LEVEL"

    def test_trip_without_route(self, decoder, now):
        payload = FeedBuilder().vehicle("v1", trip_id="trip-1").build()

        record = decoder.decode(payload, now=now).records[0]

        assert record.trip_id == "trip-1"
        assert record.route_id == "unknown"

    def test_feed_order_preserved(self, decoder, now):
        builder = FeedBuilder()
        for vehicle_id in ["c", "a", "b"]:
            builder.vehicle(vehicle_id)

        result = decoder.decode(builder.build(), now=now)

        assert [r.vehicle_id for r in result.records] == ["c", "a", "b"]

    def test_garbage_payload(self, decoder, now, log_messages):
        """Unparseable bytes never raise; they produce an empty result"""
        result = decoder.decode(b"\xff" * 16, now=now)

        assert result.records == []
        assert not result.ok
        assert isinstance(result.error, FeedDecodeError)
        assert any("Error parsing GTFS data" in message for message in log_messages)

    def test_empty_feed(self, decoder, now):
        result = decoder.decode(FeedBuilder().build(), now=now)

        assert result.ok
        assert result.records == []
        assert result.skipped == 0

    def test_defaults_now_to_current_time(self, decoder):
        before = datetime.now(timezone.utc)
        record = decoder.decode(FeedBuilder().vehicle("v1").build()).records[0]
        after = datetime.now(timezone.utc)

        assert before <= record.last_seen <= after
