"""Timestamp normalization tests"""

from datetime import datetime, timedelta, timezone

import pytest

from transit_tracker.ingestion.timestamps import normalize_timestamp


class TestNormalizeTimestamp:
    @pytest.mark.parametrize("raw", [None, 0, -1, -1700000000])
    def test_absent_or_non_positive_uses_now(self, raw, now):
        instant, anomalous = normalize_timestamp(raw, now)
        assert instant == now
        assert anomalous is False

    def test_seconds(self, now):
        instant, anomalous = normalize_timestamp(1700000000, now)
        assert instant == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert instant.timestamp() * 1000 == 1700000000 * 1000
        assert anomalous is False

    def test_milliseconds(self, now):
        instant, anomalous = normalize_timestamp(1700000000123, now)
        expected = datetime.fromtimestamp(1700000000, tz=timezone.utc) + timedelta(milliseconds=123)
        assert instant == expected
        assert anomalous is False

    def test_boundary_is_milliseconds(self, now):
        """10,000,000,000 is read as milliseconds (1970), which is implausible"""
        instant, anomalous = normalize_timestamp(10_000_000_000, now)
        assert instant == now
        assert anomalous is True

    def test_just_below_boundary_is_seconds(self, now):
        """9,999,999,999 seconds lands in 2286"""
        instant, anomalous = normalize_timestamp(9_999_999_999, now)
        assert instant == now
        assert anomalous is True

    def test_far_future_milliseconds(self, now):
        instant, anomalous = normalize_timestamp(99_999_999_999_999, now)
        assert instant == now
        assert anomalous is True

    def test_overflowing_value(self, now):
        instant, anomalous = normalize_timestamp(253402300799000000, now)
        assert instant == now
        assert anomalous is True

    def test_year_before_2000(self, now):
        instant, anomalous = normalize_timestamp(900000000, now)  # 1998
        assert instant == now
        assert anomalous is True

    def test_result_is_utc(self, now):
        instant, _ = normalize_timestamp(1700000000, now)
        assert instant.tzinfo == timezone.utc

    def test_deterministic(self, now):
        assert normalize_timestamp(1700000000, now) == normalize_timestamp(1700000000, now)
