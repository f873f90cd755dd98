"""Reconcile untrusted feed timestamps against the ingestion clock.

Feeds disagree on units: most send epoch seconds, some send epoch
milliseconds, and a few send garbage. The magnitude decides the unit and
anything that lands outside [2000, 2050] falls back to the pull time.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

from transit_tracker.schemas.vehicle import MAX_YEAR, MIN_YEAR

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Values below this are epoch seconds, at or above it epoch milliseconds.
MILLISECONDS_THRESHOLD = 10_000_000_000


class NormalizedTimestamp(NamedTuple):
    instant: datetime
    anomalous: bool


def normalize_timestamp(raw: Optional[int], now: datetime) -> NormalizedTimestamp:
    """Resolve a raw feed timestamp to an instant.

    ``anomalous`` is True only when a positive value was supplied but could
    not be turned into a plausible instant; the caller decides how to report
    it. Absent or non-positive values resolve to ``now`` without a flag.
    """
    if raw is None or raw <= 0:
        return NormalizedTimestamp(now, False)

    try:
        if raw < MILLISECONDS_THRESHOLD:
            candidate = EPOCH + timedelta(seconds=raw)
        else:
            candidate = EPOCH + timedelta(milliseconds=raw)
    except OverflowError:
        return NormalizedTimestamp(now, True)

    if not MIN_YEAR <= candidate.year <= MAX_YEAR:
        return NormalizedTimestamp(now, True)
    return NormalizedTimestamp(candidate, False)
