"""GTFS-Realtime enum codes to the strings stored in vehicle_positions.

The congestion table is kept as observed in the production feed
(3 = CONGESTION, 4 = SEVERE_CONGESTION); do not realign it with other
published readings of the code semantics without confirming intent.
"""

from __future__ import annotations

from typing import Dict, Optional

UNKNOWN = "UNKNOWN"

CONGESTION_LEVELS: Dict[int, str] = {
    0: "UNKNOWN_CONGESTION_LEVEL",
    1: "RUNNING_SMOOTHLY",
    2: "STOP_AND_GO",
    3: "CONGESTION",
    4: "SEVERE_CONGESTION",
}

VEHICLE_STATUSES: Dict[int, str] = {
    0: "INCOMING_AT",
    1: "STOPPED_AT",
    2: "IN_TRANSIT_TO",
}


def congestion_level_to_string(code: Optional[int]) -> Optional[str]:
    if code is None:
        return None
    return CONGESTION_LEVELS.get(code, UNKNOWN)


def vehicle_status_to_string(code: Optional[int]) -> Optional[str]:
    if code is None:
        return None
    return VEHICLE_STATUSES.get(code, UNKNOWN)
