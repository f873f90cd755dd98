from transit_tracker.models.base import Base
from transit_tracker.models.runs import PullRun
from transit_tracker.models.vehicle import VehiclePosition

__all__ = [
    "Base",
    "PullRun",
    "VehiclePosition",
]
