# Services package
from transit_tracker.services.data_service import DataService
from transit_tracker.services.pull_service import PULL_LOCK, PullService
from transit_tracker.services.reconciliation import ReconciliationEngine, ReconciliationResult
from transit_tracker.services.retention import RetentionService

__all__ = [
    "DataService",
    "PULL_LOCK",
    "PullService",
    "ReconciliationEngine",
    "ReconciliationResult",
    "RetentionService",
]
