"""Retention cleanup tests"""

from datetime import timedelta

from sqlalchemy import select

from transit_tracker.models.vehicle import VehiclePosition
from transit_tracker.services.reconciliation import ReconciliationEngine
from transit_tracker.services.retention import RetentionService
from transit_tracker.tests.factories import make_record


def vehicle_ids(db):
    return set(db.execute(select(VehiclePosition.vehicle_id)).scalars().all())


class TestRetentionService:
    def test_purges_only_old_inactive_vehicles(self, db, now):
        engine = ReconciliationEngine(db)
        engine.reconcile(
            [
                make_record("stale", now - timedelta(days=30), last_seen=now - timedelta(days=30)),
                make_record("recent", now - timedelta(days=1), last_seen=now - timedelta(days=1)),
            ]
        )
        # Both drop out of the feed; "active" keeps reporting.
        engine.reconcile([make_record("active", now)])

        deleted = RetentionService(db).purge_inactive(older_than_days=7, now=now)

        assert deleted == 1
        assert vehicle_ids(db) == {"recent", "active"}

    def test_active_vehicles_are_never_purged(self, db, now):
        old = now - timedelta(days=90)
        ReconciliationEngine(db).reconcile([make_record("v1", old, last_seen=old)])

        assert RetentionService(db).purge_inactive(older_than_days=7, now=now) == 0
        assert vehicle_ids(db) == {"v1"}
