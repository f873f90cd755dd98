"""Reconciles decoded vehicle records with the vehicle_positions table.

A pull is applied in two steps:

1. Every record in the batch is upserted by vehicle_id inside a single
   transaction. Any failure rolls the whole batch back.
2. Once that transaction has committed, every row still marked active
   whose vehicle_id was not in the batch is flipped to inactive.

Step 2 runs in its own transaction. If it fails, the upsert from step 1
stays committed and the stale rows remain active until the next pull
deactivates them.

An empty batch performs neither step: a transient empty response from
upstream must not be read as "no vehicles running".

Callers must not run two reconciliations concurrently against the same
table; the scheduler serialises pulls.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Type

from sqlalchemy import func, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from transit_tracker.core.errors import (
    ConnectivityFailure,
    DeactivationFailure,
    ReconciliationError,
    TransactionFailure,
)
from transit_tracker.core.logging import get_logger
from transit_tracker.models.vehicle import VehiclePosition
from transit_tracker.schemas.vehicle import VehicleRecord

log = get_logger("reconciliation")

# Rows per INSERT statement; keeps bind parameters well under the
# PostgreSQL limit of 65535 per statement.
DEFAULT_CHUNK_SIZE = 1000

MUTABLE_COLUMNS = (
    "trip_id",
    "route_id",
    "latitude",
    "longitude",
    "timestamp",
    "congestion",
    "stop_id",
    "status",
    "last_seen",
)


@dataclass(frozen=True)
class ReconciliationResult:
    upserted: int = 0
    deactivated: int = 0


class ReconciliationEngine:
    """Synchronises the store's active vehicle set with one pull."""

    def __init__(self, db: Session, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.db = db
        self.chunk_size = chunk_size

    def reconcile(self, records: Iterable[VehicleRecord]) -> ReconciliationResult:
        rows = self._collapse_duplicates(records)
        if not rows:
            log.warning("No active vehicle IDs provided, skipping inactive status update")
            return ReconciliationResult()

        with self._transaction(TransactionFailure, "upsert"):
            self._upsert(rows)
        log.info(f"Updated/inserted {len(rows)} vehicle position records")

        try:
            with self._transaction(DeactivationFailure, "deactivate"):
                deactivated = self._mark_missing_inactive(list(rows))
        except ReconciliationError as exc:
            exc.upserted = len(rows)
            raise
        log.info(f"Marked {deactivated} vehicles as inactive")

        return ReconciliationResult(upserted=len(rows), deactivated=deactivated)

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------
    @staticmethod
    def _collapse_duplicates(records: Iterable[VehicleRecord]) -> Dict[str, dict]:
        """Key rows by vehicle_id; a later record replaces an earlier one."""
        rows: Dict[str, dict] = {}
        duplicates = 0
        for record in records:
            if record.vehicle_id in rows:
                duplicates += 1
            row = record.to_row()
            row["is_active"] = True
            rows[record.vehicle_id] = row
        if duplicates:
            log.debug(f"Collapsed {duplicates} duplicate vehicle_id entries (last write wins)")
        return rows

    def _upsert(self, rows: Dict[str, dict]) -> None:
        insert = self._insert_construct()
        values = list(rows.values())
        for start in range(0, len(values), self.chunk_size):
            stmt = insert(VehiclePosition).values(values[start : start + self.chunk_size])
            set_ = {column: stmt.excluded[column] for column in MUTABLE_COLUMNS}
            set_["is_active"] = True
            set_["updated_at"] = func.now()
            stmt = stmt.on_conflict_do_update(
                index_elements=[VehiclePosition.vehicle_id],
                set_=set_,
            )
            self.db.execute(stmt)

    def _mark_missing_inactive(self, active_ids: List[str]) -> int:
        stmt = (
            update(VehiclePosition)
            .where(
                VehiclePosition.is_active.is_(True),
                VehiclePosition.vehicle_id.not_in(active_ids),
            )
            .values(is_active=False, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount or 0

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _insert_construct(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise ReconciliationError(f"Unsupported database dialect for upsert: {dialect}")

    @contextmanager
    def _transaction(self, failure: Type[ReconciliationError], step: str) -> Iterator[None]:
        """Commit on success; roll back and raise a typed failure otherwise."""
        try:
            yield
            self.db.commit()
        except (OperationalError, InterfaceError) as exc:
            self.db.rollback()
            log.error(f"Store unreachable during {step}: {exc}")
            raise ConnectivityFailure(f"{step} failed: {exc}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            log.error(f"Error during {step} of vehicle positions: {exc}")
            raise failure(f"{step} failed: {exc}") from exc
