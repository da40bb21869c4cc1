from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..store.repository import COLLECTIONS, RecordStore, between, eq
from .model import (
    StaffAttendanceEntry,
    StaffProfile,
    staff_entry_from_record,
    staff_entry_to_record,
    staff_from_record,
)


class StaffRepository:
    collection = COLLECTIONS.STAFF

    def __init__(self, store: RecordStore):
        self._store = store

    def get_by_id(self, staff_id: str) -> Optional[StaffProfile]:
        rec = self._store.get(self.collection, staff_id, staff_id)
        return staff_from_record(rec) if rec else None

    def list_active(self) -> Sequence[StaffProfile]:
        rows = self._store.query(self.collection, [eq("isActive", True)])
        return [staff_from_record(r) for r in rows]


class StaffAttendanceRepository:
    """Staff register entries, partitioned by date."""

    collection = COLLECTIONS.STAFF_REGISTER

    def __init__(self, store: RecordStore):
        self._store = store

    def get_for_staff_and_date(self, staff_id: str, day: date) -> Optional[StaffAttendanceEntry]:
        rows = self._store.query(self.collection, [eq("date", day.isoformat()), eq("staffId", staff_id)])
        return staff_entry_from_record(rows[0]) if rows else None

    def list_for_date(self, day: date) -> Sequence[StaffAttendanceEntry]:
        rows = self._store.query(self.collection, [eq("date", day.isoformat())], order_by=("staffName",))
        return [staff_entry_from_record(r) for r in rows]

    def list_between(self, start: date, end: date) -> Sequence[StaffAttendanceEntry]:
        # No ordering requested; the reconciler sorts its own output.
        rows = self._store.query(self.collection, between("date", start.isoformat(), end.isoformat()))
        return [staff_entry_from_record(r) for r in rows]

    def create(self, entry: StaffAttendanceEntry) -> StaffAttendanceEntry:
        self._store.create(self.collection, staff_entry_to_record(entry))
        return entry

    def delete(self, entry_id: str, day: date) -> None:
        self._store.delete(self.collection, entry_id, day.isoformat())
