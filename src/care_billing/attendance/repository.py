from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..store.repository import COLLECTIONS, RecordStore, between, eq
from .mapping import entry_from_record, entry_to_record
from .model import AttendanceEntry


class AttendanceRepository:
    """Register entries, partitioned by date."""

    collection = COLLECTIONS.REGISTER

    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, entry_id: str, day: date) -> Optional[AttendanceEntry]:
        rec = self._store.get(self.collection, entry_id, day.isoformat())
        return entry_from_record(rec) if rec else None

    def get_for_client_and_date(self, client_id: str, day: date) -> Optional[AttendanceEntry]:
        rows = self._store.query(self.collection, [eq("date", day.isoformat()), eq("clientId", client_id)])
        return entry_from_record(rows[0]) if rows else None

    def list_for_date(self, day: date) -> Sequence[AttendanceEntry]:
        rows = self._store.query(self.collection, [eq("date", day.isoformat())], order_by=("clientName",))
        return [entry_from_record(r) for r in rows]

    def list_between(self, start: date, end: date) -> Sequence[AttendanceEntry]:
        """Entries with start <= date <= end, ordered by date then client name."""

        rows = self._store.query(
            self.collection,
            between("date", start.isoformat(), end.isoformat()),
            order_by=("date", "clientName"),
        )
        return [entry_from_record(r) for r in rows]

    def create(self, entry: AttendanceEntry) -> AttendanceEntry:
        self._store.create(self.collection, entry_to_record(entry))
        return entry

    def replace(self, entry: AttendanceEntry) -> AttendanceEntry:
        self._store.replace(self.collection, entry.entry_id, entry.date.isoformat(), entry_to_record(entry))
        return entry

    def delete(self, entry_id: str, day: date) -> None:
        self._store.delete(self.collection, entry_id, day.isoformat())
