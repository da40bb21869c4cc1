from __future__ import annotations

from typing import Optional, Sequence

from ..store.repository import COLLECTIONS, RecordStore, eq
from .model import ClientBillingProfile, profile_from_record


class ClientRepository:
    """Read access to client documents (partitioned by id)."""

    collection = COLLECTIONS.CLIENTS

    def __init__(self, store: RecordStore):
        self._store = store

    def get_by_id(self, client_id: str) -> Optional[ClientBillingProfile]:
        rec = self._store.get(self.collection, client_id, client_id)
        return profile_from_record(rec) if rec else None

    def list_active(self) -> Sequence[ClientBillingProfile]:
        rows = self._store.query(self.collection, [eq("isActive", True)], order_by=("surname", "firstName"))
        return [profile_from_record(r) for r in rows]
