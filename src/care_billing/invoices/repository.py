from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..store.repository import COLLECTIONS, RecordStore, eq
from .model import Invoice, invoice_from_record, invoice_to_record


class InvoiceRepository:
    """Invoice documents, partitioned by client id."""

    collection = COLLECTIONS.INVOICES

    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, invoice_id: str, client_id: str) -> Optional[Invoice]:
        rec = self._store.get(self.collection, invoice_id, client_id)
        return invoice_from_record(rec) if rec else None

    def find_by_id(self, invoice_id: str) -> Optional[Invoice]:
        # Cross-partition lookup; callers only know the id.
        rows = self._store.query(self.collection, [eq("id", invoice_id)])
        return invoice_from_record(rows[0]) if rows else None

    def find_for_client_period(self, client_id: str, period_start: date) -> Optional[Invoice]:
        rows = self._store.query(
            self.collection,
            [eq("clientId", client_id), eq("periodStart", period_start.isoformat())],
            order_by=("createdAt",),
        )
        return invoice_from_record(rows[0]) if rows else None

    def find_by_number(self, invoice_number: str) -> Optional[Invoice]:
        rows = self._store.query(self.collection, [eq("invoiceNumber", invoice_number)])
        return invoice_from_record(rows[0]) if rows else None

    def list_for_period(self, period_start: date) -> Sequence[Invoice]:
        rows = self._store.query(self.collection, [eq("periodStart", period_start.isoformat())])
        return [invoice_from_record(r) for r in rows]

    def list_all(self) -> Sequence[Invoice]:
        rows = self._store.query(self.collection, order_by=("invoiceDate", "invoiceNumber"))
        return [invoice_from_record(r) for r in reversed(rows)]

    def create(self, invoice: Invoice) -> Invoice:
        self._store.create(self.collection, invoice_to_record(invoice))
        return invoice

    def replace(self, invoice: Invoice) -> Invoice:
        self._store.replace(self.collection, invoice.invoice_id, invoice.client_id, invoice_to_record(invoice))
        return invoice

    def delete(self, invoice: Invoice) -> None:
        self._store.delete(self.collection, invoice.invoice_id, invoice.client_id)
