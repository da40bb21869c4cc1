from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

Record = Dict[str, Any]


@dataclass(frozen=True)
class Collection:
    """Collection name plus the document field used as its partition key."""

    name: str
    partition_field: str


class COLLECTIONS:
    REGISTER = Collection("register", "date")
    INVOICES = Collection("invoices", "clientId")
    INVOICE_NUMBERS = Collection("invoice-numbers", "id")
    CLIENTS = Collection("clients", "id")
    STAFF = Collection("staff", "id")
    STAFF_REGISTER = Collection("staff-register", "date")


_OPS = ("eq", "ge", "le", "in")


@dataclass(frozen=True)
class Condition:
    """One term of a conjunctive query over a top-level document field."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _OPS:
            raise ValueError(f"Unsupported query operator: {self.op!r}")

    def matches(self, record: Record) -> bool:
        if self.field not in record:
            return False
        current = record[self.field]
        if self.op == "eq":
            return current == self.value
        if self.op == "in":
            return current in self.value
        if current is None:
            return False
        if self.op == "ge":
            return current >= self.value
        return current <= self.value


def eq(field: str, value: Any) -> Condition:
    return Condition(field, "eq", value)


def one_of(field: str, values: Sequence[Any]) -> Condition:
    return Condition(field, "in", tuple(values))


def between(field: str, low: Any, high: Any) -> Tuple[Condition, Condition]:
    """Inclusive range, expressed as two conditions."""
    return Condition(field, "ge", low), Condition(field, "le", high)


class RecordStore(Protocol):
    """Minimal document store used by the billing services.

    Records are JSON-compatible dicts carrying an ``id`` and the collection's
    partition field. Implementations translate their driver errors into
    ``StoreConflict``/``StoreNotFound``.
    """

    def get(self, collection: Collection, record_id: str, partition_key: str) -> Optional[Record]:
        raise NotImplementedError

    def query(
        self,
        collection: Collection,
        conditions: Sequence[Condition] = (),
        *,
        order_by: Sequence[str] = (),
    ) -> List[Record]:
        raise NotImplementedError

    def create(self, collection: Collection, record: Record) -> Record:
        """Insert a new record; raises StoreConflict on duplicate (id, partition key)."""

        raise NotImplementedError

    def replace(self, collection: Collection, record_id: str, partition_key: str, record: Record) -> Record:
        """Full replacement; raises StoreNotFound when absent."""

        raise NotImplementedError

    def delete(self, collection: Collection, record_id: str, partition_key: str) -> None:
        raise NotImplementedError


def partition_of(collection: Collection, record: Record) -> str:
    value = record.get(collection.partition_field)
    if value is None or value == "":
        raise ValueError(f"{collection.name}: record is missing partition field {collection.partition_field!r}")
    return str(value)


def _sort_key(value: Any) -> Tuple[bool, Any]:
    # Missing fields sort first, like an undefined property in a document query.
    return (value is not None, value if value is not None else "")


def sort_records(records: List[Record], order_by: Sequence[str]) -> List[Record]:
    if order_by:
        records.sort(key=lambda r: tuple(_sort_key(r.get(f)) for f in order_by))
    return records
