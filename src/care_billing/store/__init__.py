from .memory_store import InMemoryRecordStore
from .repository import COLLECTIONS, Collection, Condition, RecordStore, between, eq, one_of

__all__ = [
    "COLLECTIONS",
    "Collection",
    "Condition",
    "InMemoryRecordStore",
    "RecordStore",
    "between",
    "eq",
    "one_of",
]
