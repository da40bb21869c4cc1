from __future__ import annotations

import copy
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.exceptions import StoreConflict, StoreNotFound
from .repository import Collection, Condition, Record, RecordStore, partition_of, sort_records


class InMemoryRecordStore(RecordStore):
    """Dict-backed store for tests and local runs.

    Records are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Dict[Tuple[str, str], Record]] = {}

    def _bucket(self, collection: Collection) -> Dict[Tuple[str, str], Record]:
        return self._data.setdefault(collection.name, {})

    def get(self, collection: Collection, record_id: str, partition_key: str) -> Optional[Record]:
        rec = self._bucket(collection).get((str(partition_key), str(record_id)))
        return copy.deepcopy(rec) if rec is not None else None

    def query(
        self,
        collection: Collection,
        conditions: Sequence[Condition] = (),
        *,
        order_by: Sequence[str] = (),
    ) -> List[Record]:
        rows = [r for r in self._bucket(collection).values() if all(c.matches(r) for c in conditions)]
        return [copy.deepcopy(r) for r in sort_records(rows, order_by)]

    def create(self, collection: Collection, record: Record) -> Record:
        key = (partition_of(collection, record), str(record["id"]))
        bucket = self._bucket(collection)
        if key in bucket:
            raise StoreConflict(collection.name, key[1], key[0])
        bucket[key] = copy.deepcopy(record)
        return copy.deepcopy(record)

    def replace(self, collection: Collection, record_id: str, partition_key: str, record: Record) -> Record:
        key = (str(partition_key), str(record_id))
        bucket = self._bucket(collection)
        if key not in bucket:
            raise StoreNotFound(collection.name, key[1], key[0])
        bucket[key] = copy.deepcopy(record)
        return copy.deepcopy(record)

    def delete(self, collection: Collection, record_id: str, partition_key: str) -> None:
        key = (str(partition_key), str(record_id))
        bucket = self._bucket(collection)
        if key not in bucket:
            raise StoreNotFound(collection.name, key[1], key[0])
        del bucket[key]

    def count(self, collection: Collection) -> int:
        return len(self._bucket(collection))
