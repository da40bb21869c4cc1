from __future__ import annotations

import json
import re
from typing import Any, List, Optional, Sequence, Tuple

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..common.logging_config import get_logger
from ..core.exceptions import StoreConflict, StoreNotFound
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import Collection, Condition, Record, RecordStore, partition_of, sort_records

logger = get_logger("store.mysql")

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SQL_OPS = {"eq": "=", "ge": ">=", "le": "<="}


def _json_path(field: str) -> str:
    if not _FIELD_RE.match(field):
        raise ValueError(f"Invalid field name for query: {field!r}")
    return f"$.{field}"


def build_where(collection: Collection, conditions: Sequence[Condition]) -> Tuple[str, List[Any]]:
    """Translate conditions into a WHERE clause over the JSON ``body`` column.

    Values are compared as JSON so strings, numbers and booleans keep their
    document semantics; a missing field never matches.
    """

    clauses = ["collection=%s"]
    params: List[Any] = [collection.name]
    for cond in conditions:
        path = _json_path(cond.field)
        if cond.op == "in":
            values = list(cond.value)
            if not values:
                clauses.append("1=0")
                continue
            placeholders = ", ".join(["CAST(%s AS JSON)"] * len(values))
            clauses.append(f"JSON_EXTRACT(body, %s) IN ({placeholders})")
            params.append(path)
            params.extend(json.dumps(v) for v in values)
        else:
            clauses.append(f"JSON_EXTRACT(body, %s) {_SQL_OPS[cond.op]} CAST(%s AS JSON)")
            params.extend([path, json.dumps(cond.value)])
    return " AND ".join(clauses), params


class MySQLRecordStore(RecordStore):
    """Document store kept in a single ``records`` table (see database.bootstrap)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, collection: Collection, record_id: str, partition_key: str) -> Optional[Record]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT body FROM records
                WHERE collection=%s AND partition_key=%s AND record_id=%s
                """,
                (collection.name, str(partition_key), str(record_id)),
            )
            row = fetchone(cur)
            return _load(row["body"]) if row else None

    def query(
        self,
        collection: Collection,
        conditions: Sequence[Condition] = (),
        *,
        order_by: Sequence[str] = (),
    ) -> List[Record]:
        where, params = build_where(collection, conditions)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT body FROM records WHERE {where}", tuple(params))
            rows = [_load(r["body"]) for r in fetchall(cur)]
        return sort_records(rows, order_by)

    def create(self, collection: Collection, record: Record) -> Record:
        partition_key = partition_of(collection, record)
        record_id = str(record["id"])
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO records(collection, partition_key, record_id, body)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (collection.name, partition_key, record_id, json.dumps(record)),
                )
        except IntegrityError as exc:
            if getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY:
                logger.debug("duplicate key %s/%s in %s", partition_key, record_id, collection.name)
                raise StoreConflict(collection.name, record_id, partition_key) from exc
            raise
        return record

    def replace(self, collection: Collection, record_id: str, partition_key: str, record: Record) -> Record:
        with db_cursor(self._conn_factory) as (_, cur):
            # UPDATE reports 0 affected rows for an unchanged body, so check presence first.
            cur.execute(
                """
                SELECT record_id FROM records
                WHERE collection=%s AND partition_key=%s AND record_id=%s
                FOR UPDATE
                """,
                (collection.name, str(partition_key), str(record_id)),
            )
            if not fetchone(cur):
                raise StoreNotFound(collection.name, str(record_id), str(partition_key))
            cur.execute(
                """
                UPDATE records SET body=%s
                WHERE collection=%s AND partition_key=%s AND record_id=%s
                """,
                (json.dumps(record), collection.name, str(partition_key), str(record_id)),
            )
        return record

    def delete(self, collection: Collection, record_id: str, partition_key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE FROM records
                WHERE collection=%s AND partition_key=%s AND record_id=%s
                """,
                (collection.name, str(partition_key), str(record_id)),
            )
            if cur.rowcount == 0:
                raise StoreNotFound(collection.name, str(record_id), str(partition_key))


def _load(body: Any) -> Record:
    # mysql-connector returns JSON columns as str (or bytes with the C extension).
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    if isinstance(body, str):
        return json.loads(body)
    return dict(body)
