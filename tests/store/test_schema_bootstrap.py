from __future__ import annotations

from care_billing.database import bootstrap


class FakeCursor:
    def __init__(self, log):
        self._log = log

    def execute(self, sql, params=()):
        self._log.append(sql)

    def fetchall(self):
        return [("records",)]


class FakeConnection:
    def __init__(self, log):
        self._log = log

    def cursor(self):
        return FakeCursor(self._log)

    def commit(self):
        pass

    def close(self):
        pass


def test_apply_schema_creates_database_then_records_table(monkeypatch):
    executed = []
    connects = []

    def fake_connect(**kwargs):
        connects.append(kwargs)
        return FakeConnection(executed)

    monkeypatch.setattr(bootstrap.mysql.connector, "connect", fake_connect)
    db_config = {"host": "db", "port": 3306, "user": "u", "password": "p", "database": "care_billing_test"}

    bootstrap.apply_schema(db_config)

    assert executed[0].startswith("CREATE DATABASE IF NOT EXISTS `care_billing_test`")
    assert executed[1] == bootstrap.SCHEMA_SQL
    assert "database" not in connects[0]
    assert connects[1]["database"] == "care_billing_test"
    assert bootstrap.list_tables(db_config) == ["records"]
