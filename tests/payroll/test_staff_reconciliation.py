from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from care_billing.core.exceptions import ValidationError
from care_billing.payroll.service import StaffAttendanceReconciler
from care_billing.staff.repository import StaffAttendanceRepository, StaffRepository
from care_billing.staff.service import StaffRegister
from care_billing.store import COLLECTIONS, InMemoryRecordStore

NOW = datetime(2025, 3, 3, 8, 0, tzinfo=timezone.utc)


class Setup:
    def __init__(self):
        self.store = InMemoryRecordStore()
        self.staff = StaffRepository(self.store)
        self.entries = StaffAttendanceRepository(self.store)
        self.register = StaffRegister(self.staff, self.entries, clock=lambda: NOW)
        self.reconciler = StaffAttendanceReconciler(self.entries)

    def add_staff(self, staff_id, first, last, rate, active=True):
        self.store.create(
            COLLECTIONS.STAFF,
            {"id": staff_id, "firstName": first, "lastName": last, "dayRate": rate, "isActive": active},
        )

    def set_rate(self, staff_id, rate):
        rec = self.store.get(COLLECTIONS.STAFF, staff_id, staff_id)
        rec["dayRate"] = rate
        self.store.replace(COLLECTIONS.STAFF, staff_id, staff_id, rec)

    def reconcile(self, year=2025, month=3):
        return self.reconciler.reconcile(year, month, self.staff.list_active())


def test_check_in_snapshots_current_rate():
    s = Setup()
    s.add_staff("s1", "Sam", "Taylor", "80.00")

    entry = s.register.check_in("s1", date(2025, 3, 3), created_by="admin")

    assert entry.day_rate == Decimal("80.00")
    assert entry.staff_name == "Sam Taylor"
    assert entry.entry_id == "s1:2025-03-03"


def test_check_in_twice_on_same_day_is_rejected():
    s = Setup()
    s.add_staff("s1", "Sam", "Taylor", "80.00")
    s.register.check_in("s1", date(2025, 3, 3))

    with pytest.raises(ValidationError):
        s.register.check_in("s1", date(2025, 3, 3))


def test_check_in_unknown_staff_is_rejected():
    with pytest.raises(ValidationError):
        Setup().register.check_in("ghost", date(2025, 3, 3))


def test_rate_change_mid_month_is_weighted_by_day():
    s = Setup()
    s.add_staff("s1", "Sam", "Taylor", "80.00")
    s.register.check_in("s1", date(2025, 3, 3))
    s.register.check_in("s1", date(2025, 3, 4))
    s.set_rate("s1", "90.00")
    s.register.check_in("s1", date(2025, 3, 5))

    [row] = s.reconcile()

    assert row.days_worked == 3
    assert row.total_amount == Decimal("250.00")
    assert row.day_rate == Decimal("90.00")
    assert [e.date.day for e in row.entries] == [3, 4, 5]


def test_staff_without_days_are_omitted_and_rows_sorted_by_name():
    s = Setup()
    s.add_staff("s1", "Sam", "Taylor", "80")
    s.add_staff("s2", "alex", "Brown", "70")
    s.add_staff("s3", "Idle", "Person", "60")
    s.register.check_in("s1", date(2025, 3, 3))
    s.register.check_in("s2", date(2025, 3, 3))
    s.register.check_in("s2", date(2025, 4, 1))

    rows = s.reconcile()

    assert [r.staff_id for r in rows] == ["s2", "s1"]
    assert rows[0].days_worked == 1


def test_deactivated_staff_history_still_counts():
    s = Setup()
    s.add_staff("s1", "Sam", "Taylor", "80")
    s.register.check_in("s1", date(2025, 3, 3))
    rec = s.store.get(COLLECTIONS.STAFF, "s1", "s1")
    rec["isActive"] = False
    s.store.replace(COLLECTIONS.STAFF, "s1", "s1", rec)

    [row] = s.reconcile()

    assert row.staff_name == "Sam Taylor"
    assert row.total_amount == Decimal("80")


def test_bulk_check_in_skips_bad_rows():
    s = Setup()
    s.add_staff("s1", "Sam", "Taylor", "80")

    created = s.register.bulk_check_in(
        [
            {"staffId": "s1", "date": "2025-03-03"},
            {"staffId": "s1", "date": "2025-03-03"},
            {"staffId": "ghost", "date": "2025-03-03"},
            {"date": "2025-03-04"},
        ]
    )

    assert len(created) == 1


def test_invalid_month_is_rejected():
    with pytest.raises(ValidationError):
        Setup().reconcile(2025, 13)
