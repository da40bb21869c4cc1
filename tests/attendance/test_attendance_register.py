from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from care_billing.attendance.model import AttendancePatch
from care_billing.attendance.repository import AttendanceRepository
from care_billing.attendance.service import AttendanceRegister, entry_id_for
from care_billing.core.enums import AttendanceStatus, PaymentType
from care_billing.core.exceptions import StoreConflict, ValidationError
from care_billing.core.patch import Clear, Set
from care_billing.store import COLLECTIONS, InMemoryRecordStore

NOW = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)
DAY = date(2025, 3, 3)


def _register(store=None):
    store = store or InMemoryRecordStore()
    return AttendanceRegister(AttendanceRepository(store), clock=lambda: NOW), store


def test_new_entry_defaults_to_present_invoice_forty():
    register, _ = _register()

    entry = register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, created_by="u1")

    assert entry.entry_id == entry_id_for("c1", DAY)
    assert entry.attendance_status == AttendanceStatus.PRESENT
    assert entry.payment == Decimal("40")
    assert entry.payment_type == PaymentType.INVOICE
    assert entry.invoice_code == "AnLe"
    assert entry.created_by == "u1"


def test_upsert_replaces_same_client_and_day():
    register, store = _register()
    register.upsert(client_id="c1", client_name="Anna Lee", day=DAY)

    register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(payment=Set(Decimal("55"))))

    assert store.count(COLLECTIONS.REGISTER) == 1
    assert register.list_for_date(DAY)[0].payment == Decimal("55")


def test_absent_forces_zero_payment_and_return_restores_default():
    register, _ = _register()
    register.upsert(client_id="c1", client_name="Anna Lee", day=DAY)

    absent = register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(attended=Set(False)))
    assert absent.attendance_status == AttendanceStatus.ABSENT
    assert absent.payment == Decimal("0")

    back = register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(attended=Set(True)))
    assert back.attendance_status == AttendanceStatus.PRESENT
    assert back.payment == Decimal("40")


def test_legacy_attended_true_keeps_late_cancellation():
    register, _ = _register()
    register.upsert(
        client_id="c1",
        client_name="Anna Lee",
        day=DAY,
        patch=AttendancePatch(attendance_status=Set(AttendanceStatus.LATE_CANCELLATION)),
    )

    entry = register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(attended=Set(True)))

    assert entry.attendance_status == AttendanceStatus.LATE_CANCELLATION


def test_cash_owed_requires_cash_payment_type():
    register, _ = _register()

    with pytest.raises(ValidationError):
        register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(cash_owed=Set(Decimal("40"))))


def test_cash_owed_zeroes_payment_and_clearing_keeps_other_fields():
    register, _ = _register()
    owed = register.upsert(
        client_id="c1",
        client_name="Anna Lee",
        day=DAY,
        patch=AttendancePatch(payment_type=Set(PaymentType.CASH), cash_owed=Set(Decimal("40")), notes=Set("pay Friday")),
    )
    assert owed.cash_owed == Decimal("40")
    assert owed.payment == Decimal("0")

    cleared = register.upsert(
        client_id="c1",
        client_name="Anna Lee",
        day=DAY,
        patch=AttendancePatch(cash_owed=Clear(), payment=Set(Decimal("40"))),
    )
    assert cleared.cash_owed is None
    assert cleared.payment == Decimal("40")
    assert cleared.notes == "pay Friday"
    assert cleared.payment_type == PaymentType.CASH


def test_record_cash_payment_stamps_date_and_payer():
    register, _ = _register()
    owed = register.upsert_payload(
        {"clientId": "c1", "clientName": "Anna Lee", "date": "2025-03-03", "paymentType": "cash", "cashOwed": 40}
    )

    paid = register.record_cash_payment(owed.entry_id, DAY, paid_by="admin", paid_on=date(2025, 3, 10))

    assert paid.cash_owed_paid_date == date(2025, 3, 10)
    assert paid.cash_owed_paid_by == "admin"


def test_record_cash_payment_without_debt_fails():
    register, _ = _register()
    entry = register.upsert(client_id="c1", client_name="Anna Lee", day=DAY)

    with pytest.raises(ValidationError):
        register.record_cash_payment(entry.entry_id, DAY, paid_by="admin")


def test_payload_requires_client_and_date():
    register, _ = _register()
    with pytest.raises(ValidationError):
        register.upsert_payload({"clientId": "c1", "clientName": "Anna Lee"})


def test_bulk_upsert_counts_and_skips_incomplete_rows():
    register, store = _register()
    register.upsert(client_id="c1", client_name="Anna Lee", day=DAY)

    result = register.bulk_upsert(
        [
            {"clientId": "c1", "clientName": "Anna Lee", "date": "2025-03-03", "attendanceStatus": "absent"},
            {"clientId": "c2", "clientName": "Ben Ng", "date": "2025-03-03"},
            {"clientId": "c2", "clientName": "Ben Ng", "date": "2025-03-04"},
            {"clientName": "Nobody", "date": "2025-03-04"},
        ],
        created_by="u1",
    )

    assert (result.created, result.updated, result.skipped) == (2, 1, 1)
    assert store.count(COLLECTIONS.REGISTER) == 3
    assert register.list_for_date(DAY)[0].attendance_status == AttendanceStatus.ABSENT


def test_bulk_upsert_requires_rows():
    register, _ = _register()
    with pytest.raises(ValidationError):
        register.bulk_upsert([])


class RacingStore(InMemoryRecordStore):
    """Another writer slips in the same (client, day) just before our create."""

    def __init__(self):
        super().__init__()
        self.raced = False

    def create(self, collection, record):
        if collection == COLLECTIONS.REGISTER and not self.raced:
            self.raced = True
            rival = dict(record, payment="45.00", notes="rival")
            super().create(collection, rival)
            raise StoreConflict(collection.name, record["id"], record["date"])
        return super().create(collection, record)


def test_create_conflict_overlays_onto_winner():
    register, store = _register(RacingStore())

    entry = register.upsert(
        client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(attended=Set(True))
    )

    assert store.count(COLLECTIONS.REGISTER) == 1
    assert entry.notes == "rival"
    assert entry.payment == Decimal("45.00")


def test_delete_and_list_for_month():
    register, _ = _register()
    first = register.upsert(client_id="c1", client_name="Anna Lee", day=DAY)
    register.upsert(client_id="c1", client_name="Anna Lee", day=date(2025, 4, 1))

    assert len(register.list_for_month(2025, 3)) == 1
    register.delete(first.entry_id, DAY)
    assert register.list_for_month(2025, 3) == []
    with pytest.raises(ValidationError):
        register.delete(first.entry_id, DAY)


def test_malformed_date_in_payload_is_a_validation_error():
    register, _ = _register()

    with pytest.raises(ValidationError):
        register.upsert_payload({"clientId": "c1", "clientName": "Anna Lee", "date": "03/03/2025"})


def test_bulk_upsert_skips_rows_with_impossible_dates():
    register, store = _register()

    result = register.bulk_upsert(
        [
            {"clientId": "c1", "clientName": "Anna Lee", "date": "2025-03-03"},
            {"clientId": "c2", "clientName": "Ben Ng", "date": "2025-02-30"},
            {"clientId": "c3", "clientName": "Cara Old", "date": "2025-03-04", "cashOwed": 40},
            {"clientId": "c2", "clientName": "Ben Ng", "date": "2025-03-04"},
        ]
    )

    assert (result.created, result.updated, result.skipped) == (2, 0, 2)
    assert [e.client_id for e in result.entries] == ["c1", "c2"]
    assert store.count(COLLECTIONS.REGISTER) == 2


def test_return_from_absence_restores_default_fee_not_custom_amount():
    register, _ = _register()
    register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(payment=Set(Decimal("55.50"))))
    register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(attended=Set(False)))

    back = register.upsert(client_id="c1", client_name="Anna Lee", day=DAY, patch=AttendancePatch(attended=Set(True)))
    assert back.payment == Decimal("40")

    custom = register.upsert(
        client_id="c1",
        client_name="Anna Lee",
        day=DAY,
        patch=AttendancePatch(attendance_status=Set(AttendanceStatus.ABSENT)),
    )
    assert custom.payment == Decimal("0")
    restored = register.upsert(
        client_id="c1",
        client_name="Anna Lee",
        day=DAY,
        patch=AttendancePatch(attendance_status=Set(AttendanceStatus.PRESENT), payment=Set(Decimal("55.50"))),
    )
    assert restored.payment == Decimal("55.50")
