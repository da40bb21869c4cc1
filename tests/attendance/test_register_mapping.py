from __future__ import annotations

from decimal import Decimal

import pytest

from care_billing.attendance.mapping import (
    entry_from_record,
    entry_to_record,
    invoice_code_for,
    patch_from_payload,
)
from care_billing.core.enums import AttendanceStatus, PaymentType
from care_billing.core.exceptions import ValidationError
from care_billing.core.patch import UNSET, Clear, Set


def _legacy(**extra):
    rec = {"id": "c1:2025-03-03", "clientId": "c1", "clientName": "Anna Lee", "date": "2025-03-03", "payment": 40}
    rec.update(extra)
    return rec


def test_legacy_attended_true_reads_as_present_invoice():
    entry = entry_from_record(_legacy(attended=True))

    assert entry.attendance_status == AttendanceStatus.PRESENT
    assert entry.payment_type == PaymentType.INVOICE
    assert entry.payment == Decimal("40")


def test_legacy_attended_false_or_missing_reads_as_absent():
    assert entry_from_record(_legacy(attended=False)).attendance_status == AttendanceStatus.ABSENT
    assert entry_from_record(_legacy()).attendance_status == AttendanceStatus.ABSENT


def test_explicit_status_wins_over_legacy_flag():
    entry = entry_from_record(_legacy(attended=False, attendanceStatus="late-cancellation"))
    assert entry.attendance_status == AttendanceStatus.LATE_CANCELLATION
    assert entry.attended is True


def test_write_emits_status_and_legacy_flag():
    entry = entry_from_record(_legacy(attendanceStatus="absent", payment="0", paymentType="invoice"))
    rec = entry_to_record(entry)

    assert rec["attendanceStatus"] == "absent"
    assert rec["attended"] is False
    assert rec["payment"] == "0.00"
    assert "cashOwed" not in rec


def test_payload_absent_keys_stay_unset():
    patch = patch_from_payload({"clientId": "c1", "date": "2025-03-03"})

    assert patch.attendance_status is UNSET
    assert patch.payment is UNSET
    assert patch.cash_owed is UNSET


def test_payload_cash_owed_zero_or_null_clears():
    assert patch_from_payload({"cashOwed": 0}).cash_owed == Clear()
    assert patch_from_payload({"cashOwed": None}).cash_owed == Clear()
    assert patch_from_payload({"cashOwed": "12.50"}).cash_owed == Set(Decimal("12.50"))


def test_payload_rejects_unknown_status():
    with pytest.raises(ValidationError):
        patch_from_payload({"attendanceStatus": "sick"})


@pytest.mark.parametrize(
    "name,code",
    [("Anna Lee", "AnLe"), ("Mary Jane Watson", "MaWa"), ("Cher", "Cher"), ("  Bo  ", "Bo")],
)
def test_invoice_code(name, code):
    assert invoice_code_for(name) == code


def test_unknown_stored_status_names_the_record():
    with pytest.raises(ValidationError) as exc:
        entry_from_record(_legacy(attendanceStatus="holiday"))

    assert "c1:2025-03-03" in str(exc.value)


def test_unknown_stored_payment_type_is_a_validation_error():
    with pytest.raises(ValidationError):
        entry_from_record(_legacy(attended=True, paymentType="cheque"))
