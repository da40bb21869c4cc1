"""Register documents <-> AttendanceEntry.

Older register documents predate ``attendanceStatus`` and ``paymentType``;
they only carry the ``attended`` boolean. This module is the single place
where that legacy shape is understood: on read the status is inferred, on
write both fields are emitted so older readers keep working.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..common.datetime_utils import format_optional_date, parse_iso_date, parse_optional_date
from ..common.validators import money_str, to_decimal, to_optional_decimal
from ..core.enums import AttendanceStatus, PaymentType
from ..core.exceptions import ValidationError
from ..core.patch import UNSET, Clear, Set, from_loose
from .model import AttendanceEntry, AttendancePatch


def status_from_record(record: Mapping[str, Any]) -> AttendanceStatus:
    raw = record.get("attendanceStatus")
    if raw:
        try:
            return AttendanceStatus(raw)
        except ValueError:
            raise ValidationError(f"Register entry {record.get('id')!r} has unknown attendanceStatus {raw!r}")
    return AttendanceStatus.PRESENT if record.get("attended") is True else AttendanceStatus.ABSENT


def payment_type_from_record(record: Mapping[str, Any]) -> PaymentType:
    raw = record.get("paymentType")
    if not raw:
        return PaymentType.INVOICE
    try:
        return PaymentType(raw)
    except ValueError:
        raise ValidationError(f"Register entry {record.get('id')!r} has unknown paymentType {raw!r}")


def entry_from_record(record: Mapping[str, Any]) -> AttendanceEntry:
    return AttendanceEntry(
        entry_id=str(record["id"]),
        client_id=str(record["clientId"]),
        client_name=str(record.get("clientName") or ""),
        date=parse_iso_date(record["date"]),
        attendance_status=status_from_record(record),
        payment=to_decimal(record.get("payment") or 0, "payment"),
        payment_type=payment_type_from_record(record),
        invoice_code=str(record.get("invoiceCode") or ""),
        notes=record.get("notes"),
        cash_owed=to_optional_decimal(record.get("cashOwed"), "cashOwed"),
        cash_owed_paid_date=parse_optional_date(record.get("cashOwedPaidDate")),
        cash_owed_paid_by=record.get("cashOwedPaidBy"),
        created_at=record.get("createdAt"),
        created_by=record.get("createdBy"),
    )


def entry_to_record(entry: AttendanceEntry) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": entry.entry_id,
        "clientId": entry.client_id,
        "clientName": entry.client_name,
        "date": entry.date.isoformat(),
        "attendanceStatus": entry.attendance_status.value,
        "attended": entry.attended,
        "payment": money_str(entry.payment),
        "paymentType": entry.payment_type.value,
        "invoiceCode": entry.invoice_code,
        "createdAt": entry.created_at,
        "createdBy": entry.created_by,
    }
    optional = {
        "notes": entry.notes,
        "cashOwed": money_str(entry.cash_owed) if entry.cash_owed is not None else None,
        "cashOwedPaidDate": format_optional_date(entry.cash_owed_paid_date),
        "cashOwedPaidBy": entry.cash_owed_paid_by,
    }
    record.update({k: v for k, v in optional.items() if v is not None})
    return record


def _enum_patch(payload: Mapping[str, Any], key: str, enum_cls) -> Any:
    if key not in payload or payload[key] is None:
        return UNSET
    try:
        return Set(enum_cls(payload[key]))
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{key} must be one of: {allowed}")


def _clearable(payload: Mapping[str, Any], key: str, convert=lambda v: v) -> Any:
    if key not in payload:
        return UNSET
    value = payload[key]
    if value is None:
        return Clear()
    return Set(convert(value))


def patch_from_payload(payload: Mapping[str, Any]) -> AttendancePatch:
    """Build a patch from a camelCase request body.

    A key that is absent stays UNSET; ``cashOwed`` of ``0`` or ``null`` clears
    the deferred amount.
    """

    attended: Any = UNSET
    if payload.get("attended") is not None:
        attended = Set(bool(payload["attended"]))

    payment: Any = UNSET
    if payload.get("payment") is not None:
        payment = Set(to_decimal(payload["payment"], "payment"))

    cash_owed: Any = UNSET
    if "cashOwed" in payload:
        raw = payload["cashOwed"]
        value = None if raw is None else to_decimal(raw, "cashOwed")
        cash_owed = from_loose(value, clear_when=lambda v: v is None or v == 0)

    notes: Any = UNSET
    if "notes" in payload:
        notes = _clearable(payload, "notes", lambda v: str(v).strip())

    return AttendancePatch(
        attendance_status=_enum_patch(payload, "attendanceStatus", AttendanceStatus),
        attended=attended,
        payment=payment,
        payment_type=_enum_patch(payload, "paymentType", PaymentType),
        notes=notes,
        cash_owed=cash_owed,
        cash_owed_paid_date=_clearable(payload, "cashOwedPaidDate", parse_iso_date),
        cash_owed_paid_by=_clearable(payload, "cashOwedPaidBy", str),
    )


def invoice_code_for(client_name: str) -> str:
    """Display code: first two letters of the first and last name parts."""

    parts = client_name.split()
    if len(parts) >= 2:
        code = f"{parts[0][:2]}{parts[-1][:2]}"
    else:
        code = client_name.strip()[:4]
    return "".join(code.split())
