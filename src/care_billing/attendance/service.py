from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_utc, parse_iso_date, today_local
from ..common.logging_config import get_logger
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_REGISTER_DAYS, DEFAULT_SESSION_PAYMENT
from ..core.enums import AttendanceStatus, PaymentType
from ..core.exceptions import StoreConflict, ValidationError
from ..core.patch import Clear, Set, resolve
from ..core.period import BillingPeriod
from .mapping import invoice_code_for, patch_from_payload
from .model import AttendanceEntry, AttendancePatch, BulkUpsertResult
from .repository import AttendanceRepository

logger = get_logger("attendance.register")


def entry_id_for(client_id: str, day: date) -> str:
    return f"{client_id}:{day.isoformat()}"


def derive_status(patch: AttendancePatch, prior: Optional[AttendanceStatus]) -> AttendanceStatus:
    """Explicit status wins; a legacy ``attended`` flag maps onto the prior status."""

    if isinstance(patch.attendance_status, Set):
        return patch.attendance_status.value
    if isinstance(patch.attendance_status, Clear):
        raise ValidationError("attendanceStatus cannot be cleared")
    if isinstance(patch.attended, Set):
        if not patch.attended.value:
            return AttendanceStatus.ABSENT
        if prior is not None and prior.billable:
            return prior
        return AttendanceStatus.PRESENT
    return prior if prior is not None else AttendanceStatus.PRESENT


def _finalise(entry: AttendanceEntry) -> AttendanceEntry:
    if entry.payment < 0:
        raise ValidationError("payment cannot be negative")
    cash_owed = entry.cash_owed
    if cash_owed is not None and cash_owed == 0:
        cash_owed = None
    if cash_owed is not None:
        if cash_owed < 0:
            raise ValidationError("cashOwed cannot be negative")
        if entry.payment_type != PaymentType.CASH:
            raise ValidationError("cashOwed can only be recorded for cash payments")
    payment = entry.payment
    if cash_owed is not None or entry.attendance_status == AttendanceStatus.ABSENT:
        payment = Decimal("0")
    return replace(entry, cash_owed=cash_owed, payment=payment)


def build_entry(
    *,
    client_id: str,
    client_name: str,
    day: date,
    patch: AttendancePatch,
    default_payment: Decimal,
    created_at: Optional[str] = None,
    created_by: Optional[str] = None,
) -> AttendanceEntry:
    """First write for a (client, day) pair."""

    status = derive_status(patch, None)
    return _finalise(
        AttendanceEntry(
            entry_id=entry_id_for(client_id, day),
            client_id=client_id,
            client_name=client_name,
            date=day,
            attendance_status=status,
            payment=resolve(patch.payment, None) if isinstance(patch.payment, Set) else default_payment,
            payment_type=resolve(patch.payment_type, None) or PaymentType.INVOICE,
            invoice_code=invoice_code_for(client_name),
            notes=resolve(patch.notes, None) or None,
            cash_owed=resolve(patch.cash_owed, None),
            cash_owed_paid_date=resolve(patch.cash_owed_paid_date, None),
            cash_owed_paid_by=resolve(patch.cash_owed_paid_by, None),
            created_at=created_at,
            created_by=created_by,
        )
    )


def apply_patch(
    existing: AttendanceEntry,
    patch: AttendancePatch,
    *,
    client_name: Optional[str] = None,
    default_payment: Decimal = DEFAULT_SESSION_PAYMENT,
) -> AttendanceEntry:
    """Overlay supplied fields onto an existing entry (pure)."""

    status = derive_status(patch, existing.attendance_status)

    payment = resolve(patch.payment, existing.payment)
    if isinstance(patch.payment, Clear):
        payment = Decimal("0")
    elif not isinstance(patch.payment, Set) and existing.attendance_status == AttendanceStatus.ABSENT and status.billable:
        # An absent day carries no payment; moving it back to billable restores the session fee.
        payment = default_payment

    name = client_name or existing.client_name
    return _finalise(
        replace(
            existing,
            client_name=name,
            attendance_status=status,
            payment=payment,
            payment_type=resolve(patch.payment_type, existing.payment_type) or PaymentType.INVOICE,
            invoice_code=invoice_code_for(name),
            notes=resolve(patch.notes, existing.notes) or None,
            cash_owed=resolve(patch.cash_owed, existing.cash_owed),
            cash_owed_paid_date=resolve(patch.cash_owed_paid_date, existing.cash_owed_paid_date),
            cash_owed_paid_by=resolve(patch.cash_owed_paid_by, existing.cash_owed_paid_by),
        )
    )


class AttendanceRegister:
    """Use case: record per-day client attendance (create-or-replace by client and date)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        default_payment: Decimal = DEFAULT_SESSION_PAYMENT,
        clock: Callable[[], Any] = now_utc,
    ):
        self._attendance = attendance
        self._default_payment = Decimal(default_payment)
        self._clock = clock

    def upsert(
        self,
        *,
        client_id: str,
        client_name: str,
        day: date,
        patch: AttendancePatch = AttendancePatch(),
        created_by: Optional[str] = None,
    ) -> AttendanceEntry:
        client_id = require_non_empty(client_id, "clientId")
        client_name = require_non_empty(client_name, "clientName")

        existing = self._attendance.get_for_client_and_date(client_id, day)
        if existing:
            return self._replace(existing, patch, client_name=client_name)

        entry = build_entry(
            client_id=client_id,
            client_name=client_name,
            day=day,
            patch=patch,
            default_payment=self._default_payment,
            created_at=self._clock().isoformat(),
            created_by=created_by,
        )
        try:
            self._attendance.create(entry)
        except StoreConflict:
            # Another writer created the same (client, day) first; overlay onto theirs.
            winner = self._attendance.get_for_client_and_date(client_id, day)
            if not winner:
                raise
            return self._replace(winner, patch, client_name=client_name)

        logger.info("register entry created for %s on %s (status: %s)", client_name, day, entry.attendance_status.value)
        return entry

    def _replace(self, existing: AttendanceEntry, patch: AttendancePatch, *, client_name: Optional[str]) -> AttendanceEntry:
        updated = apply_patch(existing, patch, client_name=client_name, default_payment=self._default_payment)
        self._attendance.replace(updated)
        logger.info(
            "register entry updated for %s on %s (status: %s)",
            updated.client_name,
            updated.date,
            updated.attendance_status.value,
        )
        return updated

    def upsert_payload(self, payload: Mapping[str, Any], *, created_by: Optional[str] = None) -> AttendanceEntry:
        """Upsert from a camelCase request body (clientId, clientName, date, ...)."""

        if not payload.get("clientId") or not payload.get("date") or not payload.get("clientName"):
            raise ValidationError("Client ID, name, and date are required")
        return self.upsert(
            client_id=str(payload["clientId"]),
            client_name=str(payload["clientName"]),
            day=parse_iso_date(payload["date"]),
            patch=patch_from_payload(payload),
            created_by=created_by,
        )

    def bulk_upsert(self, rows: Sequence[Mapping[str, Any]], *, created_by: Optional[str] = None) -> BulkUpsertResult:
        if not rows:
            raise ValidationError("Entries array is required")

        known: dict[tuple[str, date], AttendanceEntry] = {}
        loaded_days: set[date] = set()
        results: list[AttendanceEntry] = []
        created = updated = skipped = 0

        for row in rows:
            if not row.get("clientId") or not row.get("date") or not row.get("clientName"):
                skipped += 1
                continue
            try:
                day = parse_iso_date(row["date"])
                patch = patch_from_payload(row)
                if day not in loaded_days:
                    # One read per day instead of one per row.
                    for e in self._attendance.list_for_date(day):
                        known.setdefault((e.client_id, e.date), e)
                    loaded_days.add(day)

                key = (str(row["clientId"]), day)
                existing = known.get(key)
                if existing:
                    entry = self._replace(existing, patch, client_name=str(row["clientName"]))
                    updated += 1
                else:
                    entry = self.upsert(
                        client_id=key[0],
                        client_name=str(row["clientName"]),
                        day=day,
                        patch=patch,
                        created_by=created_by,
                    )
                    created += 1
            except ValidationError as exc:
                logger.info("register row skipped (%s on %s): %s", row.get("clientId"), row.get("date"), exc)
                skipped += 1
                continue
            known[key] = entry
            results.append(entry)

        logger.info("bulk register: %d created, %d updated, %d skipped", created, updated, skipped)
        return BulkUpsertResult(entries=results, created=created, updated=updated, skipped=skipped)

    def update(self, entry_id: str, day: date, patch: AttendancePatch) -> AttendanceEntry:
        existing = self._attendance.get(entry_id, day)
        if not existing:
            raise ValidationError("Register entry not found")
        return self._replace(existing, patch, client_name=None)

    def record_cash_payment(
        self,
        entry_id: str,
        day: date,
        *,
        paid_by: str,
        paid_on: Optional[date] = None,
    ) -> AttendanceEntry:
        """Mark a deferred cash amount as settled."""

        existing = self._attendance.get(entry_id, day)
        if not existing:
            raise ValidationError("Register entry not found")
        if existing.cash_owed is None:
            raise ValidationError("No cash is owed for this register entry")
        patch = AttendancePatch(
            cash_owed_paid_date=Set(paid_on or today_local()),
            cash_owed_paid_by=Set(require_non_empty(paid_by, "paidBy")),
        )
        return self._replace(existing, patch, client_name=None)

    def delete(self, entry_id: str, day: date) -> None:
        if not self._attendance.get(entry_id, day):
            raise ValidationError("Register entry not found")
        self._attendance.delete(entry_id, day)
        logger.info("register entry %s deleted", entry_id)

    def list_for_date(self, day: date) -> Sequence[AttendanceEntry]:
        return self._attendance.list_for_date(day)

    def list_for_month(self, year: int, month: int) -> Sequence[AttendanceEntry]:
        period = BillingPeriod.for_month(year, month)
        return self._attendance.list_between(period.start, period.end)

    def list_recent(self, *, days: int = DEFAULT_REGISTER_DAYS, today: Optional[date] = None) -> Sequence[AttendanceEntry]:
        today = today or today_local()
        return self._attendance.list_between(today - timedelta(days=days), today)
