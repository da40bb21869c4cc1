from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus, PaymentType
from ..core.patch import UNSET, Patch


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one register line per (client, day)."""

    entry_id: str
    client_id: str
    client_name: str
    date: date
    attendance_status: AttendanceStatus
    payment: Decimal
    payment_type: PaymentType
    invoice_code: str
    notes: Optional[str] = None
    cash_owed: Optional[Decimal] = None
    cash_owed_paid_date: Optional[date] = None
    cash_owed_paid_by: Optional[str] = None
    created_at: Optional[str] = None
    created_by: Optional[str] = None

    @property
    def attended(self) -> bool:
        return self.attendance_status.billable

    @property
    def billable(self) -> bool:
        return self.attendance_status.billable


@dataclass(frozen=True)
class AttendancePatch:
    """Fields supplied by a register write; anything left UNSET is kept.

    ``attended`` is the legacy boolean; it is only consulted when no
    ``attendance_status`` is supplied.
    """

    attendance_status: Patch[AttendanceStatus] = UNSET
    attended: Patch[bool] = UNSET
    payment: Patch[Decimal] = UNSET
    payment_type: Patch[PaymentType] = UNSET
    notes: Patch[str] = UNSET
    cash_owed: Patch[Decimal] = UNSET
    cash_owed_paid_date: Patch[date] = UNSET
    cash_owed_paid_by: Patch[str] = UNSET


@dataclass(frozen=True)
class BulkUpsertResult:
    entries: list[AttendanceEntry]
    created: int
    updated: int
    skipped: int = 0
