from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import money_str, to_decimal


@dataclass(frozen=True)
class StaffProfile:
    staff_id: str
    first_name: str
    last_name: str
    day_rate: Decimal
    display_name: Optional[str] = None
    is_active: bool = True

    @property
    def name(self) -> str:
        return self.display_name or f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class StaffAttendanceEntry:
    """One checked-in day. ``day_rate`` is copied from the profile at check-in."""

    entry_id: str
    staff_id: str
    staff_name: str
    date: date
    day_rate: Decimal
    notes: Optional[str] = None
    created_at: Optional[str] = None
    created_by: Optional[str] = None


def staff_from_record(record: Mapping[str, Any]) -> StaffProfile:
    return StaffProfile(
        staff_id=str(record["id"]),
        first_name=str(record.get("firstName") or ""),
        last_name=str(record.get("lastName") or ""),
        day_rate=to_decimal(record.get("dayRate") or 0, "dayRate"),
        display_name=record.get("concatName"),
        is_active=bool(record.get("isActive", True)),
    )


def staff_entry_from_record(record: Mapping[str, Any]) -> StaffAttendanceEntry:
    return StaffAttendanceEntry(
        entry_id=str(record["id"]),
        staff_id=str(record["staffId"]),
        staff_name=str(record.get("staffName") or ""),
        date=parse_iso_date(record["date"]),
        day_rate=to_decimal(record.get("dayRate") or 0, "dayRate"),
        notes=record.get("notes"),
        created_at=record.get("createdAt"),
        created_by=record.get("createdBy"),
    )


def staff_entry_to_record(entry: StaffAttendanceEntry) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": entry.entry_id,
        "staffId": entry.staff_id,
        "staffName": entry.staff_name,
        "date": entry.date.isoformat(),
        "dayRate": money_str(entry.day_rate),
        "createdAt": entry.created_at,
        "createdBy": entry.created_by,
    }
    if entry.notes:
        record["notes"] = entry.notes
    return record
