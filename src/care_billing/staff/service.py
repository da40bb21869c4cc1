from __future__ import annotations

from datetime import date
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.logging_config import get_logger
from ..common.validators import require_non_empty
from ..core.exceptions import StoreConflict, ValidationError
from .model import StaffAttendanceEntry
from .repository import StaffAttendanceRepository, StaffRepository

logger = get_logger("staff.register")


def staff_entry_id_for(staff_id: str, day: date) -> str:
    return f"{staff_id}:{day.isoformat()}"


class StaffRegister:
    """Use case: check a staff member in for a day at their current day rate."""

    def __init__(
        self,
        staff: StaffRepository,
        entries: StaffAttendanceRepository,
        *,
        clock: Callable[[], Any] = now_utc,
    ):
        self._staff = staff
        self._entries = entries
        self._clock = clock

    def check_in(
        self,
        staff_id: str,
        day: date,
        *,
        created_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> StaffAttendanceEntry:
        staff_id = require_non_empty(staff_id, "staffId")
        member = self._staff.get_by_id(staff_id)
        if not member:
            raise ValidationError("Staff member not found")

        if self._entries.get_for_staff_and_date(staff_id, day):
            raise ValidationError("An entry already exists for this staff member on this date")

        entry = StaffAttendanceEntry(
            entry_id=staff_entry_id_for(staff_id, day),
            staff_id=staff_id,
            staff_name=member.name,
            date=day,
            day_rate=member.day_rate,
            notes=(notes or "").strip() or None,
            created_at=self._clock().isoformat(),
            created_by=created_by,
        )
        try:
            self._entries.create(entry)
        except StoreConflict:
            raise ValidationError("An entry already exists for this staff member on this date")

        logger.info("staff register entry created for %s on %s at %s", entry.staff_name, day, entry.day_rate)
        return entry

    def bulk_check_in(self, rows: Sequence[Mapping[str, Any]], *, created_by: Optional[str] = None) -> list[StaffAttendanceEntry]:
        """Check in many rows; unknown staff, bad rows and duplicates are skipped."""

        if not rows:
            raise ValidationError("Entries array is required")

        created: list[StaffAttendanceEntry] = []
        for row in rows:
            if not row.get("staffId") or not row.get("date"):
                continue
            try:
                created.append(
                    self.check_in(
                        str(row["staffId"]),
                        parse_iso_date(row["date"]),
                        created_by=created_by,
                        notes=row.get("notes"),
                    )
                )
            except ValidationError as exc:
                logger.info("staff register row skipped (%s): %s", row.get("staffId"), exc)
        logger.info("bulk staff register: %d created of %d rows", len(created), len(rows))
        return created

    def list_for_date(self, day: date) -> Sequence[StaffAttendanceEntry]:
        return self._entries.list_for_date(day)
