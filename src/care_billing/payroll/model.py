from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from ..staff.model import StaffAttendanceEntry


@dataclass
class StaffReconciliation:
    """Read-model: one staff member's worked days for a month (never persisted)."""

    staff_id: str
    staff_name: str
    day_rate: Decimal
    days_worked: int = 0
    total_amount: Decimal = Decimal("0")
    entries: list[StaffAttendanceEntry] = field(default_factory=list)
