from __future__ import annotations

from decimal import Decimal

from ...staff.model import StaffAttendanceEntry
from .base import DayRateCalculator


class StandardDayRateCalculator(DayRateCalculator):
    """Standard rule: a checked-in day pays the rate recorded on the entry.

    The staff member's current rate is never consulted.
    """

    def amount_for(self, entry: StaffAttendanceEntry) -> Decimal:
        return entry.day_rate
