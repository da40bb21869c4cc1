from __future__ import annotations

from typing import Optional, Sequence

from ..common.logging_config import get_logger
from ..core.period import BillingPeriod
from ..staff.model import StaffProfile
from ..staff.repository import StaffAttendanceRepository
from .calculator.base import DayRateCalculator
from .calculator.standard_calculator import StandardDayRateCalculator
from .model import StaffReconciliation

logger = get_logger("payroll.reconciliation")


class StaffAttendanceReconciler:
    def __init__(
        self,
        entries: StaffAttendanceRepository,
        *,
        calculator: Optional[DayRateCalculator] = None,
    ):
        self._entries = entries
        self._calculator = calculator or StandardDayRateCalculator()

    def reconcile(self, year: int, month: int, active_staff: Sequence[StaffProfile]) -> list[StaffReconciliation]:
        period = BillingPeriod.for_month(year, month)
        rows = self._entries.list_between(period.start, period.end)

        summary_map: dict[str, StaffReconciliation] = {}

        # Seed every active member so a month without attendance is visible.
        for staff in active_staff:
            summary_map[staff.staff_id] = StaffReconciliation(
                staff_id=staff.staff_id,
                staff_name=staff.name,
                day_rate=staff.day_rate,
            )

        for r in sorted(rows, key=lambda e: e.date):
            s = summary_map.get(r.staff_id)
            if not s:
                # Deactivated staff still have history: build the row from the entry itself.
                s = StaffReconciliation(staff_id=r.staff_id, staff_name=r.staff_name, day_rate=r.day_rate)
                summary_map[r.staff_id] = s
            s.days_worked += 1
            s.total_amount += self._calculator.amount_for(r)
            s.entries.append(r)

        summary = [s for s in summary_map.values() if s.days_worked > 0]
        summary.sort(key=lambda x: (x.staff_name.casefold(), x.staff_id))
        logger.info("staff reconciliation for %s: %d staff, %d entries", period.label, len(summary), len(rows))
        return summary
