from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...staff.model import StaffAttendanceEntry


class DayRateCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def amount_for(self, entry: StaffAttendanceEntry) -> Decimal:
        raise NotImplementedError
