from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from .exceptions import ValidationError


@dataclass(frozen=True)
class BillingPeriod:
    """A calendar month identified by its first and last day."""

    year: int
    month: int
    start: date
    end: date

    @classmethod
    def for_month(cls, year: int, month: int) -> "BillingPeriod":
        if isinstance(year, bool) or isinstance(month, bool):
            raise ValidationError("Year and month are required")
        try:
            year = int(year)
            month = int(month)
        except (TypeError, ValueError):
            raise ValidationError("Year and month are required")
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")
        if not 1 <= year <= 9999:
            raise ValidationError(f"Year out of range: {year}")
        last_day = calendar.monthrange(year, month)[1]
        return cls(year=year, month=month, start=date(year, month, 1), end=date(year, month, last_day))

    @property
    def code(self) -> str:
        """``YYYYMM`` form used as the invoice number prefix."""
        return f"{self.year:04d}{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end
