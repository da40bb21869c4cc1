from __future__ import annotations

from typing import Iterable

from ..attendance.model import AttendanceEntry
from ..core.enums import PaymentType
from ..core.period import BillingPeriod


def is_invoiceable(entry: AttendanceEntry, period: BillingPeriod) -> bool:
    """In the period, billable, and paid by invoice rather than cash."""

    return period.contains(entry.date) and entry.billable and entry.payment_type == PaymentType.INVOICE


class BillingPeriodAggregator:
    def select(self, entries: Iterable[AttendanceEntry], period: BillingPeriod) -> list[AttendanceEntry]:
        return [e for e in entries if is_invoiceable(e, period)]

    def aggregate(self, entries: Iterable[AttendanceEntry]) -> dict[str, list[AttendanceEntry]]:
        """Group entries by client, each list in date order.

        Clients without entries simply do not appear.
        """

        grouped: dict[str, list[AttendanceEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.client_id, []).append(entry)
        for items in grouped.values():
            items.sort(key=lambda e: e.date)
        return grouped
