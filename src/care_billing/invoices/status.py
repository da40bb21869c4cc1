from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.logging_config import get_logger
from ..core.enums import InvoiceStatus
from ..core.exceptions import InvalidStatusTransition, ValidationError
from .model import Invoice
from .repository import InvoiceRepository

logger = get_logger("invoices.status")

ALLOWED_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELLED}),
    InvoiceStatus.SENT: frozenset({InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED}),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}


def can_transition(current: InvoiceStatus, target: InvoiceStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


class InvoiceStatusService:
    """Use case: move an invoice through its lifecycle after generation."""

    def __init__(self, invoices: InvoiceRepository, *, clock: Callable[[], Any] = now_utc):
        self._invoices = invoices
        self._clock = clock

    def get(self, invoice_id: str) -> Invoice:
        invoice = self._invoices.find_by_id(invoice_id)
        if not invoice:
            raise ValidationError("Invoice not found")
        return invoice

    def list_all(self) -> Sequence[Invoice]:
        return self._invoices.list_all()

    def update_status(
        self,
        invoice_id: str,
        status: InvoiceStatus | str,
        *,
        paid_date: Optional[date] = None,
    ) -> Invoice:
        if not status:
            raise ValidationError("Status is required")
        try:
            target = InvoiceStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown invoice status: {status}")

        invoice = self.get(invoice_id)
        if invoice.status == target:
            return invoice
        if not can_transition(invoice.status, target):
            raise InvalidStatusTransition(
                f"Invoice {invoice.invoice_number} cannot move from {invoice.status.value} to {target.value}"
            )

        now = self._clock()
        updated = replace(
            invoice,
            status=target,
            paid_date=(paid_date or now.date()) if target == InvoiceStatus.PAID else invoice.paid_date,
            updated_at=now.isoformat(),
        )
        self._invoices.replace(updated)
        logger.info("invoice %s status updated to %s", invoice.invoice_number, target.value)
        return updated
