from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..clients.model import BillingAddress
from ..common.datetime_utils import format_optional_date, parse_iso_date, parse_optional_date
from ..common.validators import money_str, to_decimal
from ..core.enums import InvoiceStatus
from ..core.period import BillingPeriod


@dataclass(frozen=True)
class LineItem:
    date: date
    description: str
    amount: Decimal


@dataclass(frozen=True)
class Invoice:
    """Monthly invoice for one client.

    Billing address and email are snapshots taken at generation time.
    """

    invoice_id: str
    invoice_number: str
    client_id: str
    client_name: str
    billing_email: str
    billing_address: BillingAddress
    invoice_date: date
    due_date: date
    period_start: date
    period_end: date
    line_items: tuple[LineItem, ...]
    subtotal: Decimal
    total: Decimal
    status: InvoiceStatus = InvoiceStatus.DRAFT
    paid_date: Optional[date] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class GenerationFailure:
    client_id: str
    client_name: str
    error: str


@dataclass(frozen=True)
class GenerationResult:
    """Invoices for a period (existing and new, in client order) plus per-client failures."""

    period: BillingPeriod
    invoices: list[Invoice] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)
    created: int = 0
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def message(self) -> str:
        msg = f"Generated {len(self.invoices)} invoices for {self.period.label}"
        if self.failures:
            msg += f" ({len(self.failures)} failed)"
        return msg


def invoice_to_record(invoice: Invoice) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": invoice.invoice_id,
        "invoiceNumber": invoice.invoice_number,
        "clientId": invoice.client_id,
        "clientName": invoice.client_name,
        "billingEmail": invoice.billing_email,
        "billingAddress": invoice.billing_address.to_record(),
        "invoiceDate": invoice.invoice_date.isoformat(),
        "dueDate": invoice.due_date.isoformat(),
        "periodStart": invoice.period_start.isoformat(),
        "periodEnd": invoice.period_end.isoformat(),
        "lineItems": [
            {"date": li.date.isoformat(), "description": li.description, "amount": money_str(li.amount)}
            for li in invoice.line_items
        ],
        "subtotal": money_str(invoice.subtotal),
        "total": money_str(invoice.total),
        "status": invoice.status.value,
        "createdAt": invoice.created_at,
        "updatedAt": invoice.updated_at,
    }
    if invoice.paid_date:
        record["paidDate"] = format_optional_date(invoice.paid_date)
    return record


def invoice_from_record(record: Mapping[str, Any]) -> Invoice:
    return Invoice(
        invoice_id=str(record["id"]),
        invoice_number=str(record["invoiceNumber"]),
        client_id=str(record["clientId"]),
        client_name=str(record.get("clientName") or ""),
        billing_email=str(record.get("billingEmail") or ""),
        billing_address=BillingAddress.from_record(record.get("billingAddress")) or BillingAddress(),
        invoice_date=parse_iso_date(record["invoiceDate"]),
        due_date=parse_iso_date(record["dueDate"]),
        period_start=parse_iso_date(record["periodStart"]),
        period_end=parse_iso_date(record["periodEnd"]),
        line_items=tuple(
            LineItem(
                date=parse_iso_date(li["date"]),
                description=str(li.get("description") or ""),
                amount=to_decimal(li.get("amount") or 0, "amount"),
            )
            for li in record.get("lineItems") or []
        ),
        subtotal=to_decimal(record.get("subtotal") or 0, "subtotal"),
        total=to_decimal(record.get("total") or 0, "total"),
        status=InvoiceStatus(record.get("status") or InvoiceStatus.DRAFT.value),
        paid_date=parse_optional_date(record.get("paidDate")),
        created_at=record.get("createdAt"),
        updated_at=record.get("updatedAt"),
    )
