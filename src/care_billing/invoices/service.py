from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

from ..attendance.model import AttendanceEntry
from ..attendance.repository import AttendanceRepository
from ..clients.identity import BillingIdentityResolver
from ..clients.model import ClientBillingProfile
from ..common.datetime_utils import format_session_date, now_utc
from ..common.logging_config import get_logger
from ..core.constants import PAYMENT_TERMS_DAYS
from ..core.enums import AttendanceStatus, InvoiceStatus
from ..core.exceptions import NumberAllocationExhausted, StoreConflict, ValidationError
from ..core.period import BillingPeriod
from .aggregator import BillingPeriodAggregator
from .model import GenerationFailure, GenerationResult, Invoice, LineItem
from .numbering import InvoiceNumberAllocator
from .repository import InvoiceRepository

logger = get_logger("invoices.generator")

# Errors that only affect the client being processed; the batch carries on.
_PER_CLIENT_ERRORS = (NumberAllocationExhausted, StoreConflict, ValidationError)


def invoice_id_for(client_id: str, period_start: date) -> str:
    # Deterministic so the store rejects a second invoice for the same client and month.
    return f"{client_id}:{period_start.isoformat()}"


def build_line_items(entries: Sequence[AttendanceEntry]) -> tuple[LineItem, ...]:
    items = []
    for entry in entries:
        label = "Late cancellation" if entry.attendance_status == AttendanceStatus.LATE_CANCELLATION else "Session"
        items.append(
            LineItem(
                date=entry.date,
                description=f"{label} - {format_session_date(entry.date)}",
                amount=entry.payment,
            )
        )
    return tuple(items)


class InvoiceGenerator:
    """Use case: turn a month of register entries into one draft invoice per client.

    Re-running for a period returns the invoices already there. ``regenerate``
    first deletes every invoice of the period, whatever its status (paid
    included), and builds them again from the stored register entries.
    """

    def __init__(
        self,
        invoices: InvoiceRepository,
        attendance: AttendanceRepository,
        *,
        allocator: InvoiceNumberAllocator,
        aggregator: Optional[BillingPeriodAggregator] = None,
        identity: Optional[BillingIdentityResolver] = None,
        payment_terms_days: int = PAYMENT_TERMS_DAYS,
        clock: Callable[[], Any] = now_utc,
    ):
        self._invoices = invoices
        self._attendance = attendance
        self._allocator = allocator
        self._aggregator = aggregator or BillingPeriodAggregator()
        self._identity = identity or BillingIdentityResolver()
        self._payment_terms_days = int(payment_terms_days)
        self._clock = clock

    def generate(
        self,
        year: int,
        month: int,
        *,
        regenerate: bool = False,
        active_clients: Sequence[ClientBillingProfile],
        today: Optional[date] = None,
    ) -> GenerationResult:
        period = BillingPeriod.for_month(year, month)
        now = self._clock()
        today = today or now.date()

        if regenerate:
            self._delete_period(period)

        entries = self._attendance.list_between(period.start, period.end)
        by_client = self._aggregator.aggregate(self._aggregator.select(entries, period))

        invoices: list[Invoice] = []
        failures: list[GenerationFailure] = []
        created = skipped = 0

        for client in active_clients:
            client_entries = by_client.get(client.client_id)
            if not client_entries:
                continue

            try:
                invoice, is_new = self._invoice_for_client(
                    client, client_entries, period, regenerate=regenerate, today=today, stamp=now.isoformat()
                )
            except _PER_CLIENT_ERRORS as exc:
                logger.error("invoice for %s (%s) failed: %s", client.name, client.client_id, exc)
                failures.append(GenerationFailure(client_id=client.client_id, client_name=client.name, error=str(exc)))
                continue

            invoices.append(invoice)
            if is_new:
                created += 1
            else:
                skipped += 1

        result = GenerationResult(period=period, invoices=invoices, failures=failures, created=created, skipped=skipped)
        logger.info("%s (%d new, %d existing)", result.message, created, skipped)
        return result

    def _delete_period(self, period: BillingPeriod) -> None:
        for inv in self._invoices.list_for_period(period.start):
            self._invoices.delete(inv)
            self._allocator.release(inv.invoice_number)
            logger.info("deleted invoice %s (%s) for regeneration", inv.invoice_number, inv.status.value)

    def _invoice_for_client(
        self,
        client: ClientBillingProfile,
        entries: Sequence[AttendanceEntry],
        period: BillingPeriod,
        *,
        regenerate: bool,
        today: date,
        stamp: str,
    ) -> tuple[Invoice, bool]:
        if not regenerate:
            existing = self._invoices.find_for_client_period(client.client_id, period.start)
            if existing:
                logger.info("invoice for %s already exists for %s, skipping", client.name, period.label)
                return existing, False

        identity = self._identity.resolve(client)
        number = self._allocator.allocate(period.start, client.first_name, client.surname, owner_id=client.client_id)

        line_items = build_line_items(entries)
        subtotal = sum((li.amount for li in line_items), Decimal("0"))
        invoice = Invoice(
            invoice_id=invoice_id_for(client.client_id, period.start),
            invoice_number=number,
            client_id=client.client_id,
            client_name=client.name,
            billing_email=identity.email,
            billing_address=identity.address,
            invoice_date=today,
            due_date=today + timedelta(days=self._payment_terms_days),
            period_start=period.start,
            period_end=period.end,
            line_items=line_items,
            subtotal=subtotal,
            total=subtotal,
            status=InvoiceStatus.DRAFT,
            created_at=stamp,
            updated_at=stamp,
        )

        try:
            self._invoices.create(invoice)
        except StoreConflict:
            # A concurrent run billed this client first: hand back its invoice.
            self._allocator.release(number)
            winner = self._invoices.find_for_client_period(client.client_id, period.start)
            if winner is None:
                raise
            logger.warning("invoice for %s was created concurrently, using %s", client.name, winner.invoice_number)
            return winner, False
        except Exception:
            # The invoice was not written; the number must not stay reserved.
            self._allocator.release(number)
            raise

        logger.info("generated invoice %s for %s: %s", number, client.name, subtotal)
        return invoice, True
