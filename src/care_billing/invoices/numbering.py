from __future__ import annotations

from datetime import date
from typing import Any, Callable, Iterator, Optional

from ..common.datetime_utils import now_utc
from ..common.logging_config import get_logger
from ..core.constants import MAX_NUMBER_ATTEMPTS
from ..core.exceptions import NumberAllocationExhausted, StoreConflict, StoreNotFound, ValidationError
from ..store.repository import COLLECTIONS, RecordStore
from .repository import InvoiceRepository

logger = get_logger("invoices.numbering")


def _initials(value: str) -> str:
    return "".join(ch for ch in (value or "") if ch.isalnum())[:2]


def base_invoice_number(period_start: date, first_name: str, surname: str) -> str:
    """``YYYYMM-`` plus the first two letters of first name and surname."""

    first = _initials(first_name)
    last = _initials(surname)
    if not first or not last:
        raise ValidationError("Client first name and surname are required to number an invoice")
    return f"{period_start:%Y%m}-{first}{last}"


def candidate_numbers(base: str, max_attempts: int) -> Iterator[str]:
    yield base
    for n in range(1, max_attempts):
        yield f"{base}-{n}"


class InvoiceNumberAllocator:
    """Claims a globally unique invoice number.

    Each candidate is claimed by creating a reservation document keyed by the
    number itself, so two concurrent allocations of the same candidate end in
    a StoreConflict for one of them instead of a duplicate. Invoices written
    before reservations existed are detected through the invoice collection.
    """

    collection = COLLECTIONS.INVOICE_NUMBERS

    def __init__(
        self,
        store: RecordStore,
        invoices: InvoiceRepository,
        *,
        max_attempts: int = MAX_NUMBER_ATTEMPTS,
        clock: Callable[[], Any] = now_utc,
    ):
        self._store = store
        self._invoices = invoices
        self._max_attempts = int(max_attempts)
        self._clock = clock

    def allocate(self, period_start: date, first_name: str, surname: str, *, owner_id: Optional[str] = None) -> str:
        base = base_invoice_number(period_start, first_name, surname)
        for candidate in candidate_numbers(base, self._max_attempts):
            if self._reserve(candidate, owner_id):
                return candidate
            logger.info("invoice number %s already taken, trying next suffix", candidate)

        logger.error("no free invoice number for %s after %d attempts", base, self._max_attempts)
        raise NumberAllocationExhausted(base, self._max_attempts)

    def _reserve(self, number: str, owner_id: Optional[str]) -> bool:
        try:
            self._store.create(
                self.collection,
                {"id": number, "ownerId": owner_id, "reservedAt": self._clock().isoformat()},
            )
        except StoreConflict:
            return False
        # Legacy invoice holding this number without a reservation: keep the
        # reservation we just made (it now guards that invoice) and move on.
        legacy = self._invoices.find_by_number(number)
        if legacy and legacy.client_id != owner_id:
            return False
        return True

    def release(self, number: str) -> None:
        try:
            self._store.delete(self.collection, number, number)
        except StoreNotFound:
            logger.debug("invoice number %s had no reservation", number)
