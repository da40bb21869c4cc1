from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from care_billing.core.exceptions import NumberAllocationExhausted, ValidationError
from care_billing.invoices.numbering import InvoiceNumberAllocator, base_invoice_number, candidate_numbers
from care_billing.invoices.repository import InvoiceRepository
from care_billing.store import COLLECTIONS, InMemoryRecordStore

MARCH = date(2025, 3, 1)
NOW = datetime(2025, 4, 1, 9, 0, tzinfo=timezone.utc)


def _allocator(store, **kwargs):
    return InvoiceNumberAllocator(store, InvoiceRepository(store), clock=lambda: NOW, **kwargs)


def test_base_number_uses_period_and_initials():
    assert base_invoice_number(MARCH, "Anna", "Lee") == "202503-AnLe"
    assert base_invoice_number(MARCH, "Jo-Ann", "O'Brien") == "202503-JoOB"


def test_base_number_requires_names():
    with pytest.raises(ValidationError):
        base_invoice_number(MARCH, "Anna", "")
    with pytest.raises(ValidationError):
        base_invoice_number(MARCH, "--", "Lee")


def test_candidates_start_at_base_then_suffix():
    assert list(candidate_numbers("202503-AnLe", 3)) == ["202503-AnLe", "202503-AnLe-1", "202503-AnLe-2"]


def test_colliding_initials_get_suffixes():
    store = InMemoryRecordStore()
    allocator = _allocator(store)

    first = allocator.allocate(MARCH, "Anna", "Lee", owner_id="c1")
    second = allocator.allocate(MARCH, "Andrew", "Leigh", owner_id="c2")
    third = allocator.allocate(MARCH, "Ann", "Lewis", owner_id="c3")

    assert (first, second, third) == ("202503-AnLe", "202503-AnLe-1", "202503-AnLe-2")
    assert store.count(COLLECTIONS.INVOICE_NUMBERS) == 3


def test_legacy_invoice_without_reservation_blocks_number():
    store = InMemoryRecordStore()
    store.create(
        COLLECTIONS.INVOICES,
        {
            "id": "old",
            "invoiceNumber": "202503-AnLe",
            "clientId": "c9",
            "invoiceDate": "2025-04-01",
            "dueDate": "2025-04-15",
            "periodStart": "2025-03-01",
            "periodEnd": "2025-03-31",
            "total": 80,
            "status": "sent",
        },
    )

    assert _allocator(store).allocate(MARCH, "Anna", "Lee", owner_id="c1") == "202503-AnLe-1"


def test_exhaustion_raises_after_max_attempts():
    store = InMemoryRecordStore()
    allocator = _allocator(store, max_attempts=2)
    allocator.allocate(MARCH, "Anna", "Lee", owner_id="c1")
    allocator.allocate(MARCH, "Andrew", "Leigh", owner_id="c2")

    with pytest.raises(NumberAllocationExhausted) as exc:
        allocator.allocate(MARCH, "Ann", "Lewis", owner_id="c3")

    assert exc.value.attempts == 2
    assert exc.value.base_number == "202503-AnLe"


def test_released_number_can_be_claimed_again():
    store = InMemoryRecordStore()
    allocator = _allocator(store)
    number = allocator.allocate(MARCH, "Anna", "Lee", owner_id="c1")

    allocator.release(number)
    allocator.release(number)

    assert allocator.allocate(MARCH, "Anna", "Lee", owner_id="c1") == number
