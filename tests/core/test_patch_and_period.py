from __future__ import annotations

from datetime import date

import pytest

from care_billing.core.exceptions import ValidationError
from care_billing.core.patch import UNSET, Clear, Set, from_loose, resolve
from care_billing.core.period import BillingPeriod


def test_resolve_keeps_current_when_unset():
    assert resolve(UNSET, "kept") == "kept"
    assert not UNSET


def test_resolve_clear_and_set():
    assert resolve(Clear(), "old") is None
    assert resolve(Set("new"), "old") == "new"
    # An explicit zero is a value, not a clear.
    assert resolve(Set(0), 5) == 0


def test_from_loose_maps_clear_condition():
    assert from_loose(None) == Clear()
    assert from_loose(0, clear_when=lambda v: v is None or v == 0) == Clear()
    assert from_loose(12) == Set(12)
    assert from_loose(UNSET) is UNSET


def test_period_handles_month_lengths():
    feb_leap = BillingPeriod.for_month(2024, 2)
    assert feb_leap.start == date(2024, 2, 1)
    assert feb_leap.end == date(2024, 2, 29)

    assert BillingPeriod.for_month(2025, 2).end == date(2025, 2, 28)
    assert BillingPeriod.for_month(2025, 12).end == date(2025, 12, 31)


def test_period_code_label_and_contains():
    period = BillingPeriod.for_month("2025", "3")
    assert period.code == "202503"
    assert period.label == "March 2025"
    assert period.contains(date(2025, 3, 31))
    assert not period.contains(date(2025, 4, 1))


@pytest.mark.parametrize("year,month", [(2025, 0), (2025, 13), (None, 3), ("abc", 3), (True, 3)])
def test_period_rejects_invalid_input(year, month):
    with pytest.raises(ValidationError):
        BillingPeriod.for_month(year, month)
