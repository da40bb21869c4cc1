"""Seed demo clients, staff and one month of register entries.

Writes through the configured store (STORE_BACKEND), so point it at MySQL to
get data you can run ``care-billing generate-invoices`` against.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from datetime import date, timedelta
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from care_billing.api import CallerContext  # noqa: E402
from care_billing.config import get_settings_module  # noqa: E402
from care_billing.container import build_container_from_settings  # noqa: E402
from care_billing.core.enums import Role  # noqa: E402
from care_billing.core.exceptions import StoreConflict  # noqa: E402
from care_billing.store.repository import COLLECTIONS  # noqa: E402

DEMO_CLIENTS = [
    {
        "id": "client-anna-lee",
        "firstName": "Anna",
        "surname": "Lee",
        "concatName": "Anna Lee",
        "addressLine1": "1 High Street",
        "postcode": "AB1 2CD",
        "email": "anna.lee@example.com",
        "isActive": True,
    },
    {
        "id": "client-andrew-leigh",
        "firstName": "Andrew",
        "surname": "Leigh",
        "concatName": "Andrew Leigh",
        "addressLine1": "2 Mill Lane",
        "postcode": "AB1 3EF",
        "useSeparateBillingAddress": True,
        "billingAddress": {"line1": "PO Box 7", "postcode": "AB9 9ZZ"},
        "invoiceEmail": "accounts@leigh.example.com",
        "isActive": True,
    },
]

DEMO_STAFF = [
    {"id": "staff-sam", "firstName": "Sam", "lastName": "Taylor", "dayRate": "90.00", "isActive": True},
    {"id": "staff-jo", "firstName": "Jo", "lastName": "Brown", "dayRate": "85.00", "isActive": True},
]


def _weekdays(year: int, month: int):
    day = date(year, month, 1)
    while day.month == month:
        if day.weekday() < 5:
            yield day
        day += timedelta(days=1)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo billing data")
    parser.add_argument("year", type=int)
    parser.add_argument("month", type=int)
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container_from_settings(settings)
    store = container.store

    for rec in DEMO_CLIENTS:
        try:
            store.create(COLLECTIONS.CLIENTS, rec)
        except StoreConflict:
            pass
    for rec in DEMO_STAFF:
        try:
            store.create(COLLECTIONS.STAFF, rec)
        except StoreConflict:
            pass

    caller = CallerContext(user_id="seed", role=Role.ADMIN)
    rows = []
    staff_rows = []
    for day in _weekdays(args.year, args.month):
        for client in DEMO_CLIENTS:
            rows.append({"clientId": client["id"], "clientName": client["concatName"], "date": day.isoformat()})
        for member in DEMO_STAFF:
            staff_rows.append({"staffId": member["id"], "date": day.isoformat()})

    result = container.api.record_attendance_bulk(caller=caller, rows=rows)
    staff_entries = container.api.staff_check_in_bulk(caller=caller, rows=staff_rows)

    print(
        f"OK: Seeded {len(DEMO_CLIENTS)} clients, {len(DEMO_STAFF)} staff, "
        f"{result.created + result.updated} register entries, {len(staff_entries)} staff entries"
    )


if __name__ == "__main__":
    main()
