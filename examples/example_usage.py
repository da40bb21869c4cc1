"""Example: drive the billing core without any HTTP layer, on the in-memory store."""

from datetime import date
from decimal import Decimal

from care_billing.api import CallerContext
from care_billing.container import build_container
from care_billing.core.enums import Role
from care_billing.store.repository import COLLECTIONS


def main():
    container = build_container(backend="memory")
    container.store.create(
        COLLECTIONS.CLIENTS,
        {"id": "c1", "firstName": "Anna", "surname": "Lee", "concatName": "Anna Lee", "isActive": True},
    )

    admin = CallerContext(user_id="admin-1", role=Role.ADMIN)
    for day, status in [(3, "present"), (4, "present"), (5, "late-cancellation"), (6, "present"), (7, "absent")]:
        container.api.record_attendance(
            caller=admin,
            payload={"clientId": "c1", "clientName": "Anna Lee", "date": date(2025, 3, day).isoformat(), "attendanceStatus": status},
        )

    result = container.api.generate_invoices(caller=admin, year=2025, month=3)
    invoice = result.invoices[0]
    print(result.message)
    print(invoice.invoice_number, invoice.total)
    assert invoice.total == Decimal("160")


if __name__ == "__main__":
    main()
