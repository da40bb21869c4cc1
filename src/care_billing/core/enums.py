from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for authorization."""

    ADMIN = "admin"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Per-day attendance state stored on register entries."""

    PRESENT = "present"
    LATE_CANCELLATION = "late-cancellation"
    ABSENT = "absent"

    @property
    def billable(self) -> bool:
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.LATE_CANCELLATION)


class PaymentType(str, Enum):
    CASH = "cash"
    INVOICE = "invoice"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle. Generation only ever creates DRAFT invoices."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"
