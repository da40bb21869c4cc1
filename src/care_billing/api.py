from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from .attendance.model import AttendanceEntry, BulkUpsertResult
from .attendance.service import AttendanceRegister
from .clients.repository import ClientRepository
from .common.datetime_utils import parse_iso_date, parse_optional_date
from .common.logging_config import get_logger
from .core.constants import DEFAULT_REGISTER_DAYS
from .core.enums import InvoiceStatus, Role
from .core.exceptions import AuthorizationError, ValidationError
from .invoices.model import GenerationResult, Invoice
from .invoices.service import InvoiceGenerator
from .invoices.status import InvoiceStatusService
from .payroll.model import StaffReconciliation
from .payroll.service import StaffAttendanceReconciler
from .staff.model import StaffAttendanceEntry
from .staff.repository import StaffRepository
from .staff.service import StaffRegister

logger = get_logger("api")


@dataclass(frozen=True)
class CallerContext:
    """Identity of whoever is calling, as established by the outer HTTP layer."""

    user_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def _require_admin(caller: CallerContext) -> None:
    if caller is None or not caller.is_admin:
        raise AuthorizationError("Admin access required")


def _require_caller(caller: CallerContext) -> None:
    if caller is None or not caller.user_id:
        raise AuthorizationError("Authentication required")


class BillingApi:
    """Inbound operations of the billing core.

    Billing and reconciliation are admin-only. Register writes are open to
    any authenticated caller and are stamped with the caller id.
    """

    def __init__(
        self,
        *,
        clients: ClientRepository,
        staff: StaffRepository,
        attendance_register: AttendanceRegister,
        invoice_generator: InvoiceGenerator,
        invoice_status: InvoiceStatusService,
        staff_register: StaffRegister,
        staff_reconciler: StaffAttendanceReconciler,
    ):
        self._clients = clients
        self._staff = staff
        self._attendance_register = attendance_register
        self._invoice_generator = invoice_generator
        self._invoice_status = invoice_status
        self._staff_register = staff_register
        self._staff_reconciler = staff_reconciler

    # --- invoices ---

    def generate_invoices(
        self,
        *,
        caller: CallerContext,
        year: int,
        month: int,
        regenerate: bool = False,
    ) -> GenerationResult:
        _require_admin(caller)
        active_clients = self._clients.list_active()
        logger.info(
            "invoice generation for %s-%s requested by %s (regenerate=%s, %d active clients)",
            year,
            month,
            caller.user_id,
            regenerate,
            len(active_clients),
        )
        return self._invoice_generator.generate(year, month, regenerate=bool(regenerate), active_clients=active_clients)

    def list_invoices(self, *, caller: CallerContext) -> Sequence[Invoice]:
        _require_admin(caller)
        return self._invoice_status.list_all()

    def get_invoice(self, *, caller: CallerContext, invoice_id: str) -> Invoice:
        _require_admin(caller)
        return self._invoice_status.get(invoice_id)

    def update_invoice_status(
        self,
        *,
        caller: CallerContext,
        invoice_id: str,
        status: InvoiceStatus | str,
        paid_date: date | str | None = None,
    ) -> Invoice:
        _require_admin(caller)
        return self._invoice_status.update_status(invoice_id, status, paid_date=parse_optional_date(paid_date))

    # --- staff ---

    def get_staff_reconciliation(self, *, caller: CallerContext, year: int, month: int) -> list[StaffReconciliation]:
        _require_admin(caller)
        return self._staff_reconciler.reconcile(year, month, self._staff.list_active())

    def staff_check_in(
        self,
        *,
        caller: CallerContext,
        staff_id: str,
        day: date | str,
        notes: Optional[str] = None,
    ) -> StaffAttendanceEntry:
        _require_caller(caller)
        return self._staff_register.check_in(
            staff_id,
            parse_iso_date(day),
            created_by=caller.user_id,
            notes=notes,
        )

    def staff_check_in_bulk(
        self,
        *,
        caller: CallerContext,
        rows: Sequence[Mapping[str, Any]],
    ) -> list[StaffAttendanceEntry]:
        _require_caller(caller)
        return self._staff_register.bulk_check_in(rows, created_by=caller.user_id)

    # --- register ---

    def record_attendance(self, *, caller: CallerContext, payload: Mapping[str, Any]) -> AttendanceEntry:
        _require_caller(caller)
        return self._attendance_register.upsert_payload(payload, created_by=caller.user_id)

    def record_attendance_bulk(
        self,
        *,
        caller: CallerContext,
        rows: Sequence[Mapping[str, Any]],
    ) -> BulkUpsertResult:
        _require_caller(caller)
        return self._attendance_register.bulk_upsert(rows, created_by=caller.user_id)

    def record_cash_payment(
        self,
        *,
        caller: CallerContext,
        entry_id: str,
        day: date | str,
        paid_on: date | str | None = None,
    ) -> AttendanceEntry:
        _require_admin(caller)
        if not entry_id:
            raise ValidationError("Register entry id is required")
        return self._attendance_register.record_cash_payment(
            entry_id,
            parse_iso_date(day),
            paid_by=caller.user_id,
            paid_on=parse_optional_date(paid_on),
        )

    def list_register(self, *, caller: CallerContext, day: date | str) -> Sequence[AttendanceEntry]:
        _require_caller(caller)
        return self._attendance_register.list_for_date(parse_iso_date(day))

    def list_recent_register(self, *, caller: CallerContext, days: int = DEFAULT_REGISTER_DAYS) -> Sequence[AttendanceEntry]:
        _require_caller(caller)
        return self._attendance_register.list_recent(days=int(days))
