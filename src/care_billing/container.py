from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .api import BillingApi
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceRegister
from .clients.identity import BillingIdentityResolver
from .clients.repository import ClientRepository
from .common.logging_config import get_logger
from .core.constants import DEFAULT_SESSION_PAYMENT, PAYMENT_TERMS_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .invoices.aggregator import BillingPeriodAggregator
from .invoices.numbering import InvoiceNumberAllocator
from .invoices.repository import InvoiceRepository
from .invoices.service import InvoiceGenerator
from .invoices.status import InvoiceStatusService
from .payroll.service import StaffAttendanceReconciler
from .staff.repository import StaffAttendanceRepository, StaffRepository
from .staff.service import StaffRegister
from .store.memory_store import InMemoryRecordStore
from .store.mysql_store import MySQLRecordStore
from .store.repository import RecordStore

logger = get_logger("container")


@dataclass(frozen=True)
class Container:
    store: RecordStore

    attendance_repo: AttendanceRepository
    clients_repo: ClientRepository
    invoices_repo: InvoiceRepository
    staff_repo: StaffRepository
    staff_register_repo: StaffAttendanceRepository

    attendance_register: AttendanceRegister
    invoice_generator: InvoiceGenerator
    invoice_status_service: InvoiceStatusService
    staff_register: StaffRegister
    staff_reconciler: StaffAttendanceReconciler

    api: BillingApi


def build_store(*, backend: str = "memory", db_config: Optional[dict] = None) -> RecordStore:
    backend = (backend or "memory").lower()
    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
        return MySQLRecordStore(conn)
    raise ValueError(f"Unknown STORE_BACKEND: {backend}")


def build_container(
    *,
    store: Optional[RecordStore] = None,
    backend: str = "memory",
    db_config: Optional[dict] = None,
    payment_terms_days: int = PAYMENT_TERMS_DAYS,
    default_session_payment: Decimal | str = DEFAULT_SESSION_PAYMENT,
) -> Container:
    store = store if store is not None else build_store(backend=backend, db_config=db_config)
    logger.debug("building container on %s", type(store).__name__)

    attendance_repo = AttendanceRepository(store)
    clients_repo = ClientRepository(store)
    invoices_repo = InvoiceRepository(store)
    staff_repo = StaffRepository(store)
    staff_register_repo = StaffAttendanceRepository(store)

    attendance_register = AttendanceRegister(attendance_repo, default_payment=Decimal(str(default_session_payment)))
    invoice_generator = InvoiceGenerator(
        invoices_repo,
        attendance_repo,
        allocator=InvoiceNumberAllocator(store, invoices_repo),
        aggregator=BillingPeriodAggregator(),
        identity=BillingIdentityResolver(),
        payment_terms_days=payment_terms_days,
    )
    invoice_status_service = InvoiceStatusService(invoices_repo)
    staff_register = StaffRegister(staff_repo, staff_register_repo)
    staff_reconciler = StaffAttendanceReconciler(staff_register_repo)

    api = BillingApi(
        clients=clients_repo,
        staff=staff_repo,
        attendance_register=attendance_register,
        invoice_generator=invoice_generator,
        invoice_status=invoice_status_service,
        staff_register=staff_register,
        staff_reconciler=staff_reconciler,
    )

    return Container(
        store=store,
        attendance_repo=attendance_repo,
        clients_repo=clients_repo,
        invoices_repo=invoices_repo,
        staff_repo=staff_repo,
        staff_register_repo=staff_register_repo,
        attendance_register=attendance_register,
        invoice_generator=invoice_generator,
        invoice_status_service=invoice_status_service,
        staff_register=staff_register,
        staff_reconciler=staff_reconciler,
        api=api,
    )


def build_container_from_settings(settings) -> Container:
    return build_container(
        backend=str(getattr(settings, "STORE_BACKEND", "memory")),
        db_config=dict(getattr(settings, "DB_CONFIG", {}) or {}),
        payment_terms_days=int(getattr(settings, "PAYMENT_TERMS_DAYS", PAYMENT_TERMS_DAYS)),
        default_session_payment=str(getattr(settings, "DEFAULT_SESSION_PAYMENT", DEFAULT_SESSION_PAYMENT)),
    )
