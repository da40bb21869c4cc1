from __future__ import annotations

import argparse
import importlib
import json
import sys
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from .api import CallerContext
from .common.logging_config import configure_logging, get_logger
from .common.validators import money_str
from .config import get_settings_module
from .container import Container, build_container_from_settings
from .core.enums import Role
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, list_tables
from .invoices.model import GenerationResult, invoice_to_record
from .payroll.model import StaffReconciliation

logger = get_logger("main")


def _load_settings():
    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    if getattr(settings, "DEBUG", False):
        db = settings.DB_CONFIG
        logger.debug(
            "settings=%s backend=%s db=%s@%s:%s/%s",
            settings_module,
            getattr(settings, "STORE_BACKEND", "memory"),
            db.get("user"),
            db.get("host"),
            db.get("port", 3306),
            db.get("database"),
        )
    return settings


def generation_to_json(result: GenerationResult) -> dict[str, Any]:
    return {
        "message": result.message,
        "period": {"start": result.period.start.isoformat(), "end": result.period.end.isoformat()},
        "created": result.created,
        "skipped": result.skipped,
        "invoices": [invoice_to_record(inv) for inv in result.invoices],
        "failures": [
            {"clientId": f.client_id, "clientName": f.client_name, "error": f.error} for f in result.failures
        ],
    }


def reconciliation_to_json(rows: Sequence[StaffReconciliation]) -> list[dict[str, Any]]:
    return [
        {
            "staffId": r.staff_id,
            "staffName": r.staff_name,
            "dayRate": money_str(r.day_rate),
            "daysWorked": r.days_worked,
            "totalAmount": money_str(r.total_amount),
            "dates": [e.date.isoformat() for e in r.entries],
        }
        for r in rows
    ]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="care-billing", description="Day-care billing reconciliation")
    parser.add_argument("--user", default="cli", help="Caller id recorded on writes")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the records table in the configured MySQL database")

    gen = sub.add_parser("generate-invoices", help="Generate monthly invoices from the register")
    gen.add_argument("year", type=int)
    gen.add_argument("month", type=int)
    gen.add_argument("--regenerate", action="store_true", help="Delete the period's invoices first")

    rec = sub.add_parser("staff-reconciliation", help="Summarise staff worked days for a month")
    rec.add_argument("year", type=int)
    rec.add_argument("month", type=int)

    sub.add_parser("list-invoices", help="List all invoices, newest first")

    status = sub.add_parser("set-invoice-status", help="Move an invoice to a new status")
    status.add_argument("invoice_id")
    status.add_argument("status")
    status.add_argument("--paid-date", default=None, help="YYYY-MM-DD, defaults to today when paid")
    return parser


def _init_db(settings) -> int:
    db_config = dict(settings.DB_CONFIG)
    apply_schema(db_config)
    tables = list_tables(db_config)
    print(
        "OK: schema ready -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )
    return 0


def run(args: argparse.Namespace, container: Container) -> Any:
    caller = CallerContext(user_id=args.user, role=Role.ADMIN)
    api = container.api

    if args.command == "generate-invoices":
        return generation_to_json(
            api.generate_invoices(caller=caller, year=args.year, month=args.month, regenerate=args.regenerate)
        )
    if args.command == "staff-reconciliation":
        return reconciliation_to_json(api.get_staff_reconciliation(caller=caller, year=args.year, month=args.month))
    if args.command == "list-invoices":
        return [invoice_to_record(inv) for inv in api.list_invoices(caller=caller)]
    if args.command == "set-invoice-status":
        invoice = api.update_invoice_status(
            caller=caller, invoice_id=args.invoice_id, status=args.status, paid_date=args.paid_date
        )
        return invoice_to_record(invoice)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = _load_settings()

    if args.command == "init-db":
        return _init_db(settings)

    if bool(getattr(settings, "AUTO_INIT_DB", False)) and getattr(settings, "STORE_BACKEND", "memory") == "mysql":
        apply_schema(dict(settings.DB_CONFIG))

    container = build_container_from_settings(settings)
    try:
        output = run(args, container)
    except DomainError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
