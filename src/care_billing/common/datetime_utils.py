from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: Union[str, date], field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date.

    Full ISO timestamps are accepted too; only the date part is kept.
    Malformed or impossible dates raise ValidationError.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be YYYY-MM-DD, got {value!r}")


def parse_optional_date(value: Optional[Union[str, date]], field_name: str = "date") -> Optional[date]:
    if value is None or value == "":
        return None
    return parse_iso_date(value, field_name)


def format_optional_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def now_utc() -> datetime:
    """Current time in UTC.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def today_local() -> date:
    return datetime.now().date()


def format_session_date(value: date) -> str:
    """Line item label, e.g. ``Monday 3 Mar``."""
    return f"{value:%A} {value.day} {value:%b}"
