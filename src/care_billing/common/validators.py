from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def to_decimal(value: Any, field_name: str = "amount") -> Decimal:
    """Coerce numbers and numeric strings into Decimal.

    Legacy documents store amounts as JSON numbers, newer ones as strings.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def to_optional_decimal(value: Any, field_name: str = "amount") -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_decimal(value, field_name)


def money_str(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01")))
