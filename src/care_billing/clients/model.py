from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.validators import to_decimal


@dataclass(frozen=True)
class BillingAddress:
    line1: Optional[str] = None
    line2: Optional[str] = None
    line3: Optional[str] = None
    line4: Optional[str] = None
    postcode: Optional[str] = None

    @classmethod
    def from_record(cls, record: Optional[Mapping[str, Any]]) -> Optional["BillingAddress"]:
        if not record:
            return None
        return cls(
            line1=record.get("line1"),
            line2=record.get("line2"),
            line3=record.get("line3"),
            line4=record.get("line4"),
            postcode=record.get("postcode"),
        )

    def to_record(self) -> dict[str, Optional[str]]:
        return {
            "line1": self.line1,
            "line2": self.line2,
            "line3": self.line3,
            "line4": self.line4,
            "postcode": self.postcode,
        }

    @property
    def is_empty(self) -> bool:
        return not any((self.line1, self.line2, self.line3, self.line4, self.postcode))


@dataclass(frozen=True)
class ClientBillingProfile:
    """Read-only view of a client as seen by billing.

    Owned by client management; billing never writes it back.
    """

    client_id: str
    first_name: str
    surname: str
    email: str
    address: BillingAddress
    rate: Decimal
    billing_address: Optional[BillingAddress] = None
    use_separate_billing_address: bool = False
    invoice_email: Optional[str] = None
    display_name: Optional[str] = None
    is_active: bool = True

    @property
    def name(self) -> str:
        return self.display_name or f"{self.first_name} {self.surname}".strip()


def profile_from_record(record: Mapping[str, Any]) -> ClientBillingProfile:
    return ClientBillingProfile(
        client_id=str(record["id"]),
        first_name=str(record.get("firstName") or ""),
        surname=str(record.get("surname") or ""),
        email=str(record.get("email") or ""),
        address=BillingAddress(
            line1=record.get("addressLine1"),
            line2=record.get("addressLine2"),
            line3=record.get("addressLine3"),
            line4=record.get("addressLine4"),
            postcode=record.get("postcode"),
        ),
        rate=to_decimal(record.get("rate") or 0, "rate"),
        billing_address=BillingAddress.from_record(record.get("billingAddress")),
        use_separate_billing_address=bool(record.get("useSeparateBillingAddress")),
        invoice_email=record.get("invoiceEmail"),
        display_name=record.get("concatName"),
        is_active=bool(record.get("isActive", True)),
    )
