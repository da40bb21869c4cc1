from __future__ import annotations

from dataclasses import dataclass

from .model import BillingAddress, ClientBillingProfile


@dataclass(frozen=True)
class BillingIdentity:
    address: BillingAddress
    email: str


class BillingIdentityResolver:
    """Pick the address and email an invoice is sent to.

    - address: the separate billing address when the client opted in and one
      is on file, otherwise the primary address
    - email: the invoice email when non-empty, otherwise the primary email
    """

    def resolve(self, profile: ClientBillingProfile) -> BillingIdentity:
        address = profile.address
        if profile.use_separate_billing_address and profile.billing_address is not None:
            address = profile.billing_address

        email = profile.email
        if profile.invoice_email and profile.invoice_email.strip():
            email = profile.invoice_email.strip()

        return BillingIdentity(address=address, email=email)
