from __future__ import annotations

from care_billing.clients.identity import BillingIdentityResolver
from care_billing.clients.model import BillingAddress, profile_from_record
from care_billing.clients.repository import ClientRepository
from care_billing.store import COLLECTIONS, InMemoryRecordStore


def _client(**extra):
    rec = {
        "id": "c1",
        "firstName": "Anna",
        "surname": "Lee",
        "email": "home@example.com",
        "addressLine1": "1 High Street",
        "postcode": "AB1 2CD",
        "isActive": True,
    }
    rec.update(extra)
    return rec


def test_primary_address_and_email_by_default():
    identity = BillingIdentityResolver().resolve(profile_from_record(_client()))

    assert identity.address == BillingAddress(line1="1 High Street", postcode="AB1 2CD")
    assert identity.email == "home@example.com"


def test_separate_billing_address_only_when_opted_in():
    billing = {"line1": "PO Box 7", "postcode": "ZZ9 9ZZ"}

    opted_out = BillingIdentityResolver().resolve(profile_from_record(_client(billingAddress=billing)))
    opted_in = BillingIdentityResolver().resolve(
        profile_from_record(_client(billingAddress=billing, useSeparateBillingAddress=True))
    )

    assert opted_out.address.line1 == "1 High Street"
    assert opted_in.address.line1 == "PO Box 7"


def test_opted_in_without_billing_address_falls_back():
    identity = BillingIdentityResolver().resolve(profile_from_record(_client(useSeparateBillingAddress=True)))
    assert identity.address.line1 == "1 High Street"


def test_blank_invoice_email_falls_back_to_primary():
    resolver = BillingIdentityResolver()

    assert resolver.resolve(profile_from_record(_client(invoiceEmail="   "))).email == "home@example.com"
    assert resolver.resolve(profile_from_record(_client(invoiceEmail="acc@example.com"))).email == "acc@example.com"


def test_list_active_orders_by_surname_then_first_name():
    store = InMemoryRecordStore()
    store.create(COLLECTIONS.CLIENTS, _client(id="c1", firstName="Zoe", surname="Lee"))
    store.create(COLLECTIONS.CLIENTS, _client(id="c2", firstName="Amy", surname="Lee"))
    store.create(COLLECTIONS.CLIENTS, _client(id="c3", firstName="Bob", surname="Adams"))
    store.create(COLLECTIONS.CLIENTS, _client(id="c4", firstName="Old", surname="Aardvark", isActive=False))

    names = [c.name for c in ClientRepository(store).list_active()]

    assert names == ["Bob Adams", "Amy Lee", "Zoe Lee"]
