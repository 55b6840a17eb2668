"""Domain Types: cents conversion, currency formatting, status enum."""

from dashboard.core.domain_types import (
    InvoiceStatus, Redirect, format_currency, from_cents, to_cents,
)


def test_invoice_status_has_two_states():
    assert {s.value for s in InvoiceStatus} == {"pending", "paid"}


def test_to_cents_multiplies_by_100():
    assert to_cents(666) == 66600
    assert to_cents(12.34) == 1234
    assert to_cents(0.1 + 0.2) == 30


def test_from_cents_divides_by_100():
    assert from_cents(15795) == 157.95


def test_format_currency_renders_dollars():
    assert format_currency(123456) == "$1,234.56"
    assert format_currency(500) == "$5.00"


def test_redirect_is_value_type():
    assert Redirect("/dashboard/invoices") == Redirect("/dashboard/invoices")
