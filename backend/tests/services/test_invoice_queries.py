"""Invoice Queries: search, pagination, edit-form fetch, customer options."""

from datetime import date
from uuid import uuid4

import pytest

from dashboard.core.errors import ResourceNotFoundError
from dashboard.models import Customer, Invoice
from dashboard.services.invoice_queries import (
    fetch_customers, fetch_filtered_invoices, fetch_invoice_by_id,
    fetch_invoice_page, fetch_invoice_pages,
)


@pytest.fixture
async def seed_many(test_db):
    """Two customers; Delba has 7 invoices, Lee has 1."""
    delba = Customer(name="Delba de Oliveira", email="delba@oliveira.com")
    lee = Customer(name="Lee Robinson", email="lee@robinson.com")
    test_db.add_all([delba, lee])
    await test_db.flush()
    for day in range(1, 8):
        test_db.add(Invoice(
            customer_id=delba.id, amount=1000 * day,
            status="pending", date=date(2023, 6, day),
        ))
    test_db.add(Invoice(
        customer_id=lee.id, amount=44800, status="paid", date=date(2023, 9, 10),
    ))
    await test_db.commit()
    return delba, lee


async def test_listing_is_newest_first_and_paginated(test_db, seed_many):
    rows = await fetch_filtered_invoices(test_db, "", 1)
    assert len(rows) == 6
    assert rows[0].name == "Lee Robinson"
    assert rows[0].formatted_amount == "$448.00"
    assert [r.date for r in rows] == sorted((r.date for r in rows), reverse=True)

    second = await fetch_filtered_invoices(test_db, "", 2)
    assert len(second) == 2


async def test_search_matches_customer_case_insensitively(test_db, seed_many):
    rows = await fetch_filtered_invoices(test_db, "lee", 1)
    assert [r.email for r in rows] == ["lee@robinson.com"]


async def test_search_matches_status(test_db, seed_many):
    rows = await fetch_filtered_invoices(test_db, "PAID", 1)
    assert [r.status.value for r in rows] == ["paid"]


async def test_search_matches_date_text(test_db, seed_many):
    rows = await fetch_filtered_invoices(test_db, "2023-06-03", 1)
    assert len(rows) == 1
    assert rows[0].amount == 3000


async def test_page_count(test_db, seed_many):
    assert await fetch_invoice_pages(test_db, "") == 2
    assert await fetch_invoice_pages(test_db, "lee") == 1
    assert await fetch_invoice_pages(test_db, "nobody") == 0


async def test_invoice_page_clamps_page_number(test_db, seed_many):
    page = await fetch_invoice_page(test_db, "", 0)
    assert page.page == 1
    assert page.total_pages == 2


async def test_fetch_invoice_by_id_returns_dollars(test_db, seed_invoice):
    detail = await fetch_invoice_by_id(test_db, seed_invoice.id)
    assert detail.amount == 157.95
    assert detail.customer_id == seed_invoice.customer_id


async def test_fetch_invoice_by_id_raises_not_found(test_db):
    with pytest.raises(ResourceNotFoundError):
        await fetch_invoice_by_id(test_db, uuid4())


async def test_customers_sorted_by_name(test_db, seed_many):
    options = await fetch_customers(test_db)
    assert [c.name for c in options] == ["Delba de Oliveira", "Lee Robinson"]
