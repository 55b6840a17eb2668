"""Invoice Queries: read side of the dashboard (listing, edit form, customer select).

Invariants:
    - Listing search is case-insensitive over customer name/email, amount, date, status
    - Listing ordered by invoice date, newest first, ITEMS_PER_PAGE per page
    - Page numbers are 1-based; pages below 1 are treated as 1
"""

import math
from uuid import UUID

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.core.domain_types import ITEMS_PER_PAGE, format_currency, from_cents
from dashboard.core.errors import ErrorContext, ResourceNotFoundError
from dashboard.models.customer import Customer
from dashboard.models.invoice import Invoice
from dashboard.schemas.invoice import (
    CustomerOption, InvoiceDetail, InvoicePage, InvoiceRow,
)


def _matches(query: str):
    pattern = f"%{query}%"
    return or_(
        Customer.name.ilike(pattern),
        Customer.email.ilike(pattern),
        cast(Invoice.amount, String).ilike(pattern),
        cast(Invoice.date, String).ilike(pattern),
        Invoice.status.ilike(pattern),
    )


async def fetch_filtered_invoices(
    db: AsyncSession, query: str, page: int,
) -> list[InvoiceRow]:
    offset = (max(page, 1) - 1) * ITEMS_PER_PAGE
    result = await db.execute(
        select(
            Invoice.id, Invoice.amount, Invoice.date, Invoice.status,
            Customer.name, Customer.email, Customer.image_url,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_matches(query))
        .order_by(Invoice.date.desc(), Invoice.id)
        .limit(ITEMS_PER_PAGE)
        .offset(offset),
    )
    return [
        InvoiceRow(
            id=row.id,
            amount=row.amount,
            formatted_amount=format_currency(row.amount),
            date=row.date,
            status=row.status,
            name=row.name,
            email=row.email,
            image_url=row.image_url,
        )
        for row in result.all()
    ]


async def fetch_invoice_pages(db: AsyncSession, query: str) -> int:
    result = await db.execute(
        select(func.count(Invoice.id))
        .select_from(Invoice)
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_matches(query)),
    )
    return math.ceil(result.scalar_one() / ITEMS_PER_PAGE)


async def fetch_invoice_page(db: AsyncSession, query: str, page: int) -> InvoicePage:
    page = max(page, 1)
    return InvoicePage(
        invoices=await fetch_filtered_invoices(db, query, page),
        query=query,
        page=page,
        total_pages=await fetch_invoice_pages(db, query),
    )


async def fetch_invoice_by_id(db: AsyncSession, invoice_id: UUID) -> InvoiceDetail:
    result = await db.execute(select(Invoice).where(Invoice.id == invoice_id))
    invoice = result.scalar_one_or_none()
    if invoice is None:
        raise ResourceNotFoundError(
            "Invoice", str(invoice_id),
            ErrorContext(invoice_id=str(invoice_id), action="fetch"),
        )
    return InvoiceDetail(
        id=invoice.id,
        customer_id=invoice.customer_id,
        amount=from_cents(invoice.amount),
        status=invoice.status,
        date=invoice.date,
    )


async def fetch_customers(db: AsyncSession) -> list[CustomerOption]:
    result = await db.execute(
        select(Customer.id, Customer.name).order_by(Customer.name),
    )
    return [CustomerOption(id=row.id, name=row.name) for row in result.all()]
