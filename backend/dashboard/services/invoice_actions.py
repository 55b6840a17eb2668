"""Invoice Actions: create, update, and delete invoices from form submissions.

Invariants:
    - Validation failure returns field errors and performs no write
    - Exactly one parameterized statement per action, committed on its own
    - Persistence failures are rolled back, logged, and collapsed into one
      generic message per action; they never propagate
    - Success invalidates INVOICES_PATH in the page cache and redirects there
    - Amounts are stored in cents; create stamps today's UTC date
"""

import logging
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, insert, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.core.domain_types import INVOICES_PATH, Redirect, to_cents
from dashboard.core.validate_form import validate_invoice_form
from dashboard.infrastructure.page_cache import PageCache
from dashboard.models.invoice import Invoice
from dashboard.schemas.invoice import ActionState, InvoiceForm

logger = logging.getLogger(__name__)

ActionResult = ActionState | Redirect


def _today() -> date:
    return datetime.now(timezone.utc).date()


async def _execute_once(
    db: AsyncSession, statement, action: str, invoice_id: UUID | None = None,
) -> bool:
    """Run one statement and commit. False (after rollback) on any DB error."""
    try:
        result = await db.execute(statement)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"{action} invoice failed: {e}",
            extra={"action": action, "invoice_id": invoice_id},
            exc_info=True,
        )
        return False
    if invoice_id is not None and result.rowcount == 0:
        logger.warning(
            f"{action} invoice matched no rows",
            extra={"action": action, "invoice_id": invoice_id},
        )
    return True


def _revalidate_and_redirect(cache: PageCache) -> Redirect:
    cache.revalidate_path(INVOICES_PATH)
    return Redirect(INVOICES_PATH)


async def create_invoice(
    db: AsyncSession, cache: PageCache, fields: Mapping[str, Any],
) -> ActionResult:
    form = validate_invoice_form(fields)
    if not isinstance(form, InvoiceForm):
        return ActionState(
            errors=form, message="Missing Fields. Failed to Create Invoice.",
        )

    statement = insert(Invoice).values(
        customer_id=form.customer_id,
        amount=to_cents(form.amount),
        status=form.status.value,
        date=_today(),
    )
    if not await _execute_once(db, statement, "create"):
        return ActionState(message="Database Error: Failed to Create Invoice.")
    return _revalidate_and_redirect(cache)


async def update_invoice(
    db: AsyncSession, cache: PageCache, invoice_id: UUID, fields: Mapping[str, Any],
) -> ActionResult:
    form = validate_invoice_form(fields)
    if not isinstance(form, InvoiceForm):
        return ActionState(
            errors=form, message="Missing Fields. Failed to Update Invoice.",
        )

    statement = (
        update(Invoice)
        .where(Invoice.id == invoice_id)
        .values(
            customer_id=form.customer_id,
            amount=to_cents(form.amount),
            status=form.status.value,
        )
    )
    if not await _execute_once(db, statement, "update", invoice_id):
        return ActionState(message="Database Error: Failed to Update Invoice.")
    return _revalidate_and_redirect(cache)


async def delete_invoice(
    db: AsyncSession, cache: PageCache, invoice_id: UUID,
) -> ActionResult:
    statement = delete(Invoice).where(Invoice.id == invoice_id)
    if not await _execute_once(db, statement, "delete", invoice_id):
        return ActionState(message="Database Error: Failed to Delete Invoice.")
    return _revalidate_and_redirect(cache)
