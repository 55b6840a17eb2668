"""Invoice Routes: cached listing, edit-form fetch, and the three form actions.

Invariants:
    - Every route requires a signed-in user (require_user)
    - GET /dashboard/invoices is served from the page cache when present,
      keyed by path plus query string; a payload read before an action
      revalidated the path is returned but not cached
    - Actions answer 303 -> /dashboard/invoices on success, ActionState JSON otherwise
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.api.dependencies import form_fields, require_user, to_response
from dashboard.infrastructure.database import get_db
from dashboard.infrastructure.page_cache import PageCache, get_page_cache
from dashboard.schemas.invoice import InvoiceDetail
from dashboard.services import invoice_actions, invoice_queries

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/dashboard/invoices", tags=["invoices"],
    dependencies=[Depends(require_user)],
)


@router.get("")
async def list_invoices(
    request: Request,
    query: str = Query(""),
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
    cache: PageCache = Depends(get_page_cache),
):
    """Invoices table: search + pagination."""
    key = request.url.path
    if request.url.query:
        key = f"{key}?{request.url.query}"
    cached = cache.get(key)
    if cached is not None:
        logger.debug(f"Serving {key} from page cache", extra={"path": key})
        return cached

    generation = cache.generation(request.url.path)
    invoice_page = await invoice_queries.fetch_invoice_page(db, query, page)
    payload = invoice_page.model_dump(mode="json")
    cache.set_if_current(key, payload, generation)
    return payload


@router.post("/create")
async def create_invoice(
    fields: dict = Depends(form_fields),
    db: AsyncSession = Depends(get_db),
    cache: PageCache = Depends(get_page_cache),
):
    return to_response(await invoice_actions.create_invoice(db, cache, fields))


@router.get("/{invoice_id}", response_model=InvoiceDetail)
async def get_invoice(invoice_id: UUID, db: AsyncSession = Depends(get_db)):
    """Invoice as loaded into the edit form."""
    return await invoice_queries.fetch_invoice_by_id(db, invoice_id)


@router.post("/{invoice_id}/edit")
async def update_invoice(
    invoice_id: UUID,
    fields: dict = Depends(form_fields),
    db: AsyncSession = Depends(get_db),
    cache: PageCache = Depends(get_page_cache),
):
    return to_response(
        await invoice_actions.update_invoice(db, cache, invoice_id, fields),
    )


@router.post("/{invoice_id}/delete")
async def delete_invoice(
    invoice_id: UUID,
    db: AsyncSession = Depends(get_db),
    cache: PageCache = Depends(get_page_cache),
):
    return to_response(await invoice_actions.delete_invoice(db, cache, invoice_id))
