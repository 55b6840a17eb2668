"""Customer Routes: options for the invoice form's customer select."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.api.dependencies import require_user
from dashboard.infrastructure.database import get_db
from dashboard.schemas.invoice import CustomerOption
from dashboard.services.invoice_queries import fetch_customers

router = APIRouter(
    prefix="/dashboard/customers", tags=["customers"],
    dependencies=[Depends(require_user)],
)


@router.get("", response_model=list[CustomerOption])
async def list_customers(db: AsyncSession = Depends(get_db)):
    return await fetch_customers(db)
