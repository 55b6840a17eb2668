"""Invoice Schemas: form input, action state, and read-side payloads.

Invariants:
    - InvoiceForm.customer_id: a customer UUID, blank or malformed is "not selected"
    - InvoiceForm.amount: coerced from text, missing/blank coerces to 0, must be > 0
      and still > 0 once rounded to whole cents
    - InvoiceForm.status: one of InvoiceStatus
    - Every validator raises PydanticCustomError so the message reaches the
      form verbatim (no "Value error, " prefix)
"""

import math
import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from dashboard.core.domain_types import InvoiceStatus, to_cents

_STATUS_VALUES = tuple(s.value for s in InvoiceStatus)


class InvoiceForm(BaseModel):
    """Create/update form fields after coercion."""
    customer_id: UUID
    amount: float
    status: InvoiceStatus

    @field_validator("customer_id", mode="before")
    @classmethod
    def require_customer(cls, v: Any) -> UUID:
        if isinstance(v, UUID):
            return v
        if isinstance(v, str) and v.strip():
            try:
                return UUID(v.strip())
            except ValueError:
                pass
        raise PydanticCustomError("customer_required", "Please select a customer.")

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0.0
        try:
            amount = float(v)
        except (TypeError, ValueError):
            raise PydanticCustomError("amount_type", "Please enter a valid amount.")
        if not math.isfinite(amount):
            raise PydanticCustomError("amount_type", "Please enter a valid amount.")
        return amount

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: float) -> float:
        # sub-cent amounts round to 0 cents and would violate the amount check
        if v <= 0 or to_cents(v) <= 0:
            raise PydanticCustomError(
                "amount_gt", "Please enter an amount greater than $0.",
            )
        return v

    @field_validator("status", mode="before")
    @classmethod
    def require_status(cls, v: Any) -> Any:
        if isinstance(v, InvoiceStatus):
            return v
        if not isinstance(v, str) or not v:
            raise PydanticCustomError(
                "status_required", "Please select an invoice status.",
            )
        if v not in _STATUS_VALUES:
            raise PydanticCustomError(
                "status_enum",
                "Invalid status. Expected 'pending' | 'paid', received '{received}'.",
                {"received": v},
            )
        return v


class ActionState(BaseModel):
    """What a failed action hands back to the form for re-display."""
    errors: dict[str, list[str]] | None = None
    message: str | None = None


class InvoiceRow(BaseModel):
    """One line of the invoices table (invoice joined with its customer)."""
    id: UUID
    amount: int
    formatted_amount: str
    date: datetime.date
    status: InvoiceStatus
    name: str
    email: str
    image_url: str | None = None


class InvoicePage(BaseModel):
    invoices: list[InvoiceRow]
    query: str
    page: int
    total_pages: int


class InvoiceDetail(BaseModel):
    """Invoice as the edit form consumes it: amount back in dollars."""
    id: UUID
    customer_id: UUID
    amount: float
    status: InvoiceStatus
    date: datetime.date


class CustomerOption(BaseModel):
    id: UUID
    name: str
