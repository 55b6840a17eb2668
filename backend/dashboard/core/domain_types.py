"""Domain Types: value types shared by validation, services, and routes.

Invariants:
    - InvoiceStatus has exactly two members (pending, paid)
    - Amounts cross the persistence boundary as integer cents
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


InvoiceId = NewType("InvoiceId", UUID)
CustomerId = NewType("CustomerId", UUID)
Cents = NewType("Cents", int)

# Field name -> human-readable messages, in validation order
FieldErrors = dict[str, list[str]]

INVOICES_PATH = "/dashboard/invoices"
DASHBOARD_PATH = "/dashboard"
LOGIN_PATH = "/login"
ITEMS_PER_PAGE = 6


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


@dataclass(frozen=True)
class Redirect:
    """Successful action outcome: send the caller to `location`."""
    location: str


def to_cents(amount: float) -> Cents:
    return Cents(round(amount * 100))


def from_cents(amount: int) -> float:
    return amount / 100


def format_currency(amount: int) -> str:
    """Render stored cents as US dollars, e.g. 123456 -> '$1,234.56'."""
    return f"${from_cents(amount):,.2f}"
