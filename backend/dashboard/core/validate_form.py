"""Form Validation: raw form fields in, typed record or field error map out.

Invariants:
    - Pure: no I/O, never raises for bad input
    - Only the schema's own fields are read; extra form keys are ignored
    - Every failing field appears in the map, messages in validation order
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from dashboard.core.domain_types import FieldErrors
from dashboard.schemas.invoice import InvoiceForm

INVOICE_FIELDS = ("customer_id", "amount", "status")


def flatten_field_errors(exc: ValidationError) -> FieldErrors:
    """Group pydantic errors by top-level field name."""
    errors: FieldErrors = {}
    for e in exc.errors():
        field = str(e["loc"][0]) if e["loc"] else "__root__"
        errors.setdefault(field, []).append(e["msg"])
    return errors


def validate_invoice_form(fields: Mapping[str, Any]) -> InvoiceForm | FieldErrors:
    """Apply the invoice schema to submitted form fields."""
    try:
        return InvoiceForm.model_validate(
            {name: fields.get(name) for name in INVOICE_FIELDS},
        )
    except ValidationError as exc:
        return flatten_field_errors(exc)
