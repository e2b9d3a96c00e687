"""
Invoice Module (``studio_modules.invoice``).

Client invoice drafting with configured rate defaults, and the
send / mark paid / cancel lifecycle.  Totals, payments and receivables
are computed by ``studio_engines.invoicing``.
"""

from studio_modules.invoice.drafting import draft_invoice
from studio_modules.invoice.workflows import (
    INVOICE_WORKFLOW,
    authorize_invoice_deletion,
    invoice_actions,
    transition_invoice,
)

__all__ = [
    "INVOICE_WORKFLOW",
    "authorize_invoice_deletion",
    "draft_invoice",
    "invoice_actions",
    "transition_invoice",
]
