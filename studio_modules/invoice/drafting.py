"""Draft invoices with the studio's configured defaults.

Rates, payment terms and the due date fall back to the ``invoice`` section
of the active configuration; anything the caller passes wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal

from studio_config import StudioConfig, get_active_config
from studio_engines.invoicing import build_invoice
from studio_kernel.domain.records import Invoice, InvoiceLineItem
from studio_kernel.logging_config import get_logger

logger = get_logger("modules.invoice.drafting")


def draft_invoice(
    *,
    invoice_id: str,
    project_id: str,
    client_id: str,
    issue_date: date,
    line_items: Sequence[InvoiceLineItem] = (),
    due_date: date | None = None,
    tax_rate: Decimal | int | str | None = None,
    overhead_rate: Decimal | int | str | None = None,
    ga_rate: Decimal | int | str | None = None,
    payment_terms: str | None = None,
    currency: str | None = None,
    notes: str = "",
    config: StudioConfig | None = None,
) -> Invoice:
    cfg = config or get_active_config()
    defaults = cfg.invoice
    invoice = build_invoice(
        invoice_id=invoice_id,
        project_id=project_id,
        client_id=client_id,
        issue_date=issue_date,
        due_date=due_date or issue_date + timedelta(days=defaults.due_days),
        line_items=line_items,
        tax_rate=defaults.tax_rate if tax_rate is None else tax_rate,
        overhead_rate=defaults.overhead_rate if overhead_rate is None else overhead_rate,
        ga_rate=defaults.ga_rate if ga_rate is None else ga_rate,
        payment_terms=payment_terms or defaults.payment_terms,
        currency=currency or cfg.currency,
        notes=notes,
    )
    logger.info(
        "invoice_drafted",
        extra={
            "record_id": invoice.id,
            "project_id": invoice.project_id,
            "total": str(invoice.total.amount),
            "currency": invoice.currency,
            "config_checksum": cfg.checksum,
        },
    )
    return invoice
