"""
studio_engines.invoicing -- Invoice cascade, payments, and receivables.

Responsibility:
    Compute invoice totals from line items through the additive
    tax / overhead / G&A cascade, apply payments, derive the display
    status (Overdue), and roll invoices up into a receivables summary.

Architecture position:
    Engines -- pure calculation layer, zero I/O, zero clock reads.
    "As of" dates are explicit parameters.

Invariants enforced:
    - Additive cascade: tax, overhead and G&A are each a percentage of the
      subtotal, never of each other.  For a 1000 subtotal at 17/10/5 the
      charges are 170/100/50 and the total is 1320.
    - Rounding once per stored figure: each line amount, the tax, overhead
      and G&A amounts are rounded half-up to the currency minor unit;
      subtotal and total are exact sums of those rounded figures, so
      ``subtotal == sum(line.amount)`` and
      ``total == subtotal + tax + overhead + ga`` hold exactly.
    - ``amount_paid <= total``; ``remaining_amount`` is never negative.
    - Overdue is derived on read and never stored.

Failure modes:
    - InvalidRateError for rates outside [0, 100].
    - InvalidAmountError for negative payments.
    - CurrencyMismatchError when line items or payments use another currency.
    - InvalidDateRangeError when the due date precedes the issue date.
    - OverpaymentError when a payment (or a recalculation) would leave
      ``amount_paid`` above ``total``; the input invoice is never modified.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from studio_engines.tracer import traced_engine
from studio_kernel.domain.money import ZERO, percent_of, ratio_percent, require_rate
from studio_kernel.domain.records import (
    Invoice,
    InvoiceDisplayStatus,
    InvoiceLineItem,
    InvoiceStatus,
)
from studio_kernel.domain.values import Currency, Money
from studio_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidDateRangeError,
    OverpaymentError,
)
from studio_kernel.logging_config import get_logger

logger = get_logger("engines.invoicing")

DEFAULT_CURRENCY = "PKR"
DEFAULT_PAYMENT_TERMS = "Net 30"


@dataclass(frozen=True)
class InvoiceTotals:
    """Result of the cascade."""

    subtotal: Money
    tax_amount: Money
    overhead_amount: Money
    ga_amount: Money
    total: Money
    tax_rate: Decimal
    overhead_rate: Decimal
    ga_rate: Decimal


@traced_engine(
    "invoice_cascade", "1.0",
    fingerprint_fields=("line_items", "tax_rate", "overhead_rate", "ga_rate"),
)
def compute_totals(
    line_items: Sequence[InvoiceLineItem],
    tax_rate: Decimal | int | str,
    overhead_rate: Decimal | int | str,
    ga_rate: Decimal | int | str,
    currency: str = DEFAULT_CURRENCY,
) -> InvoiceTotals:
    """Subtotal -> tax -> overhead -> G&A -> total.

    All three charges are percentages of the subtotal (additive model).
    Rates are validated before anything is summed.
    """
    tax = require_rate(tax_rate, "tax_rate")
    overhead = require_rate(overhead_rate, "overhead_rate")
    ga = require_rate(ga_rate, "ga_rate")
    code = Currency(currency)

    subtotal = Money.zero(code)
    for line in line_items:
        if line.unit_price.currency != code:
            raise CurrencyMismatchError(code.code, line.unit_price.currency.code, "invoice line item")
        subtotal = subtotal + line.amount

    tax_amount = Money(percent_of(subtotal.amount, tax), code).round()
    overhead_amount = Money(percent_of(subtotal.amount, overhead), code).round()
    ga_amount = Money(percent_of(subtotal.amount, ga), code).round()

    return InvoiceTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        overhead_amount=overhead_amount,
        ga_amount=ga_amount,
        total=subtotal + tax_amount + overhead_amount + ga_amount,
        tax_rate=tax,
        overhead_rate=overhead,
        ga_rate=ga,
    )


def build_invoice(
    *,
    invoice_id: str,
    project_id: str,
    client_id: str,
    issue_date: date,
    due_date: date,
    line_items: Sequence[InvoiceLineItem] = (),
    tax_rate: Decimal | int | str = 0,
    overhead_rate: Decimal | int | str = 0,
    ga_rate: Decimal | int | str = 0,
    payment_terms: str = DEFAULT_PAYMENT_TERMS,
    currency: str = DEFAULT_CURRENCY,
    notes: str = "",
) -> Invoice:
    """Create a Draft invoice whose figures come from ``compute_totals``."""
    if due_date < issue_date:
        raise InvalidDateRangeError("issue_date", issue_date, "due_date", due_date)
    totals = compute_totals(line_items, tax_rate, overhead_rate, ga_rate, currency)
    return Invoice(
        id=invoice_id,
        project_id=project_id,
        client_id=client_id,
        issue_date=issue_date,
        due_date=due_date,
        payment_terms=payment_terms,
        status=InvoiceStatus.DRAFT,
        line_items=tuple(line_items),
        tax_rate=totals.tax_rate,
        overhead_rate=totals.overhead_rate,
        ga_rate=totals.ga_rate,
        subtotal=totals.subtotal,
        tax_amount=totals.tax_amount,
        overhead_amount=totals.overhead_amount,
        ga_amount=totals.ga_amount,
        total=totals.total,
        amount_paid=Money.zero(currency),
        notes=notes,
    )


def recalculate_invoice(
    invoice: Invoice,
    line_items: Sequence[InvoiceLineItem] | None = None,
    *,
    tax_rate: Decimal | int | str | None = None,
    overhead_rate: Decimal | int | str | None = None,
    ga_rate: Decimal | int | str | None = None,
) -> Invoice:
    """Return ``invoice`` with totals recomputed from (new) lines and rates.

    Raises:
        OverpaymentError: If the recomputed total is below ``amount_paid``.
    """
    lines = tuple(line_items) if line_items is not None else invoice.line_items
    totals = compute_totals(
        lines,
        invoice.tax_rate if tax_rate is None else tax_rate,
        invoice.overhead_rate if overhead_rate is None else overhead_rate,
        invoice.ga_rate if ga_rate is None else ga_rate,
        invoice.currency,
    )
    if invoice.amount_paid > totals.total:
        raise OverpaymentError(
            invoice.id, totals.total.amount, invoice.amount_paid.amount, ZERO,
            message=(
                f"Recalculated total {totals.total.amount} of invoice {invoice.id} "
                f"is below the {invoice.amount_paid.amount} already paid"
            ),
        )
    return dataclasses.replace(
        invoice,
        line_items=lines,
        tax_rate=totals.tax_rate,
        overhead_rate=totals.overhead_rate,
        ga_rate=totals.ga_rate,
        subtotal=totals.subtotal,
        tax_amount=totals.tax_amount,
        overhead_amount=totals.overhead_amount,
        ga_amount=totals.ga_amount,
        total=totals.total,
        version=invoice.version + 1,
    )


def apply_payment(invoice: Invoice, amount: Money) -> Invoice:
    """Record a payment against ``invoice``.

    Status is not changed here: marking an invoice Paid is a workflow
    transition, see ``studio_modules.invoice``.

    Raises:
        InvalidAmountError: If ``amount`` is negative.
        CurrencyMismatchError: If ``amount`` is in another currency.
        OverpaymentError: If ``amount_paid + amount > total``.
    """
    if amount.is_negative:
        raise InvalidAmountError("payment", amount.amount)
    if amount.currency != invoice.total.currency:
        raise CurrencyMismatchError(invoice.currency, amount.currency.code, "payment")

    new_paid = invoice.amount_paid + amount
    if new_paid > invoice.total:
        logger.warning(
            "payment_rejected_overpayment",
            extra={
                "invoice_id": invoice.id,
                "total": str(invoice.total.amount),
                "amount_paid": str(invoice.amount_paid.amount),
                "payment": str(amount.amount),
            },
        )
        raise OverpaymentError(
            invoice.id, invoice.total.amount, invoice.amount_paid.amount, amount.amount,
        )

    logger.info(
        "payment_applied",
        extra={
            "invoice_id": invoice.id,
            "payment": str(amount.amount),
            "amount_paid": str(new_paid.amount),
        },
    )
    return dataclasses.replace(invoice, amount_paid=new_paid, version=invoice.version + 1)


def remaining_amount(invoice: Invoice) -> Money:
    """``total - amount_paid``, floored at zero."""
    remaining = invoice.total - invoice.amount_paid
    return remaining if not remaining.is_negative else Money.zero(remaining.currency)


def is_fully_paid(invoice: Invoice) -> bool:
    return remaining_amount(invoice).is_zero


def display_status(invoice: Invoice, as_of: date) -> InvoiceDisplayStatus:
    """Stored status, except Sent invoices past their due date read as Overdue."""
    if invoice.status == InvoiceStatus.SENT and invoice.due_date < as_of:
        return InvoiceDisplayStatus.OVERDUE
    return InvoiceDisplayStatus(invoice.status.value)


@dataclass(frozen=True)
class ReceivablesSummary:
    """Portfolio view over a set of invoices (cancelled ones excluded)."""

    invoice_count: int
    total_invoiced: Money
    total_paid: Money
    total_outstanding: Money
    collection_rate: Decimal
    overdue_count: int
    overdue_amount: Money


@traced_engine("receivables_summary", "1.0")
def summarize_receivables(
    invoices: Sequence[Invoice],
    as_of: date,
    currency: str = DEFAULT_CURRENCY,
) -> ReceivablesSummary:
    """Totals invoiced / paid / outstanding and the overdue exposure.

    ``collection_rate`` is the paid share of the invoiced total in percent,
    0 when nothing has been invoiced.
    """
    invoiced = Money.zero(currency)
    paid = Money.zero(currency)
    overdue_amount = Money.zero(currency)
    count = 0
    overdue_count = 0
    for invoice in invoices:
        if invoice.status == InvoiceStatus.CANCELLED:
            continue
        if invoice.total.currency != invoiced.currency:
            raise CurrencyMismatchError(currency, invoice.currency, "receivables summary")
        count += 1
        invoiced = invoiced + invoice.total
        paid = paid + invoice.amount_paid
        if display_status(invoice, as_of) == InvoiceDisplayStatus.OVERDUE:
            overdue_count += 1
            overdue_amount = overdue_amount + remaining_amount(invoice)

    return ReceivablesSummary(
        invoice_count=count,
        total_invoiced=invoiced,
        total_paid=paid,
        total_outstanding=invoiced - paid,
        collection_rate=ratio_percent(paid.amount, invoiced.amount),
        overdue_count=overdue_count,
        overdue_amount=overdue_amount,
    )
