"""
Record types consumed by the engines.

Responsibility:
    Plain, frozen records supplied by the persistence layer: budget items
    and divisions, invoices with line items, expenses, and timesheet
    entries. Status fields are closed enums, not free strings.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.

Invariants enforced:
    - Item quantity/rate and invoice line quantity/unit price are
      non-negative finite Decimals (InvalidAmountError otherwise).
    - Invoice ``amount_paid <= total``.
    - Stored invoice status is never Overdue; a legacy "Overdue" string
      is read back as Sent (Overdue is derived, see engines.invoicing).
    - Records are never mutated: the workflow engine returns new ones
      with ``version`` incremented.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from studio_kernel.domain.money import require_amount
from studio_kernel.domain.values import Money
from studio_kernel.exceptions import InvalidAmountError, OverpaymentError


# =========================================================================
# Budget items
# =========================================================================


class ItemPriority(str, Enum):
    """Item priority; declaration order is the rollup order."""

    HIGH = "High"
    MID = "Mid"
    LOW = "Low"


class ItemStatus(str, Enum):
    """Procurement/installation progress of an item."""

    NOT_STARTED = "Not Started"
    PURCHASED = "Purchased"
    IN_INSTALLATION_PHASE = "In Installation Phase"
    INSTALLED = "Installed"
    DELIVERED = "Delivered"


COMPLETE_ITEM_STATUSES: frozenset[ItemStatus] = frozenset({
    ItemStatus.INSTALLED,
    ItemStatus.DELIVERED,
})


@dataclass(frozen=True)
class Division:
    """Grouping key for items (e.g. "Electrical", "Joinery")."""

    id: str
    project_id: str
    name: str


@dataclass(frozen=True)
class Item:
    """A budget line: ``quantity`` units of ``unit`` at ``rate`` each."""

    id: str
    division_id: str
    description: str
    unit: str
    quantity: Decimal
    rate: Decimal
    priority: ItemPriority
    status: ItemStatus = ItemStatus.NOT_STARTED

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", require_amount(self.quantity, "quantity"))
        object.__setattr__(self, "rate", require_amount(self.rate, "rate"))
        object.__setattr__(self, "priority", ItemPriority(self.priority))
        object.__setattr__(self, "status", ItemStatus(self.status))

    @property
    def line_cost(self) -> Decimal:
        """Unrounded ``quantity * rate``."""
        return self.quantity * self.rate


# =========================================================================
# Invoices
# =========================================================================


class InvoiceStatus(str, Enum):
    """Persisted invoice lifecycle states."""

    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value: str | InvoiceStatus) -> InvoiceStatus:
        """Parse a stored status; legacy rows stored "Overdue" for sent invoices."""
        if isinstance(value, InvoiceStatus):
            return value
        if value == "Overdue":
            return cls.SENT
        return cls(value)


class InvoiceDisplayStatus(str, Enum):
    """Status shown to users; Overdue is computed on read."""

    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class InvoiceLineItem:
    """A billable line; ``amount`` is ``quantity * unit_price`` rounded to the minor unit."""

    description: str
    quantity: Decimal
    unit_price: Money
    category: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", require_amount(self.quantity, "quantity"))
        if self.unit_price.is_negative:
            raise InvalidAmountError("unit_price", self.unit_price.amount)

    @property
    def amount(self) -> Money:
        return (self.unit_price * self.quantity).round()


@dataclass(frozen=True)
class Invoice:
    """Client invoice with its computed cascade figures.

    Build new invoices with ``studio_engines.invoicing.build_invoice`` so
    that the totals are consistent with the line items.
    """

    id: str
    project_id: str
    client_id: str
    issue_date: date
    due_date: date
    payment_terms: str
    status: InvoiceStatus
    line_items: tuple[InvoiceLineItem, ...]
    tax_rate: Decimal
    overhead_rate: Decimal
    ga_rate: Decimal
    subtotal: Money
    tax_amount: Money
    overhead_amount: Money
    ga_amount: Money
    total: Money
    amount_paid: Money
    version: int = 0
    notes: str = ""
    sent_by: str | None = None
    sent_at: datetime | None = None
    paid_by: str | None = None
    paid_at: datetime | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", InvoiceStatus.parse(self.status))
        object.__setattr__(self, "line_items", tuple(self.line_items))
        if self.amount_paid.is_negative:
            raise InvalidAmountError("amount_paid", self.amount_paid.amount)
        if self.amount_paid > self.total:
            raise OverpaymentError(
                self.id, self.total.amount, Decimal("0"), self.amount_paid.amount,
            )

    @property
    def currency(self) -> str:
        return self.total.currency.code


# =========================================================================
# Expenses and timesheets
# =========================================================================


class ExpenseStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    REIMBURSED = "Reimbursed"


@dataclass(frozen=True)
class Expense:
    """Out-of-pocket expense claimed by an employee."""

    id: str
    employee_id: str
    project_id: str
    amount: Money
    status: ExpenseStatus = ExpenseStatus.PENDING
    description: str = ""
    category: str = ""
    version: int = 0
    submitted_at: datetime | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejected_by: str | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    reimbursed_by: str | None = None
    reimbursed_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", ExpenseStatus(self.status))
        if self.amount.is_negative:
            raise InvalidAmountError("amount", self.amount.amount)


class TimesheetStatus(str, Enum):
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class HourType(str, Enum):
    BILLABLE = "Billable"
    NON_BILLABLE = "Non-Billable"


@dataclass(frozen=True)
class TimesheetEntry:
    """Hours an employee logged against a project on one day."""

    id: str
    employee_id: str
    hours_worked: Decimal
    hour_type: HourType = HourType.BILLABLE
    status: TimesheetStatus = TimesheetStatus.DRAFT
    project_id: str = ""
    work_date: date | None = None
    description: str = ""
    version: int = 0
    submitted_at: datetime | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejected_by: str | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "hours_worked", require_amount(self.hours_worked, "hours_worked"))
        object.__setattr__(self, "hour_type", HourType(self.hour_type))
        object.__setattr__(self, "status", TimesheetStatus(self.status))
