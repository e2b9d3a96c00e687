"""
Typed Exception Hierarchy for the Studio Kernel.

Every error has a TYPED exception class (catch by type, not message), a
``code`` class attribute (machine-readable, API-safe), and structured
attributes carrying the data that caused it.

    StudioKernelError (base)
    |
    +-- CalculationError
    |   +-- InvalidAmountError
    |   +-- InvalidRateError
    |   +-- InvalidCountError
    |   +-- InvalidDateRangeError
    |   +-- OverpaymentError
    |   +-- PlanLimitExceededError
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- WorkflowError
    |   +-- IllegalTransitionError
    |   +-- ForbiddenTransitionError
    |
    +-- ConcurrencyError
    |   +-- OptimisticLockError
    |
    +-- ConfigError

Category        | Code                  | When Raised
----------------|-----------------------|------------------------------------------
Calculation     | INVALID_AMOUNT        | Negative, non-finite or unparsable amount
                | INVALID_RATE          | Percentage rate outside [0, 100]
                | INVALID_COUNT         | Negative or non-integer count
                | INVALID_DATE_RANGE    | Due date earlier than issue date
                | OVERPAYMENT           | Payment would exceed invoice total
                | PLAN_LIMIT_EXCEEDED   | Counts exceed a fixed plan's limits
----------------|-----------------------|------------------------------------------
Currency        | INVALID_CURRENCY      | Not a known ISO 4217 code
                | CURRENCY_MISMATCH     | Mixed currencies in one operation
----------------|-----------------------|------------------------------------------
Workflow        | ILLEGAL_TRANSITION    | Action undefined for the current status
                | FORBIDDEN             | Actor role or identity not permitted
----------------|-----------------------|------------------------------------------
Concurrency     | OPTIMISTIC_LOCK_CONFLICT | Record changed since it was read
----------------|-----------------------|------------------------------------------
Config          | CONFIG_ERROR          | Configuration file failed validation

Workflow errors are normally *returned* inside a ``TransitionResult`` rather
than raised; ``TransitionResult.unwrap()`` raises them for callers that
prefer exceptions.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any


class StudioKernelError(Exception):
    """
    Base exception for all studio kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STUDIO_KERNEL_ERROR"


# Calculation exceptions


class CalculationError(StudioKernelError):
    """Base exception for malformed numeric input."""

    code: str = "CALCULATION_ERROR"


class InvalidAmountError(CalculationError):
    """Amount, quantity, or price is negative, non-finite, or unparsable."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, value: Any, reason: str = "must be a non-negative finite number"):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid amount for {field}: {value!r} ({reason})")


class InvalidRateError(CalculationError):
    """Percentage rate is outside [0, 100] or not a finite number."""

    code: str = "INVALID_RATE"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Invalid rate for {field}: {value!r} (must be between 0 and 100)")


class InvalidCountError(CalculationError):
    """Count is negative or not an integer."""

    code: str = "INVALID_COUNT"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Invalid count for {field}: {value!r} (must be an integer >= 0)")


class InvalidDateRangeError(CalculationError):
    """A period ends before it starts (e.g. due date before issue date)."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start_field: str, start: Any, end_field: str, end: Any):
        self.start_field = start_field
        self.start = start
        self.end_field = end_field
        self.end = end
        super().__init__(f"{end_field} {end} precedes {start_field} {start}")


class OverpaymentError(CalculationError):
    """
    Payment would push amount paid above the invoice total.

    The invoice is left unchanged.
    """

    code: str = "OVERPAYMENT"

    def __init__(
        self,
        invoice_id: str,
        total: Decimal,
        amount_paid: Decimal,
        payment: Decimal,
        message: str | None = None,
    ):
        self.invoice_id = invoice_id
        self.total = total
        self.amount_paid = amount_paid
        self.payment = payment
        super().__init__(message or (
            f"Payment of {payment} on invoice {invoice_id} exceeds the remaining "
            f"balance (total {total}, already paid {amount_paid})"
        ))


class PlanLimitExceededError(CalculationError):
    """Requested employee/project count exceeds a fixed plan's limit."""

    code: str = "PLAN_LIMIT_EXCEEDED"

    def __init__(self, plan: str, dimension: str, requested: int, limit: int):
        self.plan = plan
        self.dimension = dimension
        self.requested = requested
        self.limit = limit
        super().__init__(
            f"Plan {plan} allows at most {limit} {dimension}, requested {requested}"
        )


# Currency exceptions


class CurrencyError(StudioKernelError):
    """Base exception for currency errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Currency code is not a known ISO 4217 code."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: {currency}")


class CurrencyMismatchError(CurrencyError):
    """Operation mixed amounts in different currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, expected: str, received: str, operation: str = ""):
        self.expected = expected
        self.received = received
        self.operation = operation
        suffix = f" in {operation}" if operation else ""
        super().__init__(f"Currency mismatch{suffix}: expected {expected}, got {received}")


# Workflow exceptions


class WorkflowError(StudioKernelError):
    """Base exception for rejected status transitions. Record is unchanged."""

    code: str = "WORKFLOW_ERROR"


class IllegalTransitionError(WorkflowError):
    """Action is not defined for the record's current status."""

    code: str = "ILLEGAL_TRANSITION"

    def __init__(self, workflow: str, action: str, from_state: str, record_id: str = ""):
        self.workflow = workflow
        self.action = action
        self.from_state = from_state
        self.record_id = record_id
        target = f"{workflow} {record_id}" if record_id else workflow
        super().__init__(
            f"Action '{action}' is not allowed for {target} in status '{from_state}'"
        )


class ForbiddenTransitionError(WorkflowError):
    """Actor's role (or identity, for owner-only edges) lacks permission."""

    code: str = "FORBIDDEN"

    def __init__(self, workflow: str, action: str, role: str, reason: str = ""):
        self.workflow = workflow
        self.action = action
        self.role = role
        self.reason = reason or f"role '{role}' may not {action} {workflow}"
        super().__init__(f"Forbidden: {self.reason}")


# Concurrency exceptions


class ConcurrencyError(StudioKernelError):
    """Base exception for concurrency errors."""

    code: str = "CONCURRENCY_ERROR"


class OptimisticLockError(ConcurrencyError):
    """Record version changed between read and transition."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"

    def __init__(self, entity_type: str, entity_id: str, expected_version: int, actual_version: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrent modification of {entity_type} {entity_id}: "
            f"expected version {expected_version}, found {actual_version}"
        )


# Configuration exceptions


class ConfigError(StudioKernelError):
    """Configuration file failed schema validation."""

    code: str = "CONFIG_ERROR"

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{message} ({path})" if path else message)
