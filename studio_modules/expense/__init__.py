"""
Expense Module (``studio_modules.expense``).

Approval lifecycle of employee expense claims on top of the generic
workflow engine.  Principals (and admins) approve, reject and reimburse;
only the employee a claim belongs to may file it or delete it while
pending.
"""

from studio_modules.expense.workflows import (
    EXPENSE_WORKFLOW,
    authorize_expense_creation,
    authorize_expense_deletion,
    expense_actions,
    transition_expense,
)

__all__ = [
    "EXPENSE_WORKFLOW",
    "authorize_expense_creation",
    "authorize_expense_deletion",
    "expense_actions",
    "transition_expense",
]
