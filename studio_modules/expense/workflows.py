"""Expense Workflows.

State machine for employee expense claims:

    Pending --approve--> Approved --reimburse--> Reimbursed
    Pending --reject---> Rejected

Rejected and Reimbursed are terminal.  Claims are filed as Pending by the
employee they belong to, and only that employee may delete them while
they are still Pending.
"""

from __future__ import annotations

from datetime import datetime

from studio_engines.workflow import (
    TransitionResult,
    authorize_creation,
    authorize_deletion,
    available_actions,
    transition,
)
from studio_kernel.domain.permissions import PermissionMatrix
from studio_kernel.domain.records import Expense, ExpenseStatus
from studio_kernel.domain.roles import Actor
from studio_kernel.domain.workflow import Transition, Workflow
from studio_modules._permissions import resolve_permissions

_PENDING = ExpenseStatus.PENDING.value
_APPROVED = ExpenseStatus.APPROVED.value
_REJECTED = ExpenseStatus.REJECTED.value
_REIMBURSED = ExpenseStatus.REIMBURSED.value


EXPENSE_WORKFLOW = Workflow(
    name="expense",
    description="Expense claim approval and reimbursement",
    initial_state=_PENDING,
    states=(_PENDING, _APPROVED, _REJECTED, _REIMBURSED),
    transitions=(
        Transition(
            _PENDING, _APPROVED, action="approve",
            actor_field="approved_by", timestamp_field="approved_at",
        ),
        Transition(
            _PENDING, _REJECTED, action="reject",
            actor_field="rejected_by", timestamp_field="rejected_at",
            reason_field="rejection_reason",
        ),
        Transition(
            _APPROVED, _REIMBURSED, action="reimburse",
            actor_field="reimbursed_by", timestamp_field="reimbursed_at",
        ),
    ),
    terminal_states=(_REJECTED, _REIMBURSED),
    deletable_states=(_PENDING,),
    delete_requires_owner=True,
    create_requires_owner=True,
)


def transition_expense(
    expense: Expense,
    action: str,
    actor: Actor,
    *,
    now: datetime,
    reason: str | None = None,
    permissions: PermissionMatrix | None = None,
) -> TransitionResult:
    return transition(
        EXPENSE_WORKFLOW, expense, action, actor,
        permissions=resolve_permissions(permissions), now=now, reason=reason,
    )


def authorize_expense_creation(
    expense: Expense,
    actor: Actor,
    permissions: PermissionMatrix | None = None,
) -> TransitionResult:
    """Only the employee named on a pending claim may file it."""
    return authorize_creation(
        EXPENSE_WORKFLOW, expense, actor, permissions=resolve_permissions(permissions),
    )


def authorize_expense_deletion(
    expense: Expense,
    actor: Actor,
    permissions: PermissionMatrix | None = None,
) -> TransitionResult:
    return authorize_deletion(
        EXPENSE_WORKFLOW, expense, actor, permissions=resolve_permissions(permissions),
    )


def expense_actions(
    expense: Expense,
    actor: Actor,
    permissions: PermissionMatrix | None = None,
) -> tuple[str, ...]:
    """Buttons to enable for ``actor`` on this expense."""
    return available_actions(EXPENSE_WORKFLOW, expense, actor, resolve_permissions(permissions))
