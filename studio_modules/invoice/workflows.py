"""Invoice Workflows.

State machine for client invoices:

    Draft --send--> Sent --mark_paid--> Paid
    Draft --cancel--> Cancelled
    Sent  --cancel--> Cancelled

Only drafts may be deleted.  Overdue is not a state here: it is derived on
read by ``studio_engines.invoicing.display_status``.
"""

from __future__ import annotations

from datetime import datetime

from studio_engines.workflow import (
    TransitionResult,
    authorize_deletion,
    available_actions,
    transition,
)
from studio_kernel.domain.permissions import PermissionMatrix
from studio_kernel.domain.records import Invoice, InvoiceStatus
from studio_kernel.domain.roles import Actor
from studio_kernel.domain.workflow import Transition, Workflow
from studio_modules._permissions import resolve_permissions

_DRAFT = InvoiceStatus.DRAFT.value
_SENT = InvoiceStatus.SENT.value
_PAID = InvoiceStatus.PAID.value
_CANCELLED = InvoiceStatus.CANCELLED.value


INVOICE_WORKFLOW = Workflow(
    name="invoice",
    description="Client invoice lifecycle",
    initial_state=_DRAFT,
    states=(_DRAFT, _SENT, _PAID, _CANCELLED),
    transitions=(
        Transition(_DRAFT, _SENT, action="send", actor_field="sent_by", timestamp_field="sent_at"),
        Transition(_SENT, _PAID, action="mark_paid", actor_field="paid_by", timestamp_field="paid_at"),
        Transition(
            _DRAFT, _CANCELLED, action="cancel",
            actor_field="cancelled_by", timestamp_field="cancelled_at",
        ),
        Transition(
            _SENT, _CANCELLED, action="cancel",
            actor_field="cancelled_by", timestamp_field="cancelled_at",
        ),
    ),
    terminal_states=(_PAID, _CANCELLED),
    deletable_states=(_DRAFT,),
)


def transition_invoice(
    invoice: Invoice,
    action: str,
    actor: Actor,
    *,
    now: datetime,
    permissions: PermissionMatrix | None = None,
) -> TransitionResult:
    return transition(
        INVOICE_WORKFLOW, invoice, action, actor,
        permissions=resolve_permissions(permissions), now=now,
    )


def authorize_invoice_deletion(
    invoice: Invoice,
    actor: Actor,
    permissions: PermissionMatrix | None = None,
) -> TransitionResult:
    return authorize_deletion(
        INVOICE_WORKFLOW, invoice, actor, permissions=resolve_permissions(permissions),
    )


def invoice_actions(
    invoice: Invoice,
    actor: Actor,
    permissions: PermissionMatrix | None = None,
) -> tuple[str, ...]:
    return available_actions(INVOICE_WORKFLOW, invoice, actor, resolve_permissions(permissions))
