"""Timesheet Workflows.

State machine for timesheet entries:

    Draft --submit--> Submitted --approve--> Approved
                      Submitted --reject---> Rejected

Only the owning employee submits an entry or deletes it while it is a
draft.
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
from studio_kernel.domain.records import TimesheetEntry, TimesheetStatus
from studio_kernel.domain.roles import Actor
from studio_kernel.domain.workflow import Transition, Workflow
from studio_modules._permissions import resolve_permissions

_DRAFT = TimesheetStatus.DRAFT.value
_SUBMITTED = TimesheetStatus.SUBMITTED.value
_APPROVED = TimesheetStatus.APPROVED.value
_REJECTED = TimesheetStatus.REJECTED.value


TIMESHEET_WORKFLOW = Workflow(
    name="timesheet",
    description="Timesheet entry submission and approval",
    initial_state=_DRAFT,
    states=(_DRAFT, _SUBMITTED, _APPROVED, _REJECTED),
    transitions=(
        Transition(
            _DRAFT, _SUBMITTED, action="submit",
            requires_owner=True, timestamp_field="submitted_at",
        ),
        Transition(
            _SUBMITTED, _APPROVED, action="approve",
            actor_field="approved_by", timestamp_field="approved_at",
        ),
        Transition(
            _SUBMITTED, _REJECTED, action="reject",
            actor_field="rejected_by", timestamp_field="rejected_at",
            reason_field="rejection_reason",
        ),
    ),
    terminal_states=(_APPROVED, _REJECTED),
    deletable_states=(_DRAFT,),
    delete_requires_owner=True,
)


def transition_timesheet(
    entry: TimesheetEntry,
    action: str,
    actor: Actor,
    *,
    now: datetime,
    reason: str | None = None,
    permissions: PermissionMatrix | None = None,
) -> TransitionResult:
    return transition(
        TIMESHEET_WORKFLOW, entry, action, actor,
        permissions=resolve_permissions(permissions), now=now, reason=reason,
    )


def authorize_timesheet_deletion(
    entry: TimesheetEntry,
    actor: Actor,
    permissions: PermissionMatrix | None = None,
) -> TransitionResult:
    return authorize_deletion(
        TIMESHEET_WORKFLOW, entry, actor, permissions=resolve_permissions(permissions),
    )


def timesheet_actions(
    entry: TimesheetEntry,
    actor: Actor,
    permissions: PermissionMatrix | None = None,
) -> tuple[str, ...]:
    return available_actions(TIMESHEET_WORKFLOW, entry, actor, resolve_permissions(permissions))
