"""
studio_engines.workflow -- Guarded status-transition engine.

Responsibility:
    Execute one requested action against one record snapshot using a
    declarative ``Workflow`` and a ``PermissionMatrix``.  Expense, timesheet
    and invoice lifecycles all run through this single engine.

Architecture position:
    Engines -- pure calculation layer.  Never mutates the input record,
    never reads the clock (``now`` is a parameter), never persists.

Check order (first failure wins, record unchanged):
    1. The action is defined for the record's current status
       -> otherwise IllegalTransitionError.
    2. The actor's role is granted ``(workflow, action)``
       -> otherwise ForbiddenTransitionError.
    3. Owner-only edges are taken by the owning employee
       -> otherwise ForbiddenTransitionError.

Failure modes:
    Business rejections are *returned* in ``TransitionResult.error``;
    ``TransitionResult.unwrap()`` raises them.  Only programming errors
    (a record without the workflow's owner field, for instance) raise
    directly.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from studio_kernel.domain.permissions import CREATE_ACTION, DELETE_ACTION, PermissionMatrix
from studio_kernel.domain.roles import Actor
from studio_kernel.domain.workflow import Transition, Workflow
from studio_kernel.exceptions import (
    ForbiddenTransitionError,
    IllegalTransitionError,
    WorkflowError,
)
from studio_kernel.logging_config import get_logger

logger = get_logger("engines.workflow")


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of one transition or deletion check.

    On success ``record`` is the new record (``None`` for deletions, where
    ``removed`` is set instead).  On failure ``record`` is the untouched
    input and ``error`` carries the typed rejection.
    """

    success: bool
    record: Any = None
    error: WorkflowError | None = None
    action: str = ""
    from_state: str = ""
    to_state: str | None = None
    removed: bool = False

    @property
    def reason(self) -> str:
        return str(self.error) if self.error is not None else ""

    def unwrap(self) -> Any:
        """Return the new record, raising the carried error on rejection."""
        if self.error is not None:
            raise self.error
        return self.record


def _state_of(record: Any) -> str:
    status = record.status
    return status.value if isinstance(status, Enum) else str(status)


def _record_id(record: Any) -> str:
    return str(getattr(record, "id", ""))


def _is_owner(workflow: Workflow, record: Any, actor: Actor) -> bool:
    return getattr(record, workflow.owner_field) == actor.actor_id


def _reject(record: Any, action: str, from_state: str, error: WorkflowError) -> TransitionResult:
    logger.debug(
        "transition_rejected",
        extra={
            "action": action,
            "from_state": from_state,
            "error_code": error.code,
            "record_id": _record_id(record),
        },
    )
    return TransitionResult(
        success=False,
        record=record,
        error=error,
        action=action,
        from_state=from_state,
    )


def _check_actor(
    workflow: Workflow,
    record: Any,
    action: str,
    actor: Actor,
    permissions: PermissionMatrix,
    requires_owner: bool,
) -> ForbiddenTransitionError | None:
    if not permissions.is_permitted(workflow.name, action, actor.role):
        return ForbiddenTransitionError(workflow.name, action, actor.role.value)
    if requires_owner and not _is_owner(workflow, record, actor):
        return ForbiddenTransitionError(
            workflow.name,
            action,
            actor.role.value,
            reason=f"only the owner may {action} {workflow.name} {_record_id(record)}".rstrip(),
        )
    return None


def _apply(
    record: Any,
    edge: Transition,
    actor: Actor,
    now: datetime,
    reason: str | None,
) -> Any:
    status_type = type(record.status)
    changes: dict[str, Any] = {
        "status": status_type(edge.to_state) if issubclass(status_type, Enum) else edge.to_state,
        "version": record.version + 1,
    }
    if edge.actor_field:
        changes[edge.actor_field] = actor.actor_id
    if edge.timestamp_field:
        changes[edge.timestamp_field] = now
    if edge.reason_field and reason is not None:
        changes[edge.reason_field] = reason
    return dataclasses.replace(record, **changes)


def transition(
    workflow: Workflow,
    record: Any,
    action: str,
    actor: Actor,
    *,
    permissions: PermissionMatrix,
    now: datetime,
    reason: str | None = None,
) -> TransitionResult:
    """Attempt ``action`` on ``record`` as ``actor``.

    Returns a result holding a new record with the target status, a bumped
    version and the edge's actor/timestamp/reason stamps, or the untouched
    record with a typed error.
    """
    from_state = _state_of(record)
    edge = workflow.find_transition(from_state, action)
    if edge is None:
        return _reject(
            record,
            action,
            from_state,
            IllegalTransitionError(workflow.name, action, from_state, _record_id(record)),
        )

    denied = _check_actor(workflow, record, action, actor, permissions, edge.requires_owner)
    if denied is not None:
        return _reject(record, action, from_state, denied)

    return TransitionResult(
        success=True,
        record=_apply(record, edge, actor, now, reason),
        action=action,
        from_state=from_state,
        to_state=edge.to_state,
    )


def authorize_creation(
    workflow: Workflow,
    record: Any,
    actor: Actor,
    *,
    permissions: PermissionMatrix,
) -> TransitionResult:
    """Check whether ``actor`` may file ``record`` as a new entry.

    The record must be in the workflow's initial status.  On success the
    result carries the record unchanged for the persistence layer to insert.
    """
    state = _state_of(record)
    if state != workflow.initial_state:
        return _reject(
            record,
            CREATE_ACTION,
            state,
            IllegalTransitionError(workflow.name, CREATE_ACTION, state, _record_id(record)),
        )

    denied = _check_actor(
        workflow, record, CREATE_ACTION, actor, permissions, workflow.create_requires_owner
    )
    if denied is not None:
        return _reject(record, CREATE_ACTION, state, denied)

    return TransitionResult(
        success=True,
        record=record,
        action=CREATE_ACTION,
        to_state=state,
    )


def authorize_deletion(
    workflow: Workflow,
    record: Any,
    actor: Actor,
    *,
    permissions: PermissionMatrix,
) -> TransitionResult:
    """Check whether ``actor`` may remove ``record`` in its current status.

    The engine never deletes anything; a successful result (``removed``
    set) tells the persistence layer it may go ahead.
    """
    from_state = _state_of(record)
    if from_state not in workflow.deletable_states:
        return _reject(
            record,
            DELETE_ACTION,
            from_state,
            IllegalTransitionError(workflow.name, DELETE_ACTION, from_state, _record_id(record)),
        )

    denied = _check_actor(
        workflow, record, DELETE_ACTION, actor, permissions, workflow.delete_requires_owner
    )
    if denied is not None:
        return _reject(record, DELETE_ACTION, from_state, denied)

    return TransitionResult(
        success=True,
        action=DELETE_ACTION,
        from_state=from_state,
        removed=True,
    )


def available_actions(
    workflow: Workflow,
    record: Any,
    actor: Actor,
    permissions: PermissionMatrix,
) -> tuple[str, ...]:
    """Actions ``actor`` could successfully take on ``record`` right now."""
    state = _state_of(record)
    actions = [
        t.action
        for t in workflow.transitions
        if t.from_state == state
        and _check_actor(workflow, record, t.action, actor, permissions, t.requires_owner) is None
    ]
    if state in workflow.deletable_states and _check_actor(
        workflow, record, DELETE_ACTION, actor, permissions, workflow.delete_requires_owner
    ) is None:
        actions.append(DELETE_ACTION)
    return tuple(actions)
