"""
studio_services.workflow_executor -- Workflow transition execution.

Responsibility:
    Runs a transition against a record snapshot on behalf of the
    persistence layer: checks the caller's expected version, supplies the
    current time from the injected clock, delegates the decision to the
    pure engine in ``studio_engines.workflow``, and emits one structured
    trace per attempt.

Architecture position:
    Services layer.  May import studio_engines, studio_kernel and
    studio_config.  Persisting the returned record is the caller's job.

Invariants enforced:
    - A snapshot whose version differs from ``expected_version`` is never
      transitioned; ``OptimisticLockError`` is raised instead, so two
      concurrent approvals of one record cannot both succeed.
    - Every attempt, successful or not, emits a ``workflow_transition``
      log record.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from studio_config import get_active_config
from studio_config.bridges import build_permission_matrix
from studio_engines.workflow import TransitionResult, authorize_deletion, transition
from studio_kernel.domain.clock import Clock, SystemClock
from studio_kernel.domain.permissions import DELETE_ACTION, PermissionMatrix
from studio_kernel.domain.roles import Actor
from studio_kernel.domain.workflow import Workflow
from studio_kernel.exceptions import OptimisticLockError
from studio_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.workflow_executor")

# Trace message and outcome codes for structured logging
TRACE_TYPE_WORKFLOW_TRANSITION = "WORKFLOW_TRANSITION"
OUTCOME_SUCCESS = "success"
OUTCOME_VERSION_CONFLICT = "version_conflict"


def _emit_workflow_trace(
    *,
    ts: str,
    workflow_name: str,
    action: str,
    entity_id: str,
    actor: Actor,
    from_state: str,
    outcome: str,
    reason: str,
    duration_ms: float,
    to_state: str | None = None,
    outcome_sink: Callable[[dict], None] | None = None,
) -> None:
    """Emit a structured workflow transition record."""
    record: dict[str, Any] = {
        "trace_type": TRACE_TYPE_WORKFLOW_TRANSITION,
        "ts": ts,
        "workflow": workflow_name,
        "action": action,
        "entity_type": workflow_name,
        "entity_id": entity_id,
        "actor_role": actor.role.value,
        "from_state": from_state,
        "outcome": outcome,
        "reason": reason,
        "duration_ms": round(duration_ms, 3),
    }
    if to_state is not None:
        record["to_state"] = to_state
    record.update(LogContext.get_all())
    # LogRecord reserves "message"; keep it out of extra
    logger.info("workflow_transition", extra=record)
    if outcome_sink is not None:
        outcome_sink({**record, "message": "workflow_transition"})


def _outcome(result: TransitionResult) -> str:
    if result.success:
        return OUTCOME_SUCCESS
    return result.error.code.lower() if result.error is not None else "rejected"


class WorkflowExecutor:
    """Executes workflow transitions with an optimistic version check."""

    def __init__(
        self,
        clock: Clock | None = None,
        permissions: PermissionMatrix | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._permissions = permissions or build_permission_matrix(get_active_config())

    @property
    def permissions(self) -> PermissionMatrix:
        return self._permissions

    def _check_version(
        self,
        workflow: Workflow,
        record: Any,
        action: str,
        actor: Actor,
        expected_version: int | None,
        t0: float,
        outcome_sink: Callable[[dict], None] | None,
    ) -> None:
        if expected_version is None or record.version == expected_version:
            return
        error = OptimisticLockError(
            workflow.name, str(record.id), expected_version, record.version
        )
        _emit_workflow_trace(
            ts=self._clock.now().isoformat(),
            workflow_name=workflow.name,
            action=action,
            entity_id=str(record.id),
            actor=actor,
            from_state=str(getattr(record.status, "value", record.status)),
            outcome=OUTCOME_VERSION_CONFLICT,
            reason=str(error),
            duration_ms=(time.monotonic() - t0) * 1000,
            outcome_sink=outcome_sink,
        )
        raise error

    def _trace_result(
        self,
        workflow: Workflow,
        record: Any,
        actor: Actor,
        result: TransitionResult,
        t0: float,
        ts: str,
        outcome_sink: Callable[[dict], None] | None,
    ) -> None:
        _emit_workflow_trace(
            ts=ts,
            workflow_name=workflow.name,
            action=result.action,
            entity_id=str(record.id),
            actor=actor,
            from_state=result.from_state,
            outcome=_outcome(result),
            reason=result.reason,
            duration_ms=(time.monotonic() - t0) * 1000,
            to_state=result.to_state,
            outcome_sink=outcome_sink,
        )

    def execute_transition(
        self,
        workflow: Workflow,
        record: Any,
        action: str,
        actor: Actor,
        *,
        expected_version: int | None = None,
        reason: str | None = None,
        outcome_sink: Callable[[dict], None] | None = None,
    ) -> TransitionResult:
        """Attempt ``action`` on ``record`` at the clock's current time.

        Raises:
            OptimisticLockError: ``expected_version`` is given and the
                snapshot carries another version.
        """
        t0 = time.monotonic()
        with LogContext.bind(actor_id=actor.actor_id, record_id=str(record.id)):
            self._check_version(workflow, record, action, actor, expected_version, t0, outcome_sink)
            now = self._clock.now()
            result = transition(
                workflow, record, action, actor,
                permissions=self._permissions, now=now, reason=reason,
            )
            self._trace_result(workflow, record, actor, result, t0, now.isoformat(), outcome_sink)
        return result

    def execute_deletion(
        self,
        workflow: Workflow,
        record: Any,
        actor: Actor,
        *,
        expected_version: int | None = None,
        outcome_sink: Callable[[dict], None] | None = None,
    ) -> TransitionResult:
        """Authorize removal of ``record``; the caller performs the delete."""
        t0 = time.monotonic()
        with LogContext.bind(actor_id=actor.actor_id, record_id=str(record.id)):
            self._check_version(
                workflow, record, DELETE_ACTION, actor, expected_version, t0, outcome_sink
            )
            result = authorize_deletion(workflow, record, actor, permissions=self._permissions)
            self._trace_result(
                workflow, record, actor, result, t0, self._clock.now().isoformat(), outcome_sink
            )
        return result
