"""
Canonical workflow types (``studio_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects describing status lifecycles.  Expense, timesheet and
invoice workflows are all declared with these types and executed by the
single engine in ``studio_engines.workflow``.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* Terminal states have no outgoing transitions.
* At most one transition per ``(from_state, action)`` pair.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Transition:
    """A valid status change.

    ``actor_field``, ``timestamp_field`` and ``reason_field`` name the record
    attributes stamped with the acting user's id, the transition time, and
    the optional free-text reason.  ``requires_owner`` restricts the edge to
    the employee who owns the record.
    """

    from_state: str
    to_state: str
    action: str
    requires_owner: bool = False
    actor_field: str | None = None
    timestamp_field: str | None = None
    reason_field: str | None = None


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a record lifecycle.

    ``deletable_states`` lists the statuses in which the record may still
    be removed by the CRUD layer; ``delete_requires_owner`` restricts that
    to the owning employee.  New records must start in ``initial_state``;
    ``create_requires_owner`` means only the owning employee may file one.
    """

    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()
    deletable_states: tuple[str, ...] = ()
    delete_requires_owner: bool = False
    create_requires_owner: bool = False
    owner_field: str = "employee_id"

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"Workflow {self.name}: initial state {self.initial_state!r} not in states"
            )
        seen: set[tuple[str, str]] = set()
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"Workflow {self.name}: transition {t.action} references unknown state"
                )
            if t.from_state in self.terminal_states:
                raise ValueError(
                    f"Workflow {self.name}: terminal state {t.from_state!r} has outgoing edge {t.action}"
                )
            key = (t.from_state, t.action)
            if key in seen:
                raise ValueError(
                    f"Workflow {self.name}: duplicate action {t.action!r} from {t.from_state!r}"
                )
            seen.add(key)
        for state in self.deletable_states:
            if state not in self.states:
                raise ValueError(f"Workflow {self.name}: unknown deletable state {state!r}")

    def find_transition(self, from_state: str, action: str) -> Transition | None:
        for t in self.transitions:
            if t.from_state == from_state and t.action == action:
                return t
        return None

    def actions_from(self, state: str) -> tuple[str, ...]:
        return tuple(t.action for t in self.transitions if t.from_state == state)

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(t.action for t in self.transitions)
