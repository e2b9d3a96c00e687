"""Tests for roles, the permission matrix, and workflow definitions."""

import pytest

from studio_kernel.domain.permissions import PermissionMatrix
from studio_kernel.domain.roles import STAFF_ROLES, Actor, ActorRole, expand_roles
from studio_kernel.domain.workflow import Transition, Workflow


class TestActorRole:
    def test_legacy_principle_spelling(self):
        assert ActorRole.parse("principle") is ActorRole.PRINCIPAL
        assert ActorRole.parse(" Principal ") is ActorRole.PRINCIPAL

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            ActorRole.parse("superuser")

    def test_staff_excludes_client(self):
        assert ActorRole.CLIENT not in STAFF_ROLES
        assert len(STAFF_ROLES) == 6

    def test_staff_alias_expands(self):
        assert frozenset(expand_roles(["staff"])) == STAFF_ROLES

    def test_expand_keeps_order_and_drops_duplicates(self):
        roles = expand_roles(["principal", "Staff", "admin", "principle"])
        assert roles[0] is ActorRole.PRINCIPAL
        assert len(roles) == len(set(roles)) == 6
        assert ActorRole.CLIENT not in roles

    def test_expand_passes_other_roles_through(self):
        assert expand_roles([ActorRole.CLIENT, "hr"]) == (ActorRole.CLIENT, ActorRole.HR)

    def test_actor_parses_role(self):
        assert Actor("u1", "principle").role is ActorRole.PRINCIPAL

    def test_actor_requires_id(self):
        with pytest.raises(ValueError):
            Actor("", ActorRole.ADMIN)


class TestPermissionMatrix:
    def test_missing_entry_denies(self):
        matrix = PermissionMatrix.from_grants([])
        assert not matrix.is_permitted("expense", "approve", ActorRole.ADMIN)

    def test_grants_merge(self):
        matrix = PermissionMatrix.from_grants([
            ("expense", "approve", ["principal"]),
            ("expense", "approve", [ActorRole.ADMIN]),
        ])
        assert matrix.roles_for("expense", "approve") == frozenset(
            {ActorRole.PRINCIPAL, ActorRole.ADMIN}
        )
        assert not matrix.is_permitted("expense", "approve", ActorRole.EMPLOYEE)


class TestWorkflowValidation:
    def test_find_transition_and_actions(self):
        wf = Workflow(
            name="w",
            description="",
            initial_state="a",
            states=("a", "b", "c"),
            transitions=(Transition("a", "b", "go"), Transition("a", "c", "stop")),
            terminal_states=("b", "c"),
        )
        assert wf.find_transition("a", "go").to_state == "b"
        assert wf.find_transition("b", "go") is None
        assert wf.actions_from("a") == ("go", "stop")
        assert wf.actions == frozenset({"go", "stop"})

    def test_unknown_initial_state(self):
        with pytest.raises(ValueError, match="initial state"):
            Workflow("w", "", "z", ("a",), ())

    def test_unknown_transition_state(self):
        with pytest.raises(ValueError, match="unknown state"):
            Workflow("w", "", "a", ("a",), (Transition("a", "b", "go"),))

    def test_terminal_state_with_outgoing_edge(self):
        with pytest.raises(ValueError, match="terminal"):
            Workflow(
                "w", "", "a", ("a", "b"),
                (Transition("a", "b", "go"), Transition("b", "a", "back")),
                terminal_states=("b",),
            )

    def test_duplicate_action_from_state(self):
        with pytest.raises(ValueError, match="duplicate"):
            Workflow(
                "w", "", "a", ("a", "b", "c"),
                (Transition("a", "b", "go"), Transition("a", "c", "go")),
            )

    def test_unknown_deletable_state(self):
        with pytest.raises(ValueError, match="deletable"):
            Workflow("w", "", "a", ("a",), (), deletable_states=("gone",))
