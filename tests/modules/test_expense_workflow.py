"""
Expense lifecycle with the packaged permission matrix.

Pending --approve--> Approved --reimburse--> Reimbursed
Pending --reject---> Rejected
"""

from datetime import datetime, timezone

import pytest

from studio_kernel.domain.records import ExpenseStatus
from studio_kernel.domain.roles import Actor, ActorRole
from studio_kernel.exceptions import ForbiddenTransitionError, IllegalTransitionError
from studio_modules.expense import (
    authorize_expense_creation,
    authorize_expense_deletion,
    expense_actions,
    transition_expense,
)

NOW = datetime(2024, 1, 2, 9, 30, tzinfo=timezone.utc)


class TestRoleGating:
    def test_employee_cannot_approve(self, pending_expense, employee):
        result = transition_expense(pending_expense, "approve", employee, now=NOW)
        assert not result.success
        assert isinstance(result.error, ForbiddenTransitionError)
        assert result.record.status is ExpenseStatus.PENDING

    def test_principal_approves(self, pending_expense, principal):
        result = transition_expense(pending_expense, "approve", principal, now=NOW)
        assert result.success
        assert result.record.status is ExpenseStatus.APPROVED
        assert result.record.approved_by == principal.actor_id
        assert result.record.approved_at == NOW

    def test_legacy_principle_role_approves(self, pending_expense):
        result = transition_expense(pending_expense, "approve", Actor("p", "principle"), now=NOW)
        assert result.success

    def test_admin_approves(self, pending_expense):
        assert transition_expense(pending_expense, "approve", Actor("a", ActorRole.ADMIN), now=NOW).success

    @pytest.mark.parametrize("role", [ActorRole.ACCOUNTANT, ActorRole.HR, ActorRole.CLIENT])
    def test_other_roles_cannot_reimburse(self, pending_expense, principal, role):
        approved = transition_expense(pending_expense, "approve", principal, now=NOW).unwrap()
        result = transition_expense(approved, "reimburse", Actor("x", role), now=NOW)
        assert isinstance(result.error, ForbiddenTransitionError)


class TestLifecycle:
    def test_approve_then_reimburse(self, pending_expense, principal):
        approved = transition_expense(pending_expense, "approve", principal, now=NOW).unwrap()
        reimbursed = transition_expense(approved, "reimburse", principal, now=NOW).unwrap()
        assert reimbursed.status is ExpenseStatus.REIMBURSED
        assert reimbursed.reimbursed_by == principal.actor_id
        assert reimbursed.approved_by == principal.actor_id
        assert reimbursed.version == 2

    def test_reject_with_reason(self, pending_expense, principal):
        rejected = transition_expense(
            pending_expense, "reject", principal, now=NOW, reason="Personal expense"
        ).unwrap()
        assert rejected.status is ExpenseStatus.REJECTED
        assert rejected.rejection_reason == "Personal expense"

    @pytest.mark.parametrize("action", ["approve", "reject", "reimburse"])
    def test_rejected_is_final(self, pending_expense, principal, action):
        rejected = transition_expense(pending_expense, "reject", principal, now=NOW).unwrap()
        result = transition_expense(rejected, action, principal, now=NOW)
        assert isinstance(result.error, IllegalTransitionError)
        assert result.record is rejected

    @pytest.mark.parametrize("action", ["approve", "reject", "reimburse"])
    def test_reimbursed_is_final(self, pending_expense, principal, action):
        approved = transition_expense(pending_expense, "approve", principal, now=NOW).unwrap()
        reimbursed = transition_expense(approved, "reimburse", principal, now=NOW).unwrap()
        assert isinstance(
            transition_expense(reimbursed, action, principal, now=NOW).error,
            IllegalTransitionError,
        )

    def test_cannot_approve_twice(self, pending_expense, principal):
        approved = transition_expense(pending_expense, "approve", principal, now=NOW).unwrap()
        assert isinstance(
            transition_expense(approved, "approve", principal, now=NOW).error,
            IllegalTransitionError,
        )


class TestFiling:
    def test_employee_files_own_claim(self, pending_expense, employee):
        assert authorize_expense_creation(pending_expense, employee).success

    def test_cannot_file_for_another_employee(self, pending_expense, other_employee):
        result = authorize_expense_creation(pending_expense, other_employee)
        assert isinstance(result.error, ForbiddenTransitionError)

    def test_principal_cannot_file_on_behalf(self, pending_expense, principal):
        assert not authorize_expense_creation(pending_expense, principal).success

    def test_client_cannot_file(self, pending_expense, client_actor):
        result = authorize_expense_creation(pending_expense, client_actor)
        assert isinstance(result.error, ForbiddenTransitionError)

    def test_claim_must_be_pending(self, pending_expense, employee, principal):
        approved = transition_expense(pending_expense, "approve", principal, now=NOW).unwrap()
        result = authorize_expense_creation(approved, employee)
        assert isinstance(result.error, IllegalTransitionError)


class TestDeletionAndActions:
    def test_owner_deletes_pending(self, pending_expense, employee):
        assert authorize_expense_deletion(pending_expense, employee).removed

    def test_non_owner_cannot_delete(self, pending_expense, other_employee, principal):
        assert not authorize_expense_deletion(pending_expense, other_employee).success
        assert not authorize_expense_deletion(pending_expense, principal).success

    def test_client_cannot_delete_even_own_id(self, pending_expense):
        result = authorize_expense_deletion(pending_expense, Actor("emp-1", ActorRole.CLIENT))
        assert isinstance(result.error, ForbiddenTransitionError)

    def test_available_actions(self, pending_expense, principal, employee):
        assert expense_actions(pending_expense, principal) == ("approve", "reject")
        assert expense_actions(pending_expense, employee) == ("delete",)
