"""
Pytest fixtures for the studio finance test suite.

Provides:
- Structured logging configured once per session
- A captured-logs fixture returning parsed JSON records
- Deterministic clock and common actors / records
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from studio_kernel.domain.clock import DeterministicClock
from studio_kernel.domain.records import (
    Division,
    Expense,
    InvoiceLineItem,
    Item,
    TimesheetEntry,
)
from studio_kernel.domain.roles import Actor, ActorRole
from studio_kernel.domain.values import Money
from studio_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture studio_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            summarize(divisions, items)
            logs = captured_logs()
            assert any(r["message"] == "STUDIO_ENGINE_TRACE" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("studio_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock and actors
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock()


@pytest.fixture
def principal() -> Actor:
    return Actor("usr-principal", ActorRole.PRINCIPAL)


@pytest.fixture
def employee() -> Actor:
    return Actor("emp-1", ActorRole.EMPLOYEE)


@pytest.fixture
def other_employee() -> Actor:
    return Actor("emp-2", ActorRole.EMPLOYEE)


@pytest.fixture
def accountant() -> Actor:
    return Actor("usr-accounts", ActorRole.ACCOUNTANT)


@pytest.fixture
def client_actor() -> Actor:
    return Actor("cli-1", ActorRole.CLIENT)


# =============================================================================
# Records
# =============================================================================


@pytest.fixture
def pending_expense() -> Expense:
    return Expense(
        id="exp-1",
        employee_id="emp-1",
        project_id="prj-1",
        amount=Money.of("4500", "PKR"),
        description="Site visit fuel",
    )


@pytest.fixture
def draft_timesheet() -> TimesheetEntry:
    return TimesheetEntry(
        id="ts-1",
        employee_id="emp-1",
        hours_worked=Decimal("7.5"),
        project_id="prj-1",
        work_date=date(2024, 1, 1),
    )


@pytest.fixture
def divisions() -> list[Division]:
    return [
        Division("div-civil", "prj-1", "Civil Works"),
        Division("div-elec", "prj-1", "Electrical"),
        Division("div-finish", "prj-1", "Finishes"),
    ]


@pytest.fixture
def items() -> list[Item]:
    return [
        Item("it-1", "div-civil", "Cement bags", "bag", Decimal("200"), Decimal("1450"), "High", "Delivered"),
        Item("it-2", "div-civil", "Steel bars", "ton", Decimal("3"), Decimal("265000"), "High", "Purchased"),
        Item("it-3", "div-elec", "Cabling", "m", Decimal("500"), Decimal("180"), "Mid", "Installed"),
        Item("it-4", "div-elec", "Switch plates", "pc", Decimal("40"), Decimal("650"), "Low", "Not Started"),
    ]


@pytest.fixture
def design_fee_line() -> InvoiceLineItem:
    return InvoiceLineItem("Design fee", Decimal("1"), Money.of("1000", "PKR"), "design")
