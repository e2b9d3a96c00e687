"""
studio_engines.subscription -- Subscription pricing and account standing.

Responsibility:
    Quote the recurring fee for a studio account (base fee plus per-employee
    and per-project fees), price the fixed plans, and evaluate whether an
    account's trial or paid period is active, close to lapsing, expired,
    or blocked.  Decide whether an account may add seats or projects and
    whether its exports are allowed or watermarked.

Architecture position:
    Engines -- pure calculation layer, zero I/O, zero clock reads.
    Fee schedules and plan limits come from configuration via
    ``studio_config.bridges``.

Invariants enforced:
    - ``total = base_fee + employee_count * employee_fee
      + project_count * project_fee``; no included allowances.
    - Fixed plans (Individual, Organization) are flat-priced and capped.
    - ``days_remaining`` is rounded up to whole days and never negative.

Failure modes:
    - InvalidCountError for negative or non-integer counts.
    - InvalidAmountError for negative fees.
    - PlanLimitExceededError when counts exceed a fixed plan's limits.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

from studio_engines.tracer import traced_engine
from studio_kernel.domain.money import require_amount, require_count
from studio_kernel.domain.values import Money
from studio_kernel.exceptions import PlanLimitExceededError
from studio_kernel.logging_config import get_logger

logger = get_logger("engines.subscription")

DEFAULT_SUBSCRIPTION_CURRENCY = "USD"


# ============================================================================
# Pricing
# ============================================================================


@dataclass(frozen=True)
class SubscriptionQuote:
    """Fee breakdown; ``employee_fee``/``project_fee`` are the extended charges."""

    base_fee: Money
    employee_count: int
    project_count: int
    employee_unit_fee: Money
    project_unit_fee: Money
    employee_fee: Money
    project_fee: Money
    total: Money


@traced_engine(
    "subscription_quote", "1.0",
    fingerprint_fields=("employee_count", "project_count", "base_fee", "employee_fee", "project_fee"),
)
def quote(
    employee_count: int,
    project_count: int,
    base_fee: Decimal | int | str,
    employee_fee: Decimal | int | str,
    project_fee: Decimal | int | str,
    currency: str = DEFAULT_SUBSCRIPTION_CURRENCY,
) -> SubscriptionQuote:
    """Quote a custom plan: base fee plus per-seat and per-project fees.

    ``quote(5, 10, 50, 10, 5)`` totals 150 (50 + 50 + 50).
    """
    employees = require_count(employee_count, "employee_count")
    projects = require_count(project_count, "project_count")
    base = Money(require_amount(base_fee, "base_fee"), currency)
    per_employee = Money(require_amount(employee_fee, "employee_fee"), currency)
    per_project = Money(require_amount(project_fee, "project_fee"), currency)

    employee_total = per_employee * employees
    project_total = per_project * projects
    return SubscriptionQuote(
        base_fee=base,
        employee_count=employees,
        project_count=projects,
        employee_unit_fee=per_employee,
        project_unit_fee=per_project,
        employee_fee=employee_total,
        project_fee=project_total,
        total=base + employee_total + project_total,
    )


class PlanKind(str, Enum):
    INDIVIDUAL = "individual"
    CUSTOM = "custom"
    ORGANIZATION = "organization"


@dataclass(frozen=True)
class PlanDefinition:
    """A plan from the catalog. ``None`` limits mean unlimited."""

    kind: PlanKind
    flat_price: Decimal | None = None
    max_employees: int | None = None
    max_projects: int | None = None


@dataclass(frozen=True)
class SubscriptionPricing:
    """Fee schedule for custom plans plus the fixed-plan catalog."""

    base_fee: Decimal
    employee_fee: Decimal
    project_fee: Decimal
    currency: str = DEFAULT_SUBSCRIPTION_CURRENCY
    plans: tuple[PlanDefinition, ...] = ()

    def plan(self, kind: PlanKind) -> PlanDefinition:
        for p in self.plans:
            if p.kind == kind:
                return p
        if kind == PlanKind.CUSTOM:
            return PlanDefinition(kind=PlanKind.CUSTOM)
        raise KeyError(f"Plan not configured: {kind.value}")


def _check_limit(plan: PlanDefinition, dimension: str, requested: int, limit: int | None) -> None:
    if limit is not None and requested > limit:
        raise PlanLimitExceededError(plan.kind.value, dimension, requested, limit)


def quote_plan(
    kind: PlanKind | str,
    employee_count: int,
    project_count: int,
    pricing: SubscriptionPricing,
) -> SubscriptionQuote:
    """Quote ``kind`` for the given head-count and project count.

    Fixed plans charge their flat price as the base fee; custom plans use
    the per-seat/per-project schedule.
    """
    plan = pricing.plan(PlanKind(kind))
    employees = require_count(employee_count, "employee_count")
    projects = require_count(project_count, "project_count")
    _check_limit(plan, "employees", employees, plan.max_employees)
    _check_limit(plan, "projects", projects, plan.max_projects)

    logger.debug(
        "plan_quoted",
        extra={"plan": plan.kind.value, "employee_count": employees, "project_count": projects},
    )

    if plan.flat_price is None:
        return quote(
            employees, projects,
            pricing.base_fee, pricing.employee_fee, pricing.project_fee,
            pricing.currency,
        )
    return quote(employees, projects, plan.flat_price, 0, 0, pricing.currency)


# ============================================================================
# Standing
# ============================================================================


class SubscriptionStatus(str, Enum):
    """Stored account subscription status."""

    TRIAL = "trial"
    ACTIVE = "active"
    EXPIRED = "expired"
    BLOCKED = "blocked"


class StandingState(str, Enum):
    """Computed standing shown to the account and used for gating."""

    ACTIVE = "active"
    WARNING = "warning"
    EXPIRED = "expired"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class Subscription:
    account_id: str
    status: SubscriptionStatus
    plan: PlanKind = PlanKind.CUSTOM
    trial_started_at: datetime | None = None
    trial_ends_at: datetime | None = None
    subscription_ends_at: datetime | None = None
    max_employees: int = 0
    max_projects: int = 0
    current_employees: int = 0
    current_projects: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", SubscriptionStatus(self.status))
        object.__setattr__(self, "plan", PlanKind(self.plan))
        for field in ("max_employees", "max_projects", "current_employees", "current_projects"):
            object.__setattr__(self, field, require_count(getattr(self, field), field))


@dataclass(frozen=True)
class SubscriptionStanding:
    state: StandingState
    days_remaining: int
    message: str

    @property
    def allows_access(self) -> bool:
        return self.state in (StandingState.ACTIVE, StandingState.WARNING)


def trial_subscription(account_id: str, started_at: datetime, trial_days: int = 3) -> Subscription:
    """A new account's trial: no seats, no projects, ends ``trial_days`` later."""
    days = require_count(trial_days, "trial_days")
    return Subscription(
        account_id=account_id,
        status=SubscriptionStatus.TRIAL,
        trial_started_at=started_at,
        trial_ends_at=started_at + timedelta(days=days),
    )


def _days_until(end: datetime, as_of: datetime) -> int:
    return math.ceil((end - as_of).total_seconds() / 86400)


def _plural(days: int) -> str:
    return "day" if days == 1 else "days"


def evaluate_standing(
    subscription: Subscription,
    as_of: datetime,
    trial_warning_days: int = 2,
    renewal_warning_days: int = 7,
) -> SubscriptionStanding:
    """Classify ``subscription`` as active, warning, expired, or blocked at ``as_of``."""
    if subscription.status == SubscriptionStatus.BLOCKED:
        return SubscriptionStanding(
            StandingState.BLOCKED, 0,
            "Your account has been blocked. Please purchase a package to continue.",
        )
    if subscription.status == SubscriptionStatus.EXPIRED:
        return SubscriptionStanding(
            StandingState.EXPIRED, 0, "Your subscription has expired. Renew to continue.",
        )

    if subscription.status == SubscriptionStatus.TRIAL:
        if subscription.trial_ends_at is None:
            raise ValueError(f"Trial subscription {subscription.account_id} has no trial end")
        days = _days_until(subscription.trial_ends_at, as_of)
        if days <= 0:
            return SubscriptionStanding(
                StandingState.EXPIRED, 0,
                "Your free trial has expired. Purchase a package to continue.",
            )
        if days <= trial_warning_days:
            return SubscriptionStanding(
                StandingState.WARNING, days,
                f"Your free trial expires in {days} {_plural(days)}.",
            )
        return SubscriptionStanding(
            StandingState.ACTIVE, days, f"Free trial: {days} {_plural(days)} remaining",
        )

    # An active plan without an end date has no paid period.
    if subscription.subscription_ends_at is None:
        return SubscriptionStanding(StandingState.EXPIRED, 0, "No active subscription")
    days = _days_until(subscription.subscription_ends_at, as_of)
    if days <= 0:
        return SubscriptionStanding(
            StandingState.EXPIRED, 0, "Your subscription has expired. Renew to continue.",
        )
    if days <= renewal_warning_days:
        return SubscriptionStanding(
            StandingState.WARNING, days,
            f"Your subscription expires in {days} {_plural(days)}.",
        )
    return SubscriptionStanding(
        StandingState.ACTIVE, days, f"Active subscription: {days} {_plural(days)} remaining",
    )


# ============================================================================
# Entitlements
# ============================================================================


def can_add_employee(subscription: Subscription) -> bool:
    """Seats can be added only on a paid plan with headroom; never during a trial."""
    if subscription.status in (SubscriptionStatus.BLOCKED, SubscriptionStatus.TRIAL):
        return False
    return subscription.current_employees < subscription.max_employees


def can_add_project(subscription: Subscription) -> bool:
    if subscription.status in (SubscriptionStatus.BLOCKED, SubscriptionStatus.TRIAL):
        return False
    return subscription.current_projects < subscription.max_projects


def can_export(subscription: Subscription) -> bool:
    """PDF and Excel exports are for paid (active) subscriptions only."""
    return subscription.status == SubscriptionStatus.ACTIVE


def needs_watermark(subscription: Subscription) -> bool:
    """Trial exports carry a watermark."""
    return subscription.status == SubscriptionStatus.TRIAL
