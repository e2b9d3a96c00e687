"""Subscription pricing and standing with the configured fee schedule.

Thin wrappers that read fees, plan limits, trial length and warning
windows from the active configuration and delegate to
``studio_engines.subscription``.
"""

from __future__ import annotations

from datetime import datetime

from studio_config import StudioConfig, get_active_config
from studio_config.bridges import build_subscription_pricing
from studio_engines.subscription import (
    PlanKind,
    Subscription,
    SubscriptionQuote,
    SubscriptionStanding,
    evaluate_standing,
    quote_plan,
    trial_subscription,
)


def quote_subscription(
    employee_count: int,
    project_count: int,
    plan: PlanKind | str = PlanKind.CUSTOM,
    config: StudioConfig | None = None,
) -> SubscriptionQuote:
    """Quote ``plan`` using the configured schedule (50 + 10/employee + 5/project by default)."""
    pricing = build_subscription_pricing(config or get_active_config())
    return quote_plan(plan, employee_count, project_count, pricing)


def start_trial(
    account_id: str,
    started_at: datetime,
    config: StudioConfig | None = None,
) -> Subscription:
    cfg = config or get_active_config()
    return trial_subscription(account_id, started_at, cfg.subscription.trial_days)


def subscription_standing(
    subscription: Subscription,
    as_of: datetime,
    config: StudioConfig | None = None,
) -> SubscriptionStanding:
    sub = (config or get_active_config()).subscription
    return evaluate_standing(
        subscription,
        as_of,
        trial_warning_days=sub.trial_warning_days,
        renewal_warning_days=sub.renewal_warning_days,
    )
