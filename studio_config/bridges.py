"""
Config -> Kernel/Engine Bridges.

Functions that convert a ``StudioConfig`` into the inputs the kernel and
engines accept.  They live in studio_config (the producer) because the
kernel must never import studio_config.

Usage:
    from studio_config import get_active_config
    from studio_config.bridges import build_permission_matrix, build_subscription_pricing

    config = get_active_config()
    permissions = build_permission_matrix(config)
    pricing = build_subscription_pricing(config)
"""

from __future__ import annotations

from studio_config.schema import StudioConfig
from studio_engines.subscription import PlanDefinition, PlanKind, SubscriptionPricing
from studio_kernel.domain.permissions import PermissionMatrix


def build_permission_matrix(config: StudioConfig) -> PermissionMatrix:
    """Build the ``(workflow, action) -> roles`` matrix from the grants."""
    return PermissionMatrix.from_grants(
        (grant.workflow, grant.action, grant.roles) for grant in config.permissions
    )


def build_subscription_pricing(config: StudioConfig) -> SubscriptionPricing:
    sub = config.subscription
    return SubscriptionPricing(
        base_fee=sub.base_fee,
        employee_fee=sub.employee_fee,
        project_fee=sub.project_fee,
        currency=sub.currency,
        plans=tuple(
            PlanDefinition(
                kind=PlanKind(plan.kind),
                flat_price=plan.flat_price,
                max_employees=plan.max_employees,
                max_projects=plan.max_projects,
            )
            for plan in sub.plans
        ),
    )
