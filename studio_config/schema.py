"""
StudioConfig schema.

The typed form of ``studio.yaml``.  YAML is parsed into these frozen
dataclasses by ``studio_config.loader``; bridges translate them into
kernel and engine inputs.  Rates and fees are Decimal, never float.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

# ---------------------------------------------------------------------------
# Invoicing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InvoiceDefaults:
    """Rates and terms applied to a new invoice when the caller gives none."""

    tax_rate: Decimal
    overhead_rate: Decimal
    ga_rate: Decimal
    payment_terms: str = "Net 30"
    due_days: int = 30


# ---------------------------------------------------------------------------
# Subscription
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlanConfig:
    """A catalog plan.  ``None`` price means the per-seat formula applies."""

    kind: str  # individual, custom, organization
    flat_price: Decimal | None = None
    max_employees: int | None = None
    max_projects: int | None = None


@dataclass(frozen=True)
class SubscriptionConfig:
    base_fee: Decimal
    employee_fee: Decimal
    project_fee: Decimal
    currency: str = "USD"
    trial_days: int = 3
    trial_warning_days: int = 2
    renewal_warning_days: int = 7
    plans: tuple[PlanConfig, ...] = ()


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PermissionGrant:
    """Roles allowed to perform ``action`` in ``workflow``."""

    workflow: str  # expense, timesheet, invoice
    action: str
    roles: tuple[str, ...]


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StudioConfig:
    """Complete runtime configuration with its source checksum."""

    config_id: str
    version: int
    currency: str
    invoice: InvoiceDefaults
    subscription: SubscriptionConfig
    permissions: tuple[PermissionGrant, ...] = ()
    checksum: str = ""
