"""
Configuration Loader (``studio_config.loader``).

Responsibility
--------------
Loads ``studio.yaml`` and parses it into typed ``studio_config.schema``
dataclasses.  Callers outside this package use
``studio_config.get_active_config()`` instead.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Rates are percentages in [0, 100], fees are non-negative, role names are
  known role claims, and currencies are known ISO 4217 codes.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the raw
  document for configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing keys or invalid values  -> ``ConfigError`` naming the file.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from studio_config.schema import (
    InvoiceDefaults,
    PermissionGrant,
    PlanConfig,
    StudioConfig,
    SubscriptionConfig,
)
from studio_kernel.domain.currency import CurrencyRegistry
from studio_kernel.domain.money import require_amount, require_count, require_rate
from studio_kernel.domain.roles import expand_roles
from studio_kernel.exceptions import CalculationError, ConfigError

_PLAN_KINDS = ("individual", "custom", "organization")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _currency(value: Any) -> str:
    code = str(value).upper().strip()
    if not CurrencyRegistry.is_valid(code):
        raise ValueError(f"unknown currency {value!r}")
    return code


def _optional_count(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    return None if value is None else require_count(value, key)


def parse_invoice_defaults(data: dict[str, Any]) -> InvoiceDefaults:
    """Parse the ``invoice`` section."""
    return InvoiceDefaults(
        tax_rate=require_rate(str(data["tax_rate"]), "invoice.tax_rate"),
        overhead_rate=require_rate(str(data["overhead_rate"]), "invoice.overhead_rate"),
        ga_rate=require_rate(str(data["ga_rate"]), "invoice.ga_rate"),
        payment_terms=data.get("payment_terms", "Net 30"),
        due_days=require_count(data.get("due_days", 30), "invoice.due_days"),
    )


def parse_plan(data: dict[str, Any]) -> PlanConfig:
    """Parse one entry of ``subscription.plans``."""
    kind = data["kind"]
    if kind not in _PLAN_KINDS:
        raise ValueError(f"unknown plan kind {kind!r}")
    price = data.get("flat_price")
    return PlanConfig(
        kind=kind,
        flat_price=None if price is None else require_amount(str(price), f"{kind}.flat_price"),
        max_employees=_optional_count(data, "max_employees"),
        max_projects=_optional_count(data, "max_projects"),
    )


def parse_subscription(data: dict[str, Any]) -> SubscriptionConfig:
    """Parse the ``subscription`` section."""
    return SubscriptionConfig(
        base_fee=require_amount(str(data["base_fee"]), "subscription.base_fee"),
        employee_fee=require_amount(str(data["employee_fee"]), "subscription.employee_fee"),
        project_fee=require_amount(str(data["project_fee"]), "subscription.project_fee"),
        currency=_currency(data.get("currency", "USD")),
        trial_days=require_count(data.get("trial_days", 3), "subscription.trial_days"),
        trial_warning_days=require_count(
            data.get("trial_warning_days", 2), "subscription.trial_warning_days"
        ),
        renewal_warning_days=require_count(
            data.get("renewal_warning_days", 7), "subscription.renewal_warning_days"
        ),
        plans=tuple(parse_plan(p) for p in data.get("plans", ())),
    )


def parse_permission_grants(data: dict[str, Any]) -> tuple[PermissionGrant, ...]:
    """Parse the ``permissions`` section: ``{workflow: {action: [roles]}}``.

    The role ``staff`` expands to every non-client role.
    """
    grants = []
    for workflow, actions in sorted(data.items()):
        for action, roles in sorted((actions or {}).items()):
            parsed = tuple(r.value for r in expand_roles(roles or ()))
            grants.append(PermissionGrant(workflow=workflow, action=action, roles=parsed))
    return tuple(grants)


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON form of ``data``; deterministic."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_config(data: dict[str, Any], source: str | None = None) -> StudioConfig:
    """Parse a whole document, wrapping every failure in ``ConfigError``."""
    try:
        return StudioConfig(
            config_id=data["config_id"],
            version=require_count(data.get("version", 1), "version"),
            currency=_currency(data["currency"]),
            invoice=parse_invoice_defaults(data["invoice"]),
            subscription=parse_subscription(data["subscription"]),
            permissions=parse_permission_grants(data.get("permissions") or {}),
            checksum=compute_checksum(data),
        )
    except KeyError as exc:
        raise ConfigError(f"Missing required key {exc}", source) from exc
    except (ValueError, CalculationError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}", source) from exc


def load_config_file(path: Path) -> StudioConfig:
    """Load and parse ``path``."""
    return parse_config(load_yaml_file(path), str(path))
