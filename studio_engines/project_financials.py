"""
Project Financials Engine.

Pure functions with deterministic behavior. No I/O.

Builds a studio's project estimate from its cost components:

    base construction = BOQ + labor + procurement + subcontract
    contingency       = base * contingency% / 100
    overhead          = base * overhead% / 100
    construction est. = base + contingency + overhead
    design fee        = per fee model (lump sum, per area unit, % of estimate)
    supervision fee   = construction estimate * supervision% / 100
    project total     = construction estimate + design fee + supervision fee

Contingency and overhead are both taken on the base (additive), the same
model as the invoice cascade.

Usage:
    from studio_engines.project_financials import (
        AreaUnit, FeeModel, FeeModelType, ProjectCostInput,
        calculate_project_financials,
    )

    result = calculate_project_financials(ProjectCostInput(
        boq_total=Money.of("1000000", "PKR"),
        contingency_percent=Decimal("5"),
        overhead_percent=Decimal("10"),
        fee_model=FeeModel(FeeModelType.PER_UNIT, Decimal("150"), AreaUnit.SQFT),
        project_area=Decimal("2500"),
        project_area_unit=AreaUnit.SQFT,
    ))
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from studio_engines.tracer import traced_engine
from studio_kernel.domain.money import ZERO, percent_of, require_amount, require_rate
from studio_kernel.domain.values import Money
from studio_kernel.exceptions import CurrencyMismatchError, InvalidAmountError
from studio_kernel.logging_config import get_logger

logger = get_logger("engines.project_financials")


class AreaUnit(str, Enum):
    SQM = "sqm"
    SQFT = "sqft"
    KANAL = "kanal"
    YARD = "yard"


# Square metres is the pivot unit.
_TO_SQM: dict[AreaUnit, Decimal] = {
    AreaUnit.SQM: Decimal("1"),
    AreaUnit.SQFT: Decimal("0.092903"),
    AreaUnit.KANAL: Decimal("505.857"),
    AreaUnit.YARD: Decimal("0.836127"),
}

_FROM_SQM: dict[AreaUnit, Decimal] = {
    AreaUnit.SQM: Decimal("1"),
    AreaUnit.SQFT: Decimal("10.7639"),
    AreaUnit.KANAL: Decimal("0.001977"),
    AreaUnit.YARD: Decimal("1.19599"),
}


def convert_area(value: Decimal, from_unit: AreaUnit | str, to_unit: AreaUnit | str) -> Decimal:
    """Convert an area between units through square metres."""
    source = AreaUnit(from_unit)
    target = AreaUnit(to_unit)
    area = require_amount(value, "area")
    if source == target:
        return area
    return area * _TO_SQM[source] * _FROM_SQM[target]


class FeeModelType(str, Enum):
    LUMP_SUM = "lump_sum"
    PER_UNIT = "per_unit"
    PERCENTAGE = "percentage"
    HYBRID = "hybrid"


@dataclass(frozen=True)
class FeeModel:
    """How the design fee is charged.

    ``value`` is an amount for lump sum / hybrid, a rate per ``unit`` of
    area for per-unit, and a percentage of the construction estimate for
    percentage.
    """

    type: FeeModelType
    value: Decimal
    unit: AreaUnit | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", FeeModelType(self.type))
        if self.type == FeeModelType.PERCENTAGE:
            object.__setattr__(self, "value", require_rate(self.value, "fee_model.value"))
        else:
            object.__setattr__(self, "value", require_amount(self.value, "fee_model.value"))
        if self.unit is not None:
            object.__setattr__(self, "unit", AreaUnit(self.unit))


def calculate_design_fee(
    fee_model: FeeModel,
    project_area: Decimal,
    project_area_unit: AreaUnit,
    construction_estimate: Decimal | None = None,
) -> Decimal:
    """Design fee under ``fee_model``; 0 when the model lacks what it needs.

    Hybrid fees currently charge only their lump-sum part.
    """
    if fee_model.type in (FeeModelType.LUMP_SUM, FeeModelType.HYBRID):
        return fee_model.value
    if fee_model.type == FeeModelType.PER_UNIT:
        if fee_model.unit is None:
            return ZERO
        return fee_model.value * convert_area(project_area, project_area_unit, fee_model.unit)
    if not construction_estimate:
        return ZERO
    return percent_of(construction_estimate, fee_model.value)


def calculate_supervision_fee(construction_estimate: Decimal, supervision_percent: Decimal) -> Decimal:
    return percent_of(construction_estimate, require_rate(supervision_percent, "supervision_percent"))


@dataclass(frozen=True)
class ProjectCostInput:
    """Cost components of one project estimate; all Money in one currency."""

    boq_total: Money
    labor_total: Money | None = None
    procurement_total: Money | None = None
    subcontract_total: Money | None = None
    contingency_percent: Decimal = Decimal("0")
    overhead_percent: Decimal = Decimal("0")
    fee_model: FeeModel | None = None
    project_area: Decimal | None = None
    project_area_unit: AreaUnit | None = None
    supervision_percent: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        currency = self.boq_total.currency
        for attr in ("boq_total", "labor_total", "procurement_total", "subcontract_total"):
            val = getattr(self, attr)
            if val is None:
                continue
            if val.currency != currency:
                raise CurrencyMismatchError(currency.code, val.currency.code, attr)
            if val.is_negative:
                raise InvalidAmountError(attr, val.amount)
        for attr in ("contingency_percent", "overhead_percent", "supervision_percent"):
            object.__setattr__(self, attr, require_rate(getattr(self, attr), attr))

    @property
    def base_construction_cost(self) -> Money:
        total = self.boq_total
        for attr in ("labor_total", "procurement_total", "subcontract_total"):
            val = getattr(self, attr)
            if val is not None:
                total = total + val
        return total


@dataclass(frozen=True)
class ProjectFinancials:
    boq_total: Money
    labor_total: Money
    procurement_total: Money
    subcontract_total: Money
    base_construction_cost: Money
    contingency_amount: Money
    overhead_amount: Money
    construction_estimate: Money
    design_fee: Money
    supervision_fee: Money
    project_total: Money


@traced_engine("project_financials", "1.0")
def calculate_project_financials(cost_input: ProjectCostInput) -> ProjectFinancials:
    """Roll the cost components into a rounded project estimate."""
    currency = cost_input.boq_total.currency
    zero = Money.zero(currency)
    base = cost_input.base_construction_cost

    contingency = Money(percent_of(base.amount, cost_input.contingency_percent), currency).round()
    overhead = Money(percent_of(base.amount, cost_input.overhead_percent), currency).round()
    estimate = base + contingency + overhead

    design_fee = zero
    if (
        cost_input.fee_model is not None
        and cost_input.project_area
        and cost_input.project_area_unit is not None
    ):
        design_fee = Money(
            calculate_design_fee(
                cost_input.fee_model,
                cost_input.project_area,
                cost_input.project_area_unit,
                estimate.amount,
            ),
            currency,
        ).round()

    supervision_fee = zero
    if cost_input.supervision_percent > ZERO:
        supervision_fee = Money(
            calculate_supervision_fee(estimate.amount, cost_input.supervision_percent),
            currency,
        ).round()

    result = ProjectFinancials(
        boq_total=cost_input.boq_total,
        labor_total=cost_input.labor_total or zero,
        procurement_total=cost_input.procurement_total or zero,
        subcontract_total=cost_input.subcontract_total or zero,
        base_construction_cost=base,
        contingency_amount=contingency,
        overhead_amount=overhead,
        construction_estimate=estimate,
        design_fee=design_fee,
        supervision_fee=supervision_fee,
        project_total=estimate + design_fee + supervision_fee,
    )
    logger.debug(
        "project_financials_calculated",
        extra={
            "construction_estimate": str(estimate.amount),
            "project_total": str(result.project_total.amount),
        },
    )
    return result
