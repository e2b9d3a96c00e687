"""Tests for project estimates (studio_engines.project_financials)."""

from decimal import Decimal

import pytest

from studio_engines.project_financials import (
    AreaUnit,
    FeeModel,
    FeeModelType,
    ProjectCostInput,
    calculate_design_fee,
    calculate_project_financials,
    calculate_supervision_fee,
    convert_area,
)
from studio_kernel.domain.values import Money
from studio_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidRateError,
)


def pkr(value: str) -> Money:
    return Money.of(value, "PKR")


class TestConvertArea:
    def test_same_unit_identity(self):
        assert convert_area(Decimal("2500"), "sqft", AreaUnit.SQFT) == Decimal("2500")

    def test_sqm_to_sqft(self):
        assert convert_area(Decimal("100"), AreaUnit.SQM, AreaUnit.SQFT) == Decimal("1076.3900")

    def test_kanal_to_sqft_through_sqm(self):
        assert abs(convert_area(Decimal("1"), "kanal", "sqft") - Decimal("5445")) < 1

    def test_negative_area_rejected(self):
        with pytest.raises(InvalidAmountError):
            convert_area(Decimal("-1"), "sqm", "sqft")

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            convert_area(Decimal("1"), "acre", "sqm")


class TestDesignFee:
    def test_lump_sum(self):
        fee = FeeModel(FeeModelType.LUMP_SUM, Decimal("250000"))
        assert calculate_design_fee(fee, Decimal("1"), AreaUnit.SQFT) == Decimal("250000")

    def test_per_unit_converts_area_to_fee_unit(self):
        fee = FeeModel(FeeModelType.PER_UNIT, Decimal("100"), AreaUnit.SQM)
        assert calculate_design_fee(fee, Decimal("1000"), AreaUnit.SQFT) == Decimal("9290.300000")

    def test_per_unit_without_unit_is_zero(self):
        fee = FeeModel(FeeModelType.PER_UNIT, Decimal("100"))
        assert calculate_design_fee(fee, Decimal("1000"), AreaUnit.SQFT) == Decimal("0")

    def test_percentage_of_estimate(self):
        fee = FeeModel(FeeModelType.PERCENTAGE, Decimal("8"))
        assert calculate_design_fee(fee, Decimal("1"), AreaUnit.SQM, Decimal("1380000")) == Decimal("110400")

    def test_percentage_without_estimate_is_zero(self):
        fee = FeeModel(FeeModelType.PERCENTAGE, Decimal("8"))
        assert calculate_design_fee(fee, Decimal("1"), AreaUnit.SQM) == Decimal("0")

    def test_percentage_over_100_rejected(self):
        with pytest.raises(InvalidRateError):
            FeeModel("percentage", Decimal("120"))

    def test_supervision_fee(self):
        assert calculate_supervision_fee(Decimal("1380000"), Decimal("2")) == Decimal("27600")


class TestProjectFinancials:
    def test_full_estimate(self):
        result = calculate_project_financials(ProjectCostInput(
            boq_total=pkr("1000000"),
            labor_total=pkr("200000"),
            contingency_percent=Decimal("5"),
            overhead_percent=Decimal("10"),
            fee_model=FeeModel(FeeModelType.PER_UNIT, Decimal("150"), AreaUnit.SQFT),
            project_area=Decimal("2500"),
            project_area_unit=AreaUnit.SQFT,
            supervision_percent=Decimal("2"),
        ))
        assert result.base_construction_cost.amount == Decimal("1200000")
        assert result.contingency_amount.amount == Decimal("60000")
        assert result.overhead_amount.amount == Decimal("120000")
        assert result.construction_estimate.amount == Decimal("1380000")
        assert result.design_fee.amount == Decimal("375000")
        assert result.supervision_fee.amount == Decimal("27600")
        assert result.project_total.amount == Decimal("1782600")

    def test_contingency_and_overhead_are_additive(self):
        result = calculate_project_financials(ProjectCostInput(
            boq_total=pkr("1000"),
            contingency_percent=Decimal("10"),
            overhead_percent=Decimal("10"),
        ))
        assert result.contingency_amount == result.overhead_amount
        assert result.construction_estimate.amount == Decimal("1200")

    def test_boq_only(self):
        result = calculate_project_financials(ProjectCostInput(boq_total=pkr("5000")))
        assert result.project_total.amount == Decimal("5000")
        assert result.labor_total.is_zero
        assert result.design_fee.is_zero

    def test_fee_model_without_area_charges_nothing(self):
        result = calculate_project_financials(ProjectCostInput(
            boq_total=pkr("5000"),
            fee_model=FeeModel(FeeModelType.LUMP_SUM, Decimal("100")),
        ))
        assert result.design_fee.is_zero

    def test_mixed_currency_rejected(self):
        with pytest.raises(CurrencyMismatchError):
            ProjectCostInput(boq_total=pkr("1"), labor_total=Money.of("1", "USD"))

    def test_negative_component_rejected(self):
        with pytest.raises(InvalidAmountError):
            ProjectCostInput(boq_total=pkr("1"), subcontract_total=pkr("-1"))

    def test_invalid_rate_rejected(self):
        with pytest.raises(InvalidRateError):
            ProjectCostInput(boq_total=pkr("1"), supervision_percent=Decimal("101"))
