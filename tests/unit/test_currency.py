"""
Tests for currency validation and Money value objects.

- ISO 4217 codes are validated at the Money/Currency boundary.
- Rounding precision comes from the currency's minor units.
- Arithmetic and comparison refuse to mix currencies.
"""

from decimal import Decimal

import pytest

from studio_kernel.domain.currency import CurrencyRegistry
from studio_kernel.domain.values import Currency, Money
from studio_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidCurrencyError,
)


class TestCurrencyRegistry:
    def test_studio_currencies_known(self):
        for code in ("PKR", "USD", "AED", "SAR", "GBP"):
            assert CurrencyRegistry.is_valid(code)

    def test_lowercase_and_whitespace_normalized(self):
        assert CurrencyRegistry.is_valid(" pkr ")

    @pytest.mark.parametrize("code", ["", "XYZ", None, 123])
    def test_unknown_codes_invalid(self, code):
        assert not CurrencyRegistry.is_valid(code)

    def test_quantum_from_minor_units(self):
        assert CurrencyRegistry.get_quantum("PKR") == Decimal("0.01")
        assert CurrencyRegistry.get_quantum("KWD") == Decimal("0.001")
        assert CurrencyRegistry.get_quantum("JPY") == Decimal("1")


class TestCurrency:
    def test_normalizes_code(self):
        assert Currency("pkr").code == "PKR"

    def test_rejects_unknown(self):
        with pytest.raises(InvalidCurrencyError) as exc:
            Currency("ABC")
        assert exc.value.code == "INVALID_CURRENCY"


class TestMoney:
    def test_of_accepts_strings(self):
        m = Money.of("1320.00", "PKR")
        assert m.amount == Decimal("1320.00")
        assert m.currency == Currency("PKR")

    def test_unparsable_amount_rejected(self):
        with pytest.raises(InvalidAmountError):
            Money.of("lots", "PKR")

    def test_round_half_up_to_minor_unit(self):
        assert Money.of("10.005", "PKR").round().amount == Decimal("10.01")
        assert Money.of("10.0005", "KWD").round().amount == Decimal("10.001")
        assert Money.of("10.5", "JPY").round().amount == Decimal("11")

    def test_addition_and_subtraction(self):
        a = Money.of("100", "PKR")
        b = Money.of("30.50", "PKR")
        assert (a + b).amount == Decimal("130.50")
        assert (a - b).amount == Decimal("69.50")
        assert (-a).is_negative

    def test_multiplication_by_scalar(self):
        assert (Money.of("10", "USD") * 5).amount == Decimal("50")
        assert (3 * Money.of("10", "USD")).amount == Decimal("30")
        assert (Money.of("10", "USD") * Decimal("1.5")).amount == Decimal("15.0")

    def test_mixed_currency_addition_rejected(self):
        with pytest.raises(CurrencyMismatchError) as exc:
            Money.of("1", "PKR") + Money.of("1", "USD")
        assert exc.value.expected == "PKR"
        assert exc.value.received == "USD"

    def test_mixed_currency_comparison_rejected(self):
        with pytest.raises(CurrencyMismatchError):
            Money.of("1", "PKR") < Money.of("2", "USD")

    def test_comparisons(self):
        assert Money.of("1", "PKR") < Money.of("2", "PKR")
        assert Money.of("2", "PKR") >= Money.of("2.00", "PKR")

    def test_zero(self):
        z = Money.zero("PKR")
        assert z.is_zero
        assert not z.is_negative

    def test_immutable(self):
        m = Money.of("1", "PKR")
        with pytest.raises(AttributeError):
            m.amount = Decimal("2")
