"""Currency -- ISO 4217 registry with minor-unit precision."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    minor_units: int
    name: str

    @property
    def quantum(self) -> Decimal:
        """Smallest representable amount, used as the Decimal.quantize() target."""
        if self.minor_units == 0:
            return Decimal("1")
        return Decimal("0." + "0" * (self.minor_units - 1) + "1")


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies studios bill and pay in."""

    DEFAULT_MINOR_UNITS: ClassVar[int] = 2

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        # Home market and region
        "PKR": CurrencyInfo("PKR", 2, "Pakistani Rupee"),
        "INR": CurrencyInfo("INR", 2, "Indian Rupee"),
        "BDT": CurrencyInfo("BDT", 2, "Bangladeshi Taka"),
        "LKR": CurrencyInfo("LKR", 2, "Sri Lankan Rupee"),
        "AED": CurrencyInfo("AED", 2, "UAE Dirham"),
        "SAR": CurrencyInfo("SAR", 2, "Saudi Riyal"),
        "QAR": CurrencyInfo("QAR", 2, "Qatari Riyal"),
        "BHD": CurrencyInfo("BHD", 3, "Bahraini Dinar"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
        "OMR": CurrencyInfo("OMR", 3, "Omani Rial"),
        "TRY": CurrencyInfo("TRY", 2, "Turkish Lira"),
        # Major currencies
        "USD": CurrencyInfo("USD", 2, "US Dollar"),
        "EUR": CurrencyInfo("EUR", 2, "Euro"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar"),
        "AUD": CurrencyInfo("AUD", 2, "Australian Dollar"),
        "CNY": CurrencyInfo("CNY", 2, "Chinese Yuan"),
        "SGD": CurrencyInfo("SGD", 2, "Singapore Dollar"),
        # Zero minor-unit currencies
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen"),
        "KRW": CurrencyInfo("KRW", 0, "South Korean Won"),
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is known."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_minor_units(cls, code: str) -> int:
        """Digits after the decimal point for a currency."""
        info = cls.get_info(code)
        return info.minor_units if info else cls.DEFAULT_MINOR_UNITS

    @classmethod
    def get_quantum(cls, code: str) -> Decimal:
        """Quantize target derived from the currency's minor units."""
        minor_units = cls.get_minor_units(code)
        if minor_units == 0:
            return Decimal("1")
        return Decimal("0." + "0" * (minor_units - 1) + "1")

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all valid currency codes."""
        return frozenset(cls._CURRENCIES.keys())
