"""
Money arithmetic -- deterministic rounding, percentages, and input guards.

Responsibility:
    The small set of numeric primitives every engine shares: half-up
    rounding to a currency's minor unit, percentage-of-base, and the
    validators that reject malformed amounts, rates, and counts before
    any computation starts.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by values.py and by every engine.

Invariants enforced:
    - Decimal-only arithmetic; floats are converted through ``str`` so that
      0.1 becomes Decimal("0.1"), not its binary expansion.
    - Rounding is ROUND_HALF_UP and happens only where a caller asks for
      it; ``percent_of`` never rounds.
    - Validators reject before computing: no partial results.

Failure modes:
    - InvalidAmountError for negative, NaN, infinite, or unparsable amounts.
    - InvalidRateError for rates outside [0, 100].
    - InvalidCountError for negative, boolean, or non-integer counts.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from studio_kernel.exceptions import (
    InvalidAmountError,
    InvalidCountError,
    InvalidRateError,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
_TWO_PLACES = Decimal("0.01")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """Convert a number-like value to a finite Decimal.

    Raises:
        InvalidAmountError: If the value is a bool, unparsable, or non-finite.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(field, value, "booleans are not amounts")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as e:
            raise InvalidAmountError(field, value, "not a number") from e
    if not result.is_finite():
        raise InvalidAmountError(field, value, "must be finite")
    return result


def require_amount(value: Any, field: str = "amount") -> Decimal:
    """Return ``value`` as a Decimal, rejecting negative or non-finite input."""
    result = to_decimal(value, field)
    if result < ZERO:
        raise InvalidAmountError(field, value)
    return result


def require_rate(value: Any, field: str = "rate") -> Decimal:
    """Return a percentage rate as a Decimal, rejecting anything outside [0, 100]."""
    if isinstance(value, bool):
        raise InvalidRateError(field, value)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidRateError(field, value) from e
    if not result.is_finite() or result < ZERO or result > HUNDRED:
        raise InvalidRateError(field, value)
    return result


def require_count(value: Any, field: str = "count") -> int:
    """Return a non-negative integer count."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidCountError(field, value)
    return value


def round_half_up(value: Decimal, places: int = 2) -> Decimal:
    """Round to ``places`` decimal digits, halves away from zero.

    This is the cascade's only rounding step; apply it once per stored or
    displayed figure, never to intermediate sums.
    """
    quantum = _TWO_PLACES if places == 2 else Decimal(1).scaleb(-places)
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def percent_of(base: Decimal, rate_percent: Decimal) -> Decimal:
    """``base * rate_percent / 100`` with no rounding."""
    return base * rate_percent / HUNDRED


def ratio_percent(part: Decimal, whole: Decimal, places: int = 2) -> Decimal:
    """``part`` as a rounded percentage of ``whole``; 0 when ``whole`` is 0."""
    if whole == ZERO:
        return round_half_up(ZERO, places)
    return round_half_up(part * HUNDRED / whole, places)
