"""Validation helpers for pricing inputs."""

from __future__ import annotations

import math
import numbers
from datetime import datetime
from typing import TYPE_CHECKING, Final

from ..errors import InvalidInputError

if TYPE_CHECKING:
    from ..core.models import BondSpec, OptionSpec

MAX_VOLATILITY: Final[float] = 5.0
MIN_VOLATILITY: Final[float] = 1e-4
MIN_RATE: Final[float] = -1.0
MAX_RATE: Final[float] = 1.0
DAYS_PER_YEAR: Final[float] = 365.0
SUPPORTED_FREQUENCIES: Final[tuple[int, ...]] = (1, 2)


def require_finite(field: str, value: float) -> float:
    if isinstance(value, (bool, str, bytes)):
        raise InvalidInputError(field, "must be a real number", value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(field, "must be a real number", value) from None
    if not math.isfinite(number):
        raise InvalidInputError(field, "must be finite", value)
    return number


def require_positive(field: str, value: float) -> float:
    number = require_finite(field, value)
    if number <= 0.0:
        raise InvalidInputError(field, "must be strictly positive", value)
    return number


def require_within(field: str, value: float, lower: float, upper: float) -> float:
    number = require_finite(field, value)
    if not lower <= number <= upper:
        raise InvalidInputError(field, f"must be within [{lower:g}, {upper:g}]", value)
    return number


def require_volatility(value: float) -> float:
    """Reject volatilities outside the supported band instead of clamping them."""

    return require_within("volatility", value, MIN_VOLATILITY, MAX_VOLATILITY)


def year_fraction(expiry: datetime, now: datetime, *, day_count: float = DAYS_PER_YEAR) -> float:
    """Return the time between ``now`` and ``expiry`` in years.

    Both datetimes must agree on timezone awareness. An expiry at or before
    ``now`` is rejected.
    """

    if (expiry.tzinfo is None) != (now.tzinfo is None):
        raise InvalidInputError("expiry", "and now must both be naive or both be timezone-aware")
    seconds = (expiry - now).total_seconds()
    if seconds <= 0.0:
        raise InvalidInputError("expiry", "must be in the future", expiry.isoformat())
    return seconds / (day_count * 86_400.0)


def validate_option_spec(spec: "OptionSpec", *, require_sigma: bool = True) -> None:
    """Validate that an option description is well formed for pricing."""

    require_positive("underlying_price", spec.underlying_price)
    require_positive("strike", spec.strike)
    require_positive("time_to_expiry", spec.time_to_expiry)
    require_within("risk_free_rate", spec.risk_free_rate, MIN_RATE, MAX_RATE)

    if spec.volatility is None:
        if require_sigma:
            raise InvalidInputError("volatility", "is required for pricing")
        return
    require_volatility(spec.volatility)


def validate_bond_spec(spec: "BondSpec") -> None:
    require_positive("face_value", spec.face_value)
    require_within("coupon_rate", spec.coupon_rate, 0.0, 1.0)
    require_positive("years_to_maturity", spec.years_to_maturity)
    if isinstance(spec.frequency, bool) or not isinstance(spec.frequency, numbers.Integral):
        raise InvalidInputError("frequency", "must be an integer", spec.frequency)
    if spec.frequency not in SUPPORTED_FREQUENCIES:
        raise InvalidInputError("frequency", "must be 1 (annual) or 2 (semiannual)", spec.frequency)

    periods = spec.frequency * spec.years_to_maturity
    if abs(periods - round(periods)) > 1e-9:
        raise InvalidInputError(
            "years_to_maturity",
            "must span a whole number of coupon periods",
            spec.years_to_maturity,
        )

    yield_to_maturity = require_finite("yield_to_maturity", spec.yield_to_maturity)
    if 1.0 + yield_to_maturity / spec.frequency <= 0.0:
        raise InvalidInputError(
            "yield_to_maturity",
            "must keep the periodic discount base (1 + y / frequency) positive",
            yield_to_maturity,
        )


__all__ = [
    "DAYS_PER_YEAR",
    "MAX_RATE",
    "MAX_VOLATILITY",
    "MIN_RATE",
    "MIN_VOLATILITY",
    "SUPPORTED_FREQUENCIES",
    "require_finite",
    "require_positive",
    "require_volatility",
    "require_within",
    "validate_bond_spec",
    "validate_option_spec",
    "year_fraction",
]
