"""Normal distribution primitives and reproducible decimal rounding."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Final

__all__ = [
    "INV_SQRT_TWO_PI",
    "PERCENTAGE_DIGITS",
    "PRICE_DIGITS",
    "SQRT_TWO",
    "format_percentage",
    "format_price",
    "norm_cdf",
    "norm_pdf",
    "round_half_even",
]

SQRT_TWO: Final[float] = math.sqrt(2.0)
INV_SQRT_TWO_PI: Final[float] = 1.0 / math.sqrt(2.0 * math.pi)
PRICE_DIGITS: Final[int] = 6
PERCENTAGE_DIGITS: Final[int] = 4


def norm_pdf(value: float) -> float:
    """Standard normal density."""

    return INV_SQRT_TWO_PI * math.exp(-0.5 * value * value)


def norm_cdf(value: float) -> float:
    """Standard normal cumulative distribution.

    ``erfc`` keeps full relative precision in the lower tail, where
    ``0.5 * (1 + erf(x))`` would cancel to zero.
    """

    return 0.5 * math.erfc(-value / SQRT_TWO)


def _to_decimal(value: float | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value {value!r}")
    # repr gives the shortest string that round-trips, so 2.675 stays 2.675
    return Decimal(repr(float(value)))


def round_half_even(value: float | Decimal, digits: int = PRICE_DIGITS) -> Decimal:
    """Round to ``digits`` fractional digits using banker's rounding."""

    if digits < 0:
        raise ValueError("digits must be non-negative")
    quantum = Decimal(1).scaleb(-digits)
    return _to_decimal(value).quantize(quantum, rounding=ROUND_HALF_EVEN)


def format_price(value: float | Decimal, digits: int = PRICE_DIGITS) -> Decimal:
    """Currency amount at a fixed number of fractional digits."""

    return round_half_even(value, digits)


def format_percentage(value: float | Decimal, digits: int = PERCENTAGE_DIGITS) -> Decimal:
    """Express a decimal fraction (0.0525) in percent (5.2500)."""

    return round_half_even(_to_decimal(value) * 100, digits)
