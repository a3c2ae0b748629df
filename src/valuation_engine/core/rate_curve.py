"""Risk-free term structure built from discrete Treasury tenors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, Mapping, Tuple

import numpy as np

from ..errors import EmptyCurveError, InvalidInputError
from ..utils.validation import require_positive
from .models import RateCurvePoint

TREASURY_TENORS: Final[Mapping[str, float]] = {
    "1mo": 1.0 / 12.0,
    "2mo": 2.0 / 12.0,
    "3mo": 0.25,
    "4mo": 4.0 / 12.0,
    "6mo": 0.5,
    "1y": 1.0,
    "2y": 2.0,
    "3y": 3.0,
    "5y": 5.0,
    "7y": 7.0,
    "10y": 10.0,
    "20y": 20.0,
    "30y": 30.0,
}


def tenor_to_years(label: str) -> float:
    """Translate a published tenor label such as ``"3mo"`` or ``"10y"``."""

    key = label.strip().lower().replace(" ", "")
    try:
        return TREASURY_TENORS[key]
    except KeyError:
        raise InvalidInputError("tenor", "is not a recognised Treasury tenor", label) from None


@dataclass(frozen=True, slots=True)
class RateCurve:
    """Immutable snapshot of tenor/rate points sorted by tenor.

    The snapshot is replaced wholesale when new Treasury data arrives; it is
    never mutated, so any number of readers may share one instance.
    """

    points: Tuple[RateCurvePoint, ...] = ()

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.points, key=lambda point: point.tenor_years))
        for previous, current in zip(ordered, ordered[1:]):
            if current.tenor_years == previous.tenor_years:
                raise InvalidInputError("tenor_years", "must not contain duplicates", current.tenor_years)
        object.__setattr__(self, "points", ordered)

    @classmethod
    def from_points(cls, points: Iterable[Tuple[float, float]]) -> "RateCurve":
        return cls(tuple(RateCurvePoint(tenor_years=tenor, rate=rate) for tenor, rate in points))

    @classmethod
    def from_tenors(cls, rates: Mapping[str, float]) -> "RateCurve":
        """Build a curve keyed by Treasury labels, e.g. ``{"3mo": 0.052}``."""

        return cls.from_points((tenor_to_years(label), rate) for label, rate in rates.items())

    def __len__(self) -> int:
        return len(self.points)

    @property
    def tenors(self) -> np.ndarray:
        return np.fromiter((point.tenor_years for point in self.points), dtype=float, count=len(self.points))

    @property
    def rates(self) -> np.ndarray:
        return np.fromiter((point.rate for point in self.points), dtype=float, count=len(self.points))

    def rate_for(self, tenor_years: float) -> float:
        """Linearly interpolated rate, flat beyond the first and last tenor."""

        tenor = require_positive("tenor_years", tenor_years)
        if not self.points:
            raise EmptyCurveError()
        # np.interp holds the boundary values outside [tenors[0], tenors[-1]]
        return float(np.interp(tenor, self.tenors, self.rates))


def interpolate_rate(curve: RateCurve, tenor_years: float) -> float:
    return curve.rate_for(tenor_years)


__all__ = ["RateCurve", "TREASURY_TENORS", "interpolate_rate", "tenor_to_years"]
