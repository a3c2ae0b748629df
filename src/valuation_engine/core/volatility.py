"""Historical volatility from a series of observed prices."""

from __future__ import annotations

import math
from enum import IntEnum
from statistics import median
from typing import Sequence

import numpy as np

from ..errors import InsufficientDataError, InvalidInputError, NonPositivePriceError
from ..utils.validation import require_positive
from .models import PricePoint

MIN_PRICE_POINTS = 3
_TOO_FEW_RETURNS = "a sample deviation needs at least two log returns"


class Annualization(IntEnum):
    """Sampling periods per year for common observation intervals."""

    DAILY = 252
    WEEKLY = 52
    MONTHLY = 12


def _check_timestamp_awareness(points: Sequence[PricePoint]) -> None:
    naive = points[0].timestamp.tzinfo is None
    for index, point in enumerate(points):
        if (point.timestamp.tzinfo is None) != naive:
            raise InvalidInputError(
                "timestamp",
                f"must all be naive or all be timezone-aware (position {index})",
                point.timestamp.isoformat(),
            )


def _ordered_prices(points: Sequence[PricePoint]) -> np.ndarray:
    if len(points) < MIN_PRICE_POINTS:
        raise InsufficientDataError(
            required=MIN_PRICE_POINTS, received=len(points), detail=_TOO_FEW_RETURNS
        )

    _check_timestamp_awareness(points)

    for index, (previous, current) in enumerate(zip(points, points[1:]), start=1):
        if current.timestamp <= previous.timestamp:
            raise InvalidInputError(
                "timestamp",
                f"must be strictly increasing (position {index})",
                current.timestamp.isoformat(),
            )

    prices = np.fromiter((point.price for point in points), dtype=float, count=len(points))
    non_positive = np.flatnonzero(prices <= 0.0)
    if non_positive.size:
        index = int(non_positive[0])
        raise NonPositivePriceError(index=index, price=float(prices[index]))
    return prices


def log_returns(points: Sequence[PricePoint]) -> np.ndarray:
    """Return ``ln(P_i / P_{i-1})`` for consecutive observations."""

    return np.diff(np.log(_ordered_prices(points)))


def historical_volatility(points: Sequence[PricePoint], annualization_factor: float) -> float:
    """Annualised sample standard deviation of log returns."""

    factor = require_positive("annualization_factor", annualization_factor)
    returns = log_returns(points)
    sample_std = float(np.std(returns, ddof=1))
    return sample_std * math.sqrt(factor)


def infer_annualization_factor(points: Sequence[PricePoint]) -> int:
    """Pick daily, weekly or monthly annualisation from the median spacing."""

    if len(points) < 2:
        raise InsufficientDataError(required=2, received=len(points))
    _check_timestamp_awareness(points)
    gaps = [
        (current.timestamp - previous.timestamp).total_seconds() / 86_400.0
        for previous, current in zip(points, points[1:])
    ]
    spacing = median(gaps)
    if spacing <= 4.0:
        return int(Annualization.DAILY)
    if spacing <= 10.0:
        return int(Annualization.WEEKLY)
    return int(Annualization.MONTHLY)


__all__ = [
    "Annualization",
    "MIN_PRICE_POINTS",
    "historical_volatility",
    "infer_annualization_factor",
    "log_returns",
]
