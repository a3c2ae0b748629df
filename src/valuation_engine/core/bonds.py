"""Present value, duration and convexity for fixed-coupon bonds."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..utils.validation import require_finite, validate_bond_spec
from .models import BondAnalyticsResult, BondSpec

BASIS_POINT = 1e-4


@dataclass(frozen=True, slots=True)
class CashFlowSchedule:
    """Per-period cash flows and their discounted values."""

    periods: np.ndarray
    cash_flows: np.ndarray
    discount_factors: np.ndarray

    @property
    def present_values(self) -> np.ndarray:
        return self.cash_flows * self.discount_factors


def build_schedule(spec: BondSpec) -> CashFlowSchedule:
    validate_bond_spec(spec)
    periods = np.arange(1, spec.periods + 1, dtype=float)
    cash_flows = np.full(periods.shape, spec.periodic_coupon)
    cash_flows[-1] += spec.face_value
    discount_factors = (1.0 + spec.periodic_yield) ** -periods
    return CashFlowSchedule(periods=periods, cash_flows=cash_flows, discount_factors=discount_factors)


def bond_analytics(spec: BondSpec) -> BondAnalyticsResult:
    """Price, Macaulay/modified duration and convexity from one schedule.

    Durations are in years; convexity is in years squared. A zero-coupon
    bond is the ``coupon_rate == 0`` case of the same sums.
    """

    schedule = build_schedule(spec)
    present_values = schedule.present_values
    k = schedule.periods
    base = 1.0 + spec.periodic_yield
    frequency = float(spec.frequency)

    price = float(present_values.sum())
    macaulay = float((k * present_values).sum()) / price / frequency
    modified = macaulay / base
    convexity = float((k * (k + 1.0) * present_values).sum()) / (base * base) / price / frequency**2

    return BondAnalyticsResult(
        price=price,
        macaulay_duration=macaulay,
        modified_duration=modified,
        convexity=convexity,
        dv01=modified * price * BASIS_POINT,
    )


def estimate_price_change(result: BondAnalyticsResult, yield_shift: float) -> float:
    """Second-order price change for a parallel yield move ``yield_shift``."""

    shift = require_finite("yield_shift", yield_shift)
    relative = -result.modified_duration * shift + 0.5 * result.convexity * shift * shift
    return result.price * relative


__all__ = [
    "BASIS_POINT",
    "CashFlowSchedule",
    "bond_analytics",
    "build_schedule",
    "estimate_price_change",
]
