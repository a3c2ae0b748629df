"""Pricing model implementations used by the engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, Tuple, Union

import numpy as np

from ..errors import InvalidInputError
from ..utils.numerics import norm_cdf
from ..utils.validation import validate_option_spec
from .models import ExerciseStyle, OptionSpec

DEFAULT_BINOMIAL_STEPS: Final[int] = 200
MIN_BINOMIAL_STEPS: Final[int] = 2
LATTICE_FLOOR_MARGIN: Final[float] = 1.0 + 1e-6


def black_scholes_d1_d2(spec: OptionSpec) -> Tuple[float, float]:
    sigma = float(spec.volatility)
    sqrt_t = math.sqrt(spec.time_to_expiry)
    numerator = math.log(spec.underlying_price / spec.strike) + (
        spec.risk_free_rate + 0.5 * sigma * sigma
    ) * spec.time_to_expiry
    d1 = numerator / (sigma * sqrt_t)
    return d1, d1 - sigma * sqrt_t


def lattice_volatility_floor(rate: float, time_to_expiry: float, steps: int) -> float:
    """Smallest volatility that keeps the CRR probability inside [0, 1].

    The up factor must outgrow one step of carry: sigma * sqrt(dt) >= |r| * dt.
    """

    return LATTICE_FLOOR_MARGIN * abs(rate) * math.sqrt(time_to_expiry / steps)


def _black_scholes_value(spec: OptionSpec) -> float:
    d1, d2 = black_scholes_d1_d2(spec)
    discounted_strike = spec.strike * math.exp(-spec.risk_free_rate * spec.time_to_expiry)
    if spec.is_call:
        price = spec.underlying_price * norm_cdf(d1) - discounted_strike * norm_cdf(d2)
    else:
        price = discounted_strike * norm_cdf(-d2) - spec.underlying_price * norm_cdf(-d1)
    return max(0.0, price)


def _crr_value(spec: OptionSpec, steps: int) -> float:
    """Backward induction over a Cox-Ross-Rubinstein lattice.

    Only one level of node values is alive at a time; the buffers shrink in
    place as the induction walks back to the root.
    """

    sigma = float(spec.volatility)
    delta_t = spec.time_to_expiry / steps
    up = math.exp(sigma * math.sqrt(delta_t))
    down = 1.0 / up
    growth = math.exp(spec.risk_free_rate * delta_t)
    probability = (growth - down) / (up - down)
    if not 0.0 <= probability <= 1.0:
        raise InvalidInputError(
            "steps",
            "leave the risk-neutral probability outside [0, 1] for this rate and volatility",
            steps,
        )
    discount = math.exp(-spec.risk_free_rate * delta_t)
    strike = spec.strike
    american = spec.exercise_style is ExerciseStyle.AMERICAN
    sign = 1.0 if spec.is_call else -1.0

    nodes = np.arange(steps + 1, dtype=float)
    prices = spec.underlying_price * np.exp(sigma * math.sqrt(delta_t) * (2.0 * nodes - steps))
    values = np.maximum(sign * (prices - strike), 0.0)

    for level in range(steps - 1, -1, -1):
        width = level + 1
        values[:width] = discount * (
            probability * values[1 : width + 1] + (1.0 - probability) * values[:width]
        )
        # S u^j d^(level+1-j) * u == S u^j d^(level-j) because u * d == 1
        prices[:width] *= up
        if american:
            exercise = np.maximum(sign * (prices[:width] - strike), 0.0)
            np.maximum(values[:width], exercise, out=values[:width])

    return float(values[0])


@dataclass(frozen=True, slots=True)
class BlackScholesModel:
    """Closed-form European pricing."""

    name: str = "black_scholes"

    def calculate_price(self, spec: OptionSpec) -> float:
        validate_option_spec(spec)
        if spec.exercise_style is not ExerciseStyle.EUROPEAN:
            raise InvalidInputError(
                "exercise_style", "is not supported by the closed form", spec.exercise_style.value
            )
        return _black_scholes_value(spec)


@dataclass(frozen=True, slots=True)
class BinomialModel:
    """Recombining CRR tree for European and American exercise.

    With ``smoothing`` the result is the mean of the ``steps`` and
    ``steps + 1`` trees; the two step counts oscillate around the continuous
    limit with opposite sign, so the average cancels the leading error term.
    """

    steps: int = DEFAULT_BINOMIAL_STEPS
    smoothing: bool = True

    def __post_init__(self) -> None:
        if int(self.steps) != self.steps or self.steps < MIN_BINOMIAL_STEPS:
            raise InvalidInputError("steps", f"must be an integer >= {MIN_BINOMIAL_STEPS}", self.steps)

    @property
    def name(self) -> str:
        suffix = "_smoothed" if self.smoothing else ""
        return f"binomial_{self.steps}{suffix}"

    def calculate_price(self, spec: OptionSpec) -> float:
        validate_option_spec(spec)
        steps = int(self.steps)
        if not self.smoothing:
            return _crr_value(spec, steps)
        return 0.5 * (_crr_value(spec, steps) + _crr_value(spec, steps + 1))


PricingModel = Union[BlackScholesModel, BinomialModel]


def select_model(
    spec: OptionSpec,
    *,
    steps: int = DEFAULT_BINOMIAL_STEPS,
    smoothing: bool = True,
) -> PricingModel:
    """Closed form for European exercise, the tree for American exercise."""

    if spec.exercise_style is ExerciseStyle.EUROPEAN:
        return BlackScholesModel()
    return BinomialModel(steps=steps, smoothing=smoothing)


def price_option(
    spec: OptionSpec,
    *,
    steps: int = DEFAULT_BINOMIAL_STEPS,
    smoothing: bool = True,
) -> float:
    return select_model(spec, steps=steps, smoothing=smoothing).calculate_price(spec)


__all__ = [
    "BinomialModel",
    "BlackScholesModel",
    "DEFAULT_BINOMIAL_STEPS",
    "MIN_BINOMIAL_STEPS",
    "PricingModel",
    "black_scholes_d1_d2",
    "lattice_volatility_floor",
    "price_option",
    "select_model",
]
