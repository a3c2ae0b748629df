"""Analytic and finite-difference Greeks."""

from __future__ import annotations

import math
from dataclasses import replace

from ..core.models import ExerciseStyle, Greeks, OptionSpec
from ..core.pricing_models import (
    DEFAULT_BINOMIAL_STEPS,
    LATTICE_FLOOR_MARGIN,
    BinomialModel,
    black_scholes_d1_d2,
    lattice_volatility_floor,
)
from ..utils.numerics import norm_cdf, norm_pdf
from ..utils.validation import MAX_RATE, MAX_VOLATILITY, MIN_RATE, MIN_VOLATILITY, validate_option_spec
from .stability import (
    RATE_BUMP,
    VOLATILITY_BUMP,
    bumped_pair,
    divided_difference,
    second_difference,
    spot_bump,
    theta_bump,
)


def analytic_greeks(spec: OptionSpec) -> Greeks:
    """Closed-form Black-Scholes sensitivities."""

    validate_option_spec(spec)
    spot = spec.underlying_price
    strike = spec.strike
    tau = spec.time_to_expiry
    rate = spec.risk_free_rate
    sigma = float(spec.volatility)

    d1, d2 = black_scholes_d1_d2(spec)
    sqrt_t = math.sqrt(tau)
    pdf = norm_pdf(d1)
    discounted_strike = strike * math.exp(-rate * tau)

    gamma = pdf / (spot * sigma * sqrt_t)
    vega = spot * pdf * sqrt_t
    decay = -spot * pdf * sigma / (2.0 * sqrt_t)

    if spec.is_call:
        delta = norm_cdf(d1)
        theta = decay - rate * discounted_strike * norm_cdf(d2)
        rho = tau * discounted_strike * norm_cdf(d2)
    else:
        delta = norm_cdf(d1) - 1.0
        theta = decay + rate * discounted_strike * norm_cdf(-d2)
        rho = -tau * discounted_strike * norm_cdf(-d2)

    return Greeks(delta=delta, gamma=gamma, theta=theta, vega=vega, rho=rho)


def analytic_vega(spec: OptionSpec) -> float:
    validate_option_spec(spec)
    d1, _ = black_scholes_d1_d2(spec)
    return spec.underlying_price * norm_pdf(d1) * math.sqrt(spec.time_to_expiry)


def finite_difference_vega(spec: OptionSpec, model: BinomialModel) -> float:
    sigma = float(spec.volatility)
    floor = max(MIN_VOLATILITY, lattice_volatility_floor(spec.risk_free_rate, spec.time_to_expiry, model.steps))
    down_sigma, up_sigma = bumped_pair(sigma, VOLATILITY_BUMP, min(floor, sigma), MAX_VOLATILITY)
    value_up = model.calculate_price(spec.with_volatility(up_sigma))
    value_down = model.calculate_price(spec.with_volatility(down_sigma))
    h_up = up_sigma - sigma
    h_down = sigma - down_sigma
    value_mid = model.calculate_price(spec) if h_up <= 0.0 or h_down <= 0.0 else 0.0
    return divided_difference(value_up, value_mid, value_down, h_up, h_down)


def finite_difference_greeks(spec: OptionSpec, model: BinomialModel) -> Greeks:
    """Re-price the tree under bumped inputs and take divided differences."""

    validate_option_spec(spec)
    base = model.calculate_price(spec)

    spot = spec.underlying_price
    h_spot = spot_bump(spot, float(spec.volatility), spec.time_to_expiry, model.steps)
    value_up = model.calculate_price(replace(spec, underlying_price=spot + h_spot))
    value_down = model.calculate_price(replace(spec, underlying_price=spot - h_spot))
    delta = (value_up - value_down) / (2.0 * h_spot)
    gamma = second_difference(value_up, base, value_down, h_spot)

    h_tau = theta_bump(spec.time_to_expiry)
    value_later = model.calculate_price(replace(spec, time_to_expiry=spec.time_to_expiry - h_tau))
    theta = (value_later - base) / h_tau

    vega = finite_difference_vega(spec, model)

    rate = spec.risk_free_rate
    # |r| * sqrt(dt) <= sigma keeps every bumped tree valid
    rate_limit = float(spec.volatility) / math.sqrt(spec.time_to_expiry / model.steps) / LATTICE_FLOOR_MARGIN
    down_rate, up_rate = bumped_pair(
        rate, RATE_BUMP, max(MIN_RATE, min(-rate_limit, rate)), min(MAX_RATE, max(rate_limit, rate))
    )
    rho = divided_difference(
        model.calculate_price(spec.with_rate(up_rate)),
        base,
        model.calculate_price(spec.with_rate(down_rate)),
        up_rate - rate,
        rate - down_rate,
    )

    return Greeks(delta=delta, gamma=gamma, theta=theta, vega=vega, rho=rho)


def calculate_greeks(
    spec: OptionSpec,
    *,
    steps: int = DEFAULT_BINOMIAL_STEPS,
    smoothing: bool = True,
) -> Greeks:
    """Analytic Greeks for European exercise, lattice differences otherwise."""

    if spec.exercise_style is ExerciseStyle.EUROPEAN:
        return analytic_greeks(spec)
    return finite_difference_greeks(spec, BinomialModel(steps=steps, smoothing=smoothing))


def calculate_vega(
    spec: OptionSpec,
    *,
    steps: int = DEFAULT_BINOMIAL_STEPS,
    smoothing: bool = True,
) -> float:
    if spec.exercise_style is ExerciseStyle.EUROPEAN:
        return analytic_vega(spec)
    validate_option_spec(spec)
    return finite_difference_vega(spec, BinomialModel(steps=steps, smoothing=smoothing))
