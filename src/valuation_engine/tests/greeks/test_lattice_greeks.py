"""Finite-difference Greeks on the binomial lattice."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from valuation_engine.core.models import ExerciseStyle, OptionSpec, OptionType
from valuation_engine.core.pricing_models import BinomialModel
from valuation_engine.greeks import (
    analytic_greeks,
    calculate_greeks,
    calculate_vega,
    finite_difference_greeks,
    spot_bump,
    theta_bump,
)
from valuation_engine.greeks.stability import bumped_pair, divided_difference, second_difference


@pytest.mark.parametrize(
    ("strike", "option_type"),
    [
        (100.0, OptionType.CALL),
        (100.0, OptionType.PUT),
        (110.0, OptionType.CALL),
        (93.0, OptionType.PUT),
    ],
)
def test_european_tree_greeks_track_closed_form(strike: float, option_type: OptionType) -> None:
    spec = OptionSpec(100.0, strike, 1.0, 0.05, option_type, volatility=0.2)
    lattice = finite_difference_greeks(spec, BinomialModel(steps=200))
    exact = analytic_greeks(spec)

    assert lattice.delta == pytest.approx(exact.delta, abs=1e-2)
    assert lattice.gamma == pytest.approx(exact.gamma, rel=5e-2)
    assert lattice.vega == pytest.approx(exact.vega, rel=2e-2)
    assert lattice.theta == pytest.approx(exact.theta, rel=3e-2)
    assert lattice.rho == pytest.approx(exact.rho, rel=2e-2)


def test_american_put_greeks_have_expected_signs(american_put: OptionSpec) -> None:
    greeks = calculate_greeks(american_put)
    assert -1.0 < greeks.delta < 0.0
    assert greeks.gamma > 0.0
    assert greeks.vega > 0.0
    assert greeks.rho < 0.0
    assert greeks.theta < 0.0


def test_american_put_is_more_sensitive_to_spot_than_european(
    american_put: OptionSpec, atm_put: OptionSpec
) -> None:
    american = calculate_greeks(american_put)
    european = calculate_greeks(atm_put)
    assert american.delta < european.delta


def test_deep_in_the_money_american_put_behaves_like_stock() -> None:
    spec = OptionSpec(
        60.0, 100.0, 0.5, 0.08, OptionType.PUT, volatility=0.2, exercise_style=ExerciseStyle.AMERICAN
    )
    greeks = calculate_greeks(spec, steps=100)
    assert greeks.delta == pytest.approx(-1.0, abs=1e-6)
    assert greeks.gamma == pytest.approx(0.0, abs=1e-6)


def test_lattice_greeks_with_negative_rate(american_put: OptionSpec) -> None:
    spec = american_put.with_rate(-0.005)
    greeks = calculate_greeks(spec, steps=120)
    european = analytic_greeks(replace(spec, exercise_style=ExerciseStyle.EUROPEAN))
    # with r <= 0 early exercise of a put is never optimal
    assert greeks.delta == pytest.approx(european.delta, abs=1e-2)
    assert greeks.vega == pytest.approx(european.vega, rel=3e-2)


def test_short_expiry_greeks_are_finite() -> None:
    spec = OptionSpec(
        100.0, 100.0, 2.0 / 365.0, 0.05, OptionType.PUT, volatility=0.3, exercise_style=ExerciseStyle.AMERICAN
    )
    greeks = calculate_greeks(spec, steps=100)
    for value in greeks.as_dict().values():
        assert math.isfinite(value)
    assert greeks.theta < 0.0


def test_calculate_vega_dispatch(atm_put: OptionSpec, american_put: OptionSpec) -> None:
    assert calculate_vega(atm_put) == pytest.approx(analytic_greeks(atm_put).vega)
    lattice_vega = calculate_vega(american_put, steps=150)
    assert lattice_vega > 0.0
    assert lattice_vega == pytest.approx(analytic_greeks(atm_put).vega, rel=0.1)


def test_spot_bump_spans_terminal_node_spacing() -> None:
    bump = spot_bump(100.0, 0.2, 1.0, 200)
    assert bump == pytest.approx(100.0 * (math.exp(0.4 * math.sqrt(1.0 / 200.0)) - 1.0), rel=1e-9)
    assert spot_bump(100.0, 1e-4, 0.01, 1000) == pytest.approx(0.1)
    assert spot_bump(100.0, 5.0, 10.0, 2) == pytest.approx(50.0)


def test_theta_bump_never_exceeds_half_the_remaining_life() -> None:
    assert theta_bump(1.0) == pytest.approx(1.0 / 365.0)
    assert theta_bump(0.001) == pytest.approx(0.0005)


def test_bump_helpers_fall_back_to_one_sided_differences() -> None:
    assert bumped_pair(0.005, 0.01, 1e-4, 5.0) == pytest.approx((1e-4, 0.015))
    assert bumped_pair(4.995, 0.01, 1e-4, 5.0) == pytest.approx((4.985, 5.0))

    assert divided_difference(3.0, 2.0, 1.0, 0.5, 0.5) == pytest.approx(2.0)
    assert divided_difference(3.0, 2.0, 1.0, 0.5, 0.0) == pytest.approx(2.0)
    assert divided_difference(3.0, 2.0, 0.0, 0.0, 0.5) == pytest.approx(4.0)
    assert divided_difference(3.0, 2.0, 1.0, 0.0, 0.0) == 0.0
    assert second_difference(4.0, 1.0, 0.0, 1.0) == pytest.approx(2.0)
