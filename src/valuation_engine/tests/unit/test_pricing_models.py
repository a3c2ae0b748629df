"""Closed-form and lattice pricing."""

from __future__ import annotations

import math
from dataclasses import replace
from itertools import product

import pytest

from valuation_engine.core.models import ExerciseStyle, OptionSpec, OptionType
from valuation_engine.core.pricing_models import (
    BinomialModel,
    BlackScholesModel,
    lattice_volatility_floor,
    price_option,
    select_model,
)
from valuation_engine.errors import InvalidInputError


def _spec(
    spot: float = 100.0,
    strike: float = 100.0,
    tau: float = 1.0,
    rate: float = 0.05,
    sigma: float = 0.2,
    option_type: OptionType = OptionType.CALL,
    style: ExerciseStyle = ExerciseStyle.EUROPEAN,
) -> OptionSpec:
    return OptionSpec(
        underlying_price=spot,
        strike=strike,
        time_to_expiry=tau,
        risk_free_rate=rate,
        option_type=option_type,
        volatility=sigma,
        exercise_style=style,
    )


@pytest.mark.parametrize(
    ("spot", "strike", "tau", "rate", "sigma", "call", "put"),
    [
        (100.0, 100.0, 1.0, 0.05, 0.2, 10.450583572185565, 5.573526022256971),
        (42.0, 40.0, 0.5, 0.10, 0.2, 4.759422, 0.808599),
    ],
)
def test_black_scholes_reference_values(
    spot: float, strike: float, tau: float, rate: float, sigma: float, call: float, put: float
) -> None:
    model = BlackScholesModel()
    assert model.calculate_price(_spec(spot, strike, tau, rate, sigma)) == pytest.approx(call, abs=1e-6)
    assert model.calculate_price(_spec(spot, strike, tau, rate, sigma, OptionType.PUT)) == pytest.approx(
        put, abs=1e-6
    )


def test_out_of_the_money_quarter_year_call() -> None:
    price = BlackScholesModel().calculate_price(_spec(strike=110.0, tau=0.25, sigma=0.3))
    assert price == pytest.approx(2.8444057, abs=1e-4)


@pytest.mark.parametrize(
    ("spot", "strike", "tau", "rate", "sigma"),
    list(product([80.0, 100.0, 125.0], [95.0, 105.0], [0.1, 1.0, 3.0], [-0.01, 0.0, 0.05], [0.1, 0.45])),
)
def test_put_call_parity(spot: float, strike: float, tau: float, rate: float, sigma: float) -> None:
    model = BlackScholesModel()
    call = model.calculate_price(_spec(spot, strike, tau, rate, sigma))
    put = model.calculate_price(_spec(spot, strike, tau, rate, sigma, OptionType.PUT))
    assert call - put == pytest.approx(spot - strike * math.exp(-rate * tau), abs=1e-6)


def test_prices_are_monotonic_in_inputs() -> None:
    model = BlackScholesModel()
    base = _spec()
    call = model.calculate_price(base)

    assert model.calculate_price(replace(base, underlying_price=101.0)) > call
    assert model.calculate_price(replace(base, strike=101.0)) < call
    assert model.calculate_price(base.with_volatility(0.21)) > call
    assert model.calculate_price(replace(base, time_to_expiry=1.1)) > call

    put = replace(base, option_type=OptionType.PUT)
    put_price = model.calculate_price(put)
    assert model.calculate_price(replace(put, underlying_price=101.0)) < put_price
    assert model.calculate_price(replace(put, strike=101.0)) > put_price


def test_prices_stay_within_no_arbitrage_bounds() -> None:
    model = BlackScholesModel()
    for spot, sigma in product([20.0, 100.0, 500.0], [1e-4, 0.3, 5.0]):
        call_spec = _spec(spot=spot, sigma=sigma)
        put_spec = replace(call_spec, option_type=OptionType.PUT)
        discounted_strike = 100.0 * math.exp(-0.05)
        call = model.calculate_price(call_spec)
        put = model.calculate_price(put_spec)
        assert max(spot - discounted_strike, 0.0) - 1e-9 <= call <= spot
        assert max(discounted_strike - spot, 0.0) - 1e-9 <= put <= discounted_strike + 1e-9


def test_black_scholes_rejects_american_exercise() -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        BlackScholesModel().calculate_price(_spec(style=ExerciseStyle.AMERICAN))
    assert excinfo.value.field == "exercise_style"


def test_missing_volatility_is_rejected_by_every_model() -> None:
    spec = _spec(sigma=None)  # type: ignore[arg-type]
    for model in (BlackScholesModel(), BinomialModel()):
        with pytest.raises(InvalidInputError) as excinfo:
            model.calculate_price(spec)
        assert excinfo.value.field == "volatility"


@pytest.mark.parametrize("option_type", [OptionType.CALL, OptionType.PUT])
@pytest.mark.parametrize(("strike", "tolerance"), [(90.0, 5e-3), (100.0, 1e-3), (110.0, 5e-3)])
def test_smoothed_tree_converges_to_closed_form(
    option_type: OptionType, strike: float, tolerance: float
) -> None:
    # away from the money the strike falls between terminal nodes, which
    # leaves an O(1/n) error that odd/even averaging does not cancel
    spec = _spec(strike=strike, option_type=option_type)
    closed_form = BlackScholesModel().calculate_price(spec)
    assert BinomialModel(steps=200).calculate_price(spec) == pytest.approx(closed_form, abs=tolerance)


def test_smoothing_reduces_odd_even_oscillation() -> None:
    spec = _spec()
    closed_form = BlackScholesModel().calculate_price(spec)
    plain = BinomialModel(steps=200, smoothing=False).calculate_price(spec)
    smoothed = BinomialModel(steps=200, smoothing=True).calculate_price(spec)

    assert plain == pytest.approx(10.440591, abs=1e-4)
    assert abs(smoothed - closed_form) < abs(plain - closed_form)


def test_tree_handles_negative_rates() -> None:
    spec = _spec(rate=-0.01)
    tree = BinomialModel().calculate_price(spec)
    assert tree == pytest.approx(BlackScholesModel().calculate_price(spec), abs=2e-3)


def test_american_call_without_dividends_matches_european_tree() -> None:
    european = _spec()
    american = replace(european, exercise_style=ExerciseStyle.AMERICAN)
    model = BinomialModel(steps=150)
    assert model.calculate_price(american) == pytest.approx(model.calculate_price(european), abs=1e-10)


@pytest.mark.parametrize("steps", [1, 0, -3, 2.5])
def test_binomial_rejects_bad_step_counts(steps: float) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        BinomialModel(steps=steps)  # type: ignore[arg-type]
    assert excinfo.value.field == "steps"


def test_tree_rejects_volatility_below_lattice_floor() -> None:
    floor = lattice_volatility_floor(0.05, 1.0, 200)
    assert floor == pytest.approx(0.05 * math.sqrt(1.0 / 200), rel=1e-5)
    spec = _spec(sigma=floor / 2, style=ExerciseStyle.AMERICAN, option_type=OptionType.PUT)
    with pytest.raises(InvalidInputError) as excinfo:
        BinomialModel(steps=200).calculate_price(spec)
    assert excinfo.value.field == "steps"


def test_model_selection_by_exercise_style() -> None:
    european = _spec()
    american = replace(european, exercise_style=ExerciseStyle.AMERICAN)

    assert isinstance(select_model(european), BlackScholesModel)
    tree = select_model(american, steps=80, smoothing=False)
    assert isinstance(tree, BinomialModel)
    assert tree.name == "binomial_80"
    assert BinomialModel(steps=80).name == "binomial_80_smoothed"
    assert price_option(european) == pytest.approx(10.450583572185565, abs=1e-8)
