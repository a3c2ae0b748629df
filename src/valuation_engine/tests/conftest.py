"""Shared fixtures and configuration resets for the test suite."""

from __future__ import annotations

from typing import Iterator

import pytest

from valuation_engine.config import get_settings
from valuation_engine.core.models import ExerciseStyle, OptionSpec, OptionType


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    """Make every test read the environment afresh."""

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def atm_call() -> OptionSpec:
    return OptionSpec(
        underlying_price=100.0,
        strike=100.0,
        time_to_expiry=1.0,
        risk_free_rate=0.05,
        option_type=OptionType.CALL,
        volatility=0.2,
    )


@pytest.fixture
def atm_put(atm_call: OptionSpec) -> OptionSpec:
    return OptionSpec(
        underlying_price=atm_call.underlying_price,
        strike=atm_call.strike,
        time_to_expiry=atm_call.time_to_expiry,
        risk_free_rate=atm_call.risk_free_rate,
        option_type=OptionType.PUT,
        volatility=atm_call.volatility,
    )


@pytest.fixture
def american_put(atm_put: OptionSpec) -> OptionSpec:
    return OptionSpec(
        underlying_price=atm_put.underlying_price,
        strike=atm_put.strike,
        time_to_expiry=atm_put.time_to_expiry,
        risk_free_rate=atm_put.risk_free_rate,
        option_type=OptionType.PUT,
        volatility=atm_put.volatility,
        exercise_style=ExerciseStyle.AMERICAN,
    )
