"""Facade exposing one total entry point per valuation operation."""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Callable, Optional, Sequence, Tuple, TypeVar

from ..config import Settings, get_settings
from ..errors import ValuationError
from ..greeks.estimators import calculate_greeks
from ..observability.metrics import OPERATION_FAILURES, OPERATION_LATENCY
from ..utils.numerics import format_percentage, format_price
from .bonds import bond_analytics
from .implied_volatility import ImpliedVolatilitySolver
from .models import (
    BondAnalyticsResult,
    BondSpec,
    EngineResult,
    ExerciseStyle,
    Greeks,
    OptionSpec,
    PricePoint,
)
from .pricing_models import select_model
from .rate_curve import RateCurve
from .volatility import historical_volatility, infer_annualization_factor

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ValuationEngine:
    """Stateless dispatcher over the valuation components.

    Every call returns an :class:`EngineResult` carrying either the value or
    the typed failure; only programming errors propagate as exceptions. The
    engine holds nothing but its settings, so one instance can be shared
    freely across threads.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._solver = ImpliedVolatilitySolver(
            initial_guess=self.settings.iv_initial_guess,
            max_newton_iterations=self.settings.iv_max_newton_iterations,
            max_bisection_iterations=self.settings.iv_max_bisection_iterations,
            price_tolerance=self.settings.iv_price_tolerance,
            lower_bound=self.settings.iv_lower_bound,
            upper_bound=self.settings.iv_upper_bound,
            steps=self.settings.binomial_steps,
            smoothing=self.settings.binomial_smoothing,
        )

    def _execute(self, operation: str, func: Callable[[], Tuple[T, str]]) -> EngineResult[T]:
        start = time.perf_counter()
        try:
            value, model_used = func()
        except ValuationError as exc:
            elapsed = time.perf_counter() - start
            OPERATION_LATENCY.labels(operation=operation).observe(elapsed)
            OPERATION_FAILURES.labels(operation=operation, error=exc.code).inc()
            LOGGER.debug("%s failed with %s: %s", operation, exc.code, exc)
            return EngineResult(
                operation=operation,
                error=exc,
                computation_time_ms=elapsed * 1000.0,
            )

        elapsed = time.perf_counter() - start
        OPERATION_LATENCY.labels(operation=operation).observe(elapsed)
        LOGGER.debug("%s via %s in %.3f ms", operation, model_used, elapsed * 1000.0)
        return EngineResult(
            operation=operation,
            value=value,
            model_used=model_used,
            computation_time_ms=elapsed * 1000.0,
        )

    def price(self, spec: OptionSpec) -> EngineResult[float]:
        def run() -> Tuple[float, str]:
            model = select_model(
                spec,
                steps=self.settings.binomial_steps,
                smoothing=self.settings.binomial_smoothing,
            )
            return model.calculate_price(spec), model.name

        return self._execute("price", run)

    def greeks(self, spec: OptionSpec) -> EngineResult[Greeks]:
        def run() -> Tuple[Greeks, str]:
            greeks = calculate_greeks(
                spec,
                steps=self.settings.binomial_steps,
                smoothing=self.settings.binomial_smoothing,
            )
            if spec.exercise_style is ExerciseStyle.EUROPEAN:
                return greeks, "black_scholes_analytic"
            return greeks, f"binomial_{self.settings.binomial_steps}_finite_difference"

        return self._execute("greeks", run)

    def implied_volatility(self, spec: OptionSpec, market_price: float) -> EngineResult[float]:
        def run() -> Tuple[float, str]:
            result = self._solver.solve(spec, market_price)
            return result.volatility, result.method

        return self._execute("implied_volatility", run)

    def bond_analytics(self, spec: BondSpec) -> EngineResult[BondAnalyticsResult]:
        return self._execute("bond_analytics", lambda: (bond_analytics(spec), "discounted_cash_flow"))

    def historical_volatility(
        self,
        points: Sequence[PricePoint],
        annualization_factor: Optional[float] = None,
    ) -> EngineResult[float]:
        def run() -> Tuple[float, str]:
            factor = annualization_factor
            if factor is None:
                factor = infer_annualization_factor(points)
            return historical_volatility(points, factor), "log_return_stdev"

        return self._execute("historical_volatility", run)

    def interpolate_rate(self, curve: RateCurve, tenor_years: float) -> EngineResult[float]:
        return self._execute(
            "interpolate_rate", lambda: (curve.rate_for(tenor_years), "linear_flat_extrapolation")
        )

    def resolve_rate(self, spec: OptionSpec, curve: RateCurve) -> EngineResult[OptionSpec]:
        """Return ``spec`` with its rate read off ``curve`` at the option's expiry."""

        return self._execute(
            "resolve_rate",
            lambda: (spec.with_rate(curve.rate_for(spec.time_to_expiry)), "linear_flat_extrapolation"),
        )

    def format_price(self, value: float) -> Decimal:
        return format_price(value, self.settings.price_digits)

    def format_percentage(self, value: float) -> Decimal:
        return format_percentage(value, self.settings.percentage_digits)


__all__ = ["ValuationEngine"]
