"""Implied volatility by Newton-Raphson with a bracketed bisection fallback."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from scipy.optimize import bisect

from ..errors import InvalidInputError, NoConvergenceError
from ..greeks.estimators import calculate_vega
from ..utils.validation import MAX_VOLATILITY, MIN_VOLATILITY, require_positive, validate_option_spec
from .models import OptionSpec
from .pricing_models import DEFAULT_BINOMIAL_STEPS, BinomialModel, lattice_volatility_floor, select_model

DEFAULT_INITIAL_GUESS = 0.3
DEFAULT_MAX_NEWTON_ITERATIONS = 50
DEFAULT_MAX_BISECTION_ITERATIONS = 200
DEFAULT_PRICE_TOLERANCE = 1e-6
MIN_VEGA = 1e-8
BISECTION_XTOL = 1e-12


@dataclass(frozen=True, slots=True)
class ImpliedVolatilityResult:
    volatility: float
    iterations: int
    method: str


@dataclass(frozen=True, slots=True)
class ImpliedVolatilitySolver:
    """Invert the pricing model for volatility given an observed price.

    Newton steps use vega as the derivative. When vega vanishes or a step
    leaves ``[lower_bound, upper_bound]`` the search restarts as a bisection
    over that bracket, which always converges because price is monotonic in
    volatility.

    For lattice pricing the lower end is raised to the smallest volatility
    that still gives a valid tree at the option's rate.
    """

    initial_guess: float = DEFAULT_INITIAL_GUESS
    max_newton_iterations: int = DEFAULT_MAX_NEWTON_ITERATIONS
    max_bisection_iterations: int = DEFAULT_MAX_BISECTION_ITERATIONS
    price_tolerance: float = DEFAULT_PRICE_TOLERANCE
    lower_bound: float = MIN_VOLATILITY
    upper_bound: float = MAX_VOLATILITY
    steps: int = DEFAULT_BINOMIAL_STEPS
    smoothing: bool = True

    def __post_init__(self) -> None:
        if not MIN_VOLATILITY <= self.lower_bound < self.upper_bound <= MAX_VOLATILITY:
            raise InvalidInputError(
                "volatility_bracket",
                f"must satisfy {MIN_VOLATILITY:g} <= lower < upper <= {MAX_VOLATILITY:g}",
                (self.lower_bound, self.upper_bound),
            )
        require_positive("price_tolerance", self.price_tolerance)

    def solve(self, spec: OptionSpec, market_price: float) -> ImpliedVolatilityResult:
        validate_option_spec(spec, require_sigma=False)
        target = require_positive("market_price", market_price)
        model = select_model(spec, steps=self.steps, smoothing=self.smoothing)
        lower = self.lower_bound
        if isinstance(model, BinomialModel):
            lower = max(lower, lattice_volatility_floor(spec.risk_free_rate, spec.time_to_expiry, self.steps))
            if lower >= self.upper_bound:
                raise NoConvergenceError(
                    f"no volatility below {self.upper_bound:g} gives a valid lattice at this rate"
                )

        def price_at(sigma: float) -> float:
            return model.calculate_price(spec.with_volatility(sigma))

        low_price = price_at(lower)
        high_price = price_at(self.upper_bound)
        if target < low_price - self.price_tolerance or target > high_price + self.price_tolerance:
            raise NoConvergenceError(
                f"market price {target:.6f} lies outside the achievable range "
                f"[{low_price:.6f}, {high_price:.6f}] for volatility in "
                f"[{lower:g}, {self.upper_bound:g}]"
            )
        if abs(target - low_price) <= self.price_tolerance:
            return ImpliedVolatilityResult(lower, 0, "bracket")
        if abs(target - high_price) <= self.price_tolerance:
            return ImpliedVolatilityResult(self.upper_bound, 0, "bracket")

        newton = self._newton(spec, target, price_at, lower)
        if newton is not None:
            return newton
        return self._bisection(target, price_at, lower)

    def _newton(
        self,
        spec: OptionSpec,
        target: float,
        price_at: Callable[[float], float],
        lower: float,
    ) -> ImpliedVolatilityResult | None:
        sigma = min(max(self.initial_guess, lower), self.upper_bound)
        for iteration in range(1, self.max_newton_iterations + 1):
            error = price_at(sigma) - target
            if abs(error) <= self.price_tolerance:
                return ImpliedVolatilityResult(sigma, iteration, "newton")
            vega = calculate_vega(
                spec.with_volatility(sigma), steps=self.steps, smoothing=self.smoothing
            )
            if vega < MIN_VEGA:
                return None
            sigma = sigma - error / vega
            if not math.isfinite(sigma) or not lower <= sigma <= self.upper_bound:
                return None
        return None

    def _bisection(
        self, target: float, price_at: Callable[[float], float], lower: float
    ) -> ImpliedVolatilityResult:
        root, status = bisect(
            lambda sigma: price_at(sigma) - target,
            lower,
            self.upper_bound,
            xtol=BISECTION_XTOL,
            maxiter=self.max_bisection_iterations,
            full_output=True,
            disp=False,
        )
        if not status.converged:
            raise NoConvergenceError(
                f"bisection did not converge within {self.max_bisection_iterations} iterations",
                iterations=status.iterations,
                last_estimate=float(root),
            )
        return ImpliedVolatilityResult(float(root), status.iterations, "bisection")


def implied_volatility(spec: OptionSpec, market_price: float, **solver_options) -> float:
    return ImpliedVolatilitySolver(**solver_options).solve(spec, market_price).volatility


__all__ = [
    "ImpliedVolatilityResult",
    "ImpliedVolatilitySolver",
    "implied_volatility",
]
