"""Engine configuration derived from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_BINOMIAL_STEPS = 200
DEFAULT_IV_INITIAL_GUESS = 0.3
DEFAULT_IV_MAX_NEWTON_ITERATIONS = 50
DEFAULT_IV_MAX_BISECTION_ITERATIONS = 200
DEFAULT_IV_PRICE_TOLERANCE = 1e-6
DEFAULT_IV_LOWER_BOUND = 1e-4
DEFAULT_IV_UPPER_BOUND = 5.0
DEFAULT_PRICE_DIGITS = 6
DEFAULT_PERCENTAGE_DIGITS = 4


def _get_env(name: str, *, default: str | None = None) -> str | None:
    """Return a trimmed environment variable value, or ``default`` when unset or blank."""

    value = os.getenv(name)
    if value is None:
        return default
    trimmed = value.strip()
    if not trimmed:
        return default
    return trimmed


def _as_int(name: str, *, default: int, minimum: int | None = None) -> int:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer") from exc
    if minimum is not None and value < minimum:
        raise RuntimeError(f"Environment variable {name} must be >= {minimum}")
    return value


def _as_float(name: str, *, default: float, minimum: float | None = None) -> float:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be a number") from exc
    if minimum is not None and value < minimum:
        raise RuntimeError(f"Environment variable {name} must be >= {minimum}")
    return value


def _as_bool(name: str, *, default: bool) -> bool:
    raw = _get_env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable view over engine tunables."""

    binomial_steps: int = DEFAULT_BINOMIAL_STEPS
    binomial_smoothing: bool = True
    iv_initial_guess: float = DEFAULT_IV_INITIAL_GUESS
    iv_max_newton_iterations: int = DEFAULT_IV_MAX_NEWTON_ITERATIONS
    iv_max_bisection_iterations: int = DEFAULT_IV_MAX_BISECTION_ITERATIONS
    iv_price_tolerance: float = DEFAULT_IV_PRICE_TOLERANCE
    iv_lower_bound: float = DEFAULT_IV_LOWER_BOUND
    iv_upper_bound: float = DEFAULT_IV_UPPER_BOUND
    price_digits: int = DEFAULT_PRICE_DIGITS
    percentage_digits: int = DEFAULT_PERCENTAGE_DIGITS


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the current process environment."""

    lower_bound = _as_float("VE_IV_LOWER_BOUND", default=DEFAULT_IV_LOWER_BOUND, minimum=DEFAULT_IV_LOWER_BOUND)
    upper_bound = _as_float("VE_IV_UPPER_BOUND", default=DEFAULT_IV_UPPER_BOUND)
    if not lower_bound < upper_bound <= DEFAULT_IV_UPPER_BOUND:
        raise RuntimeError(
            "VE_IV_LOWER_BOUND must be below VE_IV_UPPER_BOUND, which must not exceed "
            f"{DEFAULT_IV_UPPER_BOUND}"
        )

    return Settings(
        binomial_steps=_as_int("VE_BINOMIAL_STEPS", default=DEFAULT_BINOMIAL_STEPS, minimum=2),
        binomial_smoothing=_as_bool("VE_BINOMIAL_SMOOTHING", default=True),
        iv_initial_guess=_as_float("VE_IV_INITIAL_GUESS", default=DEFAULT_IV_INITIAL_GUESS, minimum=0.0),
        iv_max_newton_iterations=_as_int(
            "VE_IV_MAX_NEWTON_ITERATIONS", default=DEFAULT_IV_MAX_NEWTON_ITERATIONS, minimum=0
        ),
        iv_max_bisection_iterations=_as_int(
            "VE_IV_MAX_BISECTION_ITERATIONS", default=DEFAULT_IV_MAX_BISECTION_ITERATIONS, minimum=1
        ),
        iv_price_tolerance=_as_float("VE_IV_PRICE_TOLERANCE", default=DEFAULT_IV_PRICE_TOLERANCE, minimum=1e-12),
        iv_lower_bound=lower_bound,
        iv_upper_bound=upper_bound,
        price_digits=_as_int("VE_PRICE_DIGITS", default=DEFAULT_PRICE_DIGITS, minimum=0),
        percentage_digits=_as_int("VE_PERCENTAGE_DIGITS", default=DEFAULT_PERCENTAGE_DIGITS, minimum=0),
    )


__all__ = ["Settings", "get_settings"]
