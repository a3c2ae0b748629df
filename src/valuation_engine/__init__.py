"""Option, bond and volatility analytics."""

from __future__ import annotations

from .core.engine import ValuationEngine
from .core.implied_volatility import ImpliedVolatilitySolver, implied_volatility
from .core.models import (
    BondAnalyticsResult,
    BondSpec,
    EngineResult,
    ExerciseStyle,
    Greeks,
    OptionSpec,
    OptionType,
    PricePoint,
    RateCurvePoint,
)
from .core.rate_curve import RateCurve
from .errors import (
    EmptyCurveError,
    InsufficientDataError,
    InvalidInputError,
    NoConvergenceError,
    NonPositivePriceError,
    ValuationError,
)

__all__ = [
    "BondAnalyticsResult",
    "BondSpec",
    "EmptyCurveError",
    "EngineResult",
    "ExerciseStyle",
    "Greeks",
    "ImpliedVolatilitySolver",
    "InsufficientDataError",
    "InvalidInputError",
    "NoConvergenceError",
    "NonPositivePriceError",
    "OptionSpec",
    "OptionType",
    "PricePoint",
    "RateCurve",
    "RateCurvePoint",
    "ValuationEngine",
    "ValuationError",
    "implied_volatility",
]
