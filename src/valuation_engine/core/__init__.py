"""Core domain models and valuation components."""

from .bonds import bond_analytics, estimate_price_change
from .models import (
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
from .pricing_models import BinomialModel, BlackScholesModel, price_option, select_model
from .rate_curve import RateCurve, interpolate_rate
from .volatility import Annualization, historical_volatility, infer_annualization_factor

__all__ = [
    "Annualization",
    "BinomialModel",
    "BlackScholesModel",
    "BondAnalyticsResult",
    "BondSpec",
    "EngineResult",
    "ExerciseStyle",
    "Greeks",
    "OptionSpec",
    "OptionType",
    "PricePoint",
    "RateCurve",
    "RateCurvePoint",
    "bond_analytics",
    "estimate_price_change",
    "historical_volatility",
    "infer_annualization_factor",
    "interpolate_rate",
    "price_option",
    "select_model",
]
