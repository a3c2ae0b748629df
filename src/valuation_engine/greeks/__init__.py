"""Greek estimation for closed-form and lattice pricing."""

from .estimators import (
    analytic_greeks,
    analytic_vega,
    calculate_greeks,
    calculate_vega,
    finite_difference_greeks,
    finite_difference_vega,
)
from .stability import (
    RATE_BUMP,
    SPOT_BUMP_RELATIVE,
    THETA_BUMP_YEARS,
    VOLATILITY_BUMP,
    spot_bump,
    theta_bump,
)

__all__ = [
    "analytic_greeks",
    "analytic_vega",
    "calculate_greeks",
    "calculate_vega",
    "finite_difference_greeks",
    "finite_difference_vega",
    "RATE_BUMP",
    "SPOT_BUMP_RELATIVE",
    "THETA_BUMP_YEARS",
    "VOLATILITY_BUMP",
    "spot_bump",
    "theta_bump",
]
