"""Bump sizes and divided-difference helpers for lattice Greeks."""

from __future__ import annotations

import math
from typing import Tuple

SPOT_BUMP_RELATIVE = 1e-3
MAX_SPOT_BUMP_RELATIVE = 0.5
VOLATILITY_BUMP = 0.01
RATE_BUMP = 0.01
THETA_BUMP_YEARS = 1.0 / 365.0


def spot_bump(spot: float, volatility: float, time_to_expiry: float, steps: int) -> float:
    """Absolute spot bump spanning at least one terminal node spacing.

    A tree value is piecewise linear in spot between the points where a
    terminal node crosses the strike, so a bump narrower than the node
    spacing (``u**2 - 1`` in relative terms) measures the slope of a single
    linear piece and yields a meaningless gamma.
    """

    node_spacing = math.exp(2.0 * volatility * math.sqrt(time_to_expiry / steps)) - 1.0
    relative = min(max(SPOT_BUMP_RELATIVE, node_spacing), MAX_SPOT_BUMP_RELATIVE)
    return spot * relative


def theta_bump(time_to_expiry: float) -> float:
    """One calendar day, or half the remaining life when that is shorter."""

    return min(THETA_BUMP_YEARS, 0.5 * time_to_expiry)


def bumped_pair(value: float, bump: float, lower: float, upper: float) -> Tuple[float, float]:
    """Return ``(down, up)`` around ``value`` kept inside ``[lower, upper]``."""

    return max(value - bump, lower), min(value + bump, upper)


def divided_difference(
    value_up: float,
    value_mid: float,
    value_down: float,
    h_up: float,
    h_down: float,
) -> float:
    """Central difference, one-sided when a bump was clipped to zero width."""

    if h_up <= 0.0 and h_down <= 0.0:
        return 0.0
    if h_down <= 0.0:
        return (value_up - value_mid) / h_up
    if h_up <= 0.0:
        return (value_mid - value_down) / h_down
    return (value_up - value_down) / (h_up + h_down)


def second_difference(value_up: float, value_mid: float, value_down: float, bump: float) -> float:
    return (value_up - 2.0 * value_mid + value_down) / (bump * bump)
