"""Utility helpers exposed by :mod:`valuation_engine`."""

from .numerics import (
    format_percentage,
    format_price,
    norm_cdf,
    norm_pdf,
    round_half_even,
)
from .validation import (
    validate_bond_spec,
    validate_option_spec,
    year_fraction,
)

__all__ = [
    "format_percentage",
    "format_price",
    "norm_cdf",
    "norm_pdf",
    "round_half_even",
    "validate_bond_spec",
    "validate_option_spec",
    "year_fraction",
]
