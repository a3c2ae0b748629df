"""Domain models for the valuation engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from ..errors import InvalidInputError, ValuationError
from ..utils.validation import (
    DAYS_PER_YEAR,
    require_finite,
    require_positive,
    validate_bond_spec,
    validate_option_spec,
    year_fraction,
)

T = TypeVar("T")


class OptionType(str, Enum):
    """Supported option contract types."""

    CALL = "call"
    PUT = "put"


class ExerciseStyle(str, Enum):
    """Available exercise styles for an option contract."""

    EUROPEAN = "european"
    AMERICAN = "american"


def _coerce_enum(enum_cls, field: str, value: Any):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidInputError(field, f"must be one of: {allowed}", value) from None


def _store_floats(instance: Any, *fields: str) -> None:
    for field in fields:
        value = getattr(instance, field)
        if value is not None:
            object.__setattr__(instance, field, require_finite(field, value))


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Immutable description of an option to be valued.

    ``volatility`` may be left unset when the option is handed to the implied
    volatility solver; every pricing path requires it.
    """

    underlying_price: float
    strike: float
    time_to_expiry: float
    risk_free_rate: float
    option_type: OptionType
    volatility: Optional[float] = None
    exercise_style: ExerciseStyle = ExerciseStyle.EUROPEAN

    def __post_init__(self) -> None:
        object.__setattr__(self, "option_type", _coerce_enum(OptionType, "option_type", self.option_type))
        object.__setattr__(
            self, "exercise_style", _coerce_enum(ExerciseStyle, "exercise_style", self.exercise_style)
        )
        _store_floats(
            self, "underlying_price", "strike", "time_to_expiry", "risk_free_rate", "volatility"
        )
        validate_option_spec(self, require_sigma=False)

    @classmethod
    def from_expiry(
        cls,
        *,
        underlying_price: float,
        strike: float,
        expiry: datetime,
        now: datetime,
        risk_free_rate: float,
        option_type: OptionType,
        volatility: Optional[float] = None,
        exercise_style: ExerciseStyle = ExerciseStyle.EUROPEAN,
        day_count: float = DAYS_PER_YEAR,
    ) -> "OptionSpec":
        """Build a spec from a calendar expiry checked against ``now``."""

        return cls(
            underlying_price=underlying_price,
            strike=strike,
            time_to_expiry=year_fraction(expiry, now, day_count=day_count),
            risk_free_rate=risk_free_rate,
            option_type=option_type,
            volatility=volatility,
            exercise_style=exercise_style,
        )

    @property
    def is_call(self) -> bool:
        return self.option_type is OptionType.CALL

    def intrinsic_value(self, spot: Optional[float] = None) -> float:
        price = self.underlying_price if spot is None else spot
        if self.is_call:
            return max(0.0, price - self.strike)
        return max(0.0, self.strike - price)

    def with_volatility(self, volatility: float) -> "OptionSpec":
        return replace(self, volatility=volatility)

    def with_rate(self, risk_free_rate: float) -> "OptionSpec":
        return replace(self, risk_free_rate=risk_free_rate)


@dataclass(frozen=True, slots=True)
class Greeks:
    """First-order sensitivities of one option, in raw model units.

    theta is per year of calendar time, vega per unit of volatility and rho
    per unit of rate.
    """

    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def per_market_convention(self) -> "Greeks":
        """Theta per calendar day, vega and rho per percentage point."""

        return Greeks(
            delta=self.delta,
            gamma=self.gamma,
            theta=self.theta / DAYS_PER_YEAR,
            vega=self.vega / 100.0,
            rho=self.rho / 100.0,
        )

    def as_dict(self) -> Dict[str, float]:
        return {
            "delta": self.delta,
            "gamma": self.gamma,
            "theta": self.theta,
            "vega": self.vega,
            "rho": self.rho,
        }


@dataclass(frozen=True, slots=True)
class BondSpec:
    """Fixed-coupon bond paying ``frequency`` coupons per year."""

    face_value: float
    coupon_rate: float
    years_to_maturity: float
    yield_to_maturity: float
    frequency: int = 2

    def __post_init__(self) -> None:
        _store_floats(self, "face_value", "coupon_rate", "years_to_maturity", "yield_to_maturity")
        validate_bond_spec(self)

    @property
    def periods(self) -> int:
        return int(round(self.frequency * self.years_to_maturity))

    @property
    def periodic_coupon(self) -> float:
        return self.face_value * self.coupon_rate / self.frequency

    @property
    def periodic_yield(self) -> float:
        return self.yield_to_maturity / self.frequency


@dataclass(frozen=True, slots=True)
class BondAnalyticsResult:
    """Price and yield-risk measures derived from one cash-flow schedule."""

    price: float
    macaulay_duration: float
    modified_duration: float
    convexity: float
    dv01: float


@dataclass(frozen=True, slots=True)
class PricePoint:
    """One observation of an underlying's price."""

    timestamp: datetime
    price: float

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, datetime):
            raise InvalidInputError("timestamp", "must be a datetime", self.timestamp)
        _store_floats(self, "price")


@dataclass(frozen=True, slots=True)
class RateCurvePoint:
    """Risk-free rate for a single tenor, in years."""

    tenor_years: float
    rate: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "tenor_years", require_positive("tenor_years", self.tenor_years))
        _store_floats(self, "rate")


@dataclass(frozen=True, slots=True)
class EngineResult(Generic[T]):
    """Outcome of a facade call: either ``value`` or a typed ``error``."""

    operation: str
    value: Optional[T] = None
    error: Optional[ValuationError] = None
    model_used: str = "unknown"
    computation_time_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def error_payload(self) -> Optional[Dict[str, Any]]:
        if self.error is None:
            return None
        return self.error.to_payload()
