"""Typed failures raised by the valuation components."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ValuationError(Exception):
    """Base class for every recoverable valuation failure."""

    code = "valuation_error"

    def to_payload(self) -> Dict[str, Any]:
        return {"code": self.code, "message": str(self)}


class InvalidInputError(ValuationError, ValueError):
    """An instrument or request field violates its invariant."""

    code = "invalid_input"

    def __init__(self, field: str, reason: str, value: Any = None) -> None:
        self.field = field
        self.reason = reason
        self.value = value
        message = f"{field} {reason}"
        if value is not None:
            message = f"{message} (got {value!r})"
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["field"] = self.field
        payload["value"] = self.value
        return payload


class InsufficientDataError(ValuationError):
    """Too few observations to estimate a statistic."""

    code = "insufficient_data"

    def __init__(self, required: int, received: int, detail: str = "") -> None:
        self.required = required
        self.received = received
        message = f"at least {required} price points are required, received {received}"
        super().__init__(f"{message} ({detail})" if detail else message)


class NonPositivePriceError(ValuationError):
    """A zero or negative price where a logarithm or ratio is taken."""

    code = "non_positive_price"

    def __init__(self, index: int, price: float) -> None:
        self.index = index
        self.price = price
        super().__init__(f"price at position {index} must be strictly positive (got {price!r})")

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["field"] = "price"
        payload["value"] = self.price
        return payload


class EmptyCurveError(ValuationError):
    """A rate curve without any tenor points."""

    code = "empty_curve"

    def __init__(self) -> None:
        super().__init__("rate curve has no points to interpolate")


class NoConvergenceError(ValuationError):
    """The implied volatility search could not produce a root."""

    code = "no_convergence"

    def __init__(
        self,
        reason: str,
        *,
        iterations: int = 0,
        last_estimate: Optional[float] = None,
    ) -> None:
        self.reason = reason
        self.iterations = iterations
        self.last_estimate = last_estimate
        super().__init__(reason)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["iterations"] = self.iterations
        payload["value"] = self.last_estimate
        return payload


__all__ = [
    "EmptyCurveError",
    "InsufficientDataError",
    "InvalidInputError",
    "NoConvergenceError",
    "NonPositivePriceError",
    "ValuationError",
]
