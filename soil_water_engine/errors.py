"""Exceptions raised by the soil water engine."""

from typing import Any


class SoilWaterError(Exception):
    """Base class for all soil water engine errors."""


class RangeError(SoilWaterError, ValueError):
    """An input parameter lies outside its valid domain."""

    def __init__(
        self,
        parameter: str,
        value: float,
        minimum: float | None = None,
        maximum: float | None = None,
        message: str | None = None,
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        if message is None:
            message = (
                f"{parameter} must be between {minimum} and {maximum}, got {value}"
            )
        super().__init__(message)


class ComputationError(SoilWaterError, ArithmeticError):
    """A derived quantity is degenerate (undefined, NaN or negative)."""

    def __init__(self, quantity: str, message: str, **values: Any) -> None:
        self.quantity = quantity
        self.values = values
        details = ", ".join(f"{k}={v:.6g}" for k, v in values.items())
        if details:
            message = f"{message} ({details})"
        super().__init__(f"{quantity}: {message}")
