"""
Measurement value objects (height and weight) with metric/imperial support.

Values are stored in the system they were entered in and converted on
demand. Arithmetic uses Decimal so conversions are reproducible.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Tuple, Union

Number = Union[int, float, str, Decimal]

CM_TO_INCHES = Decimal("0.393701")
KG_TO_POUNDS = Decimal("2.20462")


class MeasurementSystem(str, Enum):
    """Unit system used for a measurement."""
    METRIC = "metric"      # centimeters, kilograms
    IMPERIAL = "imperial"  # inches, pounds


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 75.5 from dragging in binary noise
    return Decimal(str(value))


def _format(value: Decimal, places: int) -> str:
    """Format with at most `places` decimals, dropping trailing zeros."""
    quantum = Decimal(1).scaleb(-places)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class Measurement(ABC):
    """Base for measurement value objects."""
    value: Decimal
    system: MeasurementSystem

    @abstractmethod
    def convert_to(self, target: MeasurementSystem) -> Decimal:
        """Value expressed in the target system."""


@dataclass(frozen=True)
class Height(Measurement):
    """Height in centimeters (metric) or inches (imperial)."""

    @classmethod
    def from_centimeters(cls, centimeters: Number) -> "Height":
        return cls(_to_decimal(centimeters), MeasurementSystem.METRIC)

    @classmethod
    def from_inches(cls, inches: Number) -> "Height":
        return cls(_to_decimal(inches), MeasurementSystem.IMPERIAL)

    @classmethod
    def from_feet_and_inches(cls, feet: int, inches: Number) -> "Height":
        return cls(feet * 12 + _to_decimal(inches), MeasurementSystem.IMPERIAL)

    @classmethod
    def from_millimeters(cls, millimeters: int) -> "Height":
        return cls(_to_decimal(millimeters) / 10, MeasurementSystem.METRIC)

    def convert_to(self, target: MeasurementSystem) -> Decimal:
        if self.system == target:
            return self.value
        if self.system == MeasurementSystem.METRIC:
            return self.value * CM_TO_INCHES
        return self.value / CM_TO_INCHES

    @property
    def centimeters(self) -> Decimal:
        return self.convert_to(MeasurementSystem.METRIC)

    @property
    def inches(self) -> Decimal:
        return self.convert_to(MeasurementSystem.IMPERIAL)

    @property
    def feet_and_inches(self) -> Tuple[int, Decimal]:
        total_inches = self.inches
        feet = int(total_inches / 12)
        return feet, total_inches % 12

    def __str__(self) -> str:
        if self.system == MeasurementSystem.METRIC:
            return f"{_format(self.value, 1)} cm"
        feet, inches = self.feet_and_inches
        return f"{feet}' {_format(inches, 1)}\""


@dataclass(frozen=True)
class Weight(Measurement):
    """Weight in kilograms (metric) or pounds (imperial)."""

    @classmethod
    def from_kilograms(cls, kilograms: Number) -> "Weight":
        return cls(_to_decimal(kilograms), MeasurementSystem.METRIC)

    @classmethod
    def from_pounds(cls, pounds: Number) -> "Weight":
        return cls(_to_decimal(pounds), MeasurementSystem.IMPERIAL)

    @classmethod
    def from_grams(cls, grams: int) -> "Weight":
        return cls(_to_decimal(grams) / 1000, MeasurementSystem.METRIC)

    def convert_to(self, target: MeasurementSystem) -> Decimal:
        if self.system == target:
            return self.value
        if self.system == MeasurementSystem.METRIC:
            return self.value * KG_TO_POUNDS
        return self.value / KG_TO_POUNDS

    @property
    def kilograms(self) -> Decimal:
        return self.convert_to(MeasurementSystem.METRIC)

    @property
    def pounds(self) -> Decimal:
        return self.convert_to(MeasurementSystem.IMPERIAL)

    def __str__(self) -> str:
        unit = "kg" if self.system == MeasurementSystem.METRIC else "lbs"
        return f"{_format(self.value, 2)} {unit}"


def meters_to_millimeters(meters: float) -> int:
    """Truncating meters -> millimeters conversion used at onboarding."""
    # Rounding to 6 places first drops float noise (2.01 m is 2009.999... mm)
    return int(round(meters * 1000, 6))


def kilograms_to_grams(kilograms: float) -> int:
    """Truncating kilograms -> grams conversion used at onboarding."""
    return int(round(kilograms * 1000, 6))
