"""
BMI Calculation Service

BMI = weight_kg / (height_m)²

Used by the physical profile and by onboarding to report an estimated BMI
once both height and weight are known.
"""
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Optional, Union

Number = Union[int, float, Decimal]

ONE_DECIMAL = Decimal("0.1")


def _as_decimal(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_bmi(weight_kg: Optional[Number], height_cm: Optional[Number]) -> Optional[Decimal]:
    """
    Calculate BMI from weight (kg) and height (cm).

    Formula: BMI = weight_kg / (height_m)²
    where height_m = height_cm / 100

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters

    Returns:
        BMI value (rounded to 1 decimal place, ties to even) or None if
        inputs are missing or not positive

    Examples:
        >>> calculate_bmi(Decimal('70'), Decimal('175'))
        Decimal('22.9')
        >>> calculate_bmi(Decimal('70'), None)
        None
    """
    if weight_kg is None or height_cm is None:
        return None

    weight = _as_decimal(weight_kg)
    height_m = _as_decimal(height_cm) / 100

    if weight <= 0 or height_m <= 0:
        return None

    bmi = weight / (height_m * height_m)
    return bmi.quantize(ONE_DECIMAL, rounding=ROUND_HALF_EVEN)


def calculate_bmi_from_metric_units(weight_g: Optional[int], height_mm: Optional[int]) -> Optional[Decimal]:
    """Same as calculate_bmi, for the integer units stored on the profile (grams, millimeters)."""
    if weight_g is None or height_mm is None:
        return None
    return calculate_bmi(Decimal(weight_g) / 1000, Decimal(height_mm) / 10)
