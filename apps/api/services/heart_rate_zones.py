"""
Heart Rate Zone Calculator

Builds the five-zone training table for an athlete.

Two modes:
- Karvonen (resting HR known): cut points are taken on the heart-rate
  reserve (max - resting) and offset by the resting rate.
- Percentage of max (no resting HR): cut points are taken on max HR.

Cut points sit at 50/60/70/80/90%. Each cut is computed independently with
truncating integer conversion (never rounding); a zone starts one beat above
the previous zone's ceiling, and Zone 5 always tops out at max HR.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import DomainValidationError, OutOfRangeError

ZONE_1_NAME = "Zone 1 - Recovery"
ZONE_2_NAME = "Zone 2 - Aerobic"
ZONE_3_NAME = "Zone 3 - Tempo"
ZONE_4_NAME = "Zone 4 - Threshold"
ZONE_5_NAME = "Zone 5 - VO2Max"

# (name, description) in ascending intensity order
ZONE_DEFINITIONS: Tuple[Tuple[str, str], ...] = (
    (ZONE_1_NAME, "Very light intensity, active recovery"),
    (ZONE_2_NAME, "Light intensity, improves basic endurance"),
    (ZONE_3_NAME, "Moderate intensity, improves aerobic capacity"),
    (ZONE_4_NAME, "Hard intensity, improves anaerobic threshold"),
    (ZONE_5_NAME, "Very hard intensity, improves maximum performance"),
)

CUT_POINTS: Tuple[float, ...] = (0.50, 0.60, 0.70, 0.80, 0.90)

MIN_AGE_FOR_ESTIMATE = 10
MAX_AGE_FOR_ESTIMATE = 120


@dataclass(frozen=True)
class HeartRateZone:
    """A training zone with inclusive lower and upper bounds (bpm)."""
    name: str
    lower_bound: int
    upper_bound: int
    description: Optional[str] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise DomainValidationError("Zone name cannot be empty", field="name")
        if self.lower_bound < 0:
            raise DomainValidationError(
                "Lower bound must be greater than or equal to 0", field="lower_bound"
            )
        if self.upper_bound <= self.lower_bound:
            raise DomainValidationError(
                "Upper bound must be greater than lower bound", field="upper_bound"
            )

    def contains(self, heart_rate: int) -> bool:
        return self.lower_bound <= heart_rate <= self.upper_bound

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "description": self.description,
        }


@dataclass(frozen=True)
class HeartRateZones:
    """
    A complete, immutable zone table for one athlete at one point in time.

    Persisted as a snapshot in the heart-rate-zones history; never mutated.
    """
    max_heart_rate: int
    resting_heart_rate: Optional[int] = None
    zones: Tuple[HeartRateZone, ...] = field(default_factory=tuple)

    @property
    def uses_heart_rate_reserve(self) -> bool:
        return self.resting_heart_rate is not None

    def zone_for(self, heart_rate: int) -> Optional[HeartRateZone]:
        """Return the zone containing heart_rate, or None when outside the table."""
        for zone in self.zones:
            if zone.contains(heart_rate):
                return zone
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_heart_rate": self.max_heart_rate,
            "resting_heart_rate": self.resting_heart_rate,
            "zones": [z.to_dict() for z in self.zones],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HeartRateZones":
        return cls(
            max_heart_rate=int(data["max_heart_rate"]),
            resting_heart_rate=data.get("resting_heart_rate"),
            zones=tuple(
                HeartRateZone(
                    name=z["name"],
                    lower_bound=int(z["lower_bound"]),
                    upper_bound=int(z["upper_bound"]),
                    description=z.get("description"),
                )
                for z in data.get("zones", [])
            ),
        )


def _validate_heart_rates(max_heart_rate: int, resting_heart_rate: Optional[int]) -> None:
    if max_heart_rate <= 0:
        raise DomainValidationError("Max heart rate must be positive", field="max_heart_rate")
    if resting_heart_rate is not None and resting_heart_rate <= 0:
        raise DomainValidationError(
            "Resting heart rate must be positive", field="resting_heart_rate"
        )


def _cut_points(max_heart_rate: int, resting_heart_rate: Optional[int]) -> List[int]:
    if resting_heart_rate is None:
        return [int(max_heart_rate * pct) for pct in CUT_POINTS]
    hrr = max_heart_rate - resting_heart_rate  # heart-rate reserve
    return [resting_heart_rate + int(hrr * pct) for pct in CUT_POINTS]


class HeartRateZoneCalculator:
    """Domain service for calculating heart rate zones."""

    def calculate(
        self,
        max_heart_rate: int,
        resting_heart_rate: Optional[int] = None,
    ) -> HeartRateZones:
        """
        Calculate the five-zone table.

        Args:
            max_heart_rate: Maximum heart rate in bpm (> 0)
            resting_heart_rate: Optional resting heart rate in bpm (> 0);
                switches the calculation to the Karvonen formula

        Raises:
            DomainValidationError: on non-positive inputs
        """
        _validate_heart_rates(max_heart_rate, resting_heart_rate)

        cuts = _cut_points(max_heart_rate, resting_heart_rate)
        # Zone n spans (cut[n] + 1 .. cut[n+1]); Zone 1 starts on cut[0] itself
        lowers = [cuts[0]] + [c + 1 for c in cuts[1:]]
        uppers = cuts[1:] + [max_heart_rate]

        zones = tuple(
            HeartRateZone(name, lower, upper, description)
            for (name, description), lower, upper in zip(ZONE_DEFINITIONS, lowers, uppers)
        )
        return HeartRateZones(
            max_heart_rate=max_heart_rate,
            resting_heart_rate=resting_heart_rate,
            zones=zones,
        )

    def estimate_max_heart_rate(self, age: int) -> int:
        """
        Estimate max heart rate from age using 220 - age.

        Raises:
            OutOfRangeError: if age is outside [10, 120]
        """
        if age < MIN_AGE_FOR_ESTIMATE or age > MAX_AGE_FOR_ESTIMATE:
            raise OutOfRangeError(
                f"Age must be between {MIN_AGE_FOR_ESTIMATE} and {MAX_AGE_FOR_ESTIMATE}",
                field="age",
            )
        return 220 - age
