"""
Onboarding Service

Creates or updates a user's physical profile from the onboarding form and
records the first (or next) set of metric snapshots.

Flow:
1. Convert height (m -> mm) and weight (kg -> g), truncating
2. Resolve max HR: supplied value, otherwise 220 - age
3. Load the profile; create it, or update only the supplied fields
4. Calculate heart rate zones
5. Append the zones snapshot (always) and height/weight snapshots (when supplied)
6. Estimate BMI when both height and weight were supplied in this call

Each store call commits on its own. A failure part-way through leaves the
earlier writes in place and is reported as an unsuccessful result.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from core.events import EventBus, EVENT_HEART_RATE_ZONES_CALCULATED, EVENT_PROFILE_CREATED
from models import (
    BiologicalSex,
    FitnessLevel,
    HeartRateZonesTimeSeries,
    HeightTimeSeries,
    UserPhysicalProfile,
    WeightTimeSeries,
)
from services.age import calculate_age_at_date
from services.heart_rate_zones import HeartRateZoneCalculator
from services.measurements import kilograms_to_grams, meters_to_millimeters
from services.repositories import MetricsTimeSeriesRepository, PhysicalProfileRepository

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "User onboarded successfully."


@dataclass
class OnboardingRequest:
    """Onboarding input for one user (height in meters, weight in kilograms)."""
    user_id: str
    date_of_birth: date
    biological_sex: BiologicalSex
    resting_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None
    weight_kg: Optional[float] = None
    height_m: Optional[float] = None
    fitness_level: Optional[FitnessLevel] = None


@dataclass
class OnboardingResult:
    """Outcome of an onboarding call. Only success and message are set on failure."""
    success: bool
    message: str
    max_heart_rate: Optional[int] = None
    resting_heart_rate: Optional[int] = None
    user_id: Optional[str] = None
    estimated_bmi: Optional[Decimal] = None


class OnboardingService:
    """Orchestrates profile creation/update and metric snapshots."""

    def __init__(
        self,
        profile_repository: PhysicalProfileRepository,
        metrics_repository: MetricsTimeSeriesRepository,
        calculator: Optional[HeartRateZoneCalculator] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.profile_repository = profile_repository
        self.metrics_repository = metrics_repository
        self.calculator = calculator or HeartRateZoneCalculator()
        self.event_bus = event_bus

    def onboard_user(self, request: OnboardingRequest) -> OnboardingResult:
        try:
            return self._onboard(request)
        except Exception as e:
            logger.error(
                f"Onboarding failed for user {request.user_id}: {e}",
                exc_info=True,
                extra={"extra_fields": {"user_id": request.user_id}},
            )
            return OnboardingResult(success=False, message=f"Failed to onboard user: {e}")

    def _onboard(self, request: OnboardingRequest) -> OnboardingResult:
        height_mm = meters_to_millimeters(request.height_m) if request.height_m is not None else None
        weight_g = kilograms_to_grams(request.weight_kg) if request.weight_kg is not None else None

        max_heart_rate = request.max_heart_rate
        if max_heart_rate is None:
            age = calculate_age_at_date(request.date_of_birth)
            max_heart_rate = self.calculator.estimate_max_heart_rate(age)

        profile = self.profile_repository.get_by_user_id(request.user_id)
        if profile is None:
            profile = UserPhysicalProfile(
                user_id=request.user_id,
                date_of_birth=request.date_of_birth,
                biological_sex=request.biological_sex,
                max_heart_rate=max_heart_rate,
                resting_heart_rate=request.resting_heart_rate,
                height_mm=height_mm,
                weight_g=weight_g,
                fitness_level=request.fitness_level or FitnessLevel.NOT_SPECIFIED,
            )
            self.profile_repository.add(profile)
            logger.info(f"Created physical profile for user {request.user_id}")
            self._publish(
                EVENT_PROFILE_CREATED,
                user_id=request.user_id,
                profile_id=profile.id,
                occurred_on=datetime.now(timezone.utc),
            )
        else:
            if height_mm is not None:
                profile.update_height(height_mm)
            if weight_g is not None:
                profile.update_weight(weight_g)
            profile.set_heart_rates(max_heart_rate, request.resting_heart_rate)
            if request.fitness_level is not None:
                profile.update_fitness_level(request.fitness_level)
            self.profile_repository.update(profile)
            logger.info(f"Updated physical profile for user {request.user_id}")

        zones = self.calculator.calculate(max_heart_rate, request.resting_heart_rate)

        zones_entry = HeartRateZonesTimeSeries(request.user_id, zones)
        self.metrics_repository.add_heart_rate_zones(zones_entry)
        self._publish(
            EVENT_HEART_RATE_ZONES_CALCULATED,
            user_id=request.user_id,
            heart_rate_zones_time_series_id=zones_entry.id,
            max_heart_rate=max_heart_rate,
            resting_heart_rate=request.resting_heart_rate,
            occurred_on=datetime.now(timezone.utc),
        )

        if height_mm is not None:
            self.metrics_repository.add_height(HeightTimeSeries(request.user_id, height_mm))
        if weight_g is not None:
            self.metrics_repository.add_weight(WeightTimeSeries(request.user_id, weight_g))

        estimated_bmi = None
        if height_mm and height_mm > 0 and weight_g and weight_g > 0:
            estimated_bmi = profile.calculate_bmi()

        return OnboardingResult(
            success=True,
            message=SUCCESS_MESSAGE,
            max_heart_rate=max_heart_rate,
            resting_heart_rate=request.resting_heart_rate,
            user_id=request.user_id,
            estimated_bmi=estimated_bmi,
        )

    def _publish(self, event_name: str, **payload) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(event_name, **payload)
