from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, date
from uuid import UUID
from typing import Optional, List

from models import BiologicalSex, FitnessLevel


class SaveUserInfoRequest(BaseModel):
    """Onboarding form. Height is entered in centimeters, weight in kilograms."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: date
    biological_sex: BiologicalSex
    resting_heart_rate: Optional[int] = Field(
        None, ge=30, le=120, description="Resting heart rate should be between 30-120 bpm"
    )
    max_heart_rate: Optional[int] = Field(
        None, ge=120, le=220, description="Maximum heart rate should be between 120-220 bpm"
    )
    weight: Optional[float] = Field(None, ge=30, le=300, description="Weight should be between 30-300 kg")
    height: Optional[float] = Field(None, ge=100, le=250, description="Height should be between 100-250 cm")
    fitness_level: Optional[FitnessLevel] = None


class SaveUserInfoResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    max_heart_rate: Optional[int] = None
    resting_heart_rate: Optional[int] = None
    user_id: Optional[str] = None
    estimated_bmi: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class PhysicalProfileResponse(BaseModel):
    """Current physical profile with derived values"""
    user_id: str
    date_of_birth: date
    age: int
    biological_sex: BiologicalSex
    fitness_level: FitnessLevel
    height_mm: Optional[int] = None
    height_cm: Optional[float] = None
    height_inches: Optional[float] = None
    weight_g: Optional[int] = None
    weight_kg: Optional[float] = None
    weight_pounds: Optional[float] = None
    max_heart_rate: int
    resting_heart_rate: Optional[int] = None
    bmi: Optional[float] = None  # Only when both height and weight are known
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)


class HeartRateZoneResponse(BaseModel):
    name: str
    lower_bound: int
    upper_bound: int
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class HeartRateZonesEntryResponse(BaseModel):
    """One heart rate zone snapshot"""
    id: UUID
    recorded_at: datetime
    max_heart_rate: int
    resting_heart_rate: Optional[int] = None
    uses_heart_rate_reserve: bool
    zones: List[HeartRateZoneResponse]

    @classmethod
    def from_entry(cls, entry) -> "HeartRateZonesEntryResponse":
        zones = entry.heart_rate_zones
        return cls(
            id=entry.id,
            recorded_at=entry.recorded_at,
            max_heart_rate=entry.max_heart_rate,
            resting_heart_rate=entry.resting_heart_rate,
            uses_heart_rate_reserve=zones.uses_heart_rate_reserve,
            zones=[HeartRateZoneResponse.model_validate(z) for z in zones.zones],
        )


class WeightEntryResponse(BaseModel):
    id: UUID
    recorded_at: datetime
    weight_g: int
    weight_kg: float
    weight_pounds: float

    model_config = ConfigDict(from_attributes=True)


class HeightEntryResponse(BaseModel):
    id: UUID
    recorded_at: datetime
    height_mm: int
    height_cm: float
    height_inches: float

    model_config = ConfigDict(from_attributes=True)
