from sqlalchemy import Column, Integer, Date, DateTime, Index, JSON, Text, Uuid, CheckConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from core.database import Base
from core.exceptions import DomainValidationError
from services.age import calculate_age_at_date
from services.bmi_calculator import calculate_bmi_from_metric_units
from services.heart_rate_zones import HeartRateZones
from services.measurements import Height, Weight
import enum
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class BiologicalSex(str, enum.Enum):
    """Biological sex, used by physiological calculations."""
    NOT_SPECIFIED = "not_specified"
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class FitnessLevel(str, enum.Enum):
    """Self-assessed running fitness level."""
    NOT_SPECIFIED = "not_specified"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class UserPhysicalProfile(Base):
    """
    A user's current physiological attributes, collected during onboarding.

    One row per user. Created once, then updated in place through the
    mutators below, each of which enforces the profile invariants and
    refreshes last_updated:
    - height_mm / weight_g are either unset (None) or > 0
    - max_heart_rate > 0
    - resting_heart_rate, when present, is > 0 and < max_heart_rate
    """
    __tablename__ = "user_physical_profile"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, unique=True, index=True)
    date_of_birth = Column(Date, nullable=False)
    biological_sex = Column(
        SAEnum(BiologicalSex, name="biological_sex", native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=BiologicalSex.NOT_SPECIFIED,
    )
    height_mm = Column(Integer, nullable=True)
    weight_g = Column(Integer, nullable=True)
    max_heart_rate = Column(Integer, nullable=False)
    resting_heart_rate = Column(Integer, nullable=True)
    fitness_level = Column(
        SAEnum(FitnessLevel, name="fitness_level", native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=FitnessLevel.NOT_SPECIFIED,
    )
    last_updated = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        CheckConstraint("height_mm IS NULL OR height_mm > 0", name="ck_profile_height_positive"),
        CheckConstraint("weight_g IS NULL OR weight_g > 0", name="ck_profile_weight_positive"),
        CheckConstraint("max_heart_rate > 0", name="ck_profile_max_hr_positive"),
    )

    def __init__(
        self,
        user_id: str,
        date_of_birth: date,
        biological_sex: BiologicalSex,
        max_heart_rate: int,
        resting_heart_rate: Optional[int] = None,
        height_mm: Optional[int] = None,
        weight_g: Optional[int] = None,
        fitness_level: FitnessLevel = FitnessLevel.NOT_SPECIFIED,
    ):
        super().__init__()
        if not user_id or not str(user_id).strip():
            raise DomainValidationError("User id is required", field="user_id")
        self.id = uuid.uuid4()
        self.user_id = user_id
        self.date_of_birth = date_of_birth.date() if isinstance(date_of_birth, datetime) else date_of_birth
        self.biological_sex = biological_sex
        if height_mm is not None:
            self.update_height(height_mm)
        if weight_g is not None:
            self.update_weight(weight_g)
        self.set_heart_rates(max_heart_rate, resting_heart_rate)
        self.fitness_level = fitness_level or FitnessLevel.NOT_SPECIFIED
        self.last_updated = _utcnow()

    # --- Mutators ---

    def update_height(self, height_mm: int) -> None:
        if height_mm is None or height_mm <= 0:
            raise DomainValidationError("Height must be greater than zero", field="height_mm")
        self.height_mm = height_mm
        self.last_updated = _utcnow()

    def update_weight(self, weight_g: int) -> None:
        if weight_g is None or weight_g <= 0:
            raise DomainValidationError("Weight must be greater than zero", field="weight_g")
        self.weight_g = weight_g
        self.last_updated = _utcnow()

    def set_heart_rates(self, max_heart_rate: int, resting_heart_rate: Optional[int] = None) -> None:
        if max_heart_rate is None or max_heart_rate <= 0:
            raise DomainValidationError(
                "Max heart rate must be greater than zero", field="max_heart_rate"
            )
        if resting_heart_rate is not None and resting_heart_rate <= 0:
            raise DomainValidationError(
                "Resting heart rate must be greater than zero", field="resting_heart_rate"
            )
        if resting_heart_rate is not None and resting_heart_rate >= max_heart_rate:
            raise DomainValidationError(
                "Resting heart rate must be less than max heart rate", field="resting_heart_rate"
            )
        self.max_heart_rate = max_heart_rate
        self.resting_heart_rate = resting_heart_rate
        self.last_updated = _utcnow()

    def update_fitness_level(self, fitness_level: FitnessLevel) -> None:
        self.fitness_level = fitness_level
        self.last_updated = _utcnow()

    # --- Derived values ---

    @property
    def age(self) -> int:
        return calculate_age_at_date(self.date_of_birth)

    @property
    def height(self) -> Optional[Height]:
        return Height.from_millimeters(self.height_mm) if self.height_mm else None

    @property
    def weight(self) -> Optional[Weight]:
        return Weight.from_grams(self.weight_g) if self.weight_g else None

    @property
    def height_cm(self) -> Optional[Decimal]:
        return self.height.centimeters if self.height_mm else None

    @property
    def height_inches(self) -> Optional[Decimal]:
        return self.height.inches if self.height_mm else None

    @property
    def weight_kg(self) -> Optional[Decimal]:
        return self.weight.kilograms if self.weight_g else None

    @property
    def weight_pounds(self) -> Optional[Decimal]:
        return self.weight.pounds if self.weight_g else None

    def calculate_bmi(self) -> Decimal:
        """BMI = weight_kg / height_m², rounded to one decimal place."""
        if not self.height_mm or not self.weight_g:
            raise DomainValidationError("BMI requires both height and weight")
        return calculate_bmi_from_metric_units(self.weight_g, self.height_mm)


class HeightTimeSeries(Base):
    """Append-only history of height measurements."""
    __tablename__ = "height_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    recorded_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    height_mm = Column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_height_history_user_recorded", "user_id", "recorded_at"),
        CheckConstraint("height_mm > 0", name="ck_height_history_positive"),
    )

    def __init__(self, user_id: str, height_mm: int):
        super().__init__()
        if not user_id:
            raise DomainValidationError("User id is required", field="user_id")
        if height_mm is None or height_mm <= 0:
            raise DomainValidationError("Height must be greater than zero", field="height_mm")
        self.id = uuid.uuid4()
        self.user_id = user_id
        self.height_mm = height_mm
        self.recorded_at = _utcnow()

    @property
    def height_cm(self) -> Decimal:
        return Height.from_millimeters(self.height_mm).centimeters

    @property
    def height_inches(self) -> Decimal:
        return Height.from_millimeters(self.height_mm).inches


class WeightTimeSeries(Base):
    """Append-only history of weight measurements."""
    __tablename__ = "weight_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    recorded_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    weight_g = Column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_weight_history_user_recorded", "user_id", "recorded_at"),
        CheckConstraint("weight_g > 0", name="ck_weight_history_positive"),
    )

    def __init__(self, user_id: str, weight_g: int):
        super().__init__()
        if not user_id:
            raise DomainValidationError("User id is required", field="user_id")
        if weight_g is None or weight_g <= 0:
            raise DomainValidationError("Weight must be greater than zero", field="weight_g")
        self.id = uuid.uuid4()
        self.user_id = user_id
        self.weight_g = weight_g
        self.recorded_at = _utcnow()

    @property
    def weight_kg(self) -> Decimal:
        return Weight.from_grams(self.weight_g).kilograms

    @property
    def weight_pounds(self) -> Decimal:
        return Weight.from_grams(self.weight_g).pounds


class HeartRateZonesTimeSeries(Base):
    """
    Append-only history of calculated heart rate zone tables.

    The full zone table is stored as a JSON snapshot; max/resting HR are
    duplicated into columns so history can be filtered without unpacking it.
    """
    __tablename__ = "heart_rate_zones_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    recorded_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    max_heart_rate = Column(Integer, nullable=False)
    resting_heart_rate = Column(Integer, nullable=True)
    zones_json = Column(JSONType, nullable=False)

    __table_args__ = (
        Index("ix_heart_rate_zones_history_user_recorded", "user_id", "recorded_at"),
    )

    def __init__(self, user_id: str, heart_rate_zones: HeartRateZones):
        super().__init__()
        if not user_id:
            raise DomainValidationError("User id is required", field="user_id")
        if heart_rate_zones is None:
            raise DomainValidationError("Heart rate zones are required", field="heart_rate_zones")
        self.id = uuid.uuid4()
        self.user_id = user_id
        self.max_heart_rate = heart_rate_zones.max_heart_rate
        self.resting_heart_rate = heart_rate_zones.resting_heart_rate
        self.zones_json = heart_rate_zones.to_dict()
        self.recorded_at = _utcnow()

    @property
    def heart_rate_zones(self) -> HeartRateZones:
        return HeartRateZones.from_dict(self.zones_json)
