"""
Persistence ports for the physical profile and the metrics time series.

The services depend only on the abstract classes below; the SQLAlchemy
implementations are wired in by the routers. Each write commits on its own,
so a multi-step caller (onboarding) is not transactional across calls.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from models import (
    HeartRateZonesTimeSeries,
    HeightTimeSeries,
    UserPhysicalProfile,
    WeightTimeSeries,
)

logger = logging.getLogger(__name__)


class PhysicalProfileRepository(ABC):
    """Store for the single current physical profile of each user."""

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> Optional[UserPhysicalProfile]:
        pass

    @abstractmethod
    def add(self, profile: UserPhysicalProfile) -> None:
        pass

    @abstractmethod
    def update(self, profile: UserPhysicalProfile) -> None:
        pass

    @abstractmethod
    def exists(self, user_id: str) -> bool:
        pass


class MetricsTimeSeriesRepository(ABC):
    """
    Append-only store for measurement snapshots.

    History queries return entries whose recorded_at lies in
    [start_date, end_date] (both inclusive), oldest first.
    """

    @abstractmethod
    def add_heart_rate_zones(self, entry: HeartRateZonesTimeSeries) -> None:
        pass

    @abstractmethod
    def add_weight(self, entry: WeightTimeSeries) -> None:
        pass

    @abstractmethod
    def add_height(self, entry: HeightTimeSeries) -> None:
        pass

    @abstractmethod
    def get_latest_heart_rate_zones(self, user_id: str) -> Optional[HeartRateZonesTimeSeries]:
        pass

    @abstractmethod
    def get_latest_weight(self, user_id: str) -> Optional[WeightTimeSeries]:
        pass

    @abstractmethod
    def get_latest_height(self, user_id: str) -> Optional[HeightTimeSeries]:
        pass

    @abstractmethod
    def get_heart_rate_zones_history(
        self, user_id: str, start_date: datetime, end_date: datetime
    ) -> List[HeartRateZonesTimeSeries]:
        pass

    @abstractmethod
    def get_weight_history(
        self, user_id: str, start_date: datetime, end_date: datetime
    ) -> List[WeightTimeSeries]:
        pass

    @abstractmethod
    def get_height_history(
        self, user_id: str, start_date: datetime, end_date: datetime
    ) -> List[HeightTimeSeries]:
        pass


class SqlAlchemyPhysicalProfileRepository(PhysicalProfileRepository):
    """PhysicalProfileRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: str) -> Optional[UserPhysicalProfile]:
        return self.db.query(UserPhysicalProfile).filter(
            UserPhysicalProfile.user_id == user_id
        ).first()

    def add(self, profile: UserPhysicalProfile) -> None:
        self.db.add(profile)
        self._commit()
        logger.debug(f"Added physical profile for user {profile.user_id}")

    def update(self, profile: UserPhysicalProfile) -> None:
        # The profile is already attached when loaded through this session;
        # merge covers detached instances.
        if profile not in self.db:
            self.db.merge(profile)
        self._commit()
        logger.debug(f"Updated physical profile for user {profile.user_id}")

    def exists(self, user_id: str) -> bool:
        return self.db.query(
            self.db.query(UserPhysicalProfile.id).filter(
                UserPhysicalProfile.user_id == user_id
            ).exists()
        ).scalar()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class SqlAlchemyMetricsTimeSeriesRepository(MetricsTimeSeriesRepository):
    """MetricsTimeSeriesRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def add_heart_rate_zones(self, entry: HeartRateZonesTimeSeries) -> None:
        self._append(entry)

    def add_weight(self, entry: WeightTimeSeries) -> None:
        self._append(entry)

    def add_height(self, entry: HeightTimeSeries) -> None:
        self._append(entry)

    def get_latest_heart_rate_zones(self, user_id: str) -> Optional[HeartRateZonesTimeSeries]:
        return self._latest(HeartRateZonesTimeSeries, user_id)

    def get_latest_weight(self, user_id: str) -> Optional[WeightTimeSeries]:
        return self._latest(WeightTimeSeries, user_id)

    def get_latest_height(self, user_id: str) -> Optional[HeightTimeSeries]:
        return self._latest(HeightTimeSeries, user_id)

    def get_heart_rate_zones_history(
        self, user_id: str, start_date: datetime, end_date: datetime
    ) -> List[HeartRateZonesTimeSeries]:
        return self._history(HeartRateZonesTimeSeries, user_id, start_date, end_date)

    def get_weight_history(
        self, user_id: str, start_date: datetime, end_date: datetime
    ) -> List[WeightTimeSeries]:
        return self._history(WeightTimeSeries, user_id, start_date, end_date)

    def get_height_history(
        self, user_id: str, start_date: datetime, end_date: datetime
    ) -> List[HeightTimeSeries]:
        return self._history(HeightTimeSeries, user_id, start_date, end_date)

    def _append(self, entry) -> None:
        self.db.add(entry)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.debug(f"Appended {type(entry).__name__} for user {entry.user_id}")

    def _latest(self, model, user_id: str):
        return self.db.query(model).filter(
            model.user_id == user_id
        ).order_by(model.recorded_at.desc()).first()

    def _history(self, model, user_id: str, start_date: datetime, end_date: datetime):
        return self.db.query(model).filter(
            model.user_id == user_id,
            model.recorded_at >= start_date,
            model.recorded_at <= end_date,
        ).order_by(model.recorded_at.asc()).all()
