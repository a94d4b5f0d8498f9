"""
Heart rate zone calculation and retrieval for a single user.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from core.events import EventBus, EVENT_HEART_RATE_ZONES_CALCULATED
from models import HeartRateZonesTimeSeries
from services.heart_rate_zones import HeartRateZoneCalculator
from services.repositories import MetricsTimeSeriesRepository

logger = logging.getLogger(__name__)


class HeartRateZoneService:
    """Calculates zone tables and keeps them in the metrics history."""

    def __init__(
        self,
        metrics_repository: MetricsTimeSeriesRepository,
        calculator: Optional[HeartRateZoneCalculator] = None,
        event_bus: Optional[EventBus] = None,
    ):
        if metrics_repository is None:
            raise ValueError("metrics_repository is required")
        self.metrics_repository = metrics_repository
        self.calculator = calculator or HeartRateZoneCalculator()
        self.event_bus = event_bus

    def calculate_and_store(
        self,
        user_id: str,
        max_heart_rate: int,
        resting_heart_rate: Optional[int] = None,
    ) -> HeartRateZonesTimeSeries:
        """Calculate zones and append them as a new snapshot."""
        zones = self.calculator.calculate(max_heart_rate, resting_heart_rate)
        entry = HeartRateZonesTimeSeries(user_id, zones)
        self.metrics_repository.add_heart_rate_zones(entry)
        logger.info(
            f"Stored heart rate zones for user {user_id}",
            extra={"extra_fields": {
                "user_id": user_id,
                "max_heart_rate": max_heart_rate,
                "karvonen": zones.uses_heart_rate_reserve,
            }},
        )

        if self.event_bus is not None:
            self.event_bus.emit(
                EVENT_HEART_RATE_ZONES_CALCULATED,
                user_id=user_id,
                heart_rate_zones_time_series_id=entry.id,
                max_heart_rate=max_heart_rate,
                resting_heart_rate=resting_heart_rate,
                occurred_on=datetime.now(timezone.utc),
            )
        return entry

    def get_latest(self, user_id: str) -> Optional[HeartRateZonesTimeSeries]:
        """Most recent zone snapshot, or None when nothing was stored yet."""
        return self.metrics_repository.get_latest_heart_rate_zones(user_id)
