"""
Metrics history endpoints.

Latest and date-range reads over the append-only height, weight and heart
rate zone snapshots of the authenticated user. History defaults to the
last HISTORY_DEFAULT_DAYS days and is returned oldest first. Heart rate
zones can also be recalculated from the profile on demand.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import get_current_user_id
from core.config import settings
from core.database import get_db
from core.events import EventBus, get_event_bus
from core.exceptions import NotFoundError, ValidationError
from schemas import HeartRateZonesEntryResponse, HeightEntryResponse, WeightEntryResponse
from services.heart_rate_zone_service import HeartRateZoneService
from services.repositories import (
    MetricsTimeSeriesRepository,
    SqlAlchemyMetricsTimeSeriesRepository,
    SqlAlchemyPhysicalProfileRepository,
)

router = APIRouter(prefix="/v1/metrics", tags=["metrics"])


def get_metrics_repository(db: Session = Depends(get_db)) -> MetricsTimeSeriesRepository:
    return SqlAlchemyMetricsTimeSeriesRepository(db)


def get_heart_rate_zone_service(
    repo: MetricsTimeSeriesRepository = Depends(get_metrics_repository),
    event_bus: Optional[EventBus] = Depends(get_event_bus),
) -> HeartRateZoneService:
    return HeartRateZoneService(repo, event_bus=event_bus)


def _as_utc(value: datetime) -> datetime:
    # Naive input is taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _resolve_range(
    start_date: Optional[datetime], end_date: Optional[datetime]
) -> Tuple[datetime, datetime]:
    end = _as_utc(end_date) if end_date else datetime.now(timezone.utc)
    start = _as_utc(start_date) if start_date else end - timedelta(days=settings.HISTORY_DEFAULT_DAYS)
    if start > end:
        raise ValidationError("start_date must not be after end_date", field="start_date")
    return start, end


# --- Heart rate zones ---

@router.get("/heart-rate-zones/latest", response_model=HeartRateZonesEntryResponse)
def get_latest_heart_rate_zones(
    user_id: str = Depends(get_current_user_id),
    service: HeartRateZoneService = Depends(get_heart_rate_zone_service),
):
    entry = service.get_latest(user_id)
    if entry is None:
        raise NotFoundError("Heart rate zones", user_id)
    return HeartRateZonesEntryResponse.from_entry(entry)


@router.post("/heart-rate-zones/recalculate", response_model=HeartRateZonesEntryResponse)
def recalculate_heart_rate_zones(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    service: HeartRateZoneService = Depends(get_heart_rate_zone_service),
):
    """
    Recalculate zones from the heart rates on the current profile.

    Appends a new snapshot; earlier snapshots stay in the history.
    """
    profile = SqlAlchemyPhysicalProfileRepository(db).get_by_user_id(user_id)
    if profile is None:
        raise NotFoundError("Physical profile", user_id)
    entry = service.calculate_and_store(user_id, profile.max_heart_rate, profile.resting_heart_rate)
    return HeartRateZonesEntryResponse.from_entry(entry)


@router.get("/heart-rate-zones/history", response_model=List[HeartRateZonesEntryResponse])
def get_heart_rate_zones_history(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    user_id: str = Depends(get_current_user_id),
    repo: MetricsTimeSeriesRepository = Depends(get_metrics_repository),
):
    start, end = _resolve_range(start_date, end_date)
    entries = repo.get_heart_rate_zones_history(user_id, start, end)
    return [HeartRateZonesEntryResponse.from_entry(e) for e in entries]


# --- Weight ---

@router.get("/weight/latest", response_model=WeightEntryResponse)
def get_latest_weight(
    user_id: str = Depends(get_current_user_id),
    repo: MetricsTimeSeriesRepository = Depends(get_metrics_repository),
):
    entry = repo.get_latest_weight(user_id)
    if entry is None:
        raise NotFoundError("Weight", user_id)
    return entry


@router.get("/weight/history", response_model=List[WeightEntryResponse])
def get_weight_history(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    user_id: str = Depends(get_current_user_id),
    repo: MetricsTimeSeriesRepository = Depends(get_metrics_repository),
):
    start, end = _resolve_range(start_date, end_date)
    return repo.get_weight_history(user_id, start, end)


# --- Height ---

@router.get("/height/latest", response_model=HeightEntryResponse)
def get_latest_height(
    user_id: str = Depends(get_current_user_id),
    repo: MetricsTimeSeriesRepository = Depends(get_metrics_repository),
):
    entry = repo.get_latest_height(user_id)
    if entry is None:
        raise NotFoundError("Height", user_id)
    return entry


@router.get("/height/history", response_model=List[HeightEntryResponse])
def get_height_history(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    user_id: str = Depends(get_current_user_id),
    repo: MetricsTimeSeriesRepository = Depends(get_metrics_repository),
):
    start, end = _resolve_range(start_date, end_date)
    return repo.get_height_history(user_id, start, end)
