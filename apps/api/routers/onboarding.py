"""
Onboarding router.

Accepts the onboarding form for the authenticated user and hands it to the
OnboardingService. Range checks happen here (422 before the service runs);
the service result is always returned with 200, including failures.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import get_current_user_id
from core.database import get_db
from core.events import EventBus, get_event_bus
from schemas import SaveUserInfoRequest, SaveUserInfoResponse
from services.onboarding_service import OnboardingRequest, OnboardingService
from services.repositories import (
    SqlAlchemyMetricsTimeSeriesRepository,
    SqlAlchemyPhysicalProfileRepository,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/onboarding", tags=["onboarding"])


def get_onboarding_service(
    db: Session = Depends(get_db),
    event_bus: Optional[EventBus] = Depends(get_event_bus),
) -> OnboardingService:
    return OnboardingService(
        SqlAlchemyPhysicalProfileRepository(db),
        SqlAlchemyMetricsTimeSeriesRepository(db),
        event_bus=event_bus,
    )


@router.post("/user-info", response_model=SaveUserInfoResponse)
def save_user_info(
    request: SaveUserInfoRequest,
    user_id: str = Depends(get_current_user_id),
    service: OnboardingService = Depends(get_onboarding_service),
):
    """
    Save onboarding user info.

    Creates the physical profile on first call and updates it afterwards.
    Height arrives in centimeters and is passed on in meters.
    """
    onboarding_request = OnboardingRequest(
        user_id=user_id,
        date_of_birth=request.date_of_birth,
        biological_sex=request.biological_sex,
        resting_heart_rate=request.resting_heart_rate,
        max_heart_rate=request.max_heart_rate,
        weight_kg=request.weight,
        height_m=request.height / 100 if request.height is not None else None,
        fitness_level=request.fitness_level,
    )
    result = service.onboard_user(onboarding_request)
    if not result.success:
        logger.warning(f"Onboarding unsuccessful for user {user_id}: {result.message}")
    return SaveUserInfoResponse.model_validate(result)
