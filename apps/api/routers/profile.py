"""
Physical profile read endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import get_current_user_id
from core.database import get_db
from core.exceptions import NotFoundError
from schemas import PhysicalProfileResponse
from services.repositories import SqlAlchemyPhysicalProfileRepository

router = APIRouter(prefix="/v1", tags=["profile"])


@router.get("/profile", response_model=PhysicalProfileResponse)
def get_profile(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Get the authenticated user's physical profile with derived values."""
    profile = SqlAlchemyPhysicalProfileRepository(db).get_by_user_id(user_id)
    if profile is None:
        raise NotFoundError("Physical profile", user_id)

    response = PhysicalProfileResponse.model_validate(profile)
    if profile.height_mm and profile.weight_g:
        response.bmi = float(profile.calculate_bmi())
    return response
