"""Profiles router - the caller's own profile"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthUser, get_current_user
from ...database import get_db
from .schemas import ProfileResponse, ProfileUpdate
from .service import ProfileService

router = APIRouter(prefix="/api/profile", tags=["Profile"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.get("", response_model=ProfileResponse)
async def get_profile(
    current_user: AuthUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_profile(current_user.id)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Update name, phone and email preference"""
    return service.update_profile(current_user.id, data)
