"""Ratings router - ratings panel, public reviews and admin moderation"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import AuthUser, require_admin
from ...database import get_db
from .schemas import AdminResponseRequest, RatingItem, ReviewsResponse, ServiceRatingsResponse
from .service import RatingService

router = APIRouter(prefix="/api", tags=["Ratings"])


def get_rating_service(db: Session = Depends(get_db)) -> RatingService:
    """Dependency injection for RatingService"""
    return RatingService(db)


@router.get("/services/{service_id}/ratings", response_model=ServiceRatingsResponse)
async def get_service_ratings(
    service_id: str,
    service: RatingService = Depends(get_rating_service),
):
    return service.get_service_ratings(service_id)


@router.get("/reviews", response_model=ReviewsResponse)
async def get_reviews(
    category: Optional[str] = Query(None),
    service: RatingService = Depends(get_rating_service),
):
    return service.get_reviews(category)


@router.put("/ratings/{rating_id}/response", response_model=RatingItem)
async def set_admin_response(
    rating_id: str,
    body: AdminResponseRequest,
    admin: AuthUser = Depends(require_admin),
    service: RatingService = Depends(get_rating_service),
):
    """Set or clear the admin's public reply to a rating"""
    return service.set_admin_response(rating_id, body.response, admin)


@router.delete("/ratings/{rating_id}")
async def delete_rating(
    rating_id: str,
    admin: AuthUser = Depends(require_admin),
    service: RatingService = Depends(get_rating_service),
):
    return service.delete_rating(rating_id, admin)
