"""Ratings domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RatingItem(BaseModel):
    id: str
    rating: int
    review: Optional[str] = None
    initials: str
    created_at: Optional[datetime] = None
    admin_response: Optional[str] = None
    admin_response_at: Optional[datetime] = None


class ServiceRatingsResponse(BaseModel):
    ratings: list[RatingItem]
    count: int
    average: Optional[float] = None


class ReviewItem(RatingItem):
    client_name: Optional[str] = None
    service_id: Optional[str] = None
    service_name: Optional[str] = None
    category: Optional[str] = None
    photos: list[str] = []


class ReviewsResponse(BaseModel):
    reviews: list[ReviewItem]
    categories: list[str]


class AdminResponseRequest(BaseModel):
    """Blank or null clears the response"""

    response: Optional[str] = None
