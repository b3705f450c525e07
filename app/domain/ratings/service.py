"""Ratings service - ratings panel aggregates, public reviews and moderation"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthUser
from ...models import Rating
from ...shared.validators import get_initials
from ...utils.storage import get_signed_photo_urls
from .repository import RatingRepository

logger = logging.getLogger(__name__)


def average_rating(ratings: list[Rating]) -> Optional[float]:
    """Mean rating rounded to one decimal, None when there are no ratings"""
    if not ratings:
        return None
    return round(sum(r.rating for r in ratings) / len(ratings), 1)


def _initials_for(rating: Rating) -> str:
    client = rating.client
    return get_initials(client.full_name if client else None, client.email if client else None)


def _rating_item(rating: Rating) -> dict:
    return {
        "id": rating.id,
        "rating": rating.rating,
        "review": rating.review,
        "initials": _initials_for(rating),
        "created_at": rating.created_at,
        "admin_response": rating.admin_response,
        "admin_response_at": rating.admin_response_at,
    }


class RatingService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = RatingRepository()

    def get_service_ratings(self, service_id: str) -> dict:
        ratings = self.repo.get_service_ratings(self.db, service_id)
        return {
            "ratings": [_rating_item(r) for r in ratings],
            "count": len(ratings),
            "average": average_rating(ratings),
        }

    def get_reviews(self, category: Optional[str] = None) -> dict:
        """Public reviews with signed photo URLs"""
        if category == "all":
            category = None

        reviews = []
        for rating in self.repo.get_reviews(self.db, category):
            item = _rating_item(rating)
            item.update(
                {
                    "client_name": rating.client.full_name if rating.client else None,
                    "service_id": rating.service_id,
                    "service_name": rating.service.name if rating.service else None,
                    "category": rating.service.category if rating.service else None,
                    "photos": get_signed_photo_urls(rating.photos),
                }
            )
            reviews.append(item)

        return {"reviews": reviews, "categories": self.repo.get_review_categories(self.db)}

    def _get_rating_or_404(self, rating_id: str) -> Rating:
        rating = self.repo.get_rating(self.db, rating_id)
        if not rating:
            raise HTTPException(status_code=404, detail="Rating not found")
        return rating

    def set_admin_response(self, rating_id: str, response: Optional[str], admin: AuthUser) -> dict:
        rating = self._get_rating_or_404(rating_id)
        response = (response or "").strip() or None

        if response:
            fields = {
                "admin_response": response,
                "admin_response_at": datetime.now(timezone.utc),
                "admin_responder_id": admin.id,
            }
        else:
            fields = {"admin_response": None, "admin_response_at": None, "admin_responder_id": None}

        rating = self.repo.update_rating(self.db, rating, **fields)
        action = "responded to" if response else "cleared response on"
        logger.info(f"💬 Admin {admin.id} {action} rating {rating_id}")
        return _rating_item(rating)

    def delete_rating(self, rating_id: str, admin: AuthUser) -> dict:
        rating = self._get_rating_or_404(rating_id)
        self.repo.delete_rating(self.db, rating)
        logger.info(f"🗑️ Rating {rating_id} deleted by admin {admin.id}")
        return {"message": "Rating deleted successfully"}
