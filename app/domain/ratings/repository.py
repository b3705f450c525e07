"""Ratings repository - Database operations for ratings and reviews"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Rating, Service


class RatingRepository:
    """Repository for rating database operations"""

    @staticmethod
    def get_service_ratings(db: Session, service_id: str) -> list[Rating]:
        """Ratings for a service, newest first"""
        return (
            db.query(Rating)
            .options(joinedload(Rating.client))
            .filter(Rating.service_id == service_id)
            .order_by(Rating.created_at.desc())
            .all()
        )

    @staticmethod
    def get_reviews(db: Session, category: Optional[str] = None) -> list[Rating]:
        """Ratings with review text, best first then newest"""
        query = (
            db.query(Rating)
            .options(joinedload(Rating.client), joinedload(Rating.service))
            .filter(Rating.review.isnot(None), Rating.review != "")
        )
        if category:
            query = query.join(Service, Rating.service_id == Service.id).filter(
                Service.category == category
            )
        return query.order_by(Rating.rating.desc(), Rating.created_at.desc()).all()

    @staticmethod
    def get_review_categories(db: Session) -> list[str]:
        """Distinct service categories that have at least one review"""
        rows = (
            db.query(Service.category)
            .join(Rating, Rating.service_id == Service.id)
            .filter(Rating.review.isnot(None), Rating.review != "", Service.category.isnot(None))
            .distinct()
            .order_by(Service.category)
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def get_rating(db: Session, rating_id: str) -> Optional[Rating]:
        return db.query(Rating).filter(Rating.id == rating_id).first()

    @staticmethod
    def update_rating(db: Session, rating: Rating, **fields) -> Rating:
        for key, value in fields.items():
            setattr(rating, key, value)
        db.commit()
        db.refresh(rating)
        return rating

    @staticmethod
    def delete_rating(db: Session, rating: Rating) -> None:
        db.delete(rating)
        db.commit()
