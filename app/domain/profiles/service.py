"""Profiles service - read and update the caller's profile"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Profile
from .schemas import ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> Profile:
        profile = self.db.query(Profile).filter(Profile.id == user_id).first()
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def update_profile(self, user_id: str, data: ProfileUpdate) -> Profile:
        profile = self.get_profile(user_id)

        profile.full_name = data.full_name
        profile.phone = data.phone
        if data.email_notifications is not None:
            profile.email_notifications = data.email_notifications

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update profile")

        self.db.refresh(profile)
        logger.info(f"✅ Profile updated for user {user_id}")
        return profile
