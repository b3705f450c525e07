"""Availability service - recurring slot generation"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...database import utc_now
from ...models import RecurringPattern
from .repository import AvailabilityRepository

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def pattern_dates(pattern: RecurringPattern, today: date) -> list[date]:
    """Dates from today through today + weeks_ahead weeks (inclusive) on the pattern's weekdays"""
    days = {d.lower() for d in pattern.days_of_week or []}
    end = today + timedelta(days=7 * (pattern.weeks_ahead or 0))
    dates = []
    current = today
    while current <= end:
        if weekday_name(current) in days:
            dates.append(current)
        current += timedelta(days=1)
    return dates


class AvailabilityService:
    """Service for availability slots"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()

    def process_recurring_patterns(self, today: Optional[date] = None) -> dict:
        """Create missing slots for every active recurring pattern"""
        patterns = self.repo.get_active_patterns(self.db)
        if not patterns:
            logger.info("No active recurring patterns")
            return {"message": "No active patterns found"}

        today = today or utc_now().date()
        slots_created = 0
        for pattern in patterns:
            created = 0
            for slot_date in pattern_dates(pattern, today):
                if self.repo.slot_exists(self.db, slot_date, pattern.start_time, pattern.end_time):
                    continue
                self.repo.add_slot(
                    self.db,
                    date=slot_date,
                    start_time=pattern.start_time,
                    end_time=pattern.end_time,
                    capacity=pattern.capacity,
                    is_available=True,
                    created_by=pattern.created_by,
                )
                created += 1

            try:
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                logger.error(f"❌ Failed to create slots for pattern {pattern.id}: {e}")
                continue

            slots_created += created
            logger.info(f"📅 Pattern '{pattern.name}': {created} slot(s) created")

        logger.info(
            f"✅ Processed {len(patterns)} pattern(s), {slots_created} slot(s) created"
        )
        return {
            "message": "Recurring patterns processed successfully",
            "patterns_processed": len(patterns),
            "slots_created": slots_created,
        }
