"""Availability repository - Database operations for slots and recurring patterns"""

from datetime import date, time

from sqlalchemy.orm import Session

from ...models import AvailabilitySlot, RecurringPattern


class AvailabilityRepository:
    """Repository for availability database operations"""

    @staticmethod
    def get_active_patterns(db: Session) -> list[RecurringPattern]:
        return db.query(RecurringPattern).filter(RecurringPattern.is_active.is_(True)).all()

    @staticmethod
    def slot_exists(db: Session, slot_date: date, start_time: time, end_time: time) -> bool:
        return (
            db.query(AvailabilitySlot.id)
            .filter(
                AvailabilitySlot.date == slot_date,
                AvailabilitySlot.start_time == start_time,
                AvailabilitySlot.end_time == end_time,
            )
            .first()
            is not None
        )

    @staticmethod
    def add_slot(db: Session, **fields) -> AvailabilitySlot:
        """Stage a slot; the caller commits"""
        slot = AvailabilitySlot(**fields)
        db.add(slot)
        db.flush()
        return slot
