"""Appointments repository - Database operations for appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AvailabilitySlot, Profile, Rating, UserRole

ACTIVE_STATUSES = ("pending", "confirmed")


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
        """Get appointment with client profile, slot and service loaded"""
        return (
            db.query(Appointment)
            .options(
                joinedload(Appointment.profile),
                joinedload(Appointment.slot),
                joinedload(Appointment.service),
            )
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def get_active_appointments_for_slot(db: Session, slot_id: str) -> list[Appointment]:
        """Pending and confirmed appointments booked on a slot"""
        return (
            db.query(Appointment)
            .options(
                joinedload(Appointment.profile),
                joinedload(Appointment.slot),
                joinedload(Appointment.service),
            )
            .filter(Appointment.slot_id == slot_id, Appointment.status.in_(ACTIVE_STATUSES))
            .all()
        )

    @staticmethod
    def get_appointments_needing_reminder(
        db: Session, start_date: date, end_date: date
    ) -> list[Appointment]:
        """Active appointments without a reminder whose slot date is in [start_date, end_date]"""
        return (
            db.query(Appointment)
            .join(AvailabilitySlot, Appointment.slot_id == AvailabilitySlot.id)
            .options(joinedload(Appointment.profile), joinedload(Appointment.slot))
            .filter(
                Appointment.reminder_sent.is_(False),
                Appointment.status.in_(ACTIVE_STATUSES),
                AvailabilitySlot.date >= start_date,
                AvailabilitySlot.date <= end_date,
            )
            .all()
        )

    @staticmethod
    def has_rating(db: Session, appointment_id: str) -> bool:
        return db.query(Rating.id).filter(Rating.appointment_id == appointment_id).first() is not None

    @staticmethod
    def get_admin_profiles(db: Session) -> list[Profile]:
        """Profiles holding the admin role"""
        return (
            db.query(Profile)
            .join(UserRole, UserRole.user_id == Profile.id)
            .filter(UserRole.role == "admin")
            .all()
        )

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **kwargs) -> Appointment:
        """Update appointment fields"""
        for key, value in kwargs.items():
            setattr(appointment, key, value)
        db.commit()
        db.refresh(appointment)
        return appointment
