"""Payments repository - Database operations for appointment payments and refunds"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, CancellationPolicy


class PaymentRepository:
    """Repository for payment database operations"""

    @staticmethod
    def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_active_policies(db: Session) -> list[CancellationPolicy]:
        """Active cancellation policies, largest notice window first"""
        return (
            db.query(CancellationPolicy)
            .filter(CancellationPolicy.is_active.is_(True))
            .order_by(CancellationPolicy.hours_before.desc())
            .all()
        )

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **kwargs) -> Appointment:
        """Update appointment payment fields"""
        for key, value in kwargs.items():
            setattr(appointment, key, value)
        db.commit()
        db.refresh(appointment)
        return appointment
