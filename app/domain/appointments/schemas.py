"""Appointments domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator


class AppointmentIdRequest(BaseModel):
    """Body of the functions that act on a single appointment"""

    appointmentId: str

    @field_validator("appointmentId")
    @classmethod
    def validate_appointment_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("appointmentId is required")
        return v


class AppointmentChangeRequest(BaseModel):
    """Admin moved or cancelled a slot"""

    slotId: str
    changeType: Literal["modified", "cancelled"]
    newDate: Optional[str] = None
    newStartTime: Optional[str] = None
    newEndTime: Optional[str] = None


class AppointmentStatusRequest(BaseModel):
    """Admin changed an appointment's status"""

    appointmentId: str
    newStatus: str
    previousStatus: Optional[str] = None


class PaymentConfirmationResponse(BaseModel):
    success: bool
    clientEmailSent: bool
    adminEmailSent: bool


class ReminderSweepResponse(BaseModel):
    total: int
    sent: int
    errors: int
