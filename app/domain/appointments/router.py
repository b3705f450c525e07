"""Appointments router - notification functions for bookings, payments and status changes"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthUser, require_admin
from ...database import get_db
from .schemas import (
    AppointmentChangeRequest,
    AppointmentIdRequest,
    AppointmentStatusRequest,
    PaymentConfirmationResponse,
    ReminderSweepResponse,
)
from .service import AppointmentNotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["Appointment Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> AppointmentNotificationService:
    """Dependency injection for AppointmentNotificationService"""
    return AppointmentNotificationService(db)


@router.post("/notify-appointment-change")
async def notify_appointment_change(
    body: AppointmentChangeRequest,
    admin: AuthUser = Depends(require_admin),
    service: AppointmentNotificationService = Depends(get_notification_service),
):
    """Notify every client booked on a slot that was moved or cancelled"""
    return await service.notify_appointment_change(body)


@router.post("/notify-appointment-status")
async def notify_appointment_status(
    body: AppointmentStatusRequest,
    admin: AuthUser = Depends(require_admin),
    service: AppointmentNotificationService = Depends(get_notification_service),
):
    """Notify a client that an admin changed their appointment status"""
    return await service.notify_appointment_status(body)


@router.post("/send-booking-confirmation")
async def send_booking_confirmation(
    body: AppointmentIdRequest,
    service: AppointmentNotificationService = Depends(get_notification_service),
):
    return await service.send_booking_confirmation(body.appointmentId)


@router.post("/send-payment-confirmation", response_model=PaymentConfirmationResponse)
async def send_payment_confirmation(
    body: AppointmentIdRequest,
    service: AppointmentNotificationService = Depends(get_notification_service),
):
    return await service.send_payment_confirmation(body.appointmentId)


@router.post("/send-payment-cancelled")
async def send_payment_cancelled(
    body: AppointmentIdRequest,
    service: AppointmentNotificationService = Depends(get_notification_service),
):
    return await service.send_payment_cancelled(body.appointmentId)


@router.post("/send-review-reminder")
async def send_review_reminder(
    body: AppointmentIdRequest,
    service: AppointmentNotificationService = Depends(get_notification_service),
):
    return await service.send_review_reminder(body.appointmentId)


@router.post("/send-appointment-reminders", response_model=ReminderSweepResponse)
async def send_appointment_reminders(
    service: AppointmentNotificationService = Depends(get_notification_service),
):
    """Run the day-before reminder sweep now (also scheduled in the worker)"""
    return await service.send_appointment_reminders()
