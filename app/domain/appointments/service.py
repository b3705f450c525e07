"""Appointment notification service - Business logic for client/admin appointment notices"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ... import email_service
from ...database import utc_now
from ...email_templates import STATUS_EMAIL_COPY, format_long_date, format_short_time
from ...models import Appointment, AvailabilitySlot
from ...services import twilio_service
from ...services.notification_service import record_notification, send_notification
from ...shared.validators import normalize_sms_phone
from .repository import AppointmentRepository
from .schemas import AppointmentChangeRequest, AppointmentStatusRequest

logger = logging.getLogger(__name__)

# Reminder window: appointments whose slot date falls between now+23h and now+25h
REMINDER_WINDOW_START_HOURS = 23
REMINDER_WINDOW_END_HOURS = 25


def service_name_for(appointment: Appointment) -> str:
    """Catalog service name, falling back to the free-text service type"""
    if appointment.service and appointment.service.name:
        return appointment.service.name
    return appointment.service_type or "Beauty service"


def service_price_for(appointment: Appointment) -> float:
    if appointment.service and appointment.service.price:
        return float(appointment.service.price)
    return 0.0


def time_range_for(slot: Optional[AvailabilitySlot]) -> str:
    if not slot:
        return "TBD"
    return f"{format_short_time(slot.start_time)} - {format_short_time(slot.end_time)}"


class AppointmentNotificationService:
    """Service layer for appointment notifications"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    @staticmethod
    def require_email_service():
        if not email_service.is_configured():
            logger.error("❌ RESEND_API_KEY not configured")
            raise HTTPException(status_code=500, detail="Email service not configured")

    # ------------------------------------------------------------------
    # Booking and payment emails
    # ------------------------------------------------------------------

    async def send_booking_confirmation(self, appointment_id: str) -> dict:
        """Email the customer and every admin about a new booking"""
        self.require_email_service()
        appointment = self.get_appointment(appointment_id)
        logger.info(f"📥 Sending booking confirmation for appointment {appointment_id}")

        profile = appointment.profile
        slot = appointment.slot
        customer_name = (profile.full_name if profile else None) or "Valued Customer"
        customer_email = (profile.email if profile else None) or ""
        customer_phone = (profile.phone if profile else None) or "Not provided"
        service_name = service_name_for(appointment)
        service_price = service_price_for(appointment) or None
        appointment_date = format_long_date(slot.date if slot else None)
        time_range = time_range_for(slot)

        if customer_email:
            try:
                await email_service.send_booking_confirmation_email(
                    to=customer_email,
                    customer_name=customer_name,
                    service_name=service_name,
                    service_price=service_price,
                    appointment_date=appointment_date,
                    time_range=time_range,
                    notes=appointment.notes,
                )
                status, error = "sent", None
            except Exception as e:
                logger.error(f"❌ Failed to send booking confirmation to {customer_email}: {e}")
                status, error = "failed", str(e)

            record_notification(
                self.db,
                appointment_id=appointment_id,
                notification_type="email",
                change_type="booking_confirmation",
                status=status,
                recipient_email=customer_email,
                error_message=error,
                metadata={"service": service_name, "date": appointment_date, "time": time_range},
            )

        for admin in self.repo.get_admin_profiles(self.db):
            if not admin.email:
                continue
            try:
                await email_service.send_admin_new_booking_email(
                    to=admin.email,
                    admin_name=admin.full_name or "Admin",
                    customer_name=customer_name,
                    customer_email=customer_email,
                    customer_phone=customer_phone,
                    service_name=service_name,
                    service_price=service_price,
                    appointment_date=appointment_date,
                    time_range=time_range,
                    notes=appointment.notes,
                )
            except Exception as e:
                logger.error(f"❌ Failed to send admin notification to {admin.email}: {e}")
                continue

            record_notification(
                self.db,
                appointment_id=appointment_id,
                notification_type="email",
                change_type="admin_new_booking_notification",
                status="sent",
                recipient_email=admin.email,
                metadata={
                    "customer_name": customer_name,
                    "service": service_name,
                    "date": appointment_date,
                },
            )

        return {
            "success": True,
            "message": "Booking confirmations sent",
            "customerEmail": customer_email,
        }

    async def send_payment_confirmation(self, appointment_id: str) -> dict:
        """Email the client and the business inbox once a payment is confirmed"""
        self.require_email_service()
        appointment = self.get_appointment(appointment_id)

        profile = appointment.profile
        client_email = profile.email if profile else None
        if not client_email:
            raise HTTPException(status_code=400, detail="Client email not found")

        client_name = profile.full_name or "Valued Customer"
        slot = appointment.slot
        service_name = service_name_for(appointment)
        amount = service_price_for(appointment)
        category = (appointment.service.category if appointment.service else None) or "Beauty"
        appointment_date = format_long_date(slot.date if slot else None)
        time_range = time_range_for(slot)

        client_email_sent = False
        try:
            await email_service.send_payment_confirmation_email(
                to=client_email,
                client_name=client_name,
                service_name=service_name,
                service_category=category,
                appointment_date=appointment_date,
                time_range=time_range,
                amount=amount,
            )
            client_email_sent = True
        except Exception as e:
            logger.error(f"❌ Failed to send payment confirmation to {client_email}: {e}")

        admin_email_sent = False
        try:
            await email_service.send_payment_received_admin_email(
                client_name=client_name,
                client_email=client_email,
                client_phone=profile.phone or "Not provided",
                service_name=service_name,
                appointment_date=appointment_date,
                time_range=time_range,
                amount=amount,
            )
            admin_email_sent = True
        except Exception as e:
            logger.error(f"❌ Failed to send payment notification to admin: {e}")

        logger.info(
            f"✅ Payment confirmation for {appointment_id}: "
            f"client={client_email_sent} admin={admin_email_sent}"
        )
        return {
            "success": True,
            "clientEmailSent": client_email_sent,
            "adminEmailSent": admin_email_sent,
        }

    async def send_payment_cancelled(self, appointment_id: str) -> dict:
        """Tell the client and the business inbox that a checkout was abandoned"""
        self.require_email_service()
        appointment = self.get_appointment(appointment_id)

        profile = appointment.profile
        client_email = profile.email if profile else None
        client_phone = profile.phone if profile else None
        client_name = (profile.full_name if profile else None) or "Valued Client"
        slot = appointment.slot
        service_name = service_name_for(appointment)
        amount = service_price_for(appointment)
        appointment_date = format_long_date(slot.date if slot else None)
        start_time = format_short_time(slot.start_time) if slot else "Time not available"

        if client_email:
            try:
                await email_service.send_payment_cancelled_email(
                    to=client_email,
                    client_name=client_name,
                    service_name=service_name,
                    appointment_date=appointment_date,
                    start_time=start_time,
                    amount=amount,
                )
            except Exception as e:
                logger.error(f"❌ Failed to send payment cancelled email to {client_email}: {e}")

        try:
            await email_service.send_payment_cancelled_admin_email(
                client_name=client_name,
                client_email=client_email,
                client_phone=client_phone,
                service_name=service_name,
                appointment_date=appointment_date,
                start_time=start_time,
                amount=amount,
            )
        except Exception as e:
            logger.error(f"❌ Failed to send payment cancelled notice to admin: {e}")

        formatted_phone = normalize_sms_phone(client_phone)
        if formatted_phone and twilio_service.sms_enabled():
            short_date = f"{slot.date.strftime('%b')} {slot.date.day}" if slot else ""
            await twilio_service.send_sms(
                formatted_phone,
                twilio_service.payment_cancelled_sms(service_name, short_date, start_time),
            )
        else:
            logger.debug(f"ℹ️ No SMS for payment cancelled notice on {appointment_id}")

        return {"success": True}

    async def send_review_reminder(self, appointment_id: str) -> dict:
        """Ask the client to rate a finished appointment, once"""
        if not email_service.is_configured():
            logger.info("RESEND_API_KEY not configured - review reminder email not sent")
            return {
                "message": (
                    "Review reminder logged (email sending disabled - add RESEND_API_KEY to enable)"
                )
            }

        appointment = self.get_appointment(appointment_id)

        if self.repo.has_rating(self.db, appointment_id):
            logger.info(f"Appointment {appointment_id} already has a rating - skipping reminder")
            return {"message": "Appointment already rated"}

        profile = appointment.profile
        client_email = profile.email if profile else None
        if not client_email:
            raise HTTPException(status_code=400, detail="Client email not found")

        service_name = service_name_for(appointment)
        appointment_date = format_long_date(appointment.slot.date if appointment.slot else None)

        email_error = None
        try:
            await email_service.send_review_reminder_email(
                to=client_email,
                client_name=profile.full_name or "Valued Client",
                service_name=service_name,
                appointment_date=appointment_date,
            )
        except Exception as e:
            email_error = str(e)
            logger.error(f"❌ Failed to send review reminder to {client_email}: {e}")

        record_notification(
            self.db,
            appointment_id=appointment_id,
            notification_type="email",
            change_type="review_reminder",
            status="failed" if email_error else "sent",
            recipient_email=client_email,
            error_message=email_error,
            metadata={"service_type": appointment.service_type, "appointment_date": appointment_date},
        )

        if email_error:
            raise HTTPException(status_code=500, detail="Failed to send review reminder")
        return {"message": "Review reminder sent successfully"}

    # ------------------------------------------------------------------
    # Admin-triggered change notices
    # ------------------------------------------------------------------

    async def notify_appointment_change(self, request: AppointmentChangeRequest) -> dict:
        """Fan out a slot change notice to every active appointment on the slot"""
        appointments = self.repo.get_active_appointments_for_slot(self.db, request.slotId)
        if not appointments:
            # Covers unknown slot ids too
            return {"message": "No appointments to notify"}

        slot = appointments[0].slot

        logger.info(
            f"📣 Notifying {len(appointments)} client(s) of {request.changeType} slot {slot.id}"
        )

        results = await asyncio.gather(
            *(self._notify_slot_change(appointment, slot, request) for appointment in appointments),
            return_exceptions=True,
        )
        for appointment, result in zip(appointments, results):
            if isinstance(result, Exception):
                logger.error(f"❌ Change notice failed for appointment {appointment.id}: {result}")

        return {"message": f"Notifications sent to {len(appointments)} client(s)"}

    async def _notify_slot_change(
        self,
        appointment: Appointment,
        slot: AvailabilitySlot,
        request: AppointmentChangeRequest,
    ) -> Optional[dict]:
        profile = appointment.profile
        client_email = profile.email if profile else None
        if not client_email:
            logger.error(f"No email found for appointment {appointment.id}")
            return None

        client_name = profile.full_name or "Valued Client"
        service_name = appointment.service_type or service_name_for(appointment)
        original_date = str(slot.date)
        original_start = format_short_time(slot.start_time)
        original_time = time_range_for(slot)

        new_time = None
        if request.newDate and request.newStartTime and request.newEndTime:
            new_time = (
                f"{format_short_time(request.newStartTime)} - "
                f"{format_short_time(request.newEndTime)}"
            )

        sms_body = twilio_service.slot_change_sms(
            request.changeType,
            service_name,
            original_date,
            original_start,
            new_date=request.newDate,
            new_start=format_short_time(request.newStartTime) if request.newStartTime else None,
        )

        return await send_notification(
            self.db,
            appointment_id=appointment.id,
            client_email=client_email,
            client_phone=profile.phone,
            client_name=client_name,
            change_type=request.changeType,
            email_func=email_service.send_slot_change_email,
            email_kwargs={
                "to": client_email,
                "change_type": request.changeType,
                "client_name": client_name,
                "service_name": service_name,
                "original_date": original_date,
                "original_time": original_time,
                "new_date": request.newDate if new_time else None,
                "new_time": new_time,
            },
            sms_body=sms_body,
            metadata={
                "service_type": appointment.service_type,
                "original_date": original_date,
                "original_time": original_time,
                "new_date": request.newDate,
                "new_start_time": request.newStartTime,
                "new_end_time": request.newEndTime,
            },
        )

    async def notify_appointment_status(self, request: AppointmentStatusRequest) -> dict:
        """Email and text the client after an admin status change"""
        appointment = self.get_appointment(request.appointmentId)

        profile = appointment.profile
        client_email = profile.email if profile else None
        if not client_email:
            raise HTTPException(status_code=400, detail="Client email not found")

        if request.newStatus not in STATUS_EMAIL_COPY:
            logger.info(f"No notification template for status: {request.newStatus}")
            return {"message": f"No notification sent for status: {request.newStatus}"}

        slot = appointment.slot
        client_name = profile.full_name or "Valued Client"
        service_name = service_name_for(appointment)
        appointment_date = str(slot.date) if slot else "TBD"
        time_range = time_range_for(slot)

        result = await send_notification(
            self.db,
            appointment_id=appointment.id,
            client_email=client_email,
            client_phone=profile.phone,
            client_name=client_name,
            change_type=request.newStatus,
            email_func=email_service.send_appointment_status_email,
            email_kwargs={
                "to": client_email,
                "new_status": request.newStatus,
                "client_name": client_name,
                "service_name": service_name,
                "appointment_date": appointment_date,
                "time_range": time_range,
            },
            sms_body=twilio_service.appointment_status_sms(
                request.newStatus,
                service_name,
                appointment_date,
                format_short_time(slot.start_time) if slot else "TBD",
            ),
            metadata={
                "service_name": service_name,
                "appointment_date": appointment_date,
                "appointment_time": time_range,
                "previous_status": request.previousStatus,
                "new_status": request.newStatus,
            },
        )

        return {
            "success": result["email_sent"] or result["sms_sent"],
            "message": f"Notification sent for status: {request.newStatus}",
            "emailSent": result["email_sent"],
            "smsSent": result["sms_sent"],
        }

    # ------------------------------------------------------------------
    # Scheduled reminders
    # ------------------------------------------------------------------

    async def send_appointment_reminders(self, now: Optional[datetime] = None) -> dict:
        """Email day-before reminders and flag each appointment as reminded"""
        self.require_email_service()

        now = now or utc_now()
        start_date = (now + timedelta(hours=REMINDER_WINDOW_START_HOURS)).date()
        end_date = (now + timedelta(hours=REMINDER_WINDOW_END_HOURS)).date()
        logger.info(f"⏰ Checking for appointments between {start_date} and {end_date}")

        appointments = self.repo.get_appointments_needing_reminder(self.db, start_date, end_date)
        logger.info(f"Found {len(appointments)} appointments to process")

        sent_count = 0
        error_count = 0

        for appointment in appointments:
            profile = appointment.profile
            if not profile or not profile.email:
                logger.warning(f"No email for appointment {appointment.id}")
                continue

            try:
                await email_service.send_appointment_reminder_email(
                    to=profile.email,
                    client_name=profile.full_name or "there",
                    service_name=appointment.service_type or service_name_for(appointment),
                    appointment_date=format_long_date(appointment.slot.date),
                    time_range=time_range_for(appointment.slot),
                    notes=appointment.notes,
                )
                self.repo.update_appointment(self.db, appointment, reminder_sent=True)
                sent_count += 1
            except Exception as e:
                self.db.rollback()
                logger.error(f"❌ Error processing appointment {appointment.id}: {e}")
                error_count += 1

        logger.info(f"✅ Reminder job complete: {sent_count} sent, {error_count} errors")
        return {"total": len(appointments), "sent": sent_count, "errors": error_count}
