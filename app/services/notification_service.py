"""
Unified Notification Service
Sends client notifications over email and SMS from the same event and
records every attempt in notification_history
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models import NotificationHistory
from ..shared.validators import normalize_sms_phone
from . import twilio_service

logger = logging.getLogger(__name__)


def record_notification(
    db: Session,
    appointment_id: Optional[str],
    notification_type: str,
    change_type: str,
    status: str,
    recipient_email: Optional[str] = None,
    recipient_phone: Optional[str] = None,
    error_message: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> Optional[NotificationHistory]:
    """Insert a notification_history row. A failed insert is logged, never raised."""
    entry = NotificationHistory(
        appointment_id=appointment_id,
        recipient_email=recipient_email,
        recipient_phone=recipient_phone,
        notification_type=notification_type,
        change_type=change_type,
        status=status,
        error_message=error_message,
        details=metadata or {},
    )
    try:
        db.add(entry)
        db.commit()
        return entry
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Failed to record {change_type} notification for {appointment_id}: {e}")
        return None


def summarize_channels(
    email_sent: bool,
    sms_sent: bool,
    email_error: Optional[str],
    sms_error: Optional[str],
) -> tuple[str, str, Optional[str]]:
    """
    Collapse per-channel results into history fields.

    Returns:
        Tuple of (notification_type, status, error_message)
    """
    if email_sent and sms_sent:
        notification_type = "both"
    elif sms_sent:
        notification_type = "sms"
    else:
        notification_type = "email"

    status = "sent" if email_sent or sms_sent else "failed"

    error_message = None
    if email_error or sms_error:
        error_message = f"Email: {email_error or 'N/A'}, SMS: {sms_error or 'N/A'}"

    return notification_type, status, error_message


async def send_notification(
    db: Session,
    appointment_id: str,
    client_email: Optional[str],
    client_phone: Optional[str],
    client_name: str,
    change_type: str,
    email_func,
    email_kwargs: dict,
    sms_body: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> dict:
    """
    Unified notification sender that handles both email and SMS

    Args:
        db: Database session
        appointment_id: Appointment the notification is about
        client_email: Client email address
        client_phone: Client phone number
        client_name: Client name for logging
        change_type: Type of notification (history change_type and logging)
        email_func: Email function to call
        email_kwargs: Kwargs for email function
        sms_body: SMS text; no SMS is attempted when None
        metadata: Context stored with the history row

    Returns:
        Dict with email_sent and sms_sent status
    """
    result = {"email_sent": False, "sms_sent": False, "email_error": None, "sms_error": None}

    # Send Email
    if client_email:
        try:
            logger.info(f"📧 Sending {change_type} email to {client_email}")
            await email_func(**email_kwargs)
            result["email_sent"] = True
            logger.info(f"✅ {change_type} email sent successfully to {client_email}")
        except Exception as e:
            result["email_error"] = str(e)
            logger.error(f"❌ Failed to send {change_type} email to {client_email}: {e}")
    else:
        logger.debug(f"⚠️ No email address for {change_type} notification to {client_name}")

    # Send SMS (only when Twilio is configured and the client has a phone)
    if sms_body and client_phone and twilio_service.sms_enabled():
        formatted_phone = normalize_sms_phone(client_phone)
        if not formatted_phone:
            logger.warning(f"⚠️ Invalid phone number format for {client_name}: {client_phone}")
            result["sms_error"] = "Invalid phone number format"
        else:
            try:
                logger.info(f"📱 Attempting to send {change_type} SMS to {formatted_phone}")
                success, error = await twilio_service.send_sms(formatted_phone, sms_body)
                if success:
                    result["sms_sent"] = True
                else:
                    result["sms_error"] = error
                    logger.warning(f"⚠️ {change_type} SMS not sent to {formatted_phone}: {error}")
            except Exception as e:
                result["sms_error"] = str(e)
                logger.error(f"❌ Failed to send {change_type} SMS to {client_phone}: {e}")
    elif sms_body and not client_phone:
        logger.debug(f"ℹ️ No phone number for {change_type} SMS to {client_name}")
    elif sms_body:
        logger.debug("ℹ️ SMS disabled - Twilio not configured")

    notification_type, status, error_message = summarize_channels(
        result["email_sent"], result["sms_sent"], result["email_error"], result["sms_error"]
    )
    record_notification(
        db,
        appointment_id=appointment_id,
        notification_type=notification_type,
        change_type=change_type,
        status=status,
        recipient_email=client_email,
        recipient_phone=client_phone,
        error_message=error_message,
        metadata=metadata,
    )

    return result
