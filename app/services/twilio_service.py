"""
Twilio SMS Service
Sends appointment SMS notifications through the Twilio REST API
"""

import logging
from typing import Optional

import httpx

from ..config import BUSINESS_NAME, TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


def sms_enabled() -> bool:
    """SMS goes out only when all three Twilio settings are present"""
    return bool(TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER)


async def send_sms(to_phone: str, message_body: str) -> tuple[bool, Optional[str]]:
    """
    Send SMS via Twilio

    Args:
        to_phone: Recipient phone number (should be in E.164 format)
        message_body: SMS message content

    Returns:
        Tuple of (success: bool, error_message: Optional[str])
    """
    if not to_phone:
        return False, "No phone number provided"

    if not sms_enabled():
        logger.debug("SMS disabled - Twilio not configured")
        return False, "SMS disabled"

    try:
        logger.info(f"🚀 Sending SMS to Twilio API for {to_phone}")
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{TWILIO_API_BASE}/Accounts/{TWILIO_ACCOUNT_SID}/Messages.json",
                auth=(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN),
                data={"To": to_phone, "From": TWILIO_PHONE_NUMBER, "Body": message_body},
                timeout=10.0,
            )

        logger.info(f"📡 Twilio API response status: {response.status_code}")

        if response.status_code in [200, 201]:
            message_sid = response.json().get("sid")
            logger.info(f"✅ SMS sent successfully to {to_phone} (SID: {message_sid})")
            return True, None

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        error_message = error_data.get("message") or response.text or "Unknown error"
        error_code = error_data.get("code")
        logger.error(f"❌ Twilio API error [{error_code}]: {error_message}")
        return False, f"[{error_code}] {error_message}" if error_code else error_message

    except httpx.HTTPError as e:
        logger.error(f"Twilio API error: {str(e)}")
        return False, str(e)


# SMS Message Builders


def slot_change_sms(
    change_type: str,
    service_name: str,
    original_date: str,
    original_start: str,
    new_date: Optional[str] = None,
    new_start: Optional[str] = None,
) -> str:
    if change_type == "cancelled":
        return (
            f"{BUSINESS_NAME}: Your {service_name} appointment on {original_date} at "
            f"{original_start} has been cancelled. Please contact us to reschedule."
        )
    new_time_info = f"{new_date} at {new_start}" if new_date and new_start else "a new time"
    return (
        f"{BUSINESS_NAME}: Your {service_name} appointment has been rescheduled to "
        f"{new_time_info}. Original: {original_date} at {original_start}."
    )


def appointment_status_sms(
    new_status: str, service_name: str, appointment_date: str, start_time: str
) -> str:
    if new_status == "completed":
        return (
            f"{BUSINESS_NAME}: Thank you for visiting us! Your {service_name} appointment "
            f"has been completed. We'd love your feedback!"
        )
    endings = {
        "confirmed": "has been CONFIRMED. See you soon!",
        "pending": "is PENDING confirmation. We'll notify you soon!",
        "cancelled": "has been CANCELLED. Contact us to reschedule.",
    }
    return (
        f"{BUSINESS_NAME}: Your appointment for {service_name} on {appointment_date} "
        f"at {start_time} {endings[new_status]}"
    )


def payment_cancelled_sms(service_name: str, short_date: str, start_time: str) -> str:
    return (
        f"{BUSINESS_NAME}: Your payment for {service_name} on {short_date} at {start_time} "
        f"was not completed. Please visit our website to retry. Questions? Contact us!"
    )
