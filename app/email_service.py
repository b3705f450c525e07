"""
Email Service using Resend
Provides email functionality using MJML templates for responsive design
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import ADMIN_EMAIL, BUSINESS_NAME, EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import (
    admin_new_booking_template,
    appointment_reminder_template,
    appointment_status_template,
    booking_confirmation_customer_template,
    payment_cancelled_admin_template,
    payment_cancelled_client_template,
    payment_confirmation_client_template,
    payment_received_admin_template,
    review_reminder_template,
    slot_cancelled_notice_template,
    slot_modified_notice_template,
)

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY

# Subjects for the status-change emails
STATUS_SUBJECTS = {
    "confirmed": f"Appointment Confirmed - {BUSINESS_NAME}",
    "pending": f"Appointment Pending - {BUSINESS_NAME}",
    "cancelled": f"Appointment Cancelled - {BUSINESS_NAME}",
    "completed": f"Appointment Completed - Thank You! - {BUSINESS_NAME}",
}


def is_configured() -> bool:
    """Whether an email provider key is set"""
    return bool(RESEND_API_KEY)


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict-like result with 'html' and 'errors'
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        html = getattr(result, "html", None)
        if html is not None:
            if getattr(result, "errors", None):
                logger.warning(f"MJML compilation warnings: {result.errors}")
            return html
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise Exception("Email service not configured")

    html_content = compile_mjml_to_html(mjml_content)
    recipients = [to] if isinstance(to, str) else to

    try:
        logger.info(f"📧 Sending email via Resend to: {to}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


# ============================================
# Pre-built Emails for Booking and Payment Events
# ============================================


async def send_booking_confirmation_email(
    to: str,
    customer_name: str,
    service_name: str,
    service_price: Optional[float],
    appointment_date: str,
    time_range: str,
    notes: Optional[str] = None,
) -> dict:
    """Booking received confirmation to the customer"""
    mjml_content = booking_confirmation_customer_template(
        customer_name=customer_name,
        customer_email=to,
        service_name=service_name,
        service_price=service_price,
        appointment_date=appointment_date,
        time_range=time_range,
        notes=notes,
    )
    return await send_email(
        to=to,
        subject=f"Booking Confirmed - {service_name} on {appointment_date}",
        mjml_content=mjml_content,
    )


async def send_admin_new_booking_email(
    to: str,
    admin_name: str,
    customer_name: str,
    customer_email: str,
    customer_phone: str,
    service_name: str,
    service_price: Optional[float],
    appointment_date: str,
    time_range: str,
    notes: Optional[str] = None,
) -> dict:
    """Notify an admin of a new booking"""
    mjml_content = admin_new_booking_template(
        admin_name=admin_name,
        customer_name=customer_name,
        customer_email=customer_email,
        customer_phone=customer_phone,
        service_name=service_name,
        service_price=service_price,
        appointment_date=appointment_date,
        time_range=time_range,
        notes=notes,
    )
    return await send_email(
        to=to,
        subject=f"🆕 New Booking: {customer_name} - {service_name}",
        mjml_content=mjml_content,
    )


async def send_payment_confirmation_email(
    to: str,
    client_name: str,
    service_name: str,
    service_category: str,
    appointment_date: str,
    time_range: str,
    amount: float,
) -> dict:
    """Payment confirmed email to the client"""
    mjml_content = payment_confirmation_client_template(
        client_name=client_name,
        client_email=to,
        service_name=service_name,
        service_category=service_category,
        appointment_date=appointment_date,
        time_range=time_range,
        amount=amount,
    )
    return await send_email(
        to=to,
        subject="✨ Payment Confirmed - Your Appointment is Booked!",
        mjml_content=mjml_content,
    )


async def send_payment_received_admin_email(
    client_name: str,
    client_email: str,
    client_phone: str,
    service_name: str,
    appointment_date: str,
    time_range: str,
    amount: float,
    to: Optional[str] = None,
) -> dict:
    """New payment alert to the business inbox"""
    mjml_content = payment_received_admin_template(
        client_name=client_name,
        client_email=client_email,
        client_phone=client_phone,
        service_name=service_name,
        appointment_date=appointment_date,
        time_range=time_range,
        amount=amount,
    )
    return await send_email(
        to=to or ADMIN_EMAIL,
        subject=f"💰 New Payment: ${amount:,.2f} - {client_name}",
        mjml_content=mjml_content,
    )


async def send_payment_cancelled_email(
    to: str,
    client_name: str,
    service_name: str,
    appointment_date: str,
    start_time: str,
    amount: float,
) -> dict:
    """Abandoned checkout email to the client"""
    mjml_content = payment_cancelled_client_template(
        client_name=client_name,
        client_email=to,
        service_name=service_name,
        appointment_date=appointment_date,
        start_time=start_time,
        amount=amount,
    )
    return await send_email(
        to=to,
        subject=f"Payment Cancelled - {BUSINESS_NAME}",
        mjml_content=mjml_content,
    )


async def send_payment_cancelled_admin_email(
    client_name: str,
    client_email: Optional[str],
    client_phone: Optional[str],
    service_name: str,
    appointment_date: str,
    start_time: str,
    amount: float,
    to: Optional[str] = None,
) -> dict:
    """Abandoned checkout alert to the business inbox"""
    mjml_content = payment_cancelled_admin_template(
        client_name=client_name,
        client_email=client_email,
        client_phone=client_phone,
        service_name=service_name,
        appointment_date=appointment_date,
        start_time=start_time,
        amount=amount,
    )
    return await send_email(
        to=to or ADMIN_EMAIL,
        subject=f"⚠️ Payment Cancelled - {service_name} - {client_name}",
        mjml_content=mjml_content,
    )


async def send_appointment_reminder_email(
    to: str,
    client_name: str,
    service_name: str,
    appointment_date: str,
    time_range: str,
    notes: Optional[str] = None,
) -> dict:
    """Day-before reminder"""
    mjml_content = appointment_reminder_template(
        client_name=client_name,
        service_name=service_name,
        appointment_date=appointment_date,
        time_range=time_range,
        notes=notes,
    )
    return await send_email(
        to=to,
        subject="Reminder: Your Appointment Tomorrow",
        mjml_content=mjml_content,
    )


async def send_review_reminder_email(
    to: str, client_name: str, service_name: str, appointment_date: str
) -> dict:
    """Ask the client to rate a finished appointment"""
    mjml_content = review_reminder_template(
        client_name=client_name,
        service_name=service_name,
        appointment_date=appointment_date,
    )
    return await send_email(
        to=to,
        subject=f"How was your experience? - {BUSINESS_NAME}",
        mjml_content=mjml_content,
    )


async def send_slot_change_email(
    to: str,
    change_type: str,
    client_name: str,
    service_name: str,
    original_date: str,
    original_time: str,
    new_date: Optional[str] = None,
    new_time: Optional[str] = None,
) -> dict:
    """Slot cancelled or moved by the salon"""
    if change_type == "cancelled":
        subject = f"Appointment Cancelled - {BUSINESS_NAME}"
        mjml_content = slot_cancelled_notice_template(
            client_name=client_name,
            service_name=service_name,
            original_date=original_date,
            original_time=original_time,
        )
    else:
        subject = f"Appointment Time Modified - {BUSINESS_NAME}"
        mjml_content = slot_modified_notice_template(
            client_name=client_name,
            service_name=service_name,
            original_date=original_date,
            original_time=original_time,
            new_date=new_date,
            new_time=new_time,
        )
    return await send_email(to=to, subject=subject, mjml_content=mjml_content)


async def send_appointment_status_email(
    to: str,
    new_status: str,
    client_name: str,
    service_name: str,
    appointment_date: str,
    time_range: str,
) -> dict:
    """Appointment status changed by the salon"""
    mjml_content = appointment_status_template(
        new_status=new_status,
        client_name=client_name,
        service_name=service_name,
        appointment_date=appointment_date,
        time_range=time_range,
    )
    return await send_email(
        to=to,
        subject=STATUS_SUBJECTS[new_status],
        mjml_content=mjml_content,
    )
