"""
MJML Email Templates
All email templates using MJML for responsive, cross-client compatibility
"""

from datetime import datetime, timezone
from typing import Optional

from .config import BUSINESS_NAME, FRONTEND_URL

# Salon theme colors - warm gold/charcoal scheme
THEME = {
    "primary": "#d4a574",
    "primary_dark": "#b8860b",
    "primary_light": "#faf7f4",
    "background": "#f8f4f0",
    "card_bg": "#ffffff",
    "text_primary": "#2d2d2d",
    "text_secondary": "#555555",
    "text_muted": "#888888",
    "border": "#eadfd3",
    "success": "#22c55e",
    "warning": "#f59e0b",
    "danger": "#ef4444",
    "info": "#3b82f6",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    tagline: str = "Your beauty transformation awaits",
    recipient_email: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 0 32px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="0"
              inner-padding="15px 30px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    footer_notice = ""
    if recipient_email:
        footer_notice = f"""
        <mj-text align="center" font-size="11px" color="#666666" padding="8px 0 0 0">
          This email was sent to {recipient_email}
        </mj-text>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="'Segoe UI', Tahoma, Geneva, Verdana, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="{THEME['primary']}" padding="36px 30px">
          <mj-column>
            <mj-text align="center" font-size="28px" font-weight="600" color="#ffffff" padding="0">
              {BUSINESS_NAME}
            </mj-text>
            <mj-text align="center" font-size="14px" color="#ffffff" padding="10px 0 0 0">
              {tagline}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="40px 30px 24px 30px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section background-color="{THEME['text_primary']}" padding="25px 30px">
          <mj-column>
            <mj-text align="center" font-size="12px" color="#999999" padding="0">
              © {datetime.now(timezone.utc).year} {BUSINESS_NAME}. All rights reserved.
            </mj-text>
            {footer_notice}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def details_block(rows: list[tuple[str, Optional[str]]], accent: Optional[str] = None) -> str:
    """Label/value box used for appointment and payment details. Empty values are skipped."""
    lines = "<br/>".join(
        f"<strong>{label}:</strong> {value}" for label, value in rows if value not in (None, "")
    )
    return f"""
    <mj-text background-color="{THEME['primary_light']}"
      container-background-color="{THEME['primary_light']}"
      padding="20px 25px"
      border-left="4px solid {accent or THEME['primary']}">
      {lines}
    </mj-text>
    """


def signature_block() -> str:
    return f"""
    <mj-text padding="24px 0 0 0">
      Best regards,<br/>
      <strong style="color: {THEME['primary']};">The {BUSINESS_NAME} Team</strong>
    </mj-text>
    """


def format_long_date(value) -> str:
    """Format a date (or ISO date string) as 'Friday, March 14, 2025'"""
    if not value:
        return "Date not available"
    if isinstance(value, str):
        try:
            value = datetime.strptime(value[:10], "%Y-%m-%d").date()
        except ValueError:
            return value
    return f"{value.strftime('%A, %B')} {value.day}, {value.year}"


def format_short_time(value) -> str:
    """HH:MM from a time object or 'HH:MM:SS' string"""
    if not value:
        return "TBD"
    return str(value)[:5]


def booking_confirmation_customer_template(
    customer_name: str,
    customer_email: str,
    service_name: str,
    service_price: Optional[float],
    appointment_date: str,
    time_range: str,
    notes: Optional[str] = None,
) -> str:
    """Booking received email to the customer"""
    price = f" (${service_price:,.2f})" if service_price else ""
    details = details_block(
        [
            ("Service", f"{service_name}{price}"),
            ("Date", appointment_date),
            ("Time", time_range),
            ("Status", "Pending Confirmation"),
            ("Notes", notes),
        ]
    )

    content = f"""
    <mj-text>
      Hello {customer_name},
    </mj-text>

    <mj-text>
      Thank you for booking with us! We're excited to see you. Here are your appointment details:
    </mj-text>

    {details}

    <mj-text font-size="14px" padding="20px 0 0 0">
      📧 You'll receive another email once your appointment is confirmed by our team.
    </mj-text>

    <mj-text font-size="14px">
      If you need to cancel or reschedule, please contact us as soon as possible.
    </mj-text>

    {signature_block()}
    """

    return get_base_template(
        title="Booking Confirmed! ✨",
        preview_text=f"Your {service_name} appointment on {appointment_date}",
        content_sections=content,
        recipient_email=customer_email,
    )


def admin_new_booking_template(
    admin_name: str,
    customer_name: str,
    customer_email: str,
    customer_phone: str,
    service_name: str,
    service_price: Optional[float],
    appointment_date: str,
    time_range: str,
    notes: Optional[str] = None,
) -> str:
    """New booking alert for admins"""
    details = details_block(
        [
            ("Customer", customer_name),
            ("Email", customer_email),
            ("Phone", customer_phone),
            ("Service", service_name),
            ("Price", f"${service_price:,.2f}" if service_price else None),
            ("Date", appointment_date),
            ("Time", time_range),
            ("Notes", notes),
        ],
        accent=THEME["info"],
    )

    content = f"""
    <mj-text color="{THEME['text_muted']}" padding="0 0 24px 0">
      A new appointment has been booked.
    </mj-text>

    <mj-text>
      Hi {admin_name},
    </mj-text>

    {details}

    <mj-text font-size="14px" padding="20px 0 0 0">
      Please log in to the admin dashboard to confirm or manage this appointment.
    </mj-text>
    """

    return get_base_template(
        title="🆕 New Booking",
        preview_text=f"New booking: {customer_name} - {service_name}",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/admin",
        cta_label="Open Admin Dashboard",
        tagline="Admin Notification",
    )


def payment_confirmation_client_template(
    client_name: str,
    client_email: str,
    service_name: str,
    service_category: str,
    appointment_date: str,
    time_range: str,
    amount: float,
) -> str:
    """Payment confirmed email to the client"""
    details = details_block(
        [
            ("Service", service_name),
            ("Category", service_category),
            ("Date", appointment_date),
            ("Time", time_range),
            ("Amount Paid", f"${amount:,.2f}"),
        ],
        accent=THEME["success"],
    )

    content = f"""
    <mj-text>
      Dear <strong>{client_name}</strong>,
    </mj-text>

    <mj-text>
      Thank you for your payment! Your appointment has been confirmed and we look forward to seeing you.
    </mj-text>

    {details}

    <mj-text font-size="14px" padding="20px 0 0 0">
      Please arrive 5-10 minutes early. If you need to reschedule, contact us at least 24 hours in advance.
    </mj-text>

    {signature_block()}
    """

    return get_base_template(
        title="✨ Payment Confirmed!",
        preview_text="Your booking is confirmed",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/appointments",
        cta_label="View My Appointments",
        tagline="Your booking is confirmed",
        recipient_email=client_email,
    )


def payment_received_admin_template(
    client_name: str,
    client_email: str,
    client_phone: str,
    service_name: str,
    appointment_date: str,
    time_range: str,
    amount: float,
) -> str:
    """New payment alert for the business inbox"""
    details = details_block(
        [
            ("Client", client_name),
            ("Email", client_email),
            ("Phone", client_phone),
            ("Service", service_name),
            ("Date", appointment_date),
            ("Time", time_range),
        ]
    )

    content = f"""
    <mj-text align="center" font-size="32px" color="{THEME['primary']}" font-weight="800" padding="10px 0">
      ${amount:,.2f}
    </mj-text>

    <mj-text align="center" color="{THEME['primary_dark']}" font-size="16px" font-weight="600">
      Payment Received!
    </mj-text>

    {details}
    """

    return get_base_template(
        title="💰 New Payment",
        preview_text=f"New payment: ${amount:,.2f} - {client_name}",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/admin",
        cta_label="View Admin Dashboard",
        tagline="Admin Notification",
    )


def payment_cancelled_client_template(
    client_name: str,
    client_email: str,
    service_name: str,
    appointment_date: str,
    start_time: str,
    amount: float,
) -> str:
    """Checkout abandoned - ask the client to retry"""
    details = details_block(
        [
            ("Service", service_name),
            ("Date", appointment_date),
            ("Time", start_time),
            ("Amount", f"${amount:,.2f}"),
        ],
        accent=THEME["warning"],
    )

    content = f"""
    <mj-text>
      Dear {client_name},
    </mj-text>

    <mj-text>
      Your payment for the appointment below was not completed. Your booking is saved and waiting for payment.
    </mj-text>

    {details}

    <mj-text font-size="14px" padding="20px 0 0 0">
      You can retry the payment from your appointments page at any time.
    </mj-text>

    {signature_block()}
    """

    return get_base_template(
        title="Payment Not Completed",
        preview_text=f"Your payment for {service_name} was not completed",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/appointments",
        cta_label="Retry Payment",
        recipient_email=client_email,
    )


def payment_cancelled_admin_template(
    client_name: str,
    client_email: Optional[str],
    client_phone: Optional[str],
    service_name: str,
    appointment_date: str,
    start_time: str,
    amount: float,
) -> str:
    """Abandoned checkout alert for the business inbox"""
    details = details_block(
        [
            ("Client", client_name),
            ("Email", client_email or "N/A"),
            ("Phone", client_phone or "N/A"),
            ("Service", service_name),
            ("Date", appointment_date),
            ("Time", start_time),
            ("Price", f"${amount:,.2f}"),
        ],
        accent=THEME["warning"],
    )

    content = f"""
    <mj-text>
      A payment was cancelled for the following appointment:
    </mj-text>

    {details}

    <mj-text font-size="14px" padding="20px 0 0 0">
      The appointment is pending payment. You may want to follow up with the client.
    </mj-text>
    """

    return get_base_template(
        title="⚠️ Payment Cancelled",
        preview_text=f"Payment cancelled - {service_name} - {client_name}",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/admin",
        cta_label="View Admin Dashboard",
        tagline="Admin Notification",
    )


def appointment_reminder_template(
    client_name: str,
    service_name: str,
    appointment_date: str,
    time_range: str,
    notes: Optional[str] = None,
) -> str:
    """Day-before appointment reminder"""
    details = details_block(
        [
            ("Service", service_name),
            ("Date", appointment_date),
            ("Time", time_range),
            ("Notes", notes),
        ]
    )

    content = f"""
    <mj-text>
      Hello {client_name},
    </mj-text>

    <mj-text>
      This is a friendly reminder about your upcoming appointment:
    </mj-text>

    {details}

    <mj-text padding="20px 0 0 0">
      We look forward to seeing you!
    </mj-text>

    <mj-text color="{THEME['text_muted']}" font-size="12px">
      If you need to cancel or reschedule, please contact us as soon as possible.
    </mj-text>
    """

    return get_base_template(
        title="Appointment Reminder",
        preview_text=f"See you tomorrow for your {service_name}",
        content_sections=content,
    )


def review_reminder_template(
    client_name: str,
    service_name: str,
    appointment_date: str,
) -> str:
    """Ask for a rating after a completed appointment"""
    details = details_block([("Service", service_name), ("Date", appointment_date)])

    content = f"""
    <mj-text>
      Dear {client_name},
    </mj-text>

    <mj-text>
      We hope you loved your recent appointment with us!
    </mj-text>

    {details}

    <mj-text padding="20px 0 0 0">
      Your feedback means the world to us! Visit your profile to rate your service and share your thoughts.
      Your review helps us improve and helps others discover our services.
    </mj-text>

    {signature_block()}
    """

    return get_base_template(
        title=f"Thank You for Choosing {BUSINESS_NAME}!",
        preview_text="How was your experience?",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/profile",
        cta_label="Leave a Review",
    )


def slot_cancelled_notice_template(
    client_name: str,
    service_name: str,
    original_date: str,
    original_time: str,
) -> str:
    """The admin cancelled the slot this appointment was booked on"""
    details = details_block(
        [
            ("Service", service_name),
            ("Original Date", original_date),
            ("Original Time", original_time),
        ],
        accent=THEME["danger"],
    )

    content = f"""
    <mj-text>
      Dear {client_name},
    </mj-text>

    <mj-text>
      We regret to inform you that your appointment has been cancelled:
    </mj-text>

    {details}

    <mj-text padding="20px 0 0 0">
      Please contact us to reschedule your appointment at your convenience.
      We apologize for any inconvenience this may cause.
    </mj-text>

    {signature_block()}
    """

    return get_base_template(
        title="Appointment Cancellation Notice",
        preview_text=f"Your {service_name} appointment has been cancelled",
        content_sections=content,
    )


def slot_modified_notice_template(
    client_name: str,
    service_name: str,
    original_date: str,
    original_time: str,
    new_date: Optional[str] = None,
    new_time: Optional[str] = None,
) -> str:
    """The admin moved the slot this appointment was booked on"""
    original = details_block([("Date", original_date), ("Time", original_time)])

    new_section = ""
    if new_date and new_time:
        new_details = details_block(
            [("Date", new_date), ("Time", new_time)], accent=THEME["success"]
        )
        new_section = f"""
        <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 4px 0">
          New Time
        </mj-text>
        {new_details}
        """

    content = f"""
    <mj-text>
      Dear {client_name},
    </mj-text>

    <mj-text>
      Your {service_name} appointment time has been modified.
    </mj-text>

    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 4px 0">
      Original Time
    </mj-text>
    {original}

    {new_section}

    <mj-text padding="20px 0 0 0">
      If this new time doesn't work for you, please contact us to reschedule.
    </mj-text>

    {signature_block()}
    """

    return get_base_template(
        title="Appointment Time Change Notice",
        preview_text=f"Your {service_name} appointment has been rescheduled",
        content_sections=content,
    )


# Copy for the status-change emails: title, intro, closing, accent
STATUS_EMAIL_COPY = {
    "confirmed": (
        "Appointment Confirmed!",
        "Great news! Your appointment has been confirmed.",
        "We look forward to seeing you!",
        "success",
    ),
    "pending": (
        "Appointment Pending",
        "Your appointment is pending confirmation. We'll notify you once it's confirmed.",
        "Thank you for your patience.",
        "warning",
    ),
    "cancelled": (
        "Appointment Cancelled",
        "We regret to inform you that your appointment has been cancelled.",
        "Please contact us if you'd like to reschedule. We apologize for any inconvenience.",
        "danger",
    ),
    "completed": (
        "Thank You for Visiting!",
        f"Thank you for choosing {BUSINESS_NAME}! We hope you loved your experience.",
        "We'd love to hear your feedback! Please leave a review to help others discover our services.",
        "info",
    ),
}


def appointment_status_template(
    new_status: str,
    client_name: str,
    service_name: str,
    appointment_date: str,
    time_range: str,
) -> str:
    """Status change email. Caller checks new_status is in STATUS_EMAIL_COPY."""
    title, intro, closing, accent = STATUS_EMAIL_COPY[new_status]

    rows = [("Service", service_name), ("Date", appointment_date)]
    if new_status != "completed":
        rows.append(("Time", time_range))

    content = f"""
    <mj-text>
      Dear {client_name},
    </mj-text>

    <mj-text>
      {intro}
    </mj-text>

    {details_block(rows, accent=THEME[accent])}

    <mj-text padding="20px 0 0 0">
      {closing}
    </mj-text>

    {signature_block()}
    """

    cta_url = f"{FRONTEND_URL}/profile" if new_status == "completed" else None
    return get_base_template(
        title=title,
        preview_text=f"{service_name} on {appointment_date}",
        content_sections=content,
        cta_url=cta_url,
        cta_label="Leave a Review" if cta_url else None,
    )


__all__ = [
    "THEME",
    "STATUS_EMAIL_COPY",
    "get_base_template",
    "format_long_date",
    "format_short_time",
    "booking_confirmation_customer_template",
    "admin_new_booking_template",
    "payment_confirmation_client_template",
    "payment_received_admin_template",
    "payment_cancelled_client_template",
    "payment_cancelled_admin_template",
    "appointment_reminder_template",
    "review_reminder_template",
    "slot_cancelled_notice_template",
    "slot_modified_notice_template",
    "appointment_status_template",
]
