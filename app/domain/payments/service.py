"""Payment service - Business logic for appointment checkout, webhooks and refunds"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthUser, has_role
from ...config import FRONTEND_URL, STRIPE_CURRENCY, STRIPE_WEBHOOK_SECRET
from ...database import utc_now
from ...models import Appointment, CancellationPolicy
from ...services.stripe_service import stripe_service, to_cents
from ...webhook_security import (
    WebhookPayloadError,
    WebhookSignatureError,
    parse_stripe_event,
    verify_stripe_signature,
)
from ..appointments.service import AppointmentNotificationService
from .repository import PaymentRepository
from .schemas import RefundRequest, ServicePaymentRequest

logger = logging.getLogger(__name__)

# Fallback notice window quoted when no policy row explains a 0% refund
DEFAULT_NO_REFUND_HOURS = 24


def payment_intent_id_of(obj: dict) -> Optional[str]:
    """Stripe sends payment_intent either as an id or as an expanded object"""
    payment_intent = obj.get("payment_intent")
    if not payment_intent:
        return None
    if isinstance(payment_intent, str):
        return payment_intent
    if isinstance(payment_intent, dict):
        return payment_intent.get("id")
    # Expanded StripeObject that was not converted to a dict
    return getattr(payment_intent, "id", None)


def hours_until(slot_date, slot_start, now: Optional[datetime] = None) -> float:
    """Hours from now until the slot starts. Slot times are stored as UTC wall-clock."""
    starts_at = datetime.combine(slot_date, slot_start)
    now = now or utc_now()
    return (starts_at - now) / timedelta(hours=1)


def select_refund_policy(
    policies: list[CancellationPolicy], hours_until_appointment: float
) -> Optional[CancellationPolicy]:
    """
    Pick the refund tier for a cancellation.

    The tier is the active policy with the greatest hours_before that is still
    <= the hours left before the appointment (floored at 0).
    """
    hours = max(0.0, hours_until_appointment)
    eligible = [p for p in policies if p.is_active and p.hours_before <= hours]
    if not eligible:
        return None
    return max(eligible, key=lambda p: p.hours_before)


def resolve_origin(origin_header: Optional[str], return_url: Optional[str] = None) -> str:
    """Base URL for checkout redirects"""
    return (origin_header or return_url or FRONTEND_URL).rstrip("/")


class PaymentService:
    """Service for appointment payments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()

    def get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def require_owner_or_admin(self, appointment: Appointment, user: AuthUser, message: str):
        if appointment.client_id != user.id and not has_role(self.db, user.id, "admin"):
            logger.warning(f"🚫 User {user.id} denied access to appointment {appointment.id}")
            raise HTTPException(status_code=403, detail=message)

    async def send_payment_confirmation(self, appointment_id: str):
        """Trigger the confirmation emails; failures are only logged"""
        try:
            await AppointmentNotificationService(self.db).send_payment_confirmation(appointment_id)
            logger.info(f"📧 Payment confirmation emails sent for {appointment_id}")
        except HTTPException as e:
            logger.error(f"❌ Failed to send payment confirmation for {appointment_id}: {e.detail}")
        except Exception as e:
            logger.error(f"❌ Error sending payment confirmation for {appointment_id}: {e}")

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    async def create_service_payment(
        self, request: ServicePaymentRequest, user: AuthUser, origin: Optional[str]
    ) -> dict:
        """Create a Stripe checkout session for a booked appointment"""
        if not request.appointmentId or not request.serviceName or not request.servicePrice:
            raise HTTPException(
                status_code=400,
                detail="Missing required fields: appointmentId, serviceName, servicePrice",
            )

        if not stripe_service.is_available():
            raise HTTPException(status_code=503, detail="Payment service temporarily unavailable")

        appointment = self.get_appointment(request.appointmentId)
        self.require_owner_or_admin(
            appointment, user, "Forbidden: You can only pay for your own appointments"
        )

        email = user.email or (appointment.profile.email if appointment.profile else None)
        base_url = resolve_origin(origin, request.returnUrl)

        try:
            customer_id = await stripe_service.find_customer_id(email)
            session = await stripe_service.create_checkout_session(
                line_items=[
                    {
                        "price_data": {
                            "currency": STRIPE_CURRENCY,
                            "product_data": {
                                "name": request.serviceName,
                                "description": "Beauty service appointment",
                            },
                            "unit_amount": to_cents(request.servicePrice),
                        },
                        "quantity": 1,
                    }
                ],
                success_url=f"{base_url}/payment-success?appointment_id={appointment.id}",
                cancel_url=(
                    f"{base_url}/appointments?payment=cancelled&appointment_id={appointment.id}"
                ),
                metadata={"appointment_id": appointment.id, "user_id": user.id},
                customer_id=customer_id,
                customer_email=email,
            )
        except Exception as e:
            logger.error(f"❌ Failed to create checkout session for {appointment.id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create checkout session: {e}")

        logger.info(f"✅ Checkout session created for appointment {appointment.id}: {session['id']}")

        try:
            self.repo.update_appointment(
                self.db, appointment, stripe_session_id=session["id"], payment_status="pending"
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to store session id on appointment {appointment.id}: {e}")

        return {"url": session.get("url"), "sessionId": session["id"]}

    # ------------------------------------------------------------------
    # Webhook
    # ------------------------------------------------------------------

    async def handle_webhook(self, payload: bytes, signature: Optional[str]) -> dict:
        """Verify and apply a Stripe event for appointment payments"""
        if not STRIPE_WEBHOOK_SECRET:
            logger.error("❌ STRIPE_WEBHOOK_SECRET is not set")
            raise HTTPException(status_code=500, detail="STRIPE_WEBHOOK_SECRET is not set")

        if not signature:
            logger.warning("🚫 Stripe webhook without signature header")
            raise HTTPException(status_code=400, detail="No signature")

        try:
            verify_stripe_signature(payload, signature, STRIPE_WEBHOOK_SECRET)
        except WebhookSignatureError as e:
            raise HTTPException(
                status_code=400, detail=f"Webhook signature verification failed: {e}"
            )

        try:
            event, obj = parse_stripe_event(payload)
        except WebhookPayloadError as e:
            logger.warning(f"🚫 Stripe webhook rejected: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        event_type = event.get("type")
        logger.info(f"📨 Stripe webhook verified: {event_type} ({event.get('id')})")

        if event_type == "checkout.session.completed":
            await self._on_checkout_completed(obj)
        elif event_type == "payment_intent.succeeded":
            self._on_payment_intent_succeeded(obj)
        elif event_type == "checkout.session.expired":
            self._on_checkout_expired(obj)
        else:
            logger.info(f"Unhandled event type: {event_type}")

        return {"received": True}

    async def _on_checkout_completed(self, session: dict):
        if session.get("payment_status") != "paid":
            logger.info(f"Checkout session {session.get('id')} completed without payment")
            return

        appointment_id = (session.get("metadata") or {}).get("appointment_id")
        if not appointment_id:
            logger.info("No appointment_id in session metadata")
            return

        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            logger.warning(f"⚠️ Paid session for unknown appointment {appointment_id}")
            return

        if appointment.payment_status == "paid":
            logger.info(f"Appointment {appointment_id} already paid - skipping duplicate delivery")
            return

        try:
            self.repo.update_appointment(
                self.db,
                appointment,
                payment_status="paid",
                payment_intent_id=payment_intent_id_of(session),
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update appointment {appointment_id}: {e}")
            return

        logger.info(f"✅ Appointment {appointment_id} payment status updated to paid")
        await self.send_payment_confirmation(appointment_id)

    def _on_payment_intent_succeeded(self, payment_intent: dict):
        appointment_id = (payment_intent.get("metadata") or {}).get("appointment_id")
        if not appointment_id:
            return

        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            logger.warning(f"⚠️ Payment intent for unknown appointment {appointment_id}")
            return

        if appointment.payment_status == "paid" and appointment.payment_intent_id:
            return

        try:
            self.repo.update_appointment(
                self.db,
                appointment,
                payment_status="paid",
                payment_intent_id=payment_intent.get("id"),
            )
            logger.info(f"✅ Appointment {appointment_id} updated from payment_intent.succeeded")
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update appointment from payment_intent: {e}")

    def _on_checkout_expired(self, session: dict):
        appointment_id = (session.get("metadata") or {}).get("appointment_id")
        logger.info(f"Checkout session expired: {session.get('id')}")
        if not appointment_id:
            return

        appointment = self.repo.get_appointment(self.db, appointment_id)
        if appointment and appointment.payment_status == "pending":
            logger.info(f"Appointment {appointment_id} stays pending after expired session")

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    async def verify_payment(self, appointment_id: str) -> dict:
        """Reconcile an appointment with its Stripe checkout session"""
        appointment = self.get_appointment(appointment_id)

        if appointment.payment_status == "paid":
            logger.info(f"Appointment {appointment_id} already marked as paid")
            return {"success": True, "alreadyPaid": True}

        if not appointment.stripe_session_id:
            logger.info(f"No stripe session for {appointment_id} - pay later or direct booking")
            return {"success": True, "noSession": True}

        if not stripe_service.is_available():
            raise HTTPException(status_code=500, detail="STRIPE_SECRET_KEY is not set")

        try:
            session = await stripe_service.retrieve_checkout_session(appointment.stripe_session_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to retrieve checkout session: {e}")

        payment_status = session.get("payment_status")
        if payment_status != "paid":
            logger.info(f"Payment not completed in Stripe for {appointment_id}: {payment_status}")
            return {"success": False, "status": payment_status}

        try:
            self.repo.update_appointment(
                self.db,
                appointment,
                payment_status="paid",
                payment_intent_id=payment_intent_id_of(session),
                status="confirmed",
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update appointment {appointment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update payment status")

        logger.info(f"✅ Payment verified and appointment {appointment_id} updated to paid")
        await self.send_payment_confirmation(appointment_id)
        return {"success": True, "verified": True}

    # ------------------------------------------------------------------
    # Cancellation and refunds
    # ------------------------------------------------------------------

    async def process_refund(
        self, request: RefundRequest, user: AuthUser, now: Optional[datetime] = None
    ) -> dict:
        """Cancel an appointment and refund according to the cancellation policy"""
        if not request.appointmentId:
            raise HTTPException(status_code=400, detail="Appointment ID is required")

        appointment = self.get_appointment(request.appointmentId)
        self.require_owner_or_admin(
            appointment, user, "Unauthorized: You can only cancel your own appointments"
        )

        if appointment.refund_status == "processed":
            raise HTTPException(
                status_code=400, detail="This appointment has already been refunded"
            )

        slot = appointment.slot
        if not slot:
            raise HTTPException(status_code=400, detail="Appointment slot not found")

        hours = hours_until(slot.date, slot.start_time, now=now)
        policy = select_refund_policy(self.repo.get_active_policies(self.db), hours)
        refund_percentage = policy.refund_percentage if policy else 0
        service_price = float(appointment.service.price or 0) if appointment.service else 0.0
        refund_amount = service_price * refund_percentage / 100
        logger.info(
            f"💸 Refund for {appointment.id}: {refund_percentage}% of ${service_price:.2f} "
            f"({hours:.1f}h before)"
        )

        refunded = False
        if appointment.payment_status == "paid" and refund_amount > 0:
            if not appointment.payment_intent_id:
                raise HTTPException(
                    status_code=400, detail="No payment recorded for this appointment"
                )
            if not stripe_service.is_available():
                raise HTTPException(
                    status_code=503, detail="Payment service temporarily unavailable"
                )

            try:
                await stripe_service.create_refund(
                    appointment.payment_intent_id, to_cents(refund_amount)
                )
            except Exception as e:
                logger.error(f"❌ Stripe refund failed for {appointment.id}: {e}")
                self.repo.update_appointment(
                    self.db, appointment, status="cancelled", refund_status="failed"
                )
                raise HTTPException(status_code=500, detail=f"Refund failed: {e}")

            self.repo.update_appointment(
                self.db,
                appointment,
                status="cancelled",
                refund_status="processed",
                refund_amount=refund_amount,
                refunded_at=utc_now(),
            )
            refunded = True
            message = (
                f"Appointment cancelled. A refund of ${refund_amount:.2f} "
                f"({refund_percentage}%) has been processed."
            )
        elif appointment.payment_status == "paid":
            self.repo.update_appointment(
                self.db, appointment, status="cancelled", refund_status=None, refund_amount=0
            )
            window = (policy.hours_before if policy else None) or DEFAULT_NO_REFUND_HOURS
            message = (
                "Appointment cancelled. No refund is available per the cancellation policy "
                f"(less than {window} hours before appointment)."
            )
        else:
            # pending / pay_later: nothing was charged
            self.repo.update_appointment(self.db, appointment, status="cancelled")
            message = "Appointment cancelled successfully."

        logger.info(f"✅ Refund process completed for {appointment.id}: refunded={refunded}")
        return {
            "refundPercentage": refund_percentage,
            "refundAmount": refund_amount,
            "hoursUntilAppointment": max(0.0, hours),
            "refunded": refunded,
            "message": message,
        }
