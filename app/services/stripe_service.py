"""Stripe service - Integration with the Stripe API"""

import logging
from typing import Optional

import stripe

from ..config import STRIPE_SECRET_KEY

logger = logging.getLogger(__name__)


def to_cents(amount: float) -> int:
    """Convert a dollar amount to the integer cents Stripe expects"""
    return int(round(float(amount) * 100))


class StripeService:
    """Service for Stripe API operations

    Results are returned as plain dicts. StripeObject is not a dict subclass,
    so callers never see SDK objects.
    """

    def __init__(self):
        self.api_key = STRIPE_SECRET_KEY

        if not self.api_key:
            logger.warning("STRIPE_SECRET_KEY not set; payment endpoints will fail until configured")
        else:
            logger.info("Stripe client configured")

    def is_available(self) -> bool:
        """Check if Stripe is configured"""
        return bool(self.api_key)

    async def find_customer_id(self, email: Optional[str]) -> Optional[str]:
        """Return the id of an existing Stripe customer with this email, if any"""
        if not self.api_key:
            raise Exception("Stripe client not initialized")
        if not email:
            return None

        try:
            customers = await stripe.Customer.list_async(email=email, limit=1, api_key=self.api_key)
        except Exception as e:
            logger.error(f"Failed to look up Stripe customer {email}: {e}")
            raise

        data = customers.to_dict().get("data") or []
        if data:
            logger.info(f"Found existing Stripe customer for {email}")
            return data[0]["id"]
        return None

    async def create_checkout_session(
        self,
        line_items: list[dict],
        success_url: str,
        cancel_url: str,
        metadata: Optional[dict] = None,
        customer_id: Optional[str] = None,
        customer_email: Optional[str] = None,
    ) -> dict:
        """Create a payment-mode checkout session"""
        if not self.api_key:
            raise Exception("Stripe client not initialized")

        params = {
            "mode": "payment",
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata or {},
        }
        # Stripe rejects customer and customer_email together
        if customer_id:
            params["customer"] = customer_id
        elif customer_email:
            params["customer_email"] = customer_email

        try:
            session = await stripe.checkout.Session.create_async(api_key=self.api_key, **params)
        except Exception as e:
            logger.error(f"Failed to create checkout session: {e}")
            raise
        return session.to_dict()

    async def retrieve_checkout_session(self, session_id: str) -> dict:
        """Get checkout session details"""
        if not self.api_key:
            raise Exception("Stripe client not initialized")

        try:
            session = await stripe.checkout.Session.retrieve_async(session_id, api_key=self.api_key)
        except Exception as e:
            logger.error(f"Failed to retrieve checkout session {session_id}: {e}")
            raise
        return session.to_dict()

    async def create_refund(self, payment_intent_id: str, amount_cents: int) -> dict:
        """Refund part or all of a payment intent"""
        if not self.api_key:
            raise Exception("Stripe client not initialized")

        try:
            refund = await stripe.Refund.create_async(
                payment_intent=payment_intent_id,
                amount=amount_cents,
                api_key=self.api_key,
            )
        except Exception as e:
            logger.error(f"Failed to refund payment intent {payment_intent_id}: {e}")
            raise

        refund = refund.to_dict()
        logger.info(f"✅ Refund created for {payment_intent_id}: {refund.get('id')}")
        return refund


# Singleton instance
stripe_service = StripeService()
