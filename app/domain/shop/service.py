"""Shop service - Business logic for product checkout, order webhooks and variant admin"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthUser
from ...config import STRIPE_CURRENCY, STRIPE_PRODUCT_WEBHOOK_SECRET
from ...models import Order, ProductVariant
from ...services.stripe_service import stripe_service, to_cents
from ...webhook_security import (
    WebhookPayloadError,
    WebhookSignatureError,
    parse_stripe_event,
    verify_stripe_signature,
)
from ..payments.service import resolve_origin
from .cart import Cart, CartItem
from .repository import ShopRepository
from .schemas import ProductPaymentRequest, VariantForm, VariantUpdate

logger = logging.getLogger(__name__)


class ShopService:
    """Service for storefront checkout and product variants"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ShopRepository()

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    async def create_product_payment(
        self, request: ProductPaymentRequest, user: Optional[AuthUser], origin: Optional[str]
    ) -> dict:
        """Create an order and a Stripe checkout session for the cart"""
        cart = Cart(
            [
                CartItem(product_id=i.product_id, variant_id=i.variant_id, quantity=i.quantity)
                for i in request.items
            ]
        )
        if not len(cart):
            raise HTTPException(status_code=400, detail="No items provided")

        if not stripe_service.is_available():
            raise HTTPException(status_code=503, detail="Payment service temporarily unavailable")

        products = {
            p.id: p
            for p in self.repo.get_active_products(
                self.db, list({item.product_id for item in cart.items})
            )
        }
        if not products:
            raise HTTPException(status_code=400, detail="No valid products found")

        variants = {
            v.id: v
            for v in self.repo.get_variants(
                self.db, [item.variant_id for item in cart.items if item.variant_id]
            )
        }

        line_items = []
        order_items = []
        total = 0.0
        for item in cart.items:
            product = products.get(item.product_id)
            if not product:
                logger.warning(f"⚠️ Skipping unknown or inactive product {item.product_id}")
                continue

            variant: Optional[ProductVariant] = variants.get(item.variant_id)
            if variant and variant.product_id != product.id:
                variant = None

            unit_price = variant.price if variant and variant.price else product.price
            name = f"{product.name} - {variant.name}" if variant else product.name
            total += unit_price * item.quantity

            product_data = {"name": name}
            if product.description:
                product_data["description"] = product.description
            if product.image_url:
                product_data["images"] = [product.image_url]

            line_items.append(
                {
                    "price_data": {
                        "currency": STRIPE_CURRENCY,
                        "product_data": product_data,
                        "unit_amount": to_cents(unit_price),
                    },
                    "quantity": item.quantity,
                }
            )
            order_items.append(
                {
                    "product_id": product.id,
                    "variant_id": variant.id if variant else None,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                }
            )

        if not line_items:
            raise HTTPException(status_code=400, detail="No valid products found")

        order = self.repo.create_order(
            self.db,
            total_amount=total,
            items=order_items,
            client_id=user.id if user else None,
            client_email=user.email if user else None,
        )
        logger.info(f"🛒 Order {order.id} created with {len(order_items)} item(s), total ${total:.2f}")

        base_url = resolve_origin(origin)
        try:
            session = await stripe_service.create_checkout_session(
                line_items=line_items,
                success_url=f"{base_url}/payment-success?order_id={order.id}",
                cancel_url=f"{base_url}/payment-cancelled",
                metadata={"order_id": order.id},
                customer_email=order.client_email,
            )
        except Exception as e:
            logger.error(f"❌ Failed to create checkout session for order {order.id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create checkout session: {e}")

        self.repo.update_order(self.db, order, stripe_session_id=session["id"])
        return {"url": session.get("url")}

    # ------------------------------------------------------------------
    # Webhook
    # ------------------------------------------------------------------

    def handle_webhook(self, payload: bytes, signature: Optional[str]) -> dict:
        """Mark orders paid and decrement stock once per order"""
        if STRIPE_PRODUCT_WEBHOOK_SECRET:
            try:
                verify_stripe_signature(payload, signature, STRIPE_PRODUCT_WEBHOOK_SECRET)
            except WebhookSignatureError as e:
                logger.warning(f"🚫 Product webhook signature rejected: {e}")
                raise HTTPException(
                    status_code=400, detail=f"Webhook signature verification failed: {e}"
                )
        else:
            logger.warning("⚠️ STRIPE_PRODUCT_WEBHOOK_SECRET not set - accepting unsigned event")

        try:
            event, session = parse_stripe_event(payload)
        except WebhookPayloadError as e:
            logger.warning(f"🚫 Product webhook rejected: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        event_type = event.get("type")
        logger.info(f"📨 Product webhook event: {event_type}")

        if event_type == "checkout.session.completed":
            order_id = (session.get("metadata") or {}).get("order_id")
            if order_id:
                self.fulfill_order(order_id)
            else:
                logger.info("No order_id in session metadata")

        return {"received": True}

    def fulfill_order(self, order_id: str) -> Optional[Order]:
        order = self.repo.get_order(self.db, order_id)
        if not order:
            logger.warning(f"⚠️ Paid session for unknown order {order_id}")
            return None

        if order.payment_status == "paid":
            logger.info(f"Order {order_id} already paid - stock not decremented again")
            return order

        order.status = "paid"
        order.payment_status = "paid"
        for item in order.items:
            if item.variant_id:
                variant = self.repo.get_variant(self.db, item.variant_id)
                if variant:
                    variant.stock_quantity = max(0, (variant.stock_quantity or 0) - item.quantity)
            product = self.repo.get_product(self.db, item.product_id)
            if product:
                product.stock_quantity = max(0, (product.stock_quantity or 0) - item.quantity)

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to fulfil order {order_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update order")

        logger.info(f"✅ Order {order_id} paid, stock updated for {len(order.items)} item(s)")
        return order

    # ------------------------------------------------------------------
    # Variants admin
    # ------------------------------------------------------------------

    def _get_product_or_404(self, product_id: str):
        product = self.repo.get_product(self.db, product_id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    def _get_variant_or_404(self, variant_id: str) -> ProductVariant:
        variant = self.repo.get_variant(self.db, variant_id)
        if not variant:
            raise HTTPException(status_code=404, detail="Variant not found")
        return variant

    def list_variants(self, product_id: str) -> list[ProductVariant]:
        self._get_product_or_404(product_id)
        return self.repo.list_variants(self.db, product_id)

    def create_variant(self, product_id: str, data: VariantForm) -> ProductVariant:
        self._get_product_or_404(product_id)
        fields = data.model_dump()
        fields["stock_quantity"] = fields.get("stock_quantity") or 0
        variant = self.repo.create_variant(self.db, product_id, **fields)
        logger.info(f"✅ Variant {variant.id} added to product {product_id}")
        return variant

    def update_variant(self, variant_id: str, data: VariantUpdate) -> ProductVariant:
        variant = self._get_variant_or_404(variant_id)
        fields = data.model_dump(exclude_unset=True)
        for key in ("name", "is_active"):
            if key in fields and fields[key] is None:
                del fields[key]
        return self.repo.update_variant(self.db, variant, **fields)

    def delete_variant(self, variant_id: str) -> dict:
        variant = self._get_variant_or_404(variant_id)
        self.repo.delete_variant(self.db, variant)
        logger.info(f"🗑️ Variant {variant_id} deleted")
        return {"message": "Variant deleted successfully"}
