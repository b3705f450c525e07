"""Payments router - checkout, webhook, verification and refund functions for appointments"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from ...auth import AuthUser, get_current_user
from ...database import get_db
from ..appointments.schemas import AppointmentIdRequest
from .schemas import CheckoutSessionResponse, RefundRequest, RefundResponse, ServicePaymentRequest
from .service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["Payments"])


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


@router.post("/create-service-payment", response_model=CheckoutSessionResponse)
async def create_service_payment(
    body: ServicePaymentRequest,
    origin: Optional[str] = Header(None),
    current_user: AuthUser = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Start a Stripe checkout for the caller's appointment"""
    return await service.create_service_payment(body, current_user, origin)


@router.post("/stripe-webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    service: PaymentService = Depends(get_payment_service),
):
    """
    Stripe webhook for appointment checkouts.
    The raw body is required for signature verification.
    """
    payload = await request.body()
    return await service.handle_webhook(payload, stripe_signature)


@router.post("/verify-payment")
async def verify_payment(
    body: AppointmentIdRequest,
    service: PaymentService = Depends(get_payment_service),
):
    return await service.verify_payment(body.appointmentId)


@router.post("/process-refund", response_model=RefundResponse)
async def process_refund(
    body: RefundRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Cancel an appointment and refund per the active cancellation policies"""
    return await service.process_refund(body, current_user)
