"""Payments domain - appointment checkout, Stripe webhook, verification and refunds"""

from .router import router

__all__ = ["router"]
