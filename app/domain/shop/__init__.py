"""Shop domain - cart, product checkout, order fulfilment and variant admin"""

from .router import admin_router, router

__all__ = ["router", "admin_router"]
