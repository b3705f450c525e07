"""Shop router - product checkout functions and variant administration"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from ...auth import AuthUser, get_optional_user, require_admin
from ...database import get_db
from .schemas import (
    ProductPaymentRequest,
    ProductPaymentResponse,
    VariantForm,
    VariantResponse,
    VariantUpdate,
)
from .service import ShopService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["Shop"])
admin_router = APIRouter(prefix="/api", tags=["Product Variants"])


def get_shop_service(db: Session = Depends(get_db)) -> ShopService:
    """Dependency injection for ShopService"""
    return ShopService(db)


@router.post("/create-product-payment", response_model=ProductPaymentResponse)
async def create_product_payment(
    body: ProductPaymentRequest,
    origin: Optional[str] = Header(None),
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    service: ShopService = Depends(get_shop_service),
):
    """Checkout the storefront cart. Guests may check out."""
    return await service.create_product_payment(body, current_user, origin)


@router.post("/product-stripe-webhook")
async def product_stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    service: ShopService = Depends(get_shop_service),
):
    payload = await request.body()
    return service.handle_webhook(payload, stripe_signature)


@admin_router.get("/products/{product_id}/variants", response_model=list[VariantResponse])
async def list_variants(
    product_id: str,
    admin: AuthUser = Depends(require_admin),
    service: ShopService = Depends(get_shop_service),
):
    return service.list_variants(product_id)


@admin_router.post(
    "/products/{product_id}/variants", response_model=VariantResponse, status_code=201
)
async def create_variant(
    product_id: str,
    data: VariantForm,
    admin: AuthUser = Depends(require_admin),
    service: ShopService = Depends(get_shop_service),
):
    return service.create_variant(product_id, data)


@admin_router.put("/variants/{variant_id}", response_model=VariantResponse)
async def update_variant(
    variant_id: str,
    data: VariantUpdate,
    admin: AuthUser = Depends(require_admin),
    service: ShopService = Depends(get_shop_service),
):
    return service.update_variant(variant_id, data)


@admin_router.delete("/variants/{variant_id}")
async def delete_variant(
    variant_id: str,
    admin: AuthUser = Depends(require_admin),
    service: ShopService = Depends(get_shop_service),
):
    return service.delete_variant(variant_id)
