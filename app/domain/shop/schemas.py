"""Shop domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import parse_optional_price, parse_stock_quantity


class CheckoutItem(BaseModel):
    product_id: str
    variant_id: Optional[str] = None
    quantity: int = 1


class ProductPaymentRequest(BaseModel):
    items: list[CheckoutItem] = []


class ProductPaymentResponse(BaseModel):
    url: Optional[str] = None


class VariantForm(BaseModel):
    """
    Variant form fields as the admin panel sends them.
    Price and stock arrive as text inputs and are coerced here.
    """

    name: str
    price: Optional[Union[float, int, str]] = None
    stock_quantity: Optional[Union[int, float, str]] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Variant name is required")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return parse_optional_price(v)

    @field_validator("stock_quantity")
    @classmethod
    def validate_stock(cls, v):
        return parse_stock_quantity(v)


class VariantUpdate(BaseModel):
    """Partial variant update; only sent fields change"""

    name: Optional[str] = None
    price: Optional[Union[float, int, str]] = None
    stock_quantity: Optional[Union[int, float, str]] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Variant name is required")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return parse_optional_price(v)

    @field_validator("stock_quantity")
    @classmethod
    def validate_stock(cls, v):
        return parse_stock_quantity(v)


class VariantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    name: str
    price: Optional[float] = None
    stock_quantity: int
    is_active: bool
    created_at: Optional[datetime] = None
