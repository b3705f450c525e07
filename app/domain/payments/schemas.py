"""Payments domain schemas - Pydantic models for validation"""

from typing import Optional, Union

from pydantic import BaseModel, field_validator


class ServicePaymentRequest(BaseModel):
    """Schema for starting checkout of a booked appointment"""

    appointmentId: Optional[str] = None
    serviceName: Optional[str] = None
    servicePrice: Optional[Union[float, str]] = None
    returnUrl: Optional[str] = None

    @field_validator("servicePrice")
    @classmethod
    def validate_price(cls, v):
        if v is None or v == "":
            return None
        try:
            price = float(v)
        except (TypeError, ValueError):
            raise ValueError("servicePrice must be a number")
        if price <= 0:
            raise ValueError("servicePrice must be greater than 0")
        return price


class CheckoutSessionResponse(BaseModel):
    url: Optional[str] = None
    sessionId: str


class RefundRequest(BaseModel):
    appointmentId: Optional[str] = None


class RefundResponse(BaseModel):
    refundPercentage: int
    refundAmount: float
    hoursUntilAppointment: float
    refunded: bool
    message: str
