import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_uuid():
    """Primary keys in the managed schema are UUID strings"""
    return str(uuid.uuid4())


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the auth user
    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), index=True, nullable=False)
    full_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    email_notifications = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    roles = relationship("UserRole", back_populates="profile", cascade="all, delete-orphan")
    appointments = relationship("Appointment", back_populates="profile")


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="user")  # admin, user

    profile = relationship("Profile", back_populates="roles")


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    price = Column(Float, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)


class AvailabilitySlot(Base):
    __tablename__ = "availability_slots"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    capacity = Column(Integer, default=1, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    created_by = Column(String(36), nullable=True)

    appointments = relationship("Appointment", back_populates="slot")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    client_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    slot_id = Column(String(36), ForeignKey("availability_slots.id"), nullable=True, index=True)
    service_id = Column(String(36), ForeignKey("services.id"), nullable=True)
    service_type = Column(String(255), nullable=True)
    status = Column(String(50), default="pending", nullable=False)  # pending, confirmed, cancelled, completed
    notes = Column(Text, nullable=True)
    payment_status = Column(String(50), default="pending", nullable=True)  # pending, paid, pay_later
    stripe_session_id = Column(String(255), nullable=True)
    payment_intent_id = Column(String(255), nullable=True)
    refund_status = Column(String(50), nullable=True)  # processed, failed
    refund_amount = Column(Float, nullable=True)
    refunded_at = Column(DateTime(timezone=True), nullable=True)
    reminder_sent = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="appointments")
    slot = relationship("AvailabilitySlot", back_populates="appointments")
    service = relationship("Service")


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0)
    image_url = Column(String(500), nullable=True)
    stock_quantity = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    variants = relationship(
        "ProductVariant", back_populates="product", cascade="all, delete-orphan"
    )


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=True)  # null inherits the product price
    stock_quantity = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="variants")


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    client_id = Column(String(36), nullable=True)
    client_email = Column(String(255), nullable=True)
    total_amount = Column(Float, nullable=False, default=0)
    status = Column(String(50), default="pending", nullable=False)
    payment_status = Column(String(50), default="pending", nullable=False)
    stripe_session_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    variant_id = Column(String(36), ForeignKey("product_variants.id"), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")


class Rating(Base):
    __tablename__ = "ratings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    appointment_id = Column(String(36), ForeignKey("appointments.id"), nullable=True, index=True)
    service_id = Column(String(36), ForeignKey("services.id"), nullable=True, index=True)
    client_id = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    rating = Column(Integer, nullable=False)  # 1-5
    review = Column(Text, nullable=True)
    photos = Column(JSON, nullable=True)  # list of storage URLs
    admin_response = Column(Text, nullable=True)
    admin_response_at = Column(DateTime(timezone=True), nullable=True)
    admin_responder_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    client = relationship("Profile")
    service = relationship("Service")


class NotificationHistory(Base):
    __tablename__ = "notification_history"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    appointment_id = Column(String(36), ForeignKey("appointments.id"), nullable=True, index=True)
    recipient_email = Column(String(255), nullable=True)
    recipient_phone = Column(String(50), nullable=True)
    notification_type = Column(String(20), nullable=False)  # email, sms, both
    change_type = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False)  # sent, failed
    error_message = Column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    details = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CancellationPolicy(Base):
    __tablename__ = "cancellation_policies"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    hours_before = Column(Integer, nullable=False)
    refund_percentage = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class RecurringPattern(Base):
    __tablename__ = "recurring_patterns"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_by = Column(String(36), nullable=True)
    name = Column(String(255), nullable=False)
    days_of_week = Column(JSON, nullable=False, default=list)  # ["monday", "wednesday"]
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    capacity = Column(Integer, default=1, nullable=False)
    weeks_ahead = Column(Integer, default=4, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
