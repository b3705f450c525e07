"""Token and row factories shared by the test modules"""

import time
from datetime import time as dtime, timedelta

from jose import jwt

from app.database import utc_now
from app.models import (
    Appointment,
    AvailabilitySlot,
    Product,
    ProductVariant,
    Profile,
    Service,
    UserRole,
)

JWT_SECRET = "test-jwt-secret"


def make_token(user_id: str, email: str = None, expires_in: int = 3600) -> str:
    claims = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


def auth_headers(profile: Profile) -> dict:
    return {"Authorization": f"Bearer {make_token(profile.id, profile.email)}"}


# ----------------------------------------------------------------------
# Row factories
# ----------------------------------------------------------------------


def create_profile(db, email="client@example.com", full_name="Maria Lopez", phone=None, admin=False):
    profile = Profile(email=email, full_name=full_name, phone=phone)
    db.add(profile)
    db.flush()
    db.add(UserRole(user_id=profile.id, role="admin" if admin else "user"))
    db.commit()
    db.refresh(profile)
    return profile


def create_service(db, name="Bridal Makeup", price=80.0, category="Makeup"):
    service = Service(name=name, price=price, category=category)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def create_slot(db, slot_date=None, start=dtime(10, 0), end=dtime(11, 0)):
    slot = AvailabilitySlot(
        date=slot_date or utc_now().date() + timedelta(days=7), start_time=start, end_time=end
    )
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


def create_appointment(db, profile, slot=None, service=None, **fields):
    appointment = Appointment(
        client_id=profile.id,
        slot_id=slot.id if slot else None,
        service_id=service.id if service else None,
        service_type=service.name if service else "Makeup session",
        **fields,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def create_product(db, name="Lip Gloss", price=20.0, stock=10, **fields):
    product = Product(name=name, price=price, stock_quantity=stock, **fields)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def create_variant(db, product, name="Rose", price=None, stock=5, created_at=None):
    variant = ProductVariant(
        product_id=product.id,
        name=name,
        price=price,
        stock_quantity=stock,
        created_at=created_at or utc_now(),
    )
    db.add(variant)
    db.commit()
    db.refresh(variant)
    return variant

