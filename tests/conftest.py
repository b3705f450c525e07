import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_123"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test"
os.environ["RESEND_API_KEY"] = "re_test_123"
os.environ.pop("STRIPE_PRODUCT_WEBHOOK_SECRET", None)
os.environ.pop("TWILIO_ACCOUNT_SID", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import email_service
from app.database import Base, get_db
from app.main import app
from app.services import twilio_service
from app.services.stripe_service import stripe_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ----------------------------------------------------------------------
# Provider fakes
# ----------------------------------------------------------------------


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing emails instead of calling Resend"""
    sent = []

    async def fake_send_email(to, subject, mjml_content, from_address=None):
        sent.append({"to": to, "subject": subject, "body": mjml_content})
        return {"id": f"email_{len(sent)}"}

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return sent


@pytest.fixture
def sent_sms(monkeypatch):
    """Enable SMS and capture messages instead of calling Twilio"""
    sent = []

    async def fake_send_sms(to_phone, message_body):
        sent.append({"to": to_phone, "body": message_body})
        return True, None

    monkeypatch.setattr(twilio_service, "sms_enabled", lambda: True)
    monkeypatch.setattr(twilio_service, "send_sms", fake_send_sms)
    return sent


class FakeStripe:
    def __init__(self):
        self.sessions = []
        self.refunds = []
        self.retrieved = {}
        self.customer_id = None
        self.refund_error = None

    async def find_customer_id(self, email):
        return self.customer_id

    async def create_checkout_session(self, line_items, success_url, cancel_url, metadata=None,
                                      customer_id=None, customer_email=None):
        session_id = f"cs_test_{len(self.sessions) + 1}"
        self.sessions.append(
            {
                "id": session_id,
                "line_items": line_items,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "metadata": metadata,
                "customer_id": customer_id,
                "customer_email": customer_email,
            }
        )
        return {"id": session_id, "url": f"https://checkout.stripe.com/c/pay/{session_id}"}

    async def retrieve_checkout_session(self, session_id):
        return self.retrieved[session_id]

    async def create_refund(self, payment_intent_id, amount_cents):
        if self.refund_error:
            raise self.refund_error
        self.refunds.append({"payment_intent": payment_intent_id, "amount": amount_cents})
        return {"id": "re_123", "status": "succeeded"}


@pytest.fixture
def fake_stripe(monkeypatch):
    fake = FakeStripe()
    monkeypatch.setattr(stripe_service, "api_key", "sk_test_123")
    for name in (
        "find_customer_id",
        "create_checkout_session",
        "retrieve_checkout_session",
        "create_refund",
    ):
        monkeypatch.setattr(stripe_service, name, getattr(fake, name))
    return fake
