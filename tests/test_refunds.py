from datetime import datetime, timedelta, timezone

import pytest

from app.database import utc_now
from app.domain.payments.service import hours_until, select_refund_policy
from app.models import Appointment, CancellationPolicy
from helpers import auth_headers, create_appointment, create_profile, create_service, create_slot


def policy(hours_before, refund_percentage, is_active=True):
    return CancellationPolicy(
        hours_before=hours_before, refund_percentage=refund_percentage, is_active=is_active
    )


STANDARD_POLICIES = [policy(48, 100), policy(24, 50), policy(0, 0)]


class TestRefundTier:
    @pytest.mark.parametrize(
        "hours,expected",
        [(72, 100), (48, 100), (47.9, 50), (24, 50), (23, 0), (0, 0), (-5, 0)],
    )
    def test_largest_window_not_exceeding_hours(self, hours, expected):
        selected = select_refund_policy(STANDARD_POLICIES, hours)
        assert selected.refund_percentage == expected

    def test_inactive_policies_are_ignored(self):
        policies = [policy(48, 100, is_active=False), policy(24, 50)]
        assert select_refund_policy(policies, 60).refund_percentage == 50

    def test_no_eligible_policy(self):
        assert select_refund_policy([policy(24, 50)], 10) is None
        assert select_refund_policy([], 100) is None

    def test_hours_until(self):
        now = datetime(2026, 3, 1, 10, 0)
        slot_start = datetime(2026, 3, 2, 16, 30)
        assert hours_until(slot_start.date(), slot_start.time(), now=now) == 30.5

    def test_hours_until_defaults_to_utc_clock(self, monkeypatch):
        monkeypatch.setattr(
            "app.domain.payments.service.utc_now", lambda: datetime(2026, 3, 1, 10, 0)
        )
        assert hours_until(datetime(2026, 3, 2).date(), datetime(2026, 3, 2, 16, 30).time()) == 30.5

    def test_utc_now_is_naive_utc(self):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        value = utc_now()
        assert value.tzinfo is None
        assert before <= value <= before + timedelta(seconds=5)


@pytest.fixture
def policies(db):
    db.add_all([policy(48, 100), policy(24, 50), policy(0, 0)])
    db.commit()


def book(db, hours_ahead, payment_status="paid", payment_intent_id="pi_123"):
    profile = create_profile(db, email="client@example.com")
    service = create_service(db, price=80.0)
    starts_at = (utc_now() + timedelta(hours=hours_ahead)).replace(microsecond=0)
    slot = create_slot(db, slot_date=starts_at.date(), start=starts_at.time(), end=starts_at.time())
    appointment = create_appointment(
        db,
        profile,
        slot,
        service,
        status="confirmed",
        payment_status=payment_status,
        payment_intent_id=payment_intent_id,
    )
    return profile, appointment


class TestProcessRefund:
    def test_partial_refund(self, client, db, policies, fake_stripe):
        profile, appointment = book(db, hours_ahead=30)

        response = client.post(
            "/functions/v1/process-refund",
            json={"appointmentId": appointment.id},
            headers=auth_headers(profile),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["refundPercentage"] == 50
        assert data["refundAmount"] == 40.0
        assert data["refunded"] is True
        assert data["message"] == (
            "Appointment cancelled. A refund of $40.00 (50%) has been processed."
        )
        assert 29 < data["hoursUntilAppointment"] <= 30
        assert fake_stripe.refunds == [{"payment_intent": "pi_123", "amount": 4000}]

        db.expire_all()
        stored = db.get(Appointment, appointment.id)
        assert stored.status == "cancelled"
        assert stored.refund_status == "processed"
        assert stored.refund_amount == 40.0
        assert stored.refunded_at is not None

    def test_full_refund_far_ahead(self, client, db, policies, fake_stripe):
        profile, appointment = book(db, hours_ahead=100)
        data = client.post(
            "/functions/v1/process-refund",
            json={"appointmentId": appointment.id},
            headers=auth_headers(profile),
        ).json()
        assert data["refundPercentage"] == 100
        assert fake_stripe.refunds[0]["amount"] == 8000

    def test_late_cancellation_gets_no_refund(self, client, db, policies, fake_stripe):
        profile, appointment = book(db, hours_ahead=5)

        data = client.post(
            "/functions/v1/process-refund",
            json={"appointmentId": appointment.id},
            headers=auth_headers(profile),
        ).json()

        assert data["refunded"] is False
        assert data["refundPercentage"] == 0
        assert data["message"] == (
            "Appointment cancelled. No refund is available per the cancellation policy "
            "(less than 24 hours before appointment)."
        )
        assert fake_stripe.refunds == []
        db.expire_all()
        assert db.get(Appointment, appointment.id).status == "cancelled"

    def test_past_appointment_floors_hours_at_zero(self, client, db, policies, fake_stripe):
        profile, appointment = book(db, hours_ahead=-3)
        data = client.post(
            "/functions/v1/process-refund",
            json={"appointmentId": appointment.id},
            headers=auth_headers(profile),
        ).json()
        assert data["hoursUntilAppointment"] == 0
        assert data["refunded"] is False

    def test_pay_later_is_cancelled_without_refund(self, client, db, policies, fake_stripe):
        profile, appointment = book(db, hours_ahead=72, payment_status="pay_later")

        data = client.post(
            "/functions/v1/process-refund",
            json={"appointmentId": appointment.id},
            headers=auth_headers(profile),
        ).json()

        assert data["refunded"] is False
        assert data["message"] == "Appointment cancelled successfully."
        assert fake_stripe.refunds == []

    def test_already_refunded(self, client, db, policies, fake_stripe):
        profile, appointment = book(db, hours_ahead=72)
        appointment.refund_status = "processed"
        db.commit()

        response = client.post(
            "/functions/v1/process-refund",
            json={"appointmentId": appointment.id},
            headers=auth_headers(profile),
        )
        assert response.status_code == 400
        assert fake_stripe.refunds == []

    def test_stripe_failure_marks_refund_failed(self, client, db, policies, fake_stripe):
        profile, appointment = book(db, hours_ahead=72)
        fake_stripe.refund_error = Exception("card_declined")

        response = client.post(
            "/functions/v1/process-refund",
            json={"appointmentId": appointment.id},
            headers=auth_headers(profile),
        )

        assert response.status_code == 500
        assert "card_declined" in response.json()["error"]
        db.expire_all()
        assert db.get(Appointment, appointment.id).refund_status == "failed"

    def test_cannot_cancel_someone_elses_appointment(self, client, db, policies, fake_stripe):
        _, appointment = book(db, hours_ahead=72)
        stranger = create_profile(db, email="stranger@example.com")
        response = client.post(
            "/functions/v1/process-refund",
            json={"appointmentId": appointment.id},
            headers=auth_headers(stranger),
        )
        assert response.status_code == 403

    def test_missing_appointment_id(self, client, db):
        profile = create_profile(db)
        response = client.post(
            "/functions/v1/process-refund", json={}, headers=auth_headers(profile)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Appointment ID is required"

    def test_requires_authentication(self, client, db):
        response = client.post("/functions/v1/process-refund", json={"appointmentId": "x"})
        assert response.status_code == 401
