from datetime import timedelta

import pytest

from app.database import utc_now
from app.models import Rating
from helpers import auth_headers, create_profile, create_service

PHOTO_URL = "https://proj.supabase.co/storage/v1/object/public/review-photos/u1/look.jpg"


@pytest.fixture
def signed(monkeypatch):
    monkeypatch.setattr(
        "app.domain.ratings.service.get_signed_photo_urls",
        lambda urls: [f"{url}?signed=1" for url in urls or []],
    )


def add_rating(db, service, client, rating, review=None, age_days=0, photos=None):
    row = Rating(
        service_id=service.id,
        client_id=client.id,
        rating=rating,
        review=review,
        photos=photos,
        created_at=utc_now() - timedelta(days=age_days),
    )
    db.add(row)
    db.commit()
    return row


class TestServiceRatings:
    def test_aggregates_and_initials(self, client, db):
        service = create_service(db)
        maria = create_profile(db, email="maria@example.com", full_name="Maria Lopez")
        anon = create_profile(db, email="zoe@example.com", full_name=None)
        add_rating(db, service, maria, 5, age_days=2)
        add_rating(db, service, anon, 4, age_days=0)
        add_rating(db, service, maria, 4, age_days=1)

        data = client.get(f"/api/services/{service.id}/ratings").json()

        assert data["count"] == 3
        assert data["average"] == 4.3
        assert [r["initials"] for r in data["ratings"]] == ["ZO", "ML", "ML"]

    def test_no_ratings(self, client, db):
        service = create_service(db)
        data = client.get(f"/api/services/{service.id}/ratings").json()
        assert data == {"ratings": [], "count": 0, "average": None}


class TestReviews:
    def test_orders_filters_and_signs(self, client, db, signed):
        makeup = create_service(db, name="Bridal Makeup", category="Makeup")
        hair = create_service(db, name="Blowout", category="Hair")
        maria = create_profile(db, email="maria@example.com", full_name="Maria Lopez")
        add_rating(db, makeup, maria, 4, review="Lovely", age_days=1)
        add_rating(db, makeup, maria, 5, review="Perfect", age_days=3, photos=[PHOTO_URL])
        add_rating(db, hair, maria, 4, review="Great volume", age_days=0)
        add_rating(db, hair, maria, 5, review=None)

        data = client.get("/api/reviews").json()

        assert [r["review"] for r in data["reviews"]] == ["Perfect", "Great volume", "Lovely"]
        assert data["categories"] == ["Hair", "Makeup"]
        assert data["reviews"][0]["photos"] == [f"{PHOTO_URL}?signed=1"]
        assert data["reviews"][0]["service_name"] == "Bridal Makeup"

        hair_only = client.get("/api/reviews", params={"category": "Hair"}).json()
        assert [r["review"] for r in hair_only["reviews"]] == ["Great volume"]
        assert hair_only["categories"] == ["Hair", "Makeup"]

        everything = client.get("/api/reviews", params={"category": "all"}).json()
        assert len(everything["reviews"]) == 3


class TestModeration:
    @pytest.fixture
    def rating(self, db):
        service = create_service(db)
        maria = create_profile(db, email="maria@example.com")
        return add_rating(db, service, maria, 3, review="Okay")

    @pytest.fixture
    def admin(self, db):
        return create_profile(db, email="owner@example.com", admin=True)

    def test_respond_and_clear(self, client, db, rating, admin):
        response = client.put(
            f"/api/ratings/{rating.id}/response",
            json={"response": "Thanks for the feedback!"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["admin_response"] == "Thanks for the feedback!"
        db.expire_all()
        stored = db.get(Rating, rating.id)
        assert stored.admin_responder_id == admin.id
        assert stored.admin_response_at is not None

        client.put(
            f"/api/ratings/{rating.id}/response", json={"response": "  "}, headers=auth_headers(admin)
        )
        db.expire_all()
        stored = db.get(Rating, rating.id)
        assert stored.admin_response is None
        assert stored.admin_response_at is None
        assert stored.admin_responder_id is None

    def test_delete(self, client, db, rating, admin):
        response = client.delete(f"/api/ratings/{rating.id}", headers=auth_headers(admin))
        assert response.status_code == 200
        assert db.query(Rating).count() == 0

    def test_unknown_rating(self, client, db, admin):
        assert client.delete("/api/ratings/nope", headers=auth_headers(admin)).status_code == 404
        response = client.put(
            "/api/ratings/nope/response", json={"response": "hi"}, headers=auth_headers(admin)
        )
        assert response.status_code == 404

    def test_non_admin_forbidden(self, client, db, rating):
        user = create_profile(db, email="someone@example.com")
        response = client.delete(f"/api/ratings/{rating.id}", headers=auth_headers(user))
        assert response.status_code == 403
