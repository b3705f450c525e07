from datetime import date, datetime, time

from app.domain.availability.service import AvailabilityService, pattern_dates, weekday_name
from app.models import AvailabilitySlot, RecurringPattern
from helpers import auth_headers, create_profile, create_slot

MONDAY = date(2026, 10, 19)


def make_pattern(db, days, weeks_ahead=1, is_active=True, **fields):
    pattern = RecurringPattern(
        name="Weekday mornings",
        days_of_week=days,
        start_time=time(9, 0),
        end_time=time(10, 0),
        capacity=2,
        weeks_ahead=weeks_ahead,
        is_active=is_active,
        created_by="admin-id",
        **fields,
    )
    db.add(pattern)
    db.commit()
    return pattern


def test_weekday_name():
    assert weekday_name(MONDAY) == "monday"
    assert weekday_name(date(2026, 10, 25)) == "sunday"


def test_pattern_dates_include_the_last_day():
    pattern = RecurringPattern(days_of_week=["Monday", "wednesday"], weeks_ahead=1)
    assert pattern_dates(pattern, MONDAY) == [
        date(2026, 10, 19),
        date(2026, 10, 21),
        date(2026, 10, 26),
    ]


def test_creates_missing_slots(db):
    make_pattern(db, ["monday"], weeks_ahead=1)

    summary = AvailabilityService(db).process_recurring_patterns(today=MONDAY)

    assert summary["patterns_processed"] == 1
    assert summary["slots_created"] == 2
    slots = db.query(AvailabilitySlot).order_by(AvailabilitySlot.date).all()
    assert [s.date for s in slots] == [date(2026, 10, 19), date(2026, 10, 26)]
    assert all(s.capacity == 2 and s.is_available and s.created_by == "admin-id" for s in slots)


def test_existing_slots_are_not_duplicated(db):
    make_pattern(db, ["monday"], weeks_ahead=1)
    create_slot(db, slot_date=MONDAY, start=time(9, 0), end=time(10, 0))

    service = AvailabilityService(db)
    assert service.process_recurring_patterns(today=MONDAY)["slots_created"] == 1
    assert service.process_recurring_patterns(today=MONDAY)["slots_created"] == 0
    assert db.query(AvailabilitySlot).count() == 2


def test_inactive_patterns_are_skipped(db):
    make_pattern(db, ["monday"], is_active=False)
    assert AvailabilityService(db).process_recurring_patterns(today=MONDAY) == {
        "message": "No active patterns found"
    }


def test_endpoint_is_admin_only(client, db):
    user = create_profile(db)
    response = client.post("/functions/v1/process-recurring-patterns", headers=auth_headers(user))
    assert response.status_code == 403


def test_endpoint_runs_for_admin(client, db):
    admin = create_profile(db, email="owner@example.com", admin=True)
    response = client.post("/functions/v1/process-recurring-patterns", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json() == {"message": "No active patterns found"}


def test_default_day_is_the_utc_date(db, monkeypatch):
    make_pattern(db, ["monday"], weeks_ahead=0)
    # Late Monday in UTC, already Tuesday in UTC+1 and later zones
    monkeypatch.setattr(
        "app.domain.availability.service.utc_now", lambda: datetime(2026, 10, 19, 23, 30)
    )

    summary = AvailabilityService(db).process_recurring_patterns()

    assert summary["slots_created"] == 1
    assert db.query(AvailabilitySlot).one().date == MONDAY
