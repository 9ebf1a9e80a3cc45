import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from models import db
from models.booking import Booking
from models.promo_code import FLAT, PERCENTAGE
from models.slot import Slot
from services import inventory
from services.booking_processor import submit_booking, get_booking_details
from services.errors import (
    BookingPersistenceError,
    InsufficientAvailability,
    NotFound,
    PromoRejected,
    TransactionConflict,
    EXPIRED,
    INVALID_CODE,
)


def _booked(slot_id):
    db.session.expire_all()
    return db.session.get(Slot, slot_id).booked


def test_confirmed_booking_increments_slot_and_records_row(make_experience, make_slot, booking_payload):
    experience = make_experience()
    slot = make_slot(experience, price=Decimal("120.00"), start_time="14:00", end_time="18:00")

    summary = submit_booking(booking_payload(experience, slot, guests=3))

    assert summary["status"] == "confirmed"
    assert summary["guests"] == 3
    assert summary["totalPrice"] == 360.0
    assert summary["discount"] == 0.0
    assert summary["promoCode"] is None
    assert summary["experienceTitle"] == "Sunset Desert Safari"
    assert summary["time"] == "14:00 - 18:00"
    assert summary["email"] == "amira@example.com"
    assert _booked(slot.id) == 3

    row = db.session.get(Booking, summary["id"])
    assert row.total_price == Decimal("360.00")
    assert row.slot_id == slot.id
    assert row.experience_id == experience.id


def test_not_enough_availability(make_experience, make_slot, booking_payload):
    experience = make_experience()
    slot = make_slot(experience, capacity=10, booked=8)

    with pytest.raises(InsufficientAvailability) as exc:
        submit_booking(booking_payload(experience, slot, guests=3))

    assert exc.value.remaining == 2
    assert _booked(slot.id) == 8
    assert Booking.query.count() == 0


def test_booking_exactly_the_remaining_spots(make_experience, make_slot, booking_payload):
    experience = make_experience()
    slot = make_slot(experience, capacity=10, booked=8)

    submit_booking(booking_payload(experience, slot, guests=2))

    assert _booked(slot.id) == 10


def test_promo_discount_is_applied_and_captured(make_experience, make_slot, make_promo, booking_payload):
    make_promo("SAVE10", PERCENTAGE, 10, min_amount=Decimal("100"))
    experience = make_experience()
    slot = make_slot(experience, price=Decimal("100.00"))

    summary = submit_booking(booking_payload(experience, slot, guests=2, promoCode="save10"))

    assert summary["discount"] == 20.0
    assert summary["totalPrice"] == 180.0
    assert summary["promoCode"] == "SAVE10"


def test_rejected_promo_aborts_the_whole_booking(make_experience, make_slot, make_promo, booking_payload):
    make_promo("SPRING", PERCENTAGE, 10, expires_at=datetime.utcnow() - timedelta(days=1))
    experience = make_experience()
    slot = make_slot(experience, booked=1)

    with pytest.raises(PromoRejected) as exc:
        submit_booking(booking_payload(experience, slot, promoCode="SPRING"))

    assert exc.value.reason == EXPIRED
    assert _booked(slot.id) == 1
    assert Booking.query.count() == 0


def test_unknown_promo_is_not_silently_ignored(make_experience, make_slot, booking_payload):
    experience = make_experience()
    slot = make_slot(experience)

    with pytest.raises(PromoRejected) as exc:
        submit_booking(booking_payload(experience, slot, promoCode="DOESNOTEXIST"))

    assert exc.value.reason == INVALID_CODE
    assert Booking.query.count() == 0


def test_promo_minimum_uses_slot_price_not_experience_price(make_experience, make_slot, make_promo, booking_payload):
    make_promo("FLAT100", FLAT, 100, min_amount=Decimal("500"))
    experience = make_experience(price=Decimal("200.00"))
    evening = make_slot(experience, start_time="18:00", end_time="22:00", price=Decimal("250.00"))

    summary = submit_booking(booking_payload(experience, evening, guests=2, promoCode="FLAT100"))

    assert summary["discount"] == 100.0
    assert summary["totalPrice"] == 400.0


def test_missing_experience(make_experience, make_slot, booking_payload):
    experience = make_experience()
    slot = make_slot(experience)

    with pytest.raises(NotFound) as exc:
        submit_booking(booking_payload(experience, slot, experienceId=str(uuid.uuid4())))

    assert exc.value.entity == "experience"
    assert exc.value.status_code == 404


def test_missing_slot(make_experience, booking_payload, make_slot):
    experience = make_experience()
    slot = make_slot(experience)

    with pytest.raises(NotFound) as exc:
        submit_booking(booking_payload(experience, slot, slotId=str(uuid.uuid4())))

    assert exc.value.entity == "slot"


def test_slot_of_another_experience_is_not_found(make_experience, make_slot, booking_payload):
    safari = make_experience()
    cruise = make_experience(title="Luxury Yacht Cruise", category="Water")
    cruise_slot = make_slot(cruise)

    with pytest.raises(NotFound) as exc:
        submit_booking(booking_payload(safari, cruise_slot))

    assert exc.value.entity == "slot"
    assert _booked(cruise_slot.id) == 0


def test_stale_availability_check_is_caught_by_conditional_increment(make_experience, make_slot, booking_payload, monkeypatch):
    experience = make_experience()
    slot = make_slot(experience, capacity=10, booked=0)
    real_get_slot = inventory.get_slot

    def get_slot_then_someone_else_books(slot_id):
        loaded = real_get_slot(slot_id)
        # another writer commits between our read and our increment
        with db.engine.begin() as conn:
            conn.execute(update(Slot).where(Slot.id == slot_id).values(booked=8))
        return loaded

    monkeypatch.setattr(inventory, "get_slot", get_slot_then_someone_else_books)

    with pytest.raises(InsufficientAvailability) as exc:
        submit_booking(booking_payload(experience, slot, guests=3))

    assert exc.value.remaining == 2
    assert _booked(slot.id) == 8
    assert Booking.query.count() == 0


def test_lock_error_on_commit_is_a_conflict_and_rolls_back(make_experience, make_slot, booking_payload, monkeypatch):
    experience = make_experience()
    slot = make_slot(experience)
    payload = booking_payload(experience, slot)

    def locked_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db.session, "commit", locked_commit)
    with pytest.raises(TransactionConflict):
        submit_booking(payload)
    monkeypatch.undo()

    assert _booked(slot.id) == 0
    assert Booking.query.count() == 0


def test_unexpected_database_error_leaves_no_partial_state(make_experience, make_slot, booking_payload, monkeypatch):
    experience = make_experience()
    slot = make_slot(experience)
    payload = booking_payload(experience, slot)

    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db.session, "commit", broken_commit)
    with pytest.raises(BookingPersistenceError) as exc:
        submit_booking(payload)
    monkeypatch.undo()

    assert exc.value.status_code == 500
    assert _booked(slot.id) == 0
    assert Booking.query.count() == 0


def test_booking_details(make_experience, make_slot, booking_payload):
    experience = make_experience()
    slot = make_slot(experience)
    summary = submit_booking(booking_payload(experience, slot))

    details = get_booking_details(summary["id"])

    assert details["id"] == summary["id"]
    assert details["location"] == "Dubai Desert Conservation Reserve"
    assert details["experienceImage"] == "https://example.com/safari.jpg"
    assert details["phone"] == "5551234567"
    assert details["createdAt"]


@pytest.mark.parametrize("booking_id", ["missing", "00000000-0000-0000-0000-000000000000"])
def test_booking_details_not_found(app, booking_id):
    with pytest.raises(NotFound) as exc:
        get_booking_details(booking_id)
    assert exc.value.entity == "booking"
