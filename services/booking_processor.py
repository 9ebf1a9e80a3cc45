"""
Booking transaction: validate, price, and atomically reserve slot capacity.

A call either commits one `slots.booked` increment together with one new
booking row, or leaves the database untouched.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from loguru import logger
from sqlalchemy import update
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from models import db
from models.booking import Booking, CONFIRMED
from models.slot import Slot
from services import inventory, promo_policy
from services.errors import (
    BookingPersistenceError,
    InsufficientAvailability,
    NotFound,
    TransactionConflict,
)
from services.promo_policy import to_money
from services.validation import BookingRequest, validate_booking_request, is_valid_id

_CONFLICT_MARKERS = ("database is locked", "could not serialize", "deadlock")


def _is_conflict(exc: OperationalError) -> bool:
    text = str(getattr(exc, "orig", exc)).lower()
    return any(marker in text for marker in _CONFLICT_MARKERS)


def _fresh_available(slot_id: str) -> int:
    # session was rolled back, so this re-reads the committed row
    slot = db.session.get(Slot, slot_id)
    return slot.available if slot is not None else 0


def _reserve_and_record(req: BookingRequest, total_price: Decimal, discount: Decimal, promo_code: Optional[str]) -> Booking:
    increment = (
        update(Slot)
        .where(Slot.id == req.slot_id, Slot.booked + req.guests <= Slot.capacity)
        .values(booked=Slot.booked + req.guests)
        .execution_options(synchronize_session=False)
    )

    with inventory.slot_locks.hold(req.slot_id):
        try:
            reserved = db.session.execute(increment).rowcount == 1
            if not reserved:
                db.session.rollback()
                raise InsufficientAvailability(_fresh_available(req.slot_id))

            booking = Booking(
                experience_id=req.experience_id,
                slot_id=req.slot_id,
                name=req.name,
                email=req.email,
                phone=req.phone,
                guests=req.guests,
                total_price=total_price,
                discount=discount,
                promo_code=promo_code,
                status=CONFIRMED,
            )
            db.session.add(booking)
            db.session.commit()
        except OperationalError as exc:
            db.session.rollback()
            if _is_conflict(exc):
                logger.warning("Booking conflict on slot {}: {}", req.slot_id, exc.orig)
                raise TransactionConflict() from exc
            logger.exception("Database error while booking slot {}", req.slot_id)
            raise BookingPersistenceError() from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception("Database error while booking slot {}", req.slot_id)
            raise BookingPersistenceError() from exc

    return booking


def booking_summary(booking: Booking) -> dict:
    slot = booking.slot
    return {
        "id": booking.id,
        "experienceTitle": booking.experience.title,
        "date": slot.date.isoformat(),
        "time": slot.time_range,
        "guests": booking.guests,
        "totalPrice": float(booking.total_price),
        "discount": float(booking.discount),
        "promoCode": booking.promo_code,
        "status": booking.status,
        "name": booking.name,
        "email": booking.email,
        "phone": booking.phone,
    }


def submit_booking(data, now: Optional[datetime] = None) -> dict:
    """
    Turns a slot selection into a confirmed booking and returns its summary.

    Raises ValidationFailed, NotFound, InsufficientAvailability, PromoRejected,
    TransactionConflict or BookingPersistenceError.
    """
    req = validate_booking_request(data)

    experience = inventory.get_experience(req.experience_id)
    slot = inventory.get_slot(req.slot_id)
    if slot.experience_id != experience.id:
        raise NotFound("slot")

    # Fast, friendly pre-check; the conditional UPDATE is the real guard
    if slot.available < req.guests:
        raise InsufficientAvailability(slot.available)

    subtotal = to_money(Decimal(str(slot.price)) * req.guests)
    discount = Decimal("0.00")
    applied_code = None
    if req.promo_code:
        quote = promo_policy.evaluate(req.promo_code, subtotal, now=now)
        discount = quote.discount
        applied_code = quote.code

    total_price = to_money(subtotal - discount)
    booking = _reserve_and_record(req, total_price, discount, applied_code)

    logger.info(
        "Booking {} confirmed: slot={} guests={} total={} promo={}",
        booking.id, req.slot_id, req.guests, total_price, applied_code,
    )
    return booking_summary(booking)


def get_booking_details(booking_id: str) -> dict:
    booking = db.session.get(Booking, booking_id) if is_valid_id(booking_id) else None
    if booking is None:
        raise NotFound("booking")

    experience = booking.experience
    slot = booking.slot
    return {
        "id": booking.id,
        "experienceTitle": experience.title,
        "experienceImage": experience.image,
        "location": experience.location,
        "date": slot.date.isoformat(),
        "time": slot.time_range,
        "guests": booking.guests,
        "totalPrice": float(booking.total_price),
        "discount": float(booking.discount),
        "promoCode": booking.promo_code,
        "status": booking.status,
        "name": booking.name,
        "email": booking.email,
        "phone": booking.phone,
        "createdAt": booking.created_at.isoformat(),
    }
