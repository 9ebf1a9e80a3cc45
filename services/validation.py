import re
import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from flask import current_app

from services.errors import ValidationFailed

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_DEFAULTS = {
    "BOOKING_MIN_GUESTS": 1,
    "BOOKING_MAX_GUESTS": 10,
    "BOOKING_PHONE_PATTERN": r"^[0-9]{10}$",
    "NAME_MIN_LENGTH": 2,
}


def _cfg(name: str):
    try:
        return current_app.config.get(name, _DEFAULTS[name])
    except RuntimeError:  # outside an app context
        return _DEFAULTS[name]


@dataclass(frozen=True)
class BookingRequest:
    experience_id: str
    slot_id: str
    name: str
    email: str
    phone: str
    guests: int
    promo_code: Optional[str] = None


def is_valid_id(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def is_valid_email(value) -> bool:
    return isinstance(value, str) and len(value) <= 255 and _EMAIL.match(value) is not None


def validate_booking_request(data) -> BookingRequest:
    """
    Checks a raw booking payload and returns a BookingRequest.

    Every failing field is reported, in the order ids, name, email, phone,
    guests, promoCode. Raises ValidationFailed; never touches the database.
    """
    if not isinstance(data, dict):
        raise ValidationFailed([{"field": "body", "message": "Request body must be a JSON object"}])

    errors: List[dict] = []

    experience_id = data.get("experienceId")
    slot_id = data.get("slotId")
    if not is_valid_id(experience_id):
        errors.append({"field": "experienceId", "message": "Invalid experience id"})
    if not is_valid_id(slot_id):
        errors.append({"field": "slotId", "message": "Invalid slot id"})

    name = data.get("name")
    min_name = int(_cfg("NAME_MIN_LENGTH"))
    if not isinstance(name, str) or len(name) < min_name:
        errors.append({"field": "name", "message": f"Name must be at least {min_name} characters"})

    email = data.get("email")
    if not is_valid_email(email):
        errors.append({"field": "email", "message": "Invalid email address"})

    phone = data.get("phone")
    if not isinstance(phone, str) or not re.fullmatch(_cfg("BOOKING_PHONE_PATTERN"), phone, flags=re.ASCII):
        errors.append({"field": "phone", "message": "Phone must be exactly 10 digits"})

    guests = data.get("guests")
    min_guests = int(_cfg("BOOKING_MIN_GUESTS"))
    max_guests = int(_cfg("BOOKING_MAX_GUESTS"))
    # bool is an int subclass; True must not count as one guest
    if isinstance(guests, bool) or not isinstance(guests, int) or not (min_guests <= guests <= max_guests):
        errors.append({"field": "guests", "message": f"Guests must be a whole number between {min_guests} and {max_guests}"})

    promo_code = data.get("promoCode")
    if promo_code is not None and not isinstance(promo_code, str):
        errors.append({"field": "promoCode", "message": "Promo code must be a string"})
        promo_code = None

    if errors:
        raise ValidationFailed(errors)

    return BookingRequest(
        experience_id=experience_id,
        slot_id=slot_id,
        name=name.strip(),
        email=email.strip(),
        phone=phone,
        guests=guests,
        promo_code=(promo_code or "").strip() or None,
    )


def parse_amount(value, field: str = "amount") -> Decimal:
    """Positive money amount from JSON (int, float or numeric string)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationFailed([{"field": field, "message": "Amount must be a number"}])
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationFailed([{"field": field, "message": "Amount must be a number"}])
    if not amount.is_finite() or amount <= 0:
        raise ValidationFailed([{"field": field, "message": "Amount must be positive"}])
    return amount
