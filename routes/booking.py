from flask import Blueprint, request, jsonify

from services.booking_processor import submit_booking, get_booking_details
from services.errors import BookingError
from utils.audit import log_event

booking_bp = Blueprint("booking", __name__, url_prefix="/api/bookings")


@booking_bp.post("")
def create_booking():
    data = request.get_json(silent=True)
    try:
        booking = submit_booking(data)
    except BookingError as exc:
        slot_id = data.get("slotId") if isinstance(data, dict) else None
        log_event(
            "BOOKING_FAIL",
            entity="slot",
            entity_id=slot_id,
            metadata={"error": type(exc).__name__, "status": exc.status_code},
        )
        raise

    log_event(
        "BOOKING_CREATE",
        entity="booking",
        entity_id=booking["id"],
        metadata={"slot_id": data.get("slotId"), "guests": booking["guests"], "promo_code": booking["promoCode"]},
    )
    return jsonify(success=True, booking=booking), 201


@booking_bp.get("/<booking_id>")
def get_booking(booking_id: str):
    return jsonify(get_booking_details(booking_id)), 200
