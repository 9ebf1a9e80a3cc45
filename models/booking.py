import uuid
from datetime import datetime
from models.db import db

CONFIRMED = "confirmed"


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    experience_id = db.Column(db.String(36), db.ForeignKey("experiences.id"), nullable=False, index=True)
    slot_id = db.Column(db.String(36), db.ForeignKey("slots.id"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(30), nullable=False)
    guests = db.Column(db.Integer, nullable=False)

    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    discount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    # Applied code is captured here so later promo edits don't touch past bookings
    promo_code = db.Column(db.String(40), nullable=True)

    status = db.Column(db.String(20), nullable=False, default=CONFIRMED)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    experience = db.relationship("Experience")
    slot = db.relationship("Slot")

    __table_args__ = (
        db.CheckConstraint("guests >= 1", name="ck_booking_guests_positive"),
    )
