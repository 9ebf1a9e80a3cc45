import uuid
from datetime import datetime
from models.db import db


class Slot(db.Model):
    __tablename__ = "slots"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    experience_id = db.Column(
        db.String(36),
        db.ForeignKey("experiences.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.String(5), nullable=False)  # "HH:MM"
    end_time = db.Column(db.String(5), nullable=False)

    capacity = db.Column(db.Integer, nullable=False)
    booked = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Numeric(10, 2), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    experience = db.relationship("Experience", back_populates="slots")

    __table_args__ = (
        db.CheckConstraint("capacity > 0", name="ck_slot_capacity_positive"),
        db.CheckConstraint("booked >= 0 AND booked <= capacity", name="ck_slot_booked_within_capacity"),
        db.UniqueConstraint("experience_id", "date", "start_time", name="uq_experience_slot_start"),
    )

    @property
    def available(self) -> int:
        return self.capacity - self.booked

    @property
    def is_full(self) -> bool:
        return self.booked >= self.capacity

    @property
    def time_range(self) -> str:
        return f"{self.start_time} - {self.end_time}"
