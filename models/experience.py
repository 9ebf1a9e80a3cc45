import uuid
from datetime import datetime
from models.db import db


class Experience(db.Model):
    __tablename__ = "experiences"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    title = db.Column(db.String(160), nullable=False)
    description = db.Column(db.Text, nullable=False)
    location = db.Column(db.String(160), nullable=False)
    category = db.Column(db.String(60), nullable=False, index=True)

    price = db.Column(db.Numeric(10, 2), nullable=False)  # per guest
    duration = db.Column(db.String(40), nullable=False)   # display text, e.g. "6 hours"
    image = db.Column(db.String(500), nullable=True)

    rating = db.Column(db.Float, nullable=False, default=0)
    review_count = db.Column(db.Integer, nullable=False, default=0)
    highlights = db.Column(db.JSON, nullable=False, default=list)
    included = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    slots = db.relationship(
        "Slot",
        back_populates="experience",
        cascade="all, delete-orphan",
    )
