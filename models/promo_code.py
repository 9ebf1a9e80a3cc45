from datetime import datetime
from models.db import db

PERCENTAGE = "percentage"
FLAT = "flat"


class PromoCode(db.Model):
    __tablename__ = "promo_codes"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(40), unique=True, nullable=False, index=True)  # stored uppercase

    discount_type = db.Column(db.String(20), nullable=False)  # percentage, flat
    value = db.Column(db.Numeric(10, 2), nullable=False)
    min_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    max_discount = db.Column(db.Numeric(10, 2), nullable=True)  # percentage only

    expires_at = db.Column(db.DateTime, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("discount_type IN ('percentage', 'flat')", name="ck_promo_discount_type"),
    )
