"""
Promo code pricing.

evaluate() is the single authority for discounts: the preview endpoint and the
booking processor both call it, so identical (code, subtotal, now) inputs
always give identical quotes.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from models.promo_code import PromoCode, PERCENTAGE, FLAT
from services.errors import (
    PromoRejected,
    INVALID_CODE,
    INACTIVE,
    EXPIRED,
    BELOW_MINIMUM,
)

CENT = Decimal("0.01")


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def to_money(value) -> Decimal:
    return _dec(value).quantize(CENT, rounding=ROUND_HALF_UP)


def canonical_code(code: str) -> str:
    return (code or "").strip().upper()


@dataclass(frozen=True)
class PromoQuote:
    code: str
    discount_type: str
    value: Decimal
    discount: Decimal
    final_amount: Decimal

    @property
    def message(self) -> str:
        if self.discount_type == PERCENTAGE:
            return f"{self.value.normalize():f}% off applied!"
        return f"${self.value.normalize():f} discount applied!"

    def to_dict(self) -> dict:
        return {
            "valid": True,
            "code": self.code,
            "type": self.discount_type,
            "value": float(self.value),
            "discount": float(self.discount),
            "finalAmount": float(self.final_amount),
            "message": self.message,
        }


def find_promo(code: str) -> Optional[PromoCode]:
    key = canonical_code(code)
    if not key:
        return None
    return PromoCode.query.filter_by(code=key).first()


def compute_discount(promo: PromoCode, subtotal: Decimal) -> Decimal:
    value = _dec(promo.value)
    if promo.discount_type == PERCENTAGE:
        discount = subtotal * value / Decimal(100)
        if promo.max_discount is not None and discount > _dec(promo.max_discount):
            discount = _dec(promo.max_discount)
    elif promo.discount_type == FLAT:
        # never discount below zero
        discount = min(value, subtotal)
    else:
        discount = Decimal(0)
    return discount


def evaluate(code: str, subtotal, now: Optional[datetime] = None) -> PromoQuote:
    """
    Returns a PromoQuote for (code, subtotal) at `now`, or raises PromoRejected.

    Checks run in order: unknown code, inactive, expired, below minimum.
    """
    now = now or datetime.utcnow()
    subtotal = _dec(subtotal)

    promo = find_promo(code)
    if promo is None:
        raise PromoRejected(INVALID_CODE)

    if not promo.is_active:
        raise PromoRejected(INACTIVE)

    if promo.expires_at is not None and promo.expires_at < now:
        raise PromoRejected(EXPIRED)

    min_amount = _dec(promo.min_amount or 0)
    if subtotal < min_amount:
        raise PromoRejected(BELOW_MINIMUM, min_amount=to_money(min_amount))

    discount = to_money(compute_discount(promo, subtotal))
    return PromoQuote(
        code=promo.code,
        discount_type=promo.discount_type,
        value=_dec(promo.value),
        discount=discount,
        final_amount=to_money(subtotal - discount),
    )
