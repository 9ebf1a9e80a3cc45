"""Recoverable booking outcomes, raised by the services and rendered by the HTTP layer."""

from typing import List, Optional

# Promo rejection reasons
INVALID_CODE = "INVALID_CODE"
INACTIVE = "INACTIVE"
EXPIRED = "EXPIRED"
BELOW_MINIMUM = "BELOW_MINIMUM"


class BookingError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationFailed(BookingError):
    def __init__(self, details: List[dict]):
        self.details = details
        super().__init__("Validation failed", 400)

    @property
    def fields(self) -> List[str]:
        return [d["field"] for d in self.details]

    def to_dict(self) -> dict:
        return {"error": self.message, "details": self.details}


class NotFound(BookingError):
    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity.capitalize()} not found", 404)


class InsufficientAvailability(BookingError):
    def __init__(self, remaining: int):
        self.remaining = max(remaining, 0)
        super().__init__(
            f"Not enough availability. Only {self.remaining} spots remaining.", 409
        )

    def to_dict(self) -> dict:
        return {"error": self.message, "remaining": self.remaining}


_PROMO_MESSAGES = {
    INVALID_CODE: "Invalid promo code",
    INACTIVE: "This promo code is no longer active",
    EXPIRED: "This promo code has expired",
}


class PromoRejected(BookingError):
    def __init__(self, reason: str, min_amount=None):
        self.reason = reason
        self.min_amount = min_amount
        if reason == BELOW_MINIMUM:
            message = f"Minimum booking amount of ${min_amount} required for this promo code"
        else:
            message = _PROMO_MESSAGES.get(reason, "Promo code cannot be applied")
        super().__init__(message, 400)

    def to_dict(self) -> dict:
        out = {"error": self.message, "reason": self.reason}
        if self.min_amount is not None:
            out["minAmount"] = float(self.min_amount)
        return out


class TransactionConflict(BookingError):
    def __init__(self):
        super().__init__("Slot is being booked by another request. Please retry with fresh availability.", 409)


class BookingPersistenceError(BookingError):
    def __init__(self):
        super().__init__("Failed to create booking", 500)
