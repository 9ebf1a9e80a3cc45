from .db import db
from .experience import Experience
from .slot import Slot
from .promo_code import PromoCode
from .booking import Booking
from .audit_log import AuditLog
