import threading
import weakref
from collections import OrderedDict
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import or_

from models import db
from models.experience import Experience
from models.slot import Slot
from services.errors import NotFound
from services.validation import is_valid_id


def get_experience(experience_id: str) -> Experience:
    experience = db.session.get(Experience, experience_id) if is_valid_id(experience_id) else None
    if experience is None:
        raise NotFound("experience")
    return experience


def get_slot(slot_id: str) -> Slot:
    slot = db.session.get(Slot, slot_id) if is_valid_id(slot_id) else None
    if slot is None:
        raise NotFound("slot")
    return slot


def list_experiences(
    category: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    search: Optional[str] = None,
) -> List[Experience]:
    q = Experience.query
    if category:
        q = q.filter(Experience.category == category)
    if min_price is not None:
        q = q.filter(Experience.price >= min_price)
    if max_price is not None:
        q = q.filter(Experience.price <= max_price)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            Experience.title.ilike(like),
            Experience.description.ilike(like),
            Experience.location.ilike(like),
        ))
    return q.order_by(Experience.created_at.desc()).all()


def upcoming_slots(experience_id: str, today: Optional[date] = None) -> List[Slot]:
    today = today or date.today()
    return (
        Slot.query
        .filter(Slot.experience_id == experience_id, Slot.date >= today)
        .order_by(Slot.date.asc(), Slot.start_time.asc())
        .all()
    )


def slot_to_dict(slot: Slot) -> dict:
    # available / isFull are derived on every read, never stored
    return {
        "id": slot.id,
        "experienceId": slot.experience_id,
        "date": slot.date.isoformat(),
        "startTime": slot.start_time,
        "endTime": slot.end_time,
        "capacity": slot.capacity,
        "booked": slot.booked,
        "available": slot.available,
        "isFull": slot.is_full,
        "price": float(slot.price),
    }


def slots_by_date(experience_id: str, today: Optional[date] = None) -> Dict[str, List[dict]]:
    grouped: Dict[str, List[dict]] = OrderedDict()
    for slot in upcoming_slots(experience_id, today):
        grouped.setdefault(slot.date.isoformat(), []).append(slot_to_dict(slot))
    return grouped


class SlotLocks:
    """
    Per-slot mutexes for this process.

    Threads booking the same slot queue here before the conditional UPDATE,
    so they wait on each other instead of on the database write lock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # entries vanish once no request holds or waits on the lock
        self._locks = weakref.WeakValueDictionary()

    def _lock_for(self, slot_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(slot_id)
            if lock is None:
                lock = self._locks[slot_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, slot_id: str):
        lock = self._lock_for(slot_id)
        with lock:
            yield


slot_locks = SlotLocks()
