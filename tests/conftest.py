"""
Test fixtures.

Each test gets a fresh SQLite file under tmp_path (a file rather than
:memory: so that threads get their own connections), an app context, and
factories for experiences, slots and promo codes.
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from app import create_app
from config import Config
from models import db
from models.experience import Experience
from models.promo_code import PromoCode, PERCENTAGE
from models.slot import Slot

TOMORROW = date.today() + timedelta(days=1)


class _BaseTestConfig(Config):
    TESTING = True
    LOG_LEVEL = "WARNING"
    LOG_DIR = None


@pytest.fixture
def app(tmp_path):
    class _Config(_BaseTestConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(tmp_path / "bookit_test.db")
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"timeout": 15}}

    app = create_app(_Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_experience(app):
    def _make(**overrides):
        fields = {
            "title": "Sunset Desert Safari",
            "description": "Dune bashing, camel riding and a BBQ dinner.",
            "location": "Dubai Desert Conservation Reserve",
            "category": "Adventure",
            "price": Decimal("100.00"),
            "duration": "6 hours",
            "image": "https://example.com/safari.jpg",
            "rating": 4.8,
            "review_count": 234,
            "highlights": ["Dune bashing", "Camel riding"],
            "included": ["Hotel pickup", "Dinner"],
        }
        fields.update(overrides)
        experience = Experience(**fields)
        db.session.add(experience)
        db.session.commit()
        return experience
    return _make


@pytest.fixture
def make_slot(app):
    def _make(experience, **overrides):
        fields = {
            "date": TOMORROW,
            "start_time": "08:00",
            "end_time": "12:00",
            "capacity": 10,
            "booked": 0,
            "price": Decimal("100.00"),
        }
        fields.update(overrides)
        slot = Slot(experience_id=experience.id, **fields)
        db.session.add(slot)
        db.session.commit()
        return slot
    return _make


@pytest.fixture
def make_promo(app):
    def _make(code, discount_type=PERCENTAGE, value=10, **overrides):
        fields = {"min_amount": Decimal("0"), "is_active": True}
        fields.update(overrides)
        promo = PromoCode(code=code, discount_type=discount_type, value=Decimal(str(value)), **fields)
        db.session.add(promo)
        db.session.commit()
        return promo
    return _make


@pytest.fixture
def booking_payload():
    def _build(experience, slot, **overrides):
        payload = {
            "experienceId": experience.id,
            "slotId": slot.id,
            "name": "Amira Haddad",
            "email": "amira@example.com",
            "phone": "5551234567",
            "guests": 2,
        }
        payload.update(overrides)
        return payload
    return _build
