import random
from datetime import date, timedelta
from decimal import Decimal

from loguru import logger

from models import db
from models.booking import Booking
from models.experience import Experience
from models.promo_code import PromoCode, PERCENTAGE, FLAT
from models.slot import Slot

DEFAULT_PROMO_CODES = [
    {"code": "SAVE10", "discount_type": PERCENTAGE, "value": 10, "min_amount": 100},
    {"code": "FLAT100", "discount_type": FLAT, "value": 100, "min_amount": 500},
    {"code": "WELCOME20", "discount_type": PERCENTAGE, "value": 20, "min_amount": 200, "max_discount": 500},
]

DEMO_EXPERIENCES = [
    {
        "title": "Sunset Desert Safari",
        "description": "Experience the magic of the Arabian desert at sunset. Enjoy dune bashing, camel riding, and a traditional BBQ dinner under the stars.",
        "location": "Dubai Desert Conservation Reserve",
        "category": "Adventure",
        "price": 299,
        "duration": "6 hours",
        "image": "https://images.unsplash.com/photo-1473496169904-658ba7c44d8a?w=800",
        "rating": 4.8,
        "review_count": 234,
        "highlights": ["Professional 4x4 dune bashing", "Camel riding experience", "Traditional BBQ dinner", "Live entertainment", "Henna painting"],
        "included": ["Hotel pickup and drop-off", "Professional guide", "All activities", "Dinner and refreshments", "Safety equipment"],
    },
    {
        "title": "Scuba Diving Adventure",
        "description": "Dive into crystal clear waters and explore vibrant coral reefs teeming with marine life. Perfect for beginners and experienced divers.",
        "location": "Fujairah Coast",
        "category": "Water Sports",
        "price": 450,
        "duration": "4 hours",
        "image": "https://images.unsplash.com/photo-1544551763-46a013bb70d5?w=800",
        "rating": 4.9,
        "review_count": 189,
        "highlights": ["PADI certified instructors", "All equipment provided", "Underwater photography", "Marine life spotting", "Beginner friendly"],
        "included": ["Full diving equipment", "Professional instructor", "Underwater photos", "Light refreshments", "Insurance coverage"],
    },
    {
        "title": "Hot Air Balloon Ride",
        "description": "Soar above the desert landscape at sunrise. Witness breathtaking views and spot wildlife from a unique perspective.",
        "location": "Al Ain Desert",
        "category": "Aerial",
        "price": 899,
        "duration": "4 hours",
        "image": "https://images.unsplash.com/photo-1498550744921-75f79806b163?w=800",
        "rating": 5.0,
        "review_count": 156,
        "highlights": ["Sunrise flight experience", "Wildlife spotting", "Champagne breakfast", "Flight certificate", "Small group sizes"],
        "included": ["Hotel transfers", "Pre-flight refreshments", "1-hour balloon ride", "Gourmet breakfast", "Flight certificate"],
    },
    {
        "title": "Mountain Hiking Expedition",
        "description": "Trek through stunning mountain trails with experienced guides. Discover hidden wadis and enjoy panoramic views.",
        "location": "Hatta Mountains",
        "category": "Hiking",
        "price": 199,
        "duration": "5 hours",
        "image": "https://images.unsplash.com/photo-1551632811-561732d1e306?w=800",
        "rating": 4.7,
        "review_count": 298,
        "highlights": ["Scenic mountain trails", "Hidden wadis exploration", "Professional mountain guide", "Photo opportunities", "All fitness levels"],
        "included": ["Expert guide", "Hiking equipment", "Water and snacks", "First aid kit", "Transportation"],
    },
    {
        "title": "Luxury Yacht Cruise",
        "description": "Sail along the stunning coastline on a private yacht. Enjoy swimming, snorkeling, and a delicious lunch onboard.",
        "location": "Dubai Marina",
        "category": "Water",
        "price": 1299,
        "duration": "8 hours",
        "image": "https://images.unsplash.com/photo-1567899378494-47b22a2ae96a?w=800",
        "rating": 4.9,
        "review_count": 87,
        "highlights": ["Private yacht charter", "Swimming and snorkeling", "Gourmet lunch", "Scenic coastline views", "Luxury amenities"],
        "included": ["Private yacht", "Professional crew", "Lunch and beverages", "Snorkeling equipment", "Towels and amenities"],
    },
    {
        "title": "Cultural Heritage Tour",
        "description": "Explore historic sites, traditional markets, and museums. Learn about rich cultural heritage with an expert guide.",
        "location": "Old Dubai",
        "category": "Cultural",
        "price": 149,
        "duration": "3 hours",
        "image": "https://images.unsplash.com/photo-1512453979798-5ea266f8880c?w=800",
        "rating": 4.6,
        "review_count": 412,
        "highlights": ["Historic Al Fahidi district", "Traditional souks", "Museum visits", "Expert historian guide", "Cultural insights"],
        "included": ["Expert guide", "All entrance fees", "Traditional refreshments", "Hotel pickup", "Small group tour"],
    },
]

# Categories that also run an evening slot at a premium
EVENING_CATEGORIES = {"Adventure", "Cultural", "Water"}
EVENING_PREMIUM = Decimal("1.2")


def clear_demo_data():
    Booking.query.delete()
    Slot.query.delete()
    Experience.query.delete()
    PromoCode.query.delete()
    db.session.commit()


def seed_promo_codes():
    existing = {p.code for p in PromoCode.query.all()}
    for row in DEFAULT_PROMO_CODES:
        if row["code"] not in existing:
            db.session.add(PromoCode(is_active=True, **row))
    db.session.commit()


def build_slots(experience: Experience, start: date, days: int, rng: random.Random):
    price = Decimal(str(experience.price))
    slots = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        slots.append(Slot(experience=experience, date=day, start_time="08:00", end_time="12:00",
                          capacity=10, booked=rng.randint(0, 2), price=price))
        slots.append(Slot(experience=experience, date=day, start_time="14:00", end_time="18:00",
                          capacity=10, booked=rng.randint(0, 4), price=price))
        if experience.category in EVENING_CATEGORIES:
            slots.append(Slot(experience=experience, date=day, start_time="18:00", end_time="22:00",
                              capacity=8, booked=rng.randint(0, 3), price=price * EVENING_PREMIUM))
    return slots


def seed_demo_data(days: int = 14, today=None, rng=None, clear: bool = True):
    """Loads promo codes and demo experiences with `days` of slots starting today."""
    today = today or date.today()
    rng = rng or random.Random()

    if clear:
        clear_demo_data()
    seed_promo_codes()

    created = []
    for row in DEMO_EXPERIENCES:
        experience = Experience(**row)
        db.session.add(experience)
        slots = build_slots(experience, today, days, rng)
        db.session.add_all(slots)
        created.append(experience)
        logger.info("Created experience: {} with {} slots", experience.title, len(slots))

    db.session.commit()
    return created
