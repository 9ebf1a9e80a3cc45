import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _sqlite_engine_options(uri: str) -> dict:
    # SQLite busy timeout so concurrent writers wait instead of failing fast
    if uri.startswith("sqlite"):
        return {"connect_args": {"timeout": 15}}
    return {}


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as bookit.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "bookit.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _sqlite_engine_options(SQLALCHEMY_DATABASE_URI)

    # Booking input rules
    BOOKING_MIN_GUESTS = 1
    BOOKING_MAX_GUESTS = int(os.getenv("BOOKING_MAX_GUESTS", "10"))
    BOOKING_PHONE_PATTERN = r"^[0-9]{10}$"   # exactly 10 ASCII digits
    NAME_MIN_LENGTH = 2

    # Logging (loguru)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR")  # unset = console only

    # Demo data
    SEED_DAYS = int(os.getenv("SEED_DAYS", "14"))

    # Basic app settings
    DEBUG = False
