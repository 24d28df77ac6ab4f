import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as wbrent.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "wbrent.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Seed the equipment catalog at startup (safe & idempotent)
    SEED_PRODUCTS_ON_STARTUP = os.getenv("SEED_PRODUCTS_ON_STARTUP", "true").lower() == "true"

    # Admin sessions: 8 hours absolute, 30 minutes idle
    SESSION_LIFETIME_SECONDS = 8 * 60 * 60
    IDLE_TIMEOUT_SECONDS = 30 * 60

    # Per-IP fixed window rate limits
    LOGIN_RATE_WINDOW_SECONDS = 60
    LOGIN_RATE_MAX_REQUESTS = 10
    SUBMIT_RATE_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))  # 15 min
    SUBMIT_RATE_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))

    # Pricing: one-way delivery fee in PLN, always billed round trip
    DELIVERY_UNIT_FEE = int(os.getenv("DELIVERY_UNIT_FEE", "25"))

    # Delivery area around the depot (Rzeszów)
    DEPOT_LAT = float(os.getenv("DEPOT_LAT", "50.0412"))
    DEPOT_LON = float(os.getenv("DEPOT_LON", "21.9991"))
    MAX_DELIVERY_RADIUS_KM = float(os.getenv("MAX_DELIVERY_RADIUS_KM", "30"))

    # Geocoding (OpenStreetMap Nominatim)
    GEOCODER_URL = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org/search")
    GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "wb-rent-backend/1.0")
    GEOCODER_COUNTRY_CODES = os.getenv("GEOCODER_COUNTRY_CODES", "pl")
    GEOCODER_TIMEOUT_SECONDS = float(os.getenv("GEOCODER_TIMEOUT_SECONDS", "5"))

    # Staff mailbox for new reservation / contact notifications
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@wb-rent.pl")

    # Email (SMTP)
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")
    SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE")

    # Basic app settings
    DEBUG = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SEED_PRODUCTS_ON_STARTUP = False
    SMTP_HOST = None
    LOGIN_RATE_MAX_REQUESTS = 1000
    SUBMIT_RATE_MAX_REQUESTS = 1000
    LOG_FILE = None
