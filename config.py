"""Application configuration module."""

import os


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///waitlist.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Public site, used for verification links and redirects
    SITE_URL = os.getenv("SITE_URL", "")

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting (global, flask-limiter)
    RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")

    # Waitlist submission throttle
    WAITLIST_RATE_WINDOW_SECONDS = int(os.getenv("WAITLIST_RATE_WINDOW_SECONDS", "60"))
    WAITLIST_RATE_MAX = int(os.getenv("WAITLIST_RATE_MAX", "8"))

    # Verification tokens
    VERIFICATION_TOKEN_TTL_HOURS = int(os.getenv("VERIFICATION_TOKEN_TTL_HOURS", "24"))
    VERIFICATION_EMAIL_SUBJECT = os.getenv(
        "VERIFICATION_EMAIL_SUBJECT", "Confirm your Re:Formd waitlist spot"
    )

    # Signup store
    STORE_TIMEOUT_SECONDS = int(os.getenv("STORE_TIMEOUT_SECONDS", "5"))

    # Resend (transactional email)
    RESEND_API_KEY = os.getenv("RESEND_API_KEY")
    RESEND_FROM = os.getenv("RESEND_FROM")
    RESEND_API_URL = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")
    NOTIFIER_TIMEOUT_SECONDS = float(os.getenv("NOTIFIER_TIMEOUT_SECONDS", "5"))
