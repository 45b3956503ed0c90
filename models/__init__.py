"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .waitlist_signup import WaitlistSignup  # noqa: E402,F401

__all__ = [
    "db",
    "WaitlistSignup",
]
