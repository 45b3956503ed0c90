"""WaitlistSignup model definition."""

from datetime import UTC, datetime

from . import db


VERIFICATION_STATES = ("unverified", "pending", "verified")

PROFILE_FIELDS = (
    "full_name",
    "age_bracket",
    "gender",
    "goal",
    "biggest_issue",
    "timeframe",
    "notes",
)
ATTRIBUTION_FIELDS = (
    "source",
    "landing_url",
    "referrer",
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_content",
    "utm_term",
)


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends without tz support."""

    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class WaitlistSignup(db.Model):
    """A waitlist signup, unique per normalized email address."""

    __tablename__ = "waitlist"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)

    full_name = db.Column(db.String(255), nullable=True)
    age_bracket = db.Column(db.String(255), nullable=True)
    gender = db.Column(db.String(255), nullable=True)
    goal = db.Column(db.String(255), nullable=True)
    biggest_issue = db.Column(db.String(255), nullable=True)
    timeframe = db.Column(db.String(255), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    source = db.Column(db.String(255), nullable=True)
    landing_url = db.Column(db.Text, nullable=True)
    referrer = db.Column(db.Text, nullable=True)
    utm_source = db.Column(db.String(255), nullable=True)
    utm_medium = db.Column(db.String(255), nullable=True)
    utm_campaign = db.Column(db.String(255), nullable=True)
    utm_content = db.Column(db.String(255), nullable=True)
    utm_term = db.Column(db.String(255), nullable=True)

    verification_token_digest = db.Column(db.String(64), nullable=True, index=True)
    verification_expires_at = db.Column(db.DateTime(timezone=True), nullable=True)
    confirmed_token_digest = db.Column(db.String(64), nullable=True, index=True)
    verified_at = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=db.func.now(),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=db.func.now(),
    )

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None

    @property
    def verification_state(self) -> str:
        """Return one of ``VERIFICATION_STATES``."""

        if self.verified_at is not None:
            return "verified"
        if self.verification_token_digest is not None:
            return "pending"
        return "unverified"

    def is_expired(self, now: datetime | None = None) -> bool:
        """A pending token with no expiry counts as expired."""

        expires_at = as_utc(self.verification_expires_at)
        if expires_at is None:
            return True
        return expires_at <= (now or utcnow())

    def __repr__(self) -> str:
        return f"<WaitlistSignup {self.email} state={self.verification_state}>"

    def to_dict(self) -> dict:
        """Serialize the signup into a dictionary, without token digests."""

        payload = {"id": self.id, "email": self.email}
        for field in PROFILE_FIELDS + ATTRIBUTION_FIELDS:
            payload[field] = getattr(self, field)

        expires_at = as_utc(self.verification_expires_at)
        verified_at = as_utc(self.verified_at)
        created_at = as_utc(self.created_at)
        payload.update(
            {
                "verification_state": self.verification_state,
                "verification_expires_at": expires_at.isoformat() if expires_at else None,
                "verified_at": verified_at.isoformat() if verified_at else None,
                "created_at": created_at.isoformat() if created_at else None,
            }
        )
        return payload
