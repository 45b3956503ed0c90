"""Seed one waitlist signup in each verification state."""

from datetime import timedelta
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from models import db
from models.waitlist_signup import utcnow
from utils.tokens import issue_token

SITE_URL = "http://localhost:5000"


def main() -> None:
    app = create_app()
    with app.app_context():
        db.create_all()
        store = app.extensions["waitlist_store"]

        store.upsert("unverified@example.com", {"full_name": "Una Verified", "source": "seed"})

        pending = issue_token()
        store.upsert(
            "pending@example.com",
            {
                "full_name": "Pat Pending",
                "source": "seed",
                "verification_token_digest": pending.digest,
                "verification_expires_at": pending.expires_at,
            },
        )

        expired = issue_token(now=utcnow() - timedelta(days=2))
        store.upsert(
            "expired@example.com",
            {
                "full_name": "Ex Pired",
                "source": "seed",
                "verification_token_digest": expired.digest,
                "verification_expires_at": expired.expires_at,
            },
        )

        store.upsert(
            "verified@example.com",
            {"full_name": "Vera Fied", "source": "seed", "verified_at": utcnow()},
        )

        base = app.config.get("SITE_URL") or SITE_URL
        print(f"Pending link: {base}/waitlist/verify?token={pending.token}")
        print(f"Expired link: {base}/waitlist/verify?token={expired.token}")


if __name__ == "__main__":
    main()
