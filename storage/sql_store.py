"""SQLAlchemy-backed signup store."""

from __future__ import annotations

from typing import Any, Mapping

from flask import current_app
from sqlalchemy import case, func, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.waitlist_signup import WaitlistSignup, utcnow
from utils.errors import StoreError

from .abstract_store import AbstractSignupStore

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

PENDING_TOKEN_COLUMNS = frozenset({"verification_token_digest", "verification_expires_at"})


def _conflict_changes(stmt, fields: Mapping[str, Any]) -> dict:
    """Build the ``DO UPDATE SET`` clause, guarding verification state of the existing row."""

    table = WaitlistSignup.__table__
    changes = {}
    for key in fields:
        if key in PENDING_TOKEN_COLUMNS:
            changes[key] = case(
                (table.c.verified_at.is_(None), stmt.excluded[key]),
                else_=table.c[key],
            )
        elif key == "verified_at":
            changes[key] = func.coalesce(table.c.verified_at, stmt.excluded.verified_at)
        else:
            changes[key] = stmt.excluded[key]
    changes["updated_at"] = utcnow()
    return changes


class SQLSignupStore(AbstractSignupStore):
    """Persist signups in the ``waitlist`` table through Flask-SQLAlchemy."""

    def __init__(self, session=None):
        self.session = session or db.session

    def _fail(self, action: str, error: SQLAlchemyError) -> StoreError:
        self.session.rollback()
        current_app.logger.error("Signup store %s failed: %s", action, error)
        return StoreError()

    def find(self, email: str) -> WaitlistSignup | None:
        try:
            return self.session.execute(
                select(WaitlistSignup).where(WaitlistSignup.email == email)
            ).scalar_one_or_none()
        except SQLAlchemyError as error:
            raise self._fail("lookup", error) from error

    def find_by_token_digest(self, digest: str) -> WaitlistSignup | None:
        try:
            return self.session.execute(
                select(WaitlistSignup).where(
                    or_(
                        WaitlistSignup.verification_token_digest == digest,
                        WaitlistSignup.confirmed_token_digest == digest,
                    )
                )
            ).scalars().first()
        except SQLAlchemyError as error:
            raise self._fail("token lookup", error) from error

    def upsert(self, email: str, fields: Mapping[str, Any]) -> WaitlistSignup:
        """Insert or update by email.

        Once a row is verified its pending token columns are left alone and
        ``verified_at`` is never cleared, whatever the caller read beforehand.
        """

        try:
            insert = _UPSERT_DIALECTS.get(self.session.get_bind().dialect.name)
            if insert is None:
                self._upsert_portable(email, fields)
            else:
                stmt = insert(WaitlistSignup.__table__).values(email=email, **fields)
                self.session.execute(
                    stmt.on_conflict_do_update(
                        index_elements=["email"], set_=_conflict_changes(stmt, fields)
                    )
                )
            self.session.commit()
            self.session.expire_all()
            return self.find(email)
        except SQLAlchemyError as error:
            raise self._fail("upsert", error) from error

    def _upsert_portable(self, email: str, fields: Mapping[str, Any]) -> None:
        signup = self.find(email)
        if signup is None:
            self.session.add(WaitlistSignup(email=email, **fields))
            try:
                self.session.flush()
                return
            except IntegrityError:
                self.session.rollback()
                signup = self.find(email)

        for key, value in fields.items():
            if signup.verified_at is not None and (
                key in PENDING_TOKEN_COLUMNS or key == "verified_at"
            ):
                continue
            setattr(signup, key, value)

    def conditional_update(
        self, match_digest: str, fields: Mapping[str, Any]
    ) -> WaitlistSignup | None:
        try:
            signup_id = self.session.execute(
                select(WaitlistSignup.id).where(
                    WaitlistSignup.verification_token_digest == match_digest
                )
            ).scalar_one_or_none()
            if signup_id is None:
                return None

            result = self.session.execute(
                update(WaitlistSignup)
                .where(
                    WaitlistSignup.id == signup_id,
                    WaitlistSignup.verification_token_digest == match_digest,
                    WaitlistSignup.verified_at.is_(None),
                )
                .values(updated_at=utcnow(), **fields)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.session.rollback()
                return None

            self.session.commit()
            self.session.expire_all()
            return self.session.get(WaitlistSignup, signup_id)
        except SQLAlchemyError as error:
            raise self._fail("conditional update", error) from error
