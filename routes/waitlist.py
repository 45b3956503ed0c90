"""Waitlist blueprint: signup submission and double opt-in verification."""

from __future__ import annotations

from datetime import timedelta
from http import HTTPStatus
from urllib.parse import urlencode

from flask import Blueprint, current_app, jsonify, redirect, render_template, request

from models.waitlist_signup import ATTRIBUTION_FIELDS, PROFILE_FIELDS, WaitlistSignup, utcnow
from notifications import AbstractNotifier, Failed, ResendNotifier, Sent
from storage import AbstractSignupStore
from utils.errors import NotifierSendError, RateLimited, StoreError
from utils.rate_limiter import RateLimiter, client_key_from_request
from utils.request_validation import clean_optional, parse_json_request, require_valid_email
from utils.tokens import digests_match, hash_token, issue_token

waitlist_bp = Blueprint("waitlist", __name__)

HONEYPOT_FIELD = "website"

VERIFY_SUCCESS = "success"
VERIFY_ALREADY = "already"
VERIFY_MISSING = "missing"
VERIFY_INVALID = "invalid"
VERIFY_EXPIRED = "expired"
VERIFY_ERROR = "error"


def _store() -> AbstractSignupStore:
    return current_app.extensions["waitlist_store"]


def _rate_limiter() -> RateLimiter:
    return current_app.extensions["waitlist_rate_limiter"]


def _notifier() -> AbstractNotifier:
    """Return the app's notifier, building and caching one from config on first use.

    Raises ``NotifierConfigError`` when credentials are missing.
    """

    notifier = current_app.extensions.get("waitlist_notifier")
    if notifier is None:
        notifier = ResendNotifier.from_config(current_app.config)
        current_app.extensions["waitlist_notifier"] = notifier
    return notifier


def _site_url() -> str:
    configured = (current_app.config.get("SITE_URL") or "").strip()
    return (configured or request.host_url).rstrip("/")


def _verify_link(token: str) -> str:
    return f"{_site_url()}/waitlist/verify?{urlencode({'token': token})}"


def _verify_redirect(flag: str):
    return redirect(f"{_site_url()}/?{urlencode({'verified': flag})}")


def _collect_fields(payload: dict) -> dict:
    fields = {key: clean_optional(payload, key) for key in PROFILE_FIELDS + ATTRIBUTION_FIELDS}
    if fields["source"] is None:
        fields["source"] = request.headers.get("Host") or request.headers.get("Origin")
    if fields["referrer"] is None:
        fields["referrer"] = request.headers.get("Referer")
    return fields


def _send_verification_email(email: str, token: str) -> Sent:
    notifier = _notifier()
    ttl_hours = current_app.config.get("VERIFICATION_TOKEN_TTL_HOURS", 24)
    html = render_template(
        "email/waitlist_verify.html",
        verify_link=_verify_link(token),
        ttl_hours=ttl_hours,
    )
    result = notifier.send(email, current_app.config["VERIFICATION_EMAIL_SUBJECT"], html)
    if isinstance(result, Failed):
        raise NotifierSendError(result.reason)
    return result


@waitlist_bp.route("", methods=["GET"])
def waitlist_status():
    return jsonify({"ok": True, "route": "waitlist"}), HTTPStatus.OK


@waitlist_bp.route("", methods=["POST"])
def join_waitlist():
    """Record a waitlist signup and email a verification link."""

    client_key = client_key_from_request(request)
    if not _rate_limiter().allow(client_key):
        current_app.logger.warning("Waitlist rate limit exceeded for %s", client_key)
        raise RateLimited()

    payload = parse_json_request(request)
    email = require_valid_email(payload.get("email"))

    # Bots get the same answer as people; nothing is stored or sent.
    honeypot = payload.get(HONEYPOT_FIELD)
    if isinstance(honeypot, str):
        honeypot = honeypot.strip()
    if honeypot:
        current_app.logger.info("Waitlist honeypot triggered from %s", client_key)
        return (
            jsonify({"ok": True, "already": False, "email_sent": False, "verified": False}),
            HTTPStatus.OK,
        )

    fields = _collect_fields(payload)

    store = _store()
    existing = store.find(email)
    already = existing is not None
    already_verified = bool(existing and existing.is_verified)

    issued = None
    if not already_verified:
        ttl = timedelta(hours=current_app.config.get("VERIFICATION_TOKEN_TTL_HOURS", 24))
        issued = issue_token(ttl=ttl)
        fields["verification_token_digest"] = issued.digest
        fields["verification_expires_at"] = issued.expires_at

    signup = store.upsert(email, fields)
    if signup is not None and signup.is_verified and not already_verified:
        # Verified between our read and the write; the store kept it verified.
        already = already_verified = True
        issued = None
    current_app.logger.info(
        "Waitlist signup recorded (already=%s, verified=%s)", already, already_verified
    )

    email_sent = False
    if issued is not None:
        try:
            sent = _send_verification_email(email, issued.token)
        except NotifierSendError as exc:
            current_app.logger.warning("Verification email not delivered: %s", exc.description)
        else:
            email_sent = True
            current_app.logger.info("Verification email queued id=%s", sent.id)

    return (
        jsonify(
            {
                "ok": True,
                "already": already,
                "email_sent": email_sent,
                "verified": already_verified,
            }
        ),
        HTTPStatus.OK,
    )


def _resolve_verification(token: str) -> str:
    digest = hash_token(token)
    store = _store()

    signup: WaitlistSignup | None = store.find_by_token_digest(digest)
    if signup is None:
        return VERIFY_INVALID

    if signup.is_verified:
        if digests_match(signup.confirmed_token_digest, digest):
            return VERIFY_ALREADY
        return VERIFY_INVALID

    if not digests_match(signup.verification_token_digest, digest):
        return VERIFY_INVALID

    now = utcnow()
    if signup.is_expired(now):
        return VERIFY_EXPIRED

    updated = store.conditional_update(
        digest,
        {
            "verified_at": now,
            "confirmed_token_digest": digest,
            "verification_token_digest": None,
            "verification_expires_at": None,
        },
    )
    if updated is not None:
        return VERIFY_SUCCESS

    # Lost the race: a concurrent click may have verified with this same token.
    current = store.find_by_token_digest(digest)
    if current is not None and current.is_verified and digests_match(
        current.confirmed_token_digest, digest
    ):
        return VERIFY_ALREADY
    return VERIFY_ERROR


@waitlist_bp.route("/verify", methods=["GET"])
def verify_waitlist_email():
    """Confirm a signup from the emailed link and redirect to the site."""

    token = (request.args.get("token") or "").strip()
    if not token:
        return _verify_redirect(VERIFY_MISSING)

    try:
        outcome = _resolve_verification(token)
    except StoreError:
        outcome = VERIFY_ERROR

    current_app.logger.info("Waitlist verification outcome: %s", outcome)
    return _verify_redirect(outcome)
