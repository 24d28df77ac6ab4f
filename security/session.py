"""
Admin sessions.

The raw token travels only in the ``Authorization: Bearer`` header; the
admin_sessions table keeps its SHA-256. A session dies on revoke, on its
absolute expiry, or after IDLE_TIMEOUT_SECONDS without a request.
"""
import hashlib
import secrets
from datetime import datetime, timedelta
from flask import request, current_app

from models import db
from models.session import Session


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def bearer_token():
    scheme, _, value = (request.headers.get("Authorization") or "").partition(" ")
    if scheme.lower() != "bearer":
        return None
    return value.strip() or None


def _is_live(sess: Session, now: datetime) -> bool:
    if sess.expires_at <= now:
        return False
    idle = timedelta(seconds=current_app.config.get("IDLE_TIMEOUT_SECONDS", 1800))
    return (sess.last_seen_at or sess.created_at) + idle > now


def create_session(admin_id: int) -> str:
    """Open a session for admin_id and return the raw token (shown once)."""
    token = secrets.token_urlsafe(32)
    now = datetime.utcnow()

    db.session.add(Session(
        admin_id=admin_id,
        token_hash=_hash_token(token),
        created_at=now,
        last_seen_at=now,
        expires_at=now + timedelta(seconds=current_app.config.get("SESSION_LIFETIME_SECONDS", 28800)),
        ip=request.headers.get("X-Forwarded-For", request.remote_addr),
        user_agent=(request.headers.get("User-Agent") or "")[:255],
    ))
    db.session.commit()
    return token


def get_session_from_request():
    token = bearer_token()
    if not token:
        return None

    sess = Session.query.filter_by(token_hash=_hash_token(token), revoked=False).first()
    now = datetime.utcnow()
    if sess is None or not _is_live(sess, now):
        return None

    sess.last_seen_at = now
    db.session.commit()
    return sess


def revoke_session(token: str) -> bool:
    sess = Session.query.filter_by(token_hash=_hash_token(token)).first() if token else None
    if sess is None:
        return False
    sess.revoked = True
    db.session.commit()
    return True


def revoke_all_sessions(admin_id: int) -> int:
    """Revoke every live session of admin_id; used on login so one session stays open."""
    count = Session.query.filter_by(admin_id=admin_id, revoked=False).update({"revoked": True})
    db.session.commit()
    return count
