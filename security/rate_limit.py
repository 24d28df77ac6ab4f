from datetime import datetime, timedelta
from functools import wraps
from flask import request, current_app, jsonify
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from models import db
from models.ip_rate_limit import IpRateLimit

def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"

def _ensure_counter(ip: str, bucket: str, now: datetime):
    exists = db.session.execute(
        select(IpRateLimit.id).where(IpRateLimit.ip == ip, IpRateLimit.bucket == bucket)
    ).first()
    if exists:
        return
    db.session.add(IpRateLimit(ip=ip, bucket=bucket, window_start=now, count=0))
    try:
        db.session.commit()
    except IntegrityError:
        # a concurrent first request from the same IP created it
        db.session.rollback()

def check_and_increment(bucket: str) -> tuple[bool, int]:
    """
    Returns (allowed, retry_after_seconds).
    Simple fixed window per IP and bucket ("login" or "submit").
    The reset and the increment are single UPDATEs, so concurrent requests
    from one IP are all counted.
    """
    ip = _client_ip()
    now = datetime.utcnow()

    prefix = bucket.upper()
    window_seconds = current_app.config.get(f"{prefix}_RATE_WINDOW_SECONDS", 60)
    max_requests = current_app.config.get(f"{prefix}_RATE_MAX_REQUESTS", 15)
    window = timedelta(seconds=window_seconds)

    _ensure_counter(ip, bucket, now)

    this_counter = (IpRateLimit.ip == ip, IpRateLimit.bucket == bucket)

    # Reset window if expired
    db.session.execute(
        update(IpRateLimit)
        .where(*this_counter, IpRateLimit.window_start <= now - window)
        .values(window_start=now, count=0)
        .execution_options(synchronize_session=False)
    )
    db.session.execute(
        update(IpRateLimit)
        .where(*this_counter)
        .values(count=IpRateLimit.count + 1)
        .execution_options(synchronize_session=False)
    )
    window_start, count = db.session.execute(
        select(IpRateLimit.window_start, IpRateLimit.count).where(*this_counter)
    ).one()
    db.session.commit()

    if count > max_requests:
        retry_after = int((window_start + window - now).total_seconds())
        return False, max(retry_after, 1)

    return True, 0

def rate_limited(bucket: str):
    """
    Usage: @rate_limited("submit")
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            allowed, retry_after = check_and_increment(bucket)
            if not allowed:
                return jsonify(
                    error="Too many requests. Try again in a few minutes.",
                    retry_after_seconds=retry_after,
                ), 429
            return fn(*args, **kwargs)
        return wrapper
    return decorator
