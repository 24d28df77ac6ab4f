from datetime import datetime

from flask import Blueprint, request, jsonify

from models import db
from models.newsletter import NewsletterSubscriber
from security.rate_limit import rate_limited
from utils.audit import log_event

newsletter_bp = Blueprint("newsletter", __name__, url_prefix="/api/newsletter")


@newsletter_bp.post("/subscribe")
@rate_limited("submit")
def subscribe():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    name = (data.get("name") or "").strip() or None

    if "@" not in email or len(email) > 255:
        return jsonify(error="Invalid email address"), 400
    if name and len(name) > 100:
        return jsonify(error="Name is too long"), 400

    sub = NewsletterSubscriber.query.filter_by(email=email).first()
    if sub and sub.status == "active":
        return jsonify(message="Already subscribed"), 200

    if sub:
        sub.status = "active"
        sub.unsubscribed_at = None
        sub.name = name or sub.name
    else:
        sub = NewsletterSubscriber(email=email, name=name)
        db.session.add(sub)
    db.session.commit()

    log_event("NEWSLETTER_SUBSCRIBE", entity="newsletter_subscriber", entity_id=sub.id)
    return jsonify(message="Subscribed"), 201


@newsletter_bp.post("/unsubscribe")
def unsubscribe():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()

    sub = NewsletterSubscriber.query.filter_by(email=email).first()
    if not sub or sub.status != "active":
        # do not reveal who is on the list
        return jsonify(message="Unsubscribed"), 200

    sub.status = "unsubscribed"
    sub.unsubscribed_at = datetime.utcnow()
    db.session.commit()

    log_event("NEWSLETTER_UNSUBSCRIBE", entity="newsletter_subscriber", entity_id=sub.id)
    return jsonify(message="Unsubscribed"), 200
