from collections import OrderedDict
from datetime import date, datetime

from flask import Blueprint, jsonify, g, request

from models import db
from models.contact import Contact, ContactReply
from models.newsletter import NewsletterPost, NewsletterSubscriber
from models.product_notification import ProductNotification
from models.reservation import Reservation
from services.availability import ACTIVE_STATUSES
from services.errors import InvalidTransition
from services.reminders import send_daily_reminders
from services.reservation_status import (
    TRANSITIONS,
    ReservationStatus,
    change_status,
    parse_status,
    run_side_effects,
)
from utils.audit import log_event
from utils.auth_context import admin_required
from utils.notifications import send_contact_reply, send_newsletter_post

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

CONTACT_STATUSES = ("new", "read", "replied", "archived")
EARNED_STATUSES = ("returned", "completed")
ALL_STATUSES = [s.value for s in ReservationStatus]


# ---------- reservations ----------
@admin_bp.get("/reservations")
@admin_required
def list_reservations():
    status = (request.args.get("status") or "").strip().lower()
    q = Reservation.query
    if status and status != "all":
        if status not in ALL_STATUSES:
            return jsonify(error=f"Invalid status. Allowed: {', '.join(ALL_STATUSES)}"), 400
        q = q.filter(Reservation.status == status)

    rows = q.order_by(Reservation.created_at.desc()).limit(500).all()
    return jsonify([r.to_dict() for r in rows]), 200


@admin_bp.get("/reservations/<int:reservation_id>")
@admin_required
def get_reservation(reservation_id: int):
    reservation = db.session.get(Reservation, reservation_id)
    if not reservation:
        return jsonify(error="Reservation not found"), 404

    data = reservation.to_dict()
    data["allowed_transitions"] = sorted(s.value for s in TRANSITIONS[parse_status(reservation.status)])
    return jsonify(data), 200


@admin_bp.patch("/reservations/<int:reservation_id>")
@admin_required
def update_reservation_status(reservation_id: int):
    data = request.get_json(silent=True) or {}

    reservation = db.session.get(Reservation, reservation_id)
    if not reservation:
        return jsonify(error="Reservation not found"), 404

    try:
        change = change_status(reservation, data.get("status"))
    except ValueError:
        return jsonify(error=f"Invalid status. Allowed: {', '.join(ALL_STATUSES)}"), 400
    except InvalidTransition as exc:
        allowed = sorted(s.value for s in TRANSITIONS[parse_status(exc.current)])
        return jsonify(error=str(exc), allowed=allowed), 409

    if not change.changed:
        return jsonify(message=f"Status already {change.current.value}", changed=False,
                       data=reservation.to_dict()), 200

    db.session.commit()
    run_side_effects(reservation, change)

    log_event(
        "RESERVATION_STATUS_CHANGE",
        admin_id=g.admin.id,
        entity="reservation",
        entity_id=reservation.id,
        metadata={
            "from": change.previous.value,
            "to": change.current.value,
            "notifications": change.notifications,
            "released_subscribers": change.released_subscribers,
        },
    )
    return jsonify(
        message=f"Status changed to: {change.current.value}",
        changed=True,
        notifications=change.notifications,
        released_subscribers=change.released_subscribers,
        data=reservation.to_dict(),
    ), 200


@admin_bp.post("/send-reminders")
@admin_required
def trigger_reminders():
    sent_pickup, sent_return = send_daily_reminders()
    log_event("REMINDERS_SENT", admin_id=g.admin.id,
              metadata={"pickup": sent_pickup, "return": sent_return})
    return jsonify(
        message=f"Reminders sent: {sent_pickup} pickup, {sent_return} return",
        pickup_reminders=sent_pickup,
        return_reminders=sent_return,
    ), 200


# ---------- dashboard ----------
def _revenue(reservations, today: date):
    earned = [r for r in reservations if r.status in EARNED_STATUSES]
    by_month = OrderedDict()
    for r in sorted(earned, key=lambda r: r.end_date):
        key = r.end_date.strftime("%Y-%m")
        by_month[key] = by_month.get(key, 0) + r.total_price

    return {
        "today": sum(r.total_price for r in earned if r.end_date == today),
        "month": sum(
            r.total_price for r in earned
            if (r.end_date.year, r.end_date.month) == (today.year, today.month)
        ),
        "total": sum(r.total_price for r in earned),
        "pending": sum(r.total_price for r in reservations if r.status in ACTIVE_STATUSES),
        "byMonth": [{"month": k, "revenue": v} for k, v in by_month.items()],
    }


@admin_bp.get("/stats")
@admin_required
def stats():
    reservations = Reservation.query.all()
    counts = {s: 0 for s in ALL_STATUSES}
    for r in reservations:
        counts[r.status] = counts.get(r.status, 0) + 1

    revenue = _revenue(reservations, date.today())
    revenue.pop("byMonth")

    return jsonify(
        reservations={"total": len(reservations), **counts},
        contacts={
            "total": Contact.query.count(),
            "new": Contact.query.filter_by(status="new").count(),
        },
        newsletter={"active": NewsletterSubscriber.query.filter_by(status="active").count()},
        product_notifications={"waiting": ProductNotification.query.filter_by(status="waiting").count()},
        revenue=revenue,
    ), 200


@admin_bp.get("/revenue")
@admin_required
def revenue():
    return jsonify(_revenue(Reservation.query.all(), date.today())), 200


# ---------- contacts ----------
def _contact_dict(c, with_replies=False):
    out = {
        "id": c.id,
        "name": c.name,
        "email": c.email,
        "subject": c.subject,
        "message": c.message,
        "status": c.status,
        "created_at": c.created_at.isoformat(),
    }
    if with_replies:
        out["replies"] = [
            {"id": r.id, "message": r.message, "sent_by": r.sent_by, "created_at": r.created_at.isoformat()}
            for r in c.replies
        ]
    return out


@admin_bp.get("/contacts")
@admin_required
def list_contacts():
    status = (request.args.get("status") or "").strip().lower()
    q = Contact.query
    if status:
        q = q.filter(Contact.status == status)
    rows = q.order_by(Contact.created_at.desc()).limit(500).all()
    return jsonify([_contact_dict(c) for c in rows]), 200


@admin_bp.get("/contacts/<int:contact_id>")
@admin_required
def get_contact(contact_id: int):
    contact = db.session.get(Contact, contact_id)
    if not contact:
        return jsonify(error="Message not found"), 404
    return jsonify(_contact_dict(contact, with_replies=True)), 200


@admin_bp.patch("/contacts/<int:contact_id>")
@admin_required
def update_contact_status(contact_id: int):
    data = request.get_json(silent=True) or {}
    status = (data.get("status") or "").strip().lower()
    if status not in CONTACT_STATUSES:
        return jsonify(error=f"Invalid status. Allowed: {', '.join(CONTACT_STATUSES)}"), 400

    contact = db.session.get(Contact, contact_id)
    if not contact:
        return jsonify(error="Message not found"), 404

    contact.status = status
    db.session.commit()
    log_event("CONTACT_STATUS_CHANGE", admin_id=g.admin.id, entity="contact", entity_id=contact.id,
              metadata={"status": status})
    return jsonify(message=f"Status changed to: {status}"), 200


@admin_bp.delete("/contacts/<int:contact_id>")
@admin_required
def delete_contact(contact_id: int):
    contact = db.session.get(Contact, contact_id)
    if not contact:
        return jsonify(error="Message not found"), 404

    db.session.delete(contact)
    db.session.commit()
    log_event("CONTACT_DELETE", admin_id=g.admin.id, entity="contact", entity_id=contact_id)
    return jsonify(message="Message deleted"), 200


@admin_bp.post("/contacts/delete-many")
@admin_required
def delete_contacts():
    data = request.get_json(silent=True) or {}
    ids = data.get("ids")
    if not isinstance(ids, list) or not ids:
        return jsonify(error="ids must be a non-empty list"), 400

    try:
        ids = {int(i) for i in ids}
    except (TypeError, ValueError):
        return jsonify(error="ids must be integers"), 400

    contacts = Contact.query.filter(Contact.id.in_(ids)).all()
    for c in contacts:
        db.session.delete(c)
    db.session.commit()

    log_event("CONTACT_DELETE_MANY", admin_id=g.admin.id, metadata={"ids": sorted(c.id for c in contacts)})
    return jsonify(message=f"Deleted {len(contacts)} messages", deleted=len(contacts)), 200


@admin_bp.post("/contacts/<int:contact_id>/reply")
@admin_required
def reply_to_contact(contact_id: int):
    data = request.get_json(silent=True) or {}
    message = (data.get("message") or "").strip()
    if len(message) < 5:
        return jsonify(error="Reply must be at least 5 characters"), 400

    contact = db.session.get(Contact, contact_id)
    if not contact:
        return jsonify(error="Message not found"), 404

    db.session.add(ContactReply(contact_id=contact.id, message=message, sent_by=g.admin.email))
    contact.status = "replied"
    db.session.commit()

    result = send_contact_reply(contact, message)
    log_event("CONTACT_REPLY", admin_id=g.admin.id, entity="contact", entity_id=contact.id,
              metadata={"sent": result["sent"], "error": result["error"]})
    return jsonify(message="Reply saved", email_sent=result["sent"],
                   data=_contact_dict(contact, with_replies=True)), 200


# ---------- newsletter ----------
@admin_bp.get("/newsletter/subscribers")
@admin_required
def list_subscribers():
    rows = NewsletterSubscriber.query.order_by(NewsletterSubscriber.created_at.desc()).all()
    return jsonify([
        {
            "id": s.id,
            "email": s.email,
            "name": s.name,
            "status": s.status,
            "created_at": s.created_at.isoformat(),
            "unsubscribed_at": s.unsubscribed_at.isoformat() if s.unsubscribed_at else None,
        }
        for s in rows
    ]), 200


def _post_dict(p):
    return {
        "id": p.id,
        "title": p.title,
        "content": p.content,
        "status": p.status,
        "sent_count": p.sent_count,
        "created_at": p.created_at.isoformat(),
        "sent_at": p.sent_at.isoformat() if p.sent_at else None,
    }


@admin_bp.get("/newsletter/posts")
@admin_required
def list_posts():
    rows = NewsletterPost.query.order_by(NewsletterPost.created_at.desc()).all()
    return jsonify([_post_dict(p) for p in rows]), 200


@admin_bp.post("/newsletter/posts")
@admin_required
def create_post():
    data = request.get_json(silent=True) or {}
    title = (data.get("title") or "").strip()
    content = (data.get("content") or "").strip()

    if len(title) < 3 or len(title) > 200:
        return jsonify(error="title must be 3-200 characters"), 400
    if len(content) < 10 or len(content) > 10000:
        return jsonify(error="content must be 10-10000 characters"), 400

    post = NewsletterPost(title=title, content=content, status="draft")
    db.session.add(post)
    db.session.commit()

    log_event("NEWSLETTER_POST_CREATE", admin_id=g.admin.id, entity="newsletter_post", entity_id=post.id)
    return jsonify(_post_dict(post)), 201


@admin_bp.post("/newsletter/posts/<int:post_id>/send")
@admin_required
def send_post(post_id: int):
    post = db.session.get(NewsletterPost, post_id)
    if not post:
        return jsonify(error="Post not found"), 404
    if post.status == "sent":
        return jsonify(error="Post already sent"), 409

    subscribers = NewsletterSubscriber.query.filter_by(status="active").all()
    sent = sum(1 for s in subscribers if send_newsletter_post(post, s)["sent"])

    post.status = "sent"
    post.sent_count = sent
    post.sent_at = datetime.utcnow()
    db.session.commit()

    log_event("NEWSLETTER_POST_SEND", admin_id=g.admin.id, entity="newsletter_post", entity_id=post.id,
              metadata={"sent": sent, "subscribers": len(subscribers)})
    return jsonify(message=f"Sent to {sent} subscribers", data=_post_dict(post)), 200


# ---------- stock notifications ----------
@admin_bp.get("/product-notifications")
@admin_required
def list_product_notifications():
    status = (request.args.get("status") or "").strip().lower()
    q = ProductNotification.query
    if status:
        q = q.filter(ProductNotification.status == status)
    rows = q.order_by(ProductNotification.created_at.desc()).all()
    return jsonify([
        {
            "id": n.id,
            "product_id": n.product_id,
            "email": n.email,
            "status": n.status,
            "created_at": n.created_at.isoformat(),
            "notified_at": n.notified_at.isoformat() if n.notified_at else None,
        }
        for n in rows
    ]), 200
