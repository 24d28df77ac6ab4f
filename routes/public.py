from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import IntegrityError

from models import db
from models.contact import Contact
from models.product import Product
from models.product_notification import ProductNotification
from security.rate_limit import rate_limited
from services.availability import conflicts_payload, find_conflicts
from services.booking import create_reservation, quote_from_payload, validate_dates
from services.distance import check_delivery_distance, depot_from_config, get_geocoder
from services.errors import (
    BookingValidationError,
    DeliveryRejected,
    ReservationConflict,
    ReservationPersistenceError,
)
from utils.audit import log_event
from utils.logger import get_logger
from utils.notifications import notify_contact_received, notify_reservation_created

logger = get_logger()

public_bp = Blueprint("public", __name__, url_prefix="/api")


def _client_ip():
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr


def _validation_response(exc: BookingValidationError):
    return jsonify(error=exc.message, errors=exc.errors), 400


# ---------- catalog ----------
@public_bp.get("/products")
def list_products():
    category_id = request.args.get("category")
    q = Product.query
    if category_id:
        q = q.filter_by(category_id=category_id)

    products = q.order_by(Product.category_id.asc(), Product.name.asc()).all()
    return jsonify([
        {
            "id": p.id,
            "categoryId": p.category_id,
            "name": p.name,
            "description": p.description,
            "pricePerDay": p.price_per_day,
            "priceNextDay": p.price_next_day,
            "priceWeekend": p.price_weekend,
            "transportPrice": p.transport_price,
            "weekendPickupFee": p.weekend_pickup_fee,
            "available": p.available,
        }
        for p in products
    ]), 200


# ---------- preview: price quote ----------
@public_bp.post("/quote")
def quote():
    data = request.get_json(silent=True) or {}
    try:
        q = quote_from_payload(data)
    except BookingValidationError as exc:
        return _validation_response(exc)
    return jsonify(q.to_dict()), 200


# ---------- preview: availability ----------
@public_bp.get("/availability/<product_id>")
def availability(product_id: str):
    start, end, _, _, errors = validate_dates(request.args)
    if errors:
        return jsonify(error="Validation failed", errors=errors), 400

    if db.session.get(Product, product_id) is None:
        return jsonify(error="Product not found"), 404

    conflicts = find_conflicts(product_id, start, end)
    if conflicts:
        return jsonify(
            available=False,
            message="The product is already booked for part of this period",
            conflicts=conflicts_payload(conflicts),
        ), 200
    return jsonify(available=True, message="The product is available", conflicts=[]), 200


# ---------- preview: delivery distance ----------
@public_bp.get("/delivery/check")
def delivery_check():
    city = (request.args.get("city") or "").strip()
    address = (request.args.get("address") or "").strip() or None
    if len(city) < 2:
        return jsonify(error="city is required"), 400

    cfg = current_app.config
    check = check_delivery_distance(
        city, address, get_geocoder(), depot_from_config(cfg), cfg["MAX_DELIVERY_RADIUS_KM"]
    )
    return jsonify(check.to_dict()), 200


# ---------- booking ----------
@public_bp.post("/reservations")
@rate_limited("submit")
def submit_reservation():
    data = request.get_json(silent=True) or {}
    try:
        reservation, quote, price_mismatch = create_reservation(data, ip_address=_client_ip())
    except BookingValidationError as exc:
        return _validation_response(exc)
    except DeliveryRejected as exc:
        return jsonify(error=exc.check.message, code=exc.code, distance=exc.check.to_dict()), 422
    except ReservationConflict as exc:
        log_event("RESERVATION_CONFLICT_AT_COMMIT", entity="product", entity_id=data.get("productId"),
                  metadata={"startDate": data.get("startDate"), "endDate": data.get("endDate")})
        return jsonify(
            error="The selected dates are no longer available",
            code="CONFLICT_AT_COMMIT",
            conflicts=exc.conflicts,
        ), 409
    except ReservationPersistenceError as exc:
        logger.error(f"Reservation could not be saved: {exc}")
        return jsonify(error="Could not save the reservation. Please try again later."), 500

    log_event(
        "RESERVATION_CREATE",
        entity="reservation",
        entity_id=reservation.id,
        metadata={
            "product_id": reservation.product_id,
            "total_price": reservation.total_price,
            "client_total": data.get("totalPrice"),
            "price_mismatch": price_mismatch,
            "delivery_check": reservation.delivery_check,
        },
    )
    notify_reservation_created(reservation)

    return jsonify(
        id=reservation.id,
        message="Reservation received! We will contact you within 24h.",
        summary={
            "productName": reservation.product.name,
            "days": quote.days,
            "isWeekend": quote.is_weekend,
            "weekendPickup": quote.weekend_pickup,
            **quote.cost.to_dict(),
        },
        priceMismatch=price_mismatch,
        deliveryCheck=reservation.delivery_check,
    ), 201


# ---------- contact form ----------
@public_bp.post("/contact")
@rate_limited("submit")
def submit_contact():
    data = request.get_json(silent=True) or {}

    # honeypot: bots fill the hidden "website" field; pretend success
    if (data.get("website") or "").strip():
        log_event("CONTACT_HONEYPOT", metadata={"ip": _client_ip()})
        return jsonify(message="Message sent!"), 200

    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    subject = (data.get("subject") or "").strip() or None
    message = (data.get("message") or "").strip()

    errors = []
    if len(name) < 2 or len(name) > 100:
        errors.append({"field": "name", "message": "Name must be 2-100 characters"})
    if "@" not in email or len(email) > 255:
        errors.append({"field": "email", "message": "Invalid email address"})
    if subject and len(subject) > 200:
        errors.append({"field": "subject", "message": "Subject is too long"})
    if len(message) < 10 or len(message) > 5000:
        errors.append({"field": "message", "message": "Message must be 10-5000 characters"})
    if errors:
        return jsonify(error="Validation failed", errors=errors), 400

    contact = Contact(name=name, email=email, subject=subject, message=message, ip_address=_client_ip())
    db.session.add(contact)
    db.session.commit()

    log_event("CONTACT_CREATE", entity="contact", entity_id=contact.id)
    notify_contact_received(contact)
    return jsonify(id=contact.id, message="Thank you! We will reply as soon as possible."), 201


# ---------- "notify me when available" ----------
@public_bp.post("/product-notifications")
@rate_limited("submit")
def subscribe_product_notification():
    data = request.get_json(silent=True) or {}
    product_id = (data.get("productId") or "").strip()
    email = (data.get("email") or "").strip().lower()

    if not product_id:
        return jsonify(error="productId is required"), 400
    if "@" not in email or len(email) > 255:
        return jsonify(error="Invalid email address"), 400
    if db.session.get(Product, product_id) is None:
        return jsonify(error="Product not found"), 404

    row = ProductNotification(product_id=product_id, email=email)
    db.session.add(row)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        existing = ProductNotification.query.filter_by(product_id=product_id, email=email).first()
        if existing is None:
            return jsonify(error="Could not save the subscription"), 409
        if existing.status == "waiting":
            return jsonify(message="You are already on the list"), 200
        # notified earlier: wait for the next release
        existing.status = "waiting"
        existing.notified_at = None
        db.session.commit()
        row = existing

    log_event("PRODUCT_NOTIFICATION_SUBSCRIBE", entity="product", entity_id=product_id)
    return jsonify(id=row.id, message="We will let you know when it is available"), 201