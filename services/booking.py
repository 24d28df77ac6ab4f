"""
Authoritative booking path.

Days, calendar flags and price are recomputed here from product id + dates +
delivery choice; a client-submitted total is only compared, never stored.
The availability check runs again inside the transaction that inserts the
reservation, with the product row locked, so two overlapping submissions
cannot both commit.
"""
import math
from dataclasses import dataclass
from datetime import date

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.product import Product
from models.reservation import Reservation
from services.availability import conflicts_payload, find_conflicts
from services.distance import (
    DistanceStatus,
    check_delivery_distance,
    depot_from_config,
    get_geocoder,
)
from services.errors import (
    BookingValidationError,
    DeliveryRejected,
    ReservationConflict,
    ReservationPersistenceError,
)
from services.pricing import CostBreakdown, calculate_cost
from services.rental_days import (
    TIME_RE,
    calculate_rental_days,
    calendar_flags,
    parse_date,
)

PRICE_TOLERANCE = 0.005


@dataclass(frozen=True)
class Quote:
    product_id: str
    start_date: date
    end_date: date
    days: int
    is_weekend: bool
    weekend_pickup: bool
    cost: CostBreakdown

    def to_dict(self):
        return {
            "productId": self.product_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "days": self.days,
            "isWeekend": self.is_weekend,
            "weekendPickup": self.weekend_pickup,
            "cost": self.cost.to_dict(),
        }


def _err(field, message):
    return {"field": field, "message": message}


def _text(data, key):
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""


def _is_valid_email(email: str) -> bool:
    return isinstance(email, str) and "@" in email and "." in email.split("@")[-1] and len(email) <= 255


def validate_dates(data):
    """(start, end, start_time, end_time, errors)"""
    errors = []
    start = parse_date(data.get("startDate"))
    end = parse_date(data.get("endDate"))
    start_time = _text(data, "startTime") or None
    end_time = _text(data, "endTime") or None

    if start is None:
        errors.append(_err("startDate", "Invalid start date (YYYY-MM-DD)"))
    if end is None:
        errors.append(_err("endDate", "Invalid end date (YYYY-MM-DD)"))
    if start and end and end < start:
        errors.append(_err("endDate", "End date must be on or after the start date"))
    if start_time and not TIME_RE.match(start_time):
        errors.append(_err("startTime", "Invalid pickup time (HH:MM)"))
    if end_time and not TIME_RE.match(end_time):
        errors.append(_err("endTime", "Invalid return time (HH:MM)"))
    return start, end, start_time, end_time, errors


def build_quote(product, start_date, end_date, start_time=None, end_time=None,
                with_delivery=False, delivery_unit_fee=None) -> Quote:
    days = calculate_rental_days(start_date, end_date, start_time, end_time)
    if days < 1:
        raise BookingValidationError([_err("endDate", "Invalid rental period")])

    is_weekend, weekend_pickup = calendar_flags(start_date, days)
    if delivery_unit_fee is None:
        delivery_unit_fee = current_app.config["DELIVERY_UNIT_FEE"]

    cost = calculate_cost(
        product.tariff,
        days,
        with_delivery=with_delivery,
        is_weekend=is_weekend,
        weekend_pickup=weekend_pickup,
        delivery_unit_fee=delivery_unit_fee,
    )
    return Quote(product.id, parse_date(start_date), parse_date(end_date),
                 days, is_weekend, weekend_pickup, cost)


def quote_from_payload(data) -> Quote:
    start, end, start_time, end_time, errors = validate_dates(data)
    product_id = _text(data, "productId")
    if not product_id:
        errors.append(_err("productId", "Choose a product"))
    if errors:
        raise BookingValidationError(errors)

    product = db.session.get(Product, product_id)
    if product is None:
        raise BookingValidationError([_err("productId", "Selected product does not exist")])

    return build_quote(product, start, end, start_time, end_time, with_delivery=bool(data.get("delivery")))


def validate_reservation_payload(data, today=None):
    start, end, start_time, end_time, errors = validate_dates(data)
    today = today or date.today()

    if start and start < today:
        errors.append(_err("startDate", "Start date cannot be in the past"))
    if not _text(data, "productId"):
        errors.append(_err("productId", "Choose a product"))

    for key, label in (("firstName", "First name"), ("lastName", "Last name")):
        value = _text(data, key)
        if len(value) < 2 or len(value) > 100:
            errors.append(_err(key, f"{label} must be 2-100 characters"))

    if not _is_valid_email(_text(data, "email")):
        errors.append(_err("email", "Invalid email address"))

    phone = _text(data, "phone")
    if len(phone) < 9 or len(phone) > 20 or not all(c.isdigit() or c in "+ -" for c in phone):
        errors.append(_err("phone", "Invalid phone number"))

    if data.get("delivery"):
        if len(_text(data, "city")) < 2:
            errors.append(_err("city", "Delivery city is required"))
        if len(_text(data, "address")) < 5:
            errors.append(_err("address", "Delivery address is required"))
    if len(_text(data, "city")) > 100:
        errors.append(_err("city", "City is too long"))
    if len(_text(data, "address")) > 500:
        errors.append(_err("address", "Address is too long"))
    if len(_text(data, "company")) > 200:
        errors.append(_err("company", "Company name is too long"))
    if len(_text(data, "notes")) > 2000:
        errors.append(_err("notes", "Notes are too long"))

    if data.get("wantsInvoice") and not _text(data, "invoiceNip"):
        errors.append(_err("invoiceNip", "NIP is required for an invoice"))
    if len(_text(data, "invoiceNip")) > 20:
        errors.append(_err("invoiceNip", "NIP is too long"))

    total = data.get("totalPrice")
    if total is not None and (
        isinstance(total, bool) or not isinstance(total, (int, float)) or not math.isfinite(total)
    ):
        errors.append(_err("totalPrice", "totalPrice must be a number"))

    return start, end, start_time, end_time, errors


def verify_delivery(city, address, acknowledged: bool):
    """Distance gate at submission time. Returns the DistanceCheck or raises DeliveryRejected."""
    cfg = current_app.config
    check = check_delivery_distance(
        city, address, get_geocoder(), depot_from_config(cfg), cfg["MAX_DELIVERY_RADIUS_KM"]
    )
    if check.status is DistanceStatus.TOO_FAR:
        raise DeliveryRejected(check, "DELIVERY_TOO_FAR")
    if not check.status.verified and not acknowledged:
        raise DeliveryRejected(check, "DELIVERY_UNVERIFIED")
    return check


def create_reservation(data, ip_address=None, today=None):
    """
    Validate, price and persist a reservation at status "pending".

    Returns (reservation, quote, price_mismatch).
    """
    start, end, start_time, end_time, errors = validate_reservation_payload(data, today)
    if errors:
        raise BookingValidationError(errors)

    product = db.session.get(Product, _text(data, "productId"))
    if product is None:
        raise BookingValidationError([_err("productId", "Selected product does not exist")])

    with_delivery = bool(data.get("delivery"))
    quote = build_quote(product, start, end, start_time, end_time, with_delivery=with_delivery)

    client_total = data.get("totalPrice")
    price_mismatch = client_total is not None and abs(float(client_total) - quote.cost.total) > PRICE_TOLERANCE

    check = None
    if with_delivery:
        check = verify_delivery(_text(data, "city"), _text(data, "address"),
                                bool(data.get("deliveryUnverifiedAck")))

    try:
        # serialize writers per product
        db.session.execute(
            select(Product.id).where(Product.id == product.id).with_for_update()
        )

        reservation = Reservation(
            product_id=product.id,
            category_id=product.category_id,
            start_date=start,
            end_date=end,
            start_time=start_time,
            end_time=end_time,
            delivery=with_delivery,
            city=_text(data, "city") or None,
            address=_text(data, "address") or None,
            delivery_check=("ok" if check.status is DistanceStatus.OK else "unverified") if check else None,
            delivery_distance_km=check.distance_km if check else None,
            name=f"{_text(data, 'firstName')} {_text(data, 'lastName')}",
            email=_text(data, "email").lower(),
            phone=_text(data, "phone"),
            company=_text(data, "company") or None,
            wants_invoice=bool(data.get("wantsInvoice")),
            invoice_nip=_text(data, "invoiceNip") or None,
            invoice_company=_text(data, "invoiceCompany") or None,
            invoice_address=_text(data, "invoiceAddress") or None,
            notes=_text(data, "notes") or None,
            days=quote.days,
            base_price=quote.cost.base_price,
            delivery_fee=quote.cost.delivery_fee,
            weekend_pickup_fee=quote.cost.weekend_pickup_fee_amount,
            total_price=quote.cost.total,
            status="pending",
            ip_address=ip_address,
        )
        db.session.add(reservation)
        db.session.flush()

        conflicts = find_conflicts(product.id, start, end, exclude_id=reservation.id)
        if conflicts:
            payload = conflicts_payload(conflicts)
            db.session.rollback()
            raise ReservationConflict(payload, at_commit=True)

        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise ReservationPersistenceError(str(exc)) from exc

    return reservation, quote, price_mismatch
