from datetime import datetime

from flask import current_app

from models import db
from models.product_notification import ProductNotification
from utils.emailer import send_email
from utils.logger import get_logger

logger = get_logger()

SIGNATURE = "\n\nPozdrawiamy,\nZespół WB-Rent"


def _product_name(reservation):
    return reservation.product.name if reservation.product else reservation.product_id


def _rental_lines(reservation):
    lines = [
        f"Sprzęt: {_product_name(reservation)}",
        f"Termin: {reservation.start_date.isoformat()} {reservation.start_time or ''}".rstrip()
        + f" - {reservation.end_date.isoformat()} {reservation.end_time or ''}".rstrip(),
        f"Liczba dób: {reservation.days}",
        f"Cena wynajmu: {reservation.base_price} zł",
    ]
    if reservation.delivery_fee:
        lines.append(f"Dostawa i odbiór: {reservation.delivery_fee} zł")
    if reservation.weekend_pickup_fee:
        lines.append(f"Odbiór w weekend: {reservation.weekend_pickup_fee} zł")
    lines.append(f"Razem: {reservation.total_price} zł")
    return "\n".join(lines)


def _send(kind, to_email, subject, body):
    ok, error = send_email(to_email, subject, body)
    if not ok:
        logger.warning(f"{kind} email to {to_email} not sent: {error}")
    return {"kind": kind, "sent": ok, "error": error}


# ---------- reservations ----------
def notify_reservation_created(reservation):
    customer = _send(
        "reservation_pending",
        reservation.email,
        "Rezerwacja oczekuje na potwierdzenie - WB-Rent",
        f"Dzień dobry {reservation.name},\n\n"
        "dziękujemy za rezerwację. Skontaktujemy się w ciągu 24h, aby ją potwierdzić.\n\n"
        f"{_rental_lines(reservation)}{SIGNATURE}",
    )
    delivery = ""
    if reservation.delivery:
        delivery = f"\nDostawa: {reservation.address or ''}, {reservation.city or ''}"
        if reservation.delivery_check == "unverified":
            delivery += "\nUWAGA: adresu nie udało się zweryfikować, potwierdź odległość z klientem."
    staff = _send(
        "reservation_staff",
        current_app.config.get("ADMIN_EMAIL"),
        f"Nowa rezerwacja: {_product_name(reservation)} ({reservation.start_date.isoformat()})",
        f"Rezerwacja #{reservation.id}\n{_rental_lines(reservation)}\n\n"
        f"Klient: {reservation.name}, {reservation.email}, {reservation.phone}{delivery}",
    )
    return [customer, staff]


STATUS_EMAILS = {
    "confirmed": (
        "Rezerwacja potwierdzona - WB-Rent",
        "Twoja rezerwacja została potwierdzona. Do zobaczenia przy odbiorze!",
    ),
    "rejected": (
        "Rezerwacja odrzucona - WB-Rent",
        "Niestety nie możemy zrealizować Twojej rezerwacji w wybranym terminie. "
        "Zapraszamy do wyboru innej daty.",
    ),
    "picked_up": (
        "Sprzęt został odebrany - WB-Rent",
        "Potwierdzamy odbiór sprzętu. Życzymy udanej pracy!",
    ),
    "returned": (
        "Sprzęt został zwrócony - Dziękujemy! - WB-Rent",
        "Potwierdzamy zwrot sprzętu. Dziękujemy za skorzystanie z naszej wypożyczalni.",
    ),
}


def notify_status_change(reservation, status: str):
    """Customer email for a status the customer cares about; None otherwise."""
    template = STATUS_EMAILS.get(status)
    if not template:
        return None
    subject, intro = template
    return _send(
        f"status_{status}",
        reservation.email,
        subject,
        f"Dzień dobry {reservation.name},\n\n{intro}\n\n{_rental_lines(reservation)}{SIGNATURE}",
    )


def send_pickup_reminder(reservation):
    return _send(
        "pickup_reminder",
        reservation.email,
        "Przypomnienie: Jutro odbiór sprzętu - WB-Rent",
        f"Dzień dobry {reservation.name},\n\nprzypominamy, że jutro "
        f"({reservation.start_date.isoformat()}) odbiór sprzętu.\n\n{_rental_lines(reservation)}{SIGNATURE}",
    )


def send_return_reminder(reservation):
    return _send(
        "return_reminder",
        reservation.email,
        "Przypomnienie: Jutro zwrot sprzętu - WB-Rent",
        f"Dzień dobry {reservation.name},\n\nprzypominamy, że jutro "
        f"({reservation.end_date.isoformat()}) mija termin zwrotu sprzętu.\n\n{_rental_lines(reservation)}{SIGNATURE}",
    )


# ---------- stock notifications ----------
def release_stock_notifications(product) -> int:
    """Email everyone waiting for `product` and mark them notified. Returns the count."""
    waiting = ProductNotification.query.filter_by(product_id=product.id, status="waiting").all()
    sent = 0
    for row in waiting:
        result = _send(
            "product_available",
            row.email,
            f"{product.name} jest już dostępny! - WB-Rent",
            f"Dzień dobry,\n\nsprzęt, na który czekasz ({product.name}), jest znowu dostępny. "
            f"Zarezerwuj go na naszej stronie.{SIGNATURE}",
        )
        if result["sent"]:
            row.status = "notified"
            row.notified_at = datetime.utcnow()
            sent += 1
    db.session.commit()
    return sent


# ---------- contact ----------
def notify_contact_received(contact):
    customer = _send(
        "contact_confirmation",
        contact.email,
        "Potwierdzenie wiadomości - WB-Rent",
        f"Dzień dobry {contact.name},\n\notrzymaliśmy Twoją wiadomość i odpowiemy najszybciej "
        f"jak to możliwe.{SIGNATURE}",
    )
    staff = _send(
        "contact_staff",
        current_app.config.get("ADMIN_EMAIL"),
        f"Nowa wiadomość kontaktowa: {contact.subject or 'Brak tematu'}",
        f"Od: {contact.name} <{contact.email}>\n\n{contact.message}",
    )
    return [customer, staff]


def send_contact_reply(contact, message: str):
    return _send(
        "contact_reply",
        contact.email,
        f"Re: {contact.subject or 'Twoje zapytanie'} - WB-Rent",
        f"Dzień dobry {contact.name},\n\n{message}{SIGNATURE}",
    )


# ---------- newsletter ----------
def send_newsletter_post(post, subscriber):
    return _send(
        "newsletter",
        subscriber.email,
        f"{post.title} - WB-Rent",
        f"{post.content}\n\n--\nAby zrezygnować z newslettera, odpowiedz na tę wiadomość.",
    )
