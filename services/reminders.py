from datetime import date, datetime, timedelta

from models import db
from models.reservation import Reservation
from utils.logger import get_logger
from utils.notifications import send_pickup_reminder, send_return_reminder

logger = get_logger()


def send_daily_reminders(today: date = None):
    """
    Pickup reminders for confirmed rentals starting tomorrow and return
    reminders for picked-up rentals ending tomorrow.

    Each reservation is reminded once: the sent-at marker is committed per
    reservation, and only after a successful send, so re-running the job the
    same day sends nothing new while failed sends are retried.
    Returns (pickup_sent, return_sent).
    """
    today = today or date.today()
    tomorrow = today + timedelta(days=1)
    logger.info(f"Running daily reminder job for {tomorrow.isoformat()}")

    pickups = Reservation.query.filter(
        Reservation.status == "confirmed",
        Reservation.start_date == tomorrow,
        Reservation.pickup_reminder_sent_at.is_(None),
    ).all()
    returns = Reservation.query.filter(
        Reservation.status == "picked_up",
        Reservation.end_date == tomorrow,
        Reservation.return_reminder_sent_at.is_(None),
    ).all()

    sent_pickup = 0
    for r in pickups:
        result = send_pickup_reminder(r)
        if result["sent"]:
            r.pickup_reminder_sent_at = datetime.utcnow()
            db.session.commit()
            sent_pickup += 1
            logger.info(f"Pickup reminder sent to {r.email} for reservation #{r.id}")

    sent_return = 0
    for r in returns:
        result = send_return_reminder(r)
        if result["sent"]:
            r.return_reminder_sent_at = datetime.utcnow()
            db.session.commit()
            sent_return += 1
            logger.info(f"Return reminder sent to {r.email} for reservation #{r.id}")

    logger.info(f"Daily reminders complete: {sent_pickup} pickup, {sent_return} return")
    return sent_pickup, sent_return
