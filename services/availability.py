from datetime import timedelta

from sqlalchemy import and_, or_

from models.reservation import Reservation

# Statuses that hold the equipment
ACTIVE_STATUSES = ("pending", "confirmed", "picked_up")


def occupied_end(start_date, end_date):
    """Exclusive end of the occupied range; a same-day rental still occupies its day."""
    if end_date > start_date:
        return end_date
    return start_date + timedelta(days=1)


def ranges_overlap(a_start, a_end, b_start, b_end) -> bool:
    """Half-open [start, end) overlap; adjacent ranges do not overlap."""
    return a_start < occupied_end(b_start, b_end) and occupied_end(a_start, a_end) > b_start


def find_conflicts(product_id: str, start_date, end_date, exclude_id=None):
    """Active reservations of product_id overlapping [start_date, end_date)."""
    end = occupied_end(start_date, end_date)
    q = Reservation.query.filter(
        Reservation.product_id == product_id,
        Reservation.status.in_(ACTIVE_STATUSES),
        Reservation.start_date < end,
        or_(
            Reservation.end_date > start_date,
            and_(Reservation.end_date == Reservation.start_date, Reservation.start_date >= start_date),
        ),
    )
    if exclude_id is not None:
        q = q.filter(Reservation.id != exclude_id)
    return q.order_by(Reservation.start_date.asc()).all()


def conflicts_payload(conflicts):
    return [
        {
            "startDate": r.start_date.isoformat(),
            "endDate": r.end_date.isoformat(),
            "status": r.status,
        }
        for r in conflicts
    ]


def is_out_on_rent(product_id: str, day) -> bool:
    """True if an active reservation of product_id covers `day`."""
    return bool(find_conflicts(product_id, day, day + timedelta(days=1)))
