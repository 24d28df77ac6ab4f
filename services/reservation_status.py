from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from sqlalchemy import update

from models import db
from models.reservation import Reservation
from services.errors import InvalidTransition


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PICKED_UP = "picked_up"
    RETURNED = "returned"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


S = ReservationStatus

TERMINAL = frozenset({S.COMPLETED, S.REJECTED, S.CANCELLED})

TRANSITIONS = {
    S.PENDING: frozenset({S.CONFIRMED, S.REJECTED, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.PICKED_UP, S.CANCELLED}),
    S.PICKED_UP: frozenset({S.RETURNED, S.CANCELLED}),
    S.RETURNED: frozenset({S.COMPLETED, S.CANCELLED}),
    S.COMPLETED: frozenset(),
    S.REJECTED: frozenset(),
    S.CANCELLED: frozenset(),
}

# statuses after which the equipment may be free again
RELEASING = frozenset({S.RETURNED, S.CANCELLED, S.REJECTED})


def parse_status(value) -> ReservationStatus:
    """ValueError for anything outside the lifecycle."""
    if isinstance(value, ReservationStatus):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid status: {value!r}")
    return ReservationStatus(value.strip().lower())


def can_transition(current, new) -> bool:
    return parse_status(new) in TRANSITIONS[parse_status(current)]


@dataclass
class StatusChange:
    reservation_id: int
    previous: ReservationStatus
    current: ReservationStatus
    changed: bool
    notifications: list = field(default_factory=list)
    released_subscribers: int = 0


def change_status(reservation, new_status) -> StatusChange:
    """
    Apply a status transition to `reservation` (not committed).

    Re-applying the current status is a no-op with changed=False so callers
    skip the side effects. The row is only updated while it still holds the
    status read here; when a concurrent writer got there first the request
    is judged again against the status that writer left.
    """
    new = parse_status(new_status)
    current = parse_status(reservation.status)

    if new is current:
        return StatusChange(reservation.id, current, new, changed=False)

    if new not in TRANSITIONS[current]:
        raise InvalidTransition(current.value, new.value)

    result = db.session.execute(
        update(Reservation)
        .where(Reservation.id == reservation.id, Reservation.status == current.value)
        .values(status=new.value, status_changed_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    db.session.refresh(reservation)

    if result.rowcount == 0:
        return change_status(reservation, new)
    return StatusChange(reservation.id, current, new, changed=True)


def run_side_effects(reservation, change: StatusChange, today: date = None) -> StatusChange:
    """Notifications for a committed, effective transition."""
    from services.availability import is_out_on_rent
    from utils.notifications import notify_status_change, release_stock_notifications

    if not change.changed:
        return change

    result = notify_status_change(reservation, change.current.value)
    if result:
        change.notifications.append(result)

    if change.current in RELEASING and reservation.product is not None:
        today = today or date.today()
        if not is_out_on_rent(reservation.product_id, today):
            change.released_subscribers = release_stock_notifications(reservation.product)

    return change
