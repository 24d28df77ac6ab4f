from datetime import date

import pytest

from models.product_notification import ProductNotification
from services.errors import InvalidTransition
from services.reservation_status import (
    TERMINAL,
    TRANSITIONS,
    ReservationStatus as S,
    can_transition,
    change_status,
    parse_status,
    run_side_effects,
)


def test_happy_path_lifecycle():
    chain = [S.PENDING, S.CONFIRMED, S.PICKED_UP, S.RETURNED, S.COMPLETED]
    for current, new in zip(chain, chain[1:]):
        assert can_transition(current, new)


@pytest.mark.parametrize("current,new", [
    ("pending", "picked_up"),
    ("pending", "returned"),
    ("confirmed", "pending"),
    ("confirmed", "rejected"),
    ("picked_up", "confirmed"),
    ("returned", "picked_up"),
])
def test_illegal_moves(current, new):
    assert not can_transition(current, new)


def test_terminal_states_have_no_exits():
    for status in TERMINAL:
        assert TRANSITIONS[status] == frozenset()


def test_cancel_allowed_until_completion():
    for status in ("pending", "confirmed", "picked_up", "returned"):
        assert can_transition(status, "cancelled")


def test_parse_status():
    assert parse_status(" Confirmed ") is S.CONFIRMED
    with pytest.raises(ValueError):
        parse_status("lost")
    with pytest.raises(ValueError):
        parse_status(None)


def test_change_status_applies_transition(make_reservation):
    r = make_reservation(status="pending")
    change = change_status(r, "confirmed")
    assert change.changed
    assert (change.previous, change.current) == (S.PENDING, S.CONFIRMED)
    assert r.status == "confirmed"
    assert r.status_changed_at is not None


def test_reapplying_status_is_a_no_op(make_reservation):
    r = make_reservation(status="confirmed")
    change = change_status(r, "confirmed")
    assert not change.changed
    assert r.status_changed_at is None


def test_illegal_change_raises_and_leaves_status(make_reservation):
    r = make_reservation(status="completed")
    with pytest.raises(InvalidTransition) as info:
        change_status(r, "pending")
    assert info.value.current == "completed"
    assert r.status == "completed"


def test_side_effects_send_status_email(make_reservation, emails):
    r = make_reservation(status="pending")
    change = run_side_effects(r, change_status(r, "confirmed"))
    assert [n["kind"] for n in change.notifications] == ["status_confirmed"]
    assert emails.sent[0]["to"] == "jan@example.com"


def test_no_side_effects_without_change(make_reservation, emails):
    r = make_reservation(status="confirmed")
    change = run_side_effects(r, change_status(r, "confirmed"))
    assert change.notifications == []
    assert emails.sent == []


def test_cancel_has_no_customer_email(make_reservation, emails):
    r = make_reservation(status="pending")
    change = run_side_effects(r, change_status(r, "cancelled"), today=date(2026, 2, 2))
    assert change.notifications == []


def test_return_releases_waiting_subscribers(app, make_reservation, emails):
    from models import db

    r = make_reservation(start=date(2026, 2, 1), end=date(2026, 2, 5), status="picked_up")
    db.session.add(ProductNotification(product_id="nt-22-1", email="waiting@example.com"))
    db.session.add(ProductNotification(product_id="puzzi-10-1", email="other@example.com"))
    db.session.commit()

    change = run_side_effects(r, change_status(r, "returned"), today=date(2026, 2, 3))
    assert change.released_subscribers == 1

    row = ProductNotification.query.filter_by(email="waiting@example.com").one()
    assert row.status == "notified"
    assert row.notified_at is not None
    assert ProductNotification.query.filter_by(email="other@example.com").one().status == "waiting"


def test_no_release_while_another_rental_is_out(app, make_reservation, emails):
    from models import db

    make_reservation(start=date(2026, 2, 3), end=date(2026, 2, 8), status="picked_up")
    r = make_reservation(start=date(2026, 1, 10), end=date(2026, 1, 12), status="pending")
    db.session.add(ProductNotification(product_id="nt-22-1", email="waiting@example.com"))
    db.session.commit()

    change = run_side_effects(r, change_status(r, "rejected"), today=date(2026, 2, 4))
    assert change.released_subscribers == 0
    assert ProductNotification.query.one().status == "waiting"


def test_stale_read_is_judged_against_the_stored_status(app, make_reservation):
    from sqlalchemy import update

    from models import db
    from models.reservation import Reservation

    r = make_reservation(status="pending")
    # another writer confirms the row behind this session's back
    db.session.execute(
        update(Reservation).where(Reservation.id == r.id).values(status="confirmed")
        .execution_options(synchronize_session=False)
    )
    assert r.status == "pending"

    change = change_status(r, "confirmed")
    assert not change.changed
    assert r.status == "confirmed"
