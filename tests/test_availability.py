from datetime import date

import pytest

from services.availability import find_conflicts, is_out_on_rent, ranges_overlap


def d(day, month=2):
    return date(2026, month, day)


def test_ranges_overlap_half_open():
    assert ranges_overlap(d(4), d(6), d(1), d(5))
    assert not ranges_overlap(d(5), d(7), d(1), d(5))
    assert not ranges_overlap(d(1), d(5), d(5), d(7))
    assert ranges_overlap(d(2), d(3), d(1), d(5))


def test_same_day_range_occupies_its_day():
    assert ranges_overlap(d(3), d(3), d(1), d(5))
    assert ranges_overlap(d(3), d(3), d(3), d(3))
    assert not ranges_overlap(d(5), d(5), d(1), d(5))
    assert not ranges_overlap(d(4), d(4), d(5), d(5))


def test_overlapping_request_conflicts(make_reservation):
    existing = make_reservation(start=d(1), end=d(5), status="confirmed")
    conflicts = find_conflicts("nt-22-1", d(4), d(6))
    assert [r.id for r in conflicts] == [existing.id]


def test_adjacent_request_is_free(make_reservation):
    make_reservation(start=d(1), end=d(5), status="confirmed")
    assert find_conflicts("nt-22-1", d(5), d(7)) == []
    assert find_conflicts("nt-22-1", d(1, 1), d(1)) == []


@pytest.mark.parametrize("status", ["returned", "completed", "rejected", "cancelled"])
def test_inactive_statuses_do_not_block(make_reservation, status):
    make_reservation(start=d(1), end=d(5), status=status)
    assert find_conflicts("nt-22-1", d(2), d(3)) == []


@pytest.mark.parametrize("status", ["pending", "confirmed", "picked_up"])
def test_active_statuses_block(make_reservation, status):
    make_reservation(start=d(1), end=d(5), status=status)
    assert len(find_conflicts("nt-22-1", d(2), d(3))) == 1


def test_other_products_are_independent(make_reservation):
    make_reservation(product_id="puzzi-10-1", start=d(1), end=d(5))
    assert find_conflicts("nt-22-1", d(1), d(5)) == []


def test_stored_same_day_rental_blocks_that_day(make_reservation):
    make_reservation(start=d(10), end=d(10), status="confirmed")
    assert len(find_conflicts("nt-22-1", d(9), d(11))) == 1
    assert len(find_conflicts("nt-22-1", d(10), d(10))) == 1
    assert find_conflicts("nt-22-1", d(11), d(12)) == []
    assert find_conflicts("nt-22-1", d(8), d(10)) == []


def test_exclude_id(make_reservation):
    r = make_reservation(start=d(1), end=d(5))
    assert find_conflicts("nt-22-1", d(1), d(5), exclude_id=r.id) == []


def test_is_out_on_rent(make_reservation):
    make_reservation(start=d(1), end=d(5), status="picked_up")
    assert is_out_on_rent("nt-22-1", d(4))
    assert not is_out_on_rent("nt-22-1", d(5))
