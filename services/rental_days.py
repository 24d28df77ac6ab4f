"""
Rental day ("doba") arithmetic.

A rental day is a rolling 24-hour period anchored to the pickup clock time.
Returning later in the clock than the pickup time on the last day consumes
one more day. Only the two clock times are compared; the elapsed hours across
the whole span are not.
"""
import re
from datetime import date, datetime

TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")

FRIDAY = 4
WEEKEND_DAYS = (5, 6)  # Saturday, Sunday
WEEKEND_PACKAGE_MAX_DAYS = 3


def parse_date(value):
    """Return a date for a date/datetime/"YYYY-MM-DD" value, or None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_time(value):
    """Return minutes since midnight for "HH:MM", or None if missing/invalid."""
    if not isinstance(value, str) or not TIME_RE.match(value.strip()):
        return None
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


def calculate_rental_days(start_date, end_date, start_time=None, end_time=None) -> int:
    """
    Billable day count for a pickup/return pair.

    Returns 0 when either date is invalid or the return precedes the pickup.
    That is a precondition failure the caller has to reject, never a rental
    billed for zero days.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start is None or end is None or end < start:
        return 0

    days = max(1, (end - start).days)

    start_minutes = parse_time(start_time)
    end_minutes = parse_time(end_time)
    if start_minutes is not None and end_minutes is not None and end_minutes > start_minutes:
        days += 1

    return days


def calendar_flags(start_date, days: int) -> tuple[bool, bool]:
    """
    (is_weekend, weekend_pickup) for a rental starting on start_date.

    is_weekend: Friday pickup for at most 3 days (flat weekend package).
    weekend_pickup: pickup itself on Saturday or Sunday (surcharge).
    """
    start = parse_date(start_date)
    if start is None:
        return False, False
    weekday = start.weekday()
    is_weekend = weekday == FRIDAY and days <= WEEKEND_PACKAGE_MAX_DAYS
    weekend_pickup = weekday in WEEKEND_DAYS
    return is_weekend, weekend_pickup
