"""Date availability queries for a single house.

All ranges are inclusive on both ends: a booking from the 1st to the 3rd
occupies three days, and a booking ending on the 3rd conflicts with one
starting on the 3rd.
"""
from datetime import timedelta

from models import Booking


def inclusive_day_count(start, end):
    return (end - start).days + 1


def ranges_overlap(start, end, other_start, other_end):
    return start <= other_end and end >= other_start


def is_range_free(house_id, start, end, exclude_booking_id=None):
    query = Booking.query.filter(
        Booking.house_id == house_id,
        Booking.start_date <= end,
        Booking.end_date >= start,
    )
    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)
    return query.first() is None


def covers_window(window_start, window_end, ranges):
    """True if the union of ``ranges`` covers every day of the window."""
    if window_start is None or window_end is None or window_start > window_end:
        return False

    next_uncovered = window_start
    for start, end in sorted(ranges):
        if end < next_uncovered:
            continue
        if start > next_uncovered:
            # gap before this range
            return False
        next_uncovered = end + timedelta(days=1)
        if next_uncovered > window_end:
            return True
    return False


def is_fully_booked(house, bookings=None):
    if not house.has_window:
        return False
    if bookings is None:
        bookings = Booking.query.filter_by(house_id=house.id).all()
    if not bookings:
        return False
    return covers_window(
        house.start_date,
        house.end_date,
        [(b.start_date, b.end_date) for b in bookings],
    )
