from datetime import date

from models import House, Booking
from services.availability import (
    inclusive_day_count, ranges_overlap, covers_window, is_fully_booked, is_range_free,
)
from services import bookings
from tests.conftest import make_house


def JAN(day):
    return date(2024, 1, day)


class TestDayCount:
    def test_single_day(self):
        assert inclusive_day_count(JAN(1), JAN(1)) == 1

    def test_three_days(self):
        assert inclusive_day_count(JAN(1), JAN(3)) == 3

    def test_across_month(self):
        assert inclusive_day_count(date(2024, 1, 30), date(2024, 2, 2)) == 4


class TestOverlap:
    def test_overlapping(self):
        assert ranges_overlap(JAN(3), JAN(8), JAN(1), JAN(5))

    def test_shared_end_day_counts_as_overlap(self):
        # inclusive bounds: checkout day of one booking is still occupied
        assert ranges_overlap(JAN(5), JAN(8), JAN(1), JAN(5))

    def test_contained(self):
        assert ranges_overlap(JAN(2), JAN(3), JAN(1), JAN(10))

    def test_disjoint(self):
        assert not ranges_overlap(JAN(6), JAN(8), JAN(1), JAN(5))
        assert not ranges_overlap(JAN(1), JAN(5), JAN(6), JAN(8))


class TestCoversWindow:
    def test_single_range_exact(self):
        assert covers_window(JAN(1), JAN(5), [(JAN(1), JAN(5))])

    def test_partial(self):
        assert not covers_window(JAN(1), JAN(5), [(JAN(1), JAN(3))])

    def test_adjacent_ranges_join(self):
        assert covers_window(JAN(1), JAN(5), [(JAN(4), JAN(5)), (JAN(1), JAN(3))])

    def test_gap_in_middle(self):
        assert not covers_window(JAN(1), JAN(5), [(JAN(1), JAN(2)), (JAN(4), JAN(5))])

    def test_ranges_spilling_outside_window(self):
        assert covers_window(JAN(3), JAN(5), [(JAN(1), JAN(4)), (JAN(5), JAN(9))])

    def test_no_window(self):
        assert not covers_window(None, None, [(JAN(1), JAN(5))])

    def test_no_ranges(self):
        assert not covers_window(JAN(1), JAN(5), [])


class TestIsFullyBooked:
    def test_house_without_window_is_never_full(self):
        house = House(start_date=None, end_date=None)
        assert not is_fully_booked(house, [Booking(start_date=JAN(1), end_date=JAN(31))])

    def test_house_without_bookings_is_never_full(self):
        house = House(start_date=JAN(1), end_date=JAN(5))
        assert not is_fully_booked(house, [])

    def test_full_window(self):
        house = House(start_date=JAN(1), end_date=JAN(5))
        assert is_fully_booked(house, [Booking(start_date=JAN(1), end_date=JAN(5))])

    def test_partial_window(self):
        house = House(start_date=JAN(1), end_date=JAN(5))
        assert not is_fully_booked(house, [Booking(start_date=JAN(1), end_date=JAN(3))])

    def test_reads_bookings_from_database(self, people, house_id, ctx):
        from extensions import db
        house = db.session.get(House, house_id)
        bookings.create_booking(house_id, people["tenant"], JAN(1), JAN(2))
        assert not is_fully_booked(house)
        bookings.create_booking(house_id, people["other_tenant"], JAN(3), JAN(5))
        assert is_fully_booked(house)


def test_is_range_free(people, ctx):
    house = make_house(people["owner"], start=JAN(1), end=JAN(31))
    bookings.create_booking(house.id, people["tenant"], JAN(10), JAN(12))

    assert is_range_free(house.id, JAN(1), JAN(9))
    assert is_range_free(house.id, JAN(13), JAN(20))
    assert not is_range_free(house.id, JAN(12), JAN(14))
    assert not is_range_free(house.id, JAN(8), JAN(10))
    assert not is_range_free(house.id, JAN(1), JAN(31))

    other = make_house(people["owner"], start=JAN(1), end=JAN(31))
    assert is_range_free(other.id, JAN(10), JAN(12))
