from datetime import date

from extensions import db
from models import House
from services import bookings, house_status, moderation
from tests.conftest import make_house


def test_restriction_outranks_availability(people, house_id, ctx):
    house = db.session.get(House, house_id)
    moderation.set_house_moderation(house_id, "restricted")
    assert house.status == "restricted"
    assert house.availability == "available"

    house_status.recompute(house)
    db.session.commit()
    assert house.moderation_status == "restricted"
    assert house.status == "restricted"


def test_cancelling_never_clears_a_restriction(people, house_id, ctx):
    booking = bookings.create_booking(house_id, people["tenant"], date(2024, 1, 1), date(2024, 1, 5))
    moderation.set_house_moderation(house_id, "restricted")

    bookings.cancel_booking(booking.id, people["tenant"])

    house = db.session.get(House, house_id)
    assert house.moderation_status == "restricted"
    assert house.availability == "available"
    assert house.status == "restricted"


def test_lifting_restriction_shows_current_availability(people, house_id, ctx):
    bookings.create_booking(house_id, people["tenant"], date(2024, 1, 1), date(2024, 1, 5))
    moderation.set_house_moderation(house_id, "restricted")
    moderation.set_house_moderation(house_id, "valid")

    assert db.session.get(House, house_id).status == "rented"


def test_recompute_all_repairs_drift(people, ctx):
    full = make_house(people["owner"])
    empty = make_house(people["owner"])
    bookings.create_booking(full.id, people["tenant"], date(2024, 1, 1), date(2024, 1, 5))

    full.availability = "available"
    empty.availability = "rented"
    db.session.commit()

    house_status.recompute_all()

    assert full.availability == "rented"
    assert empty.availability == "available"


def test_shrinking_window_can_fill_house(people, ctx):
    from services import listings

    house = make_house(people["owner"], start=date(2024, 1, 1), end=date(2024, 1, 10))
    bookings.create_booking(house.id, people["tenant"], date(2024, 1, 1), date(2024, 1, 5))
    assert house.availability == "available"

    listings.update_house(house.id, people["owner"], {"end_date": "2024-01-05"})
    assert house.availability == "rented"
