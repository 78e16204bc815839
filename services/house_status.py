import structlog

from extensions import db
from models import House, Booking
from services.availability import is_fully_booked

logger = structlog.get_logger(__name__)


def recompute(house):
    """Re-derive the booking availability of ``house`` from a fresh read.

    Only the ``availability`` column is written. ``moderation_status`` belongs
    to admins and wins when the display status is derived.
    Caller commits.
    """
    db.session.flush()
    bookings = Booking.query.filter_by(house_id=house.id).all()
    new_value = "rented" if is_fully_booked(house, bookings) else "available"

    if house.availability != new_value:
        logger.info(
            "House availability changed",
            house_id=house.id,
            old=house.availability,
            new=new_value,
        )
        house.availability = new_value
    return house


def recompute_all():
    houses = House.query.all()
    for house in houses:
        recompute(house)
    db.session.commit()
    return houses
