import structlog

from extensions import db
from models import User, Report
from services import house_status
from services.errors import NotFound, InvalidInput, Forbidden
from services.listings import get_house
from services.notifications import notify
from services.transaction import atomic

logger = structlog.get_logger(__name__)

MODERATION_STATES = ("valid", "restricted")


def set_house_moderation(house_id, status):
    if status not in MODERATION_STATES:
        raise InvalidInput(f"Unknown moderation status: {status}")
    with atomic():
        house = get_house(house_id)
        house.moderation_status = status
        # Availability kept current underneath so lifting a restriction is exact
        house_status.recompute(house)
        notify(house.owner_email, f"house_{status}", {"house_id": house.id, "room_name": house.room_name})
    logger.info("House moderation changed", house_id=house_id, status=status)
    return house


def get_user(email):
    user = User.query.filter_by(email=email).first()
    if user is None:
        raise NotFound("User not found.")
    return user


def set_user_moderation(email, status):
    if status not in MODERATION_STATES:
        raise InvalidInput(f"Unknown moderation status: {status}")
    with atomic():
        user = get_user(email)
        if user.role == "admin":
            raise Forbidden("Admin accounts cannot be moderated.")
        user.status = status
    logger.info("User moderation changed", email=email, status=status)
    return user


def update_user(email, name=None, birthday=None):
    with atomic():
        user = get_user(email)
        if name:
            user.name = name.strip()
        if birthday is not None:
            user.birthday = birthday
    return user


def delete_user_photo(email):
    with atomic():
        user = get_user(email)
        if not user.has_photo:
            raise InvalidInput("This account has no photo.")
        user.photo_url = None
    return user


def delete_user(email):
    """Delete an account with its listings, bookings and reviews.

    Houses that lose a booking this way get their availability re-derived.
    """
    with atomic():
        user = get_user(email)
        booked = {b.house for b in user.bookings if b.house.owner_email != email}
        db.session.delete(user)
        for house in booked:
            house_status.recompute(house)
    logger.info("User deleted", email=email)


def close_report(report_id, status):
    if status not in ("resolved", "dismissed"):
        raise InvalidInput(f"Unknown report status: {status}")
    with atomic():
        rep = db.session.get(Report, report_id)
        if rep is None:
            raise NotFound("Report not found.")
        rep.status = status
    logger.info("Report closed", report_id=report_id, status=status)
    return rep
