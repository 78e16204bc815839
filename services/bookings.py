"""Booking lifecycle: create, cancel, list.

Create and cancel each run in one transaction. The house row is locked
before the availability check, so two overlapping requests for the same
house serialise on it and the second one sees the first one's booking.
"""
from datetime import datetime, date

import structlog

from extensions import db
from models import House, Booking, Payment, User
from services import house_status
from services.availability import inclusive_day_count, is_range_free
from services.errors import NotFound, InvalidRange, DateConflict, Forbidden
from services.notifications import notify, booking_data
from services.transaction import atomic, lock_row

logger = structlog.get_logger(__name__)


def parse_date(value):
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidRange("Please choose both a start and an end date.")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidRange(f"Invalid date: {value}")


def calculate_total_price(house, start, end):
    return house.price * inclusive_day_count(start, end)


def _lock_house(house_id):
    return lock_row(House, House.id == house_id)


def create_booking(house_id, tenant_email, start, end):
    start = parse_date(start)
    end = parse_date(end)
    if start > end:
        raise InvalidRange("Start date must not be after end date.")

    with atomic():
        house = _lock_house(house_id)
        if house is None:
            raise NotFound("House not found.")
        if house.moderation_status == "restricted":
            raise Forbidden("This house is not available for booking.")
        if house.has_window and (start < house.start_date or end > house.end_date):
            raise InvalidRange(
                f"Dates must be within {house.start_date.isoformat()} and {house.end_date.isoformat()}."
            )
        if not is_range_free(house.id, start, end):
            raise DateConflict()

        total = calculate_total_price(house, start, end)
        booking = Booking(
            house_id=house.id,
            tenant_email=tenant_email,
            start_date=start,
            end_date=end,
            total_price=total,
        )
        booking.payment = Payment(amount=total, status="pending")
        db.session.add(booking)

        house_status.recompute(house)

    logger.info(
        "Booking created",
        booking_id=booking.id,
        house_id=house_id,
        tenant=tenant_email,
        start=start.isoformat(),
        end=end.isoformat(),
    )
    return booking


def _can_cancel(booking, requester_email):
    if requester_email in (booking.tenant_email, booking.house.owner_email):
        return True
    requester = User.query.filter_by(email=requester_email).first()
    return requester is not None and requester.role == "admin"


def cancel_booking(booking_id, requester_email):
    with atomic():
        booking = db.session.get(Booking, booking_id)
        if booking is None:
            raise NotFound("Booking not found.")
        if not _can_cancel(booking, requester_email):
            raise Forbidden("You cannot cancel this booking.")

        house = _lock_house(booking.house_id)
        data = booking_data(booking)
        tenant_email = booking.tenant_email

        if booking.payment is not None:
            db.session.delete(booking.payment)
        db.session.delete(booking)

        house_status.recompute(house)

        notify(tenant_email, "booking_cancelled", data)
        if house.owner_email != tenant_email:
            notify(house.owner_email, "booking_cancelled", data)

    logger.info("Booking cancelled", booking_id=booking_id, by=requester_email)


def list_bookings(tenant_email=None, owner_email=None, page=1, page_size=4):
    if (tenant_email is None) == (owner_email is None):
        raise ValueError("Pass exactly one of tenant_email or owner_email")
    if page < 1:
        page = 1

    query = Booking.query
    if tenant_email is not None:
        query = query.filter(Booking.tenant_email == tenant_email)
    else:
        query = query.join(House, House.id == Booking.house_id).filter(House.owner_email == owner_email)

    query = query.order_by(Booking.start_date.desc(), Booking.id.desc())
    return query.paginate(page=page, per_page=page_size, error_out=False)
