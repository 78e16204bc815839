from decimal import Decimal, InvalidOperation

import structlog
from sqlalchemy import and_, exists

from extensions import db
from models import House, HouseImage, HouseReview, Booking, Report
from services import house_status
from services.bookings import parse_date
from services.errors import NotFound, Forbidden, InvalidInput, InvalidRange
from services.transaction import atomic

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("room_name", "room_type", "address", "price")
INT_FIELDS = ("rooms", "bathrooms", "sqft")
TEXT_FIELDS = ("room_name", "room_type", "address", "furnishing", "other", "image_url")


def _clean(form, partial=False):
    data = {}
    for field in TEXT_FIELDS:
        if field in form:
            data[field] = (form.get(field) or "").strip() or None

    for field in INT_FIELDS:
        if form.get(field) not in (None, ""):
            try:
                data[field] = int(form.get(field))
            except (TypeError, ValueError):
                raise InvalidInput(f"{field} must be a whole number.")
            if data[field] < 0:
                raise InvalidInput(f"{field} must not be negative.")

    if form.get("price") not in (None, ""):
        try:
            data["price"] = Decimal(str(form.get("price")))
        except InvalidOperation:
            raise InvalidInput("Price must be a number.")
        if data["price"] <= 0:
            raise InvalidInput("Price must be greater than zero.")

    for field in ("start_date", "end_date"):
        if field in form:
            data[field] = parse_date(form.get(field)) if form.get(field) else None

    # partial edits may skip a required field but never blank it
    required = [f for f in REQUIRED_FIELDS if not partial or f in data]
    missing = [f for f in required if not data.get(f)]
    if missing:
        raise InvalidInput(f"Missing required fields: {', '.join(missing)}")
    return data


def _check_window(house):
    if (house.start_date is None) != (house.end_date is None):
        raise InvalidRange("Please set both the start and the end of the rental window.")
    if house.start_date and house.end_date and house.start_date > house.end_date:
        raise InvalidRange("Rental window start must not be after its end.")


def get_house(house_id):
    house = db.session.get(House, house_id)
    if house is None:
        raise NotFound("House not found.")
    return house


def _owned(house_id, owner_email):
    house = get_house(house_id)
    if house.owner_email != owner_email:
        raise Forbidden("This listing belongs to another owner.")
    return house


def create_house(owner_email, form):
    data = _clean(form)
    with atomic():
        house = House(owner_email=owner_email, **data)
        _check_window(house)
        db.session.add(house)
        db.session.flush()
        for url in form.get("image_urls") or []:
            db.session.add(HouseImage(house_id=house.id, image_url=url))
    logger.info("House listed", house_id=house.id, owner=owner_email)
    return house


def update_house(house_id, owner_email, form):
    """Edit listing fields and re-derive availability.

    ``owner_email`` of None skips the ownership check (admin edit).
    Moderation and availability are never taken from the form.
    """
    with atomic():
        house = get_house(house_id) if owner_email is None else _owned(house_id, owner_email)
        for key, value in _clean(form, partial=True).items():
            setattr(house, key, value)
        _check_window(house)
        house_status.recompute(house)
    logger.info("House updated", house_id=house.id, by=owner_email or "admin")
    return house


def delete_house(house_id, owner_email=None):
    """Delete a listing with its bookings, payments, images and reviews.

    ``owner_email`` of None skips the ownership check (admin removal).
    """
    with atomic():
        house = get_house(house_id) if owner_email is None else _owned(house_id, owner_email)
        db.session.delete(house)
    logger.info("House deleted", house_id=house_id, by=owner_email or "admin")


def add_images(house_id, owner_email, urls):
    urls = [u.strip() for u in urls if u and u.strip()]
    if not urls:
        raise InvalidInput("No image URL given.")
    with atomic():
        house = _owned(house_id, owner_email)
        images = [HouseImage(house_id=house.id, image_url=u) for u in urls]
        db.session.add_all(images)
    return images


def search_houses(args, page=1, per_page=12):
    query = House.query.filter(House.moderation_status == "valid")

    address = args.get("address")
    room_type = args.get("room_type")
    min_price = args.get("min_price", type=float)
    max_price = args.get("max_price", type=float)
    available_only = args.get("available")  # "yes" or None
    sort_price = args.get("sort_price")      # "asc" / "desc"
    free_from = args.get("free_from")
    free_to = args.get("free_to")

    if address:
        query = query.filter(House.address.like(f"%{address}%"))
    if room_type:
        query = query.filter_by(room_type=room_type)
    if min_price:
        query = query.filter(House.price >= min_price)
    if max_price:
        query = query.filter(House.price <= max_price)
    if available_only == "yes":
        query = query.filter(House.availability == "available")

    if free_from and free_to:
        start, end = parse_date(free_from), parse_date(free_to)
        if start > end:
            raise InvalidRange("Start date must not be after end date.")
        clash = exists().where(and_(
            Booking.house_id == House.id,
            Booking.start_date <= end,
            Booking.end_date >= start,
        ))
        query = query.filter(~clash)

    if sort_price == "asc":
        query = query.order_by(House.price.asc())
    elif sort_price == "desc":
        query = query.order_by(House.price.desc())
    else:
        query = query.order_by(House.created_at.desc(), House.id.desc())

    return query.paginate(page=max(page, 1), per_page=per_page, error_out=False)


def add_review(house_id, user_email, rating, comment=None):
    try:
        rating = int(rating)
    except (TypeError, ValueError):
        raise InvalidInput("Rating must be a number from 1 to 5.")
    if not 1 <= rating <= 5:
        raise InvalidInput("Rating must be a number from 1 to 5.")

    with atomic():
        house = get_house(house_id)
        review = HouseReview(
            house_id=house.id,
            user_email=user_email,
            rating=rating,
            comment=(comment or "").strip()[:1000] or None,
        )
        db.session.add(review)
    return review


def report(reporter_email, report_type, details=None, house_id=None, target_email=None):
    if not report_type:
        raise InvalidInput("Please choose a report type.")
    if house_id is None and not target_email:
        raise InvalidInput("Nothing to report.")

    with atomic():
        if house_id is not None:
            get_house(house_id)
        rep = Report(
            reporter_email=reporter_email,
            target_house_id=house_id,
            target_email=target_email,
            report_type=report_type,
            details=details,
        )
        db.session.add(rep)
    logger.info("Report filed", report_id=rep.id, house_id=house_id, target=target_email)
    return rep
