from flask import Blueprint, request, jsonify, url_for, current_app
from flask_login import current_user

from extensions import db
from models import Booking
from blueprints.utils import form_data, reply, fail, role_required
from blueprints.serializers import booking_to_dict, payment_to_dict, page_to_dict
from services import bookings, payments
from services.errors import RentalError, NotFound, Forbidden

bookings_bp = Blueprint("bookings", __name__)


def _booking_for(booking_id, *, tenant=False, owner=False):
    """Load a booking the current user may act on in the given capacity."""
    booking = db.session.get(Booking, booking_id)
    if booking is None:
        raise NotFound("Booking not found.")
    if current_user.role == "admin":
        return booking
    if tenant and booking.tenant_email == current_user.email:
        return booking
    if owner and booking.house.owner_email == current_user.email:
        return booking
    raise Forbidden("This booking belongs to someone else.")


def _page_args():
    page = request.args.get("page", 1, type=int)
    page_size = request.args.get("page_size", current_app.config["BOOKINGS_PER_PAGE"], type=int)
    return page, max(1, min(page_size, 50))


#-------------------------------------------------------
# Tenant
@bookings_bp.route("/", methods=["POST"])
@role_required("tenant")
def create():
    data = form_data()
    try:
        house_id = int(data.get("house_id"))
    except (TypeError, ValueError):
        return fail(NotFound("House not found."), url_for("houses.browse"))

    try:
        booking = bookings.create_booking(
            house_id,
            current_user.email,
            data.get("start_date"),
            data.get("end_date"),
        )
    except RentalError as e:
        return fail(e, url_for("houses.detail", house_id=house_id))

    return reply(
        "Booking created! Please choose a payment method.",
        url_for("bookings.my_bookings"),
        status=201,
        booking=booking_to_dict(booking),
    )


@bookings_bp.route("/mine")
@role_required("tenant")
def my_bookings():
    page, page_size = _page_args()
    result = bookings.list_bookings(tenant_email=current_user.email, page=page, page_size=page_size)
    return jsonify(page_to_dict(result, booking_to_dict))


@bookings_bp.route("/<int:booking_id>/cancel", methods=["POST"])
@role_required()
def cancel(booking_id):
    back = url_for("bookings.owner_bookings") if current_user.role == "owner" else url_for("bookings.my_bookings")
    try:
        bookings.cancel_booking(booking_id, current_user.email)
    except RentalError as e:
        return fail(e, back)
    return reply("Booking has been cancelled successfully.", back)


@bookings_bp.route("/<int:booking_id>")
@role_required()
def detail(booking_id):
    try:
        booking = _booking_for(booking_id, tenant=True, owner=True)
    except RentalError as e:
        return jsonify({"success": False, "message": e.message}), e.status_code
    return jsonify(booking_to_dict(booking))


#-------------------------------------------------------
# Payments
@bookings_bp.route("/<int:booking_id>/payment", methods=["POST"])
@role_required("tenant")
def set_payment_method(booking_id):
    data = form_data()
    try:
        _booking_for(booking_id, tenant=True)
        payment = payments.record_payment_method(booking_id, data.get("method"))
    except RentalError as e:
        return fail(e, url_for("bookings.my_bookings"))

    if payment.status == "completed":
        message = "Payment completed, thank you!"
    else:
        message = "Payment recorded, waiting for confirmation."
    return reply(message, url_for("bookings.my_bookings"), payment=payment_to_dict(payment))


@bookings_bp.route("/<int:booking_id>/payment/confirm", methods=["POST"])
@role_required("owner", "admin")
def confirm_payment(booking_id):
    try:
        _booking_for(booking_id, owner=True)
        payment = payments.confirm_pending(booking_id)
    except RentalError as e:
        return fail(e, url_for("bookings.owner_bookings"))
    return reply(
        "Payment confirmed.",
        url_for("bookings.owner_bookings"),
        payment=payment_to_dict(payment),
    )


#-------------------------------------------------------
# Owner
@bookings_bp.route("/owner")
@role_required("owner")
def owner_bookings():
    page, page_size = _page_args()
    result = bookings.list_bookings(owner_email=current_user.email, page=page, page_size=page_size)
    return jsonify(page_to_dict(result, booking_to_dict))
