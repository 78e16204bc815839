from datetime import datetime

from flask import Blueprint, request, jsonify, url_for, current_app, send_file
from flask_login import current_user
from sqlalchemy import or_

from extensions import db
from models import User, House, Booking, Report
from blueprints.utils import form_data, reply, fail
from blueprints.serializers import (
    user_to_dict, house_to_dict, booking_to_dict, report_to_dict, page_to_dict,
)
from services import moderation, listings, exports
from services.errors import RentalError, Forbidden, InvalidInput

admin_bp = Blueprint("admin", __name__)


# Admins only
@admin_bp.before_request
def restrict_to_admin():
    if not current_user.is_authenticated or current_user.role != "admin":
        return fail(Forbidden("You do not have access to the admin area."), url_for("auth.login"))


#-------------------------------------------------------
# Users
@admin_bp.route("/users")
def users():
    page = request.args.get("page", 1, type=int)
    keyword = request.args.get("q", "").strip()
    role = request.args.get("role")

    query = User.query
    if keyword:
        query = query.filter(or_(User.email.ilike(f"%{keyword}%"), User.name.ilike(f"%{keyword}%")))
    if role:
        query = query.filter_by(role=role)

    result = query.order_by(User.email.asc()).paginate(
        page=max(page, 1), per_page=current_app.config["ADMIN_USERS_PER_PAGE"], error_out=False
    )
    return jsonify(page_to_dict(result, user_to_dict))


@admin_bp.route("/users/<string:email>")
def user_detail(email):
    try:
        user = moderation.get_user(email)
    except RentalError as e:
        return fail(e, url_for("admin.users"))
    data = user_to_dict(user)
    data["houses"] = [h.id for h in user.houses]
    data["bookings"] = [booking_to_dict(b) for b in user.bookings]
    return jsonify(data)


@admin_bp.route("/users/<string:email>/update", methods=["POST"])
def update_user(email):
    data = form_data()
    try:
        birthday = None
        if data.get("birthday"):
            try:
                birthday = datetime.strptime(data["birthday"], "%Y-%m-%d").date()
            except ValueError:
                raise InvalidInput("Invalid date format")
        user = moderation.update_user(email, name=data.get("name"), birthday=birthday)
    except RentalError as e:
        return fail(e, url_for("admin.user_detail", email=email))
    return reply("User updated successfully!", url_for("admin.user_detail", email=email), user=user_to_dict(user))


@admin_bp.route("/users/<string:email>/delete_photo", methods=["POST"])
def delete_photo(email):
    try:
        moderation.delete_user_photo(email)
    except RentalError as e:
        return fail(e, url_for("admin.user_detail", email=email))
    return reply("Photo deleted.", url_for("admin.user_detail", email=email))


@admin_bp.route("/users/<string:email>/delete", methods=["POST"])
def delete_user(email):
    if email == current_user.email:
        return fail(Forbidden("You cannot delete your own account."), url_for("admin.users"))
    try:
        moderation.delete_user(email)
    except RentalError as e:
        return fail(e, url_for("admin.users"))
    return reply("User deleted successfully!", url_for("admin.users"))


@admin_bp.route("/users/<string:email>/<any(restrict, validate):action>", methods=["POST"])
def moderate_user(email, action):
    status = "restricted" if action == "restrict" else "valid"
    try:
        moderation.set_user_moderation(email, status)
    except RentalError as e:
        return fail(e, url_for("admin.user_detail", email=email))
    return reply(f"User is now {status}.", url_for("admin.user_detail", email=email))


#-------------------------------------------------------
# Houses
@admin_bp.route("/houses")
def houses():
    status = request.args.get("status")
    query = House.query
    if status in ("valid", "restricted"):
        query = query.filter_by(moderation_status=status)
    elif status in ("available", "rented"):
        query = query.filter_by(availability=status)
    houses = query.order_by(House.id.asc()).all()
    return jsonify({"items": [house_to_dict(h) for h in houses]})


@admin_bp.route("/houses/<int:house_id>")
def house_detail(house_id):
    house = db.get_or_404(House, house_id)
    data = house_to_dict(house)
    data["bookings"] = [
        booking_to_dict(b)
        for b in Booking.query.filter_by(house_id=house.id).order_by(Booking.start_date.desc()).all()
    ]
    return jsonify(data)


@admin_bp.route("/houses/<int:house_id>/update", methods=["POST"])
def update_house(house_id):
    try:
        house = listings.update_house(house_id, None, form_data())
    except RentalError as e:
        return fail(e, url_for("admin.house_detail", house_id=house_id))
    return reply(
        "House updated successfully!",
        url_for("admin.house_detail", house_id=house_id),
        house=house_to_dict(house),
    )


@admin_bp.route("/houses/<int:house_id>/<any(restrict, validate):action>", methods=["POST"])
def moderate_house(house_id, action):
    status = "restricted" if action == "restrict" else "valid"
    try:
        house = moderation.set_house_moderation(house_id, status)
    except RentalError as e:
        return fail(e, url_for("admin.houses"))
    return reply(
        f"House is now {status}.",
        url_for("admin.house_detail", house_id=house_id),
        house=house_to_dict(house),
    )


@admin_bp.route("/houses/<int:house_id>/delete", methods=["POST"])
def delete_house(house_id):
    try:
        listings.delete_house(house_id)
    except RentalError as e:
        return fail(e, url_for("admin.houses"))
    return reply("House deleted.", url_for("admin.houses"))


#-------------------------------------------------------
# Reports
@admin_bp.route("/reports")
def reports():
    status = request.args.get("status")
    query = Report.query
    if status:
        query = query.filter_by(status=status)
    reps = query.order_by(Report.created_at.desc(), Report.id.desc()).all()
    return jsonify({"items": [report_to_dict(r) for r in reps]})


@admin_bp.route("/reports/<int:report_id>/<any(resolve, dismiss):action>", methods=["POST"])
def close_report(report_id, action):
    status = "resolved" if action == "resolve" else "dismissed"
    try:
        moderation.close_report(report_id, status)
    except RentalError as e:
        return fail(e, url_for("admin.reports"))
    return reply(f"Report {status}.", url_for("admin.reports"))


#-------------------------------------------------------
# Export
@admin_bp.route("/export/bookings")
def export_bookings():
    output = exports.bookings_workbook()
    filename = f"Rental_bookings_{datetime.now().strftime('%Y-%m-%d_%H-%M')}.xlsx"
    return send_file(
        output,
        as_attachment=True,
        download_name=filename,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
