from datetime import datetime

from flask import Blueprint, request, jsonify, url_for
from flask_login import current_user

from extensions import db
from blueprints.utils import form_data, reply, fail, role_required
from blueprints.serializers import user_to_dict, notification_to_dict
from services import notifications, listings
from services.errors import RentalError, InvalidInput

account_bp = Blueprint("account", __name__)


#-------------------------------------------------------
# Profile
@account_bp.route("/profile", methods=["GET", "POST"])
@role_required()
def profile():
    if request.method == "GET":
        return jsonify(user_to_dict(current_user))

    data = form_data()
    try:
        name = (data.get("name") or "").strip()
        if "name" in data and not name:
            raise InvalidInput("Name must not be empty.")
        if name:
            current_user.name = name

        if data.get("birthday"):
            try:
                current_user.birthday = datetime.strptime(data["birthday"], "%Y-%m-%d").date()
            except ValueError:
                raise InvalidInput("Invalid birthday.")

        if "photo_url" in data:
            if not current_user.has_photo:
                raise InvalidInput("This account has no photo.")
            current_user.photo_url = (data.get("photo_url") or "").strip() or None
    except RentalError as e:
        db.session.rollback()
        return fail(e, url_for("account.profile"))

    db.session.commit()
    return reply("Profile updated.", url_for("account.profile"), user=user_to_dict(current_user))


@account_bp.route("/report", methods=["POST"])
@role_required()
def report_user():
    data = form_data()
    try:
        listings.report(
            current_user.email,
            data.get("report_type"),
            details=data.get("details"),
            target_email=(data.get("target_email") or "").strip().lower() or None,
        )
    except RentalError as e:
        return fail(e, url_for("account.profile"))
    return reply("Report submitted.", url_for("account.profile"), status=201)


#-------------------------------------------------------
# Notifications
@account_bp.route("/notifications")
@role_required()
def notification_list():
    notifs = notifications.list_for(current_user.email)
    return jsonify({
        "items": [notification_to_dict(n) for n in notifs],
        "unread": sum(1 for n in notifs if not n.is_read),
    })


@account_bp.route("/notifications/mark_all_read", methods=["POST"])
@role_required()
def mark_all_read():
    notifications.mark_all_read(current_user.email)
    return "", 204
