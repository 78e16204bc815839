from flask import Blueprint, request, jsonify, url_for, current_app
from flask_login import login_required, current_user
from sqlalchemy import func

from extensions import db
from models import House, HouseReview
from blueprints.utils import form_data, reply, fail, role_required
from blueprints.serializers import house_to_dict, review_to_dict, page_to_dict
from services import listings
from services.errors import RentalError, NotFound

houses_bp = Blueprint("houses", __name__)


#-------------------------------------------------------
# Browse
@houses_bp.route("/")
def browse():
    page = request.args.get("page", 1, type=int)
    try:
        houses = listings.search_houses(
            request.args, page=page, per_page=current_app.config["HOUSES_PER_PAGE"]
        )
    except RentalError as e:
        return jsonify({"success": False, "message": e.message}), e.status_code
    return jsonify(page_to_dict(houses, house_to_dict))


@houses_bp.route("/<int:house_id>")
def detail(house_id):
    house = db.get_or_404(House, house_id)

    # Restricted listings stay visible to their owner and admins only
    if house.moderation_status == "restricted":
        viewer = current_user if current_user.is_authenticated else None
        if viewer is None or (viewer.role != "admin" and viewer.email != house.owner_email):
            return jsonify({"success": False, "message": NotFound.default_message}), 404

    avg_rating = (
        db.session.query(func.avg(HouseReview.rating))
        .filter(HouseReview.house_id == house.id)
        .scalar()
    )
    data = house_to_dict(house)
    data["images"] = [img.image_url for img in house.images]
    data["reviews"] = [
        review_to_dict(r)
        for r in sorted(house.reviews, key=lambda r: r.id, reverse=True)
    ]
    data["average_rating"] = round(float(avg_rating), 1) if avg_rating is not None else None
    return jsonify(data)


#-------------------------------------------------------
# Owner listings
@houses_bp.route("/mine")
@role_required("owner")
def mine():
    houses = (
        House.query.filter_by(owner_email=current_user.email)
        .order_by(House.created_at.desc(), House.id.desc())
        .all()
    )
    return jsonify({"items": [house_to_dict(h) for h in houses]})


@houses_bp.route("/", methods=["POST"])
@role_required("owner")
def create():
    try:
        house = listings.create_house(current_user.email, form_data())
    except RentalError as e:
        return fail(e, url_for("houses.mine"))
    return reply(
        "House listed successfully!",
        url_for("houses.detail", house_id=house.id),
        status=201,
        house=house_to_dict(house),
    )


@houses_bp.route("/<int:house_id>/edit", methods=["POST"])
@role_required("owner")
def edit(house_id):
    try:
        house = listings.update_house(house_id, current_user.email, form_data())
    except RentalError as e:
        return fail(e, url_for("houses.detail", house_id=house_id))
    return reply(
        "House updated successfully!",
        url_for("houses.detail", house_id=house.id),
        house=house_to_dict(house),
    )


@houses_bp.route("/<int:house_id>/delete", methods=["POST"])
@role_required("owner")
def delete(house_id):
    try:
        listings.delete_house(house_id, current_user.email)
    except RentalError as e:
        return fail(e, url_for("houses.mine"))
    return reply("House deleted.", url_for("houses.mine"))


@houses_bp.route("/<int:house_id>/images", methods=["POST"])
@role_required("owner")
def add_images(house_id):
    data = form_data()
    urls = data.get("image_urls") or []
    if isinstance(urls, str):
        urls = [urls]
    try:
        images = listings.add_images(house_id, current_user.email, urls)
    except RentalError as e:
        return fail(e, url_for("houses.detail", house_id=house_id))
    return reply(
        f"Added {len(images)} image(s).",
        url_for("houses.detail", house_id=house_id),
        images=[img.image_url for img in images],
    )


#-------------------------------------------------------
# Reviews & reports
@houses_bp.route("/<int:house_id>/reviews", methods=["POST"])
@role_required("tenant")
def review(house_id):
    data = form_data()
    try:
        rev = listings.add_review(house_id, current_user.email, data.get("rating"), data.get("comment"))
    except RentalError as e:
        return fail(e, url_for("houses.detail", house_id=house_id))
    return reply(
        "Thanks for your review!",
        url_for("houses.detail", house_id=house_id),
        status=201,
        review=review_to_dict(rev),
    )


@houses_bp.route("/<int:house_id>/report", methods=["POST"])
@login_required
def report(house_id):
    data = form_data()
    try:
        listings.report(
            current_user.email,
            data.get("report_type"),
            details=data.get("details"),
            house_id=house_id,
        )
    except RentalError as e:
        return fail(e, url_for("houses.detail", house_id=house_id))
    return reply("Report submitted.", url_for("houses.detail", house_id=house_id), status=201)
