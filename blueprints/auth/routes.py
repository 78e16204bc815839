from datetime import datetime

from flask import Blueprint, request, url_for, jsonify
from flask_login import login_user, logout_user, login_required, current_user

from extensions import db
from models.user import User
from blueprints.utils import form_data, reply, fail, wants_json
from services import verification
from services.errors import RentalError, InvalidInput, NotFound, Forbidden

auth_bp = Blueprint("auth", __name__)

MIN_PASSWORD_LENGTH = 5


def _check_new_password(password, confirm):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if password != confirm:
        raise InvalidInput("Passwords do not match, please try again!")


def _parse_birthday(value):
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidInput("Invalid birthday.")


# -----------------------------------------------------------------------------
# Register
@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "GET":
        return jsonify({"fields": ["email", "name", "password", "confirm_password", "role", "birthday", "photo_url"]})

    data = form_data()
    email = (data.get("email") or "").strip().lower()
    name = (data.get("name") or "").strip()
    role = data.get("role") or "tenant"
    try:
        if not email or "@" not in email:
            raise InvalidInput("Please enter a valid email.")
        if not name:
            raise InvalidInput("Please enter your name.")
        if role not in ("owner", "tenant"):
            raise InvalidInput("Please register as an owner or a tenant.")
        _check_new_password(data.get("password"), data.get("confirm_password"))
        birthday = _parse_birthday(data.get("birthday"))

        if User.query.filter_by(email=email).first():
            raise InvalidInput("Email already registered!")

        user = User(email=email)
        user.set_password(data.get("password"))
        payload = {
            "name": name,
            "role": role,
            "password_hash": user.password_hash,
            "birthday": birthday.isoformat() if birthday else None,
            "photo_url": (data.get("photo_url") or "").strip() or None,
        }
        verification.issue_code(email, "register", payload=payload, name=name)
    except RentalError as e:
        return fail(e, url_for("auth.register"))

    return reply(
        "A verification code has been sent to your email.",
        url_for("auth.verify", email=email, purpose="register"),
    )


def _finish_register(record):
    payload = record.payload or {}
    if User.query.filter_by(email=record.email).first():
        raise InvalidInput("Email already registered!")

    user = User(
        email=record.email,
        name=payload["name"],
        role=payload["role"],
        password_hash=payload["password_hash"],
        birthday=datetime.strptime(payload["birthday"], "%Y-%m-%d").date() if payload.get("birthday") else None,
        photo_url=payload.get("photo_url"),
    )
    db.session.add(user)
    db.session.commit()
    return user


# -----------------------------------------------------------------------------
# Login
@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "GET":
        return jsonify({"message": "Please log in."}), 401 if wants_json() else 200

    data = form_data()
    email = (data.get("email") or "").strip().lower()
    user = User.query.filter_by(email=email).first()
    try:
        if not user or not user.check_password(data.get("password") or ""):
            raise InvalidInput("Login credentials not matched.")
        if user.is_restricted:
            raise Forbidden("Your account has been restricted.")
        verification.issue_code(
            email, "login", payload={"remember": bool(data.get("remember"))}, name=user.name
        )
    except RentalError as e:
        return fail(e, url_for("auth.login"))

    return reply(
        "A verification code has been sent to your email.",
        url_for("auth.verify", email=email, purpose="login"),
    )


@auth_bp.route("/logout")
@login_required
def logout():
    logout_user()
    return reply("Logged out.", url_for("auth.login"))


# -----------------------------------------------------------------------------
# Verification
@auth_bp.route("/verify", methods=["GET", "POST"])
def verify():
    if request.method == "GET":
        return jsonify({"email": request.args.get("email"), "purpose": request.args.get("purpose")})

    data = form_data()
    email = (data.get("email") or "").strip().lower()
    purpose = data.get("purpose")
    back = url_for("auth.verify", email=email, purpose=purpose)
    try:
        if purpose not in ("register", "login", "reset"):
            raise InvalidInput("Unknown verification purpose.")
        record = verification.verify_code(email, purpose, data.get("code"))

        if purpose == "register":
            _finish_register(record)
            return reply("Registered successfully. Please log in.", url_for("auth.login"))

        if purpose == "login":
            user = User.query.filter_by(email=email).first()
            if user is None:
                raise NotFound("User not found.")
            login_user(user, remember=bool((record.payload or {}).get("remember")))
            return reply("Logged in successfully.", url_for("home"), role=user.role)

        return reply(
            "Code verified, please choose a new password.",
            url_for("auth.reset_password", email=email),
        )
    except RentalError as e:
        return fail(e, back)


@auth_bp.route("/resend", methods=["POST"])
def resend():
    data = form_data()
    email = (data.get("email") or "").strip().lower()
    purpose = data.get("purpose")
    try:
        if purpose not in ("register", "login", "reset"):
            raise InvalidInput("Unknown verification purpose.")
        verification.resend_code(email, purpose)
    except RentalError as e:
        return fail(e, url_for("auth.verify", email=email, purpose=purpose))
    return reply("A new code has been sent.", url_for("auth.verify", email=email, purpose=purpose))


# -----------------------------------------------------------------------------
# Forgot / reset password
@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    data = form_data()
    email = (data.get("email") or "").strip().lower()
    user = User.query.filter_by(email=email).first()
    try:
        if not user:
            raise NotFound("Email not found.")
        verification.issue_code(email, "reset", name=user.name)
    except RentalError as e:
        return fail(e, url_for("auth.login"))
    return reply(
        "A verification code has been sent to your email.",
        url_for("auth.verify", email=email, purpose="reset"),
    )


@auth_bp.route("/reset-password", methods=["GET", "POST"])
def reset_password():
    if request.method == "GET":
        return jsonify({"email": request.args.get("email")})

    data = form_data()
    email = (data.get("email") or "").strip().lower()
    try:
        _check_new_password(data.get("password"), data.get("confirm_password"))
        user = User.query.filter_by(email=email).first()
        if user is None:
            raise NotFound("Email not found.")
        verification.consume_verified(email, "reset")
        user.set_password(data.get("password"))
        db.session.commit()
    except RentalError as e:
        db.session.rollback()
        return fail(e, url_for("auth.reset_password", email=email))

    return reply("Password has been reset. Please log in.", url_for("auth.login"))


@auth_bp.route("/change-password", methods=["POST"])
@login_required
def change_password():
    data = form_data()
    try:
        if not current_user.check_password(data.get("current_password") or ""):
            raise InvalidInput("Current password not matched.")
        _check_new_password(data.get("password"), data.get("confirm_password"))
    except RentalError as e:
        return fail(e, url_for("account.profile"))

    current_user.set_password(data.get("password"))
    db.session.commit()
    return reply("Password updated.", url_for("account.profile"))
