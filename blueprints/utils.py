from functools import wraps

from flask import request, jsonify, flash, redirect
from flask_login import current_user, login_required

from services.errors import Forbidden


def wants_json():
    return (
        request.is_json
        or request.headers.get("X-Requested-With") == "XMLHttpRequest"
        or request.accept_mimetypes.best == "application/json"
    )


def form_data():
    """Request body as a plain dict, JSON or form encoded."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    data = request.form.to_dict()
    if "image_urls" in request.form:
        data["image_urls"] = request.form.getlist("image_urls")
    return data


def reply(message, redirect_to, status=200, **extra):
    if wants_json():
        return jsonify({"success": True, "message": message, **extra}), status
    flash(message, "success")
    return redirect(redirect_to)


def fail(error, redirect_to):
    if wants_json():
        return jsonify({"success": False, "message": error.message}), error.status_code
    flash(error.message, "danger")
    return redirect(redirect_to)


def role_required(*roles):
    """login_required plus a role check; restricted accounts are refused too."""
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapped(*args, **kwargs):
            if current_user.is_restricted:
                return fail(Forbidden("Your account has been restricted."), "/")
            if roles and current_user.role not in roles:
                return fail(Forbidden(), "/")
            return view(*args, **kwargs)
        return wrapped
    return decorator
