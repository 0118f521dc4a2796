from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user
from flask_wtf.csrf import generate_csrf

from backoffice import storage
from backoffice.auth import start_session, end_session
from backoffice.errors import ApiError, Unauthenticated, Forbidden, InternalError, error_response
from backoffice.extensions import bcrypt
from backoffice.forms import LoginForm, validate_payload
from backoffice.models import ROLES
from .utils import role_required, get_payload

auth_bp = Blueprint("auth_api", __name__, url_prefix="/api")


@auth_bp.route("/csrf-token", methods=["GET"])
def csrf_token():
    """Token the dashboards send back in the X-CSRFToken header."""
    return jsonify({"csrfToken": generate_csrf()})


@auth_bp.route("/login", methods=["POST"])
def login():
    try:
        values = validate_payload(LoginForm, get_payload())
        user = storage.get_user_by_email(values["email"])
        if user is None or not bcrypt.check_password_hash(user.password_hash, values["password"]):
            current_app.logger.info(f"Failed login for {values['email']}")
            raise Unauthenticated("Invalid email or password")
        if not user.is_active:
            raise Forbidden("Your account is not active. Please contact an administrator.")
        start_session(user)
        return jsonify(user.to_dict())
    except ApiError as e:
        return error_response(e)
    except Exception as e:
        current_app.logger.error(f"Unexpected error during login: {e}", exc_info=True)
        return error_response(InternalError("Login failed"))


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    current_app.logger.info(f"Session for user {current_user.id} ended")
    end_session()
    return "", 204


@auth_bp.route("/auth/user", methods=["GET"])
@role_required(*ROLES)
def get_current_user(principal):
    return jsonify(principal.to_dict())
