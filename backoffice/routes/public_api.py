from flask import Blueprint, jsonify, current_app

from backoffice import storage
from backoffice.errors import ApiError, InternalError, error_response
from backoffice.extensions import db, csrf
from backoffice.forms import ContactMessageForm, validate_payload
from .utils import get_payload

public_bp = Blueprint("public_api", __name__, url_prefix="/api")


@public_bp.route("/categories", methods=["GET"])
def get_categories():
    try:
        return jsonify([c.to_dict() for c in storage.get_categories()])
    except Exception as e:
        current_app.logger.error(f"Error fetching categories: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch categories"))


# Anonymous visitors have no session to protect
@public_bp.route("/contact", methods=["POST"])
@csrf.exempt
def create_contact_message():
    """Store a message from the public contact form. New messages start unread."""
    try:
        values = validate_payload(ContactMessageForm, get_payload(), ignore=("status",))
        message = storage.create_contact_message(values)
        db.session.commit()
        return jsonify(message.to_dict())
    except ApiError as e:
        db.session.rollback()
        return error_response(e)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error creating contact message: {e}", exc_info=True)
        return error_response(InternalError("Failed to create message"))


# A simple health check endpoint for the API
@public_bp.route("/health", methods=["GET"])
def health_check():
    return jsonify({"status": "API is healthy"}), 200
