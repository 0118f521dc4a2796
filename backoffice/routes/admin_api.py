from flask import Blueprint, jsonify, current_app

from backoffice import storage
from backoffice.errors import ApiError, NotFound, InternalError, error_response
from backoffice.extensions import db
from backoffice.forms import UpdateMessageStatusForm, UpdateOrderStatusForm, validate_payload
from .utils import role_required, get_payload

admin_bp = Blueprint("admin_api", __name__)


@admin_bp.route("/stats", methods=["GET"])
@role_required("admin")
def get_stats(principal):
    try:
        return jsonify(storage.get_admin_stats())
    except Exception as e:
        current_app.logger.error(f"Error fetching admin stats: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch stats"))


@admin_bp.route("/users", methods=["GET"])
@role_required("admin")
def get_users(principal):
    try:
        users = storage.get_users_with_stats()
        return jsonify([dict(user.to_dict(), productCount=product_count) for user, product_count in users])
    except Exception as e:
        current_app.logger.error(f"Error fetching users: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch users"))


@admin_bp.route("/products", methods=["GET"])
@role_required("admin")
def get_products(principal):
    try:
        return jsonify([p.to_dict() for p in storage.get_products()])
    except Exception as e:
        current_app.logger.error(f"Error fetching products: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch products"))


@admin_bp.route("/orders", methods=["GET"])
@role_required("admin")
def get_orders(principal):
    try:
        return jsonify([o.to_dict() for o in storage.get_all_orders()])
    except Exception as e:
        current_app.logger.error(f"Error fetching orders: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch orders"))


@admin_bp.route("/messages", methods=["GET"])
@role_required("admin")
def get_messages(principal):
    try:
        return jsonify([m.to_dict() for m in storage.get_contact_messages()])
    except Exception as e:
        current_app.logger.error(f"Error fetching messages: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch messages"))


@admin_bp.route("/messages/<int:message_id>/status", methods=["PUT"])
@role_required("admin")
def update_message_status(principal, message_id):
    """Move a contact message between `unread` and `read`."""
    try:
        values = validate_payload(UpdateMessageStatusForm, get_payload())
        message = storage.update_contact_message_status(message_id, values["status"])
        if message is None:
            raise NotFound("Message not found")
        db.session.commit()
        return jsonify(message.to_dict())
    except ApiError as e:
        db.session.rollback()
        return error_response(e)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating message {message_id} status: {e}", exc_info=True)
        return error_response(InternalError("Failed to update message status"))


@admin_bp.route("/orders/<int:order_id>/status", methods=["PUT"])
@role_required("admin")
def update_order_status(principal, order_id):
    try:
        values = validate_payload(UpdateOrderStatusForm, get_payload())
        order = storage.update_order_status(order_id, values["status"])
        if order is None:
            raise NotFound("Order not found")
        db.session.commit()
        current_app.logger.info(f"Admin {principal.id} set order {order_id} status to {order.status}")
        return jsonify(order.to_dict())
    except ApiError as e:
        db.session.rollback()
        return error_response(e)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating order {order_id} status: {e}", exc_info=True)
        return error_response(InternalError("Failed to update order status"))
