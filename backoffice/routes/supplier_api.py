from flask import Blueprint, jsonify, current_app
from sqlalchemy.exc import IntegrityError

from backoffice import storage
from backoffice.errors import ApiError, NotFound, Conflict, ValidationError, InternalError, error_response
from backoffice.extensions import db
from backoffice.forms import ProductForm, validate_payload
from .utils import role_required, get_payload

supplier_bp = Blueprint("supplier_api", __name__)

PRODUCT_NOT_FOUND = "Product not found"
DUPLICATE_SLUG = "A product with this slug already exists."


def _check_category(values):
    category_id = values.get("category_id")
    if category_id is not None and storage.get_category(category_id) is None:
        raise ValidationError("Invalid request payload", errors={"categoryId": ["Unknown category."]})


def _check_slug(values, product_id=None):
    slug = values.get("slug")
    if slug is None:
        return
    existing = storage.get_product_by_slug(slug)
    if existing is not None and existing.id != product_id:
        raise Conflict(DUPLICATE_SLUG)


def _integrity_conflict(error):
    # Concurrent writes can still race past _check_slug
    if "slug" in str(error.orig):
        return Conflict(DUPLICATE_SLUG)
    return Conflict("Product conflicts with existing data.")


# --- Product CRUD ---

@supplier_bp.route("/products", methods=["GET"])
@role_required("supplier")
def get_products(principal):
    """List the products owned by the calling supplier."""
    try:
        products = storage.get_products(supplier_id=principal.id)
        return jsonify([p.to_dict() for p in products])
    except Exception as e:
        current_app.logger.error(f"Error fetching supplier products: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch products"))


@supplier_bp.route("/products", methods=["POST"])
@role_required("supplier")
def create_product(principal):
    """Create a product owned by the calling supplier.

    A `supplierId` sent by the client is discarded; ownership always comes
    from the session.
    """
    try:
        values = validate_payload(ProductForm, get_payload(), ignore=("supplierId",))
        _check_category(values)
        _check_slug(values)
        values["supplier_id"] = principal.id
        product = storage.create_product(values)
        db.session.commit()
        current_app.logger.info(f"Supplier {principal.id} created product {product.id}")
        return jsonify(product.to_dict())
    except ApiError as e:
        db.session.rollback()
        return error_response(e)
    except IntegrityError as ie:
        db.session.rollback()
        current_app.logger.warning(f"Integrity error creating product: {ie}")
        return error_response(_integrity_conflict(ie))
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error creating product: {e}", exc_info=True)
        return error_response(InternalError("Failed to create product"))


@supplier_bp.route("/products/<int:product_id>", methods=["PUT"])
@role_required("supplier")
def update_product(principal, product_id):
    """Partially update one of the caller's products.

    Products owned by someone else answer 404 exactly like missing ones.
    """
    try:
        if storage.get_owned_product(product_id, principal.id) is None:
            raise NotFound(PRODUCT_NOT_FOUND)

        values = validate_payload(ProductForm, get_payload(), partial=True)
        _check_category(values)
        _check_slug(values, product_id)

        product = storage.update_product(product_id, principal.id, values)
        if product is None:
            raise NotFound(PRODUCT_NOT_FOUND)
        db.session.commit()
        return jsonify(product.to_dict())
    except ApiError as e:
        db.session.rollback()
        return error_response(e)
    except IntegrityError as ie:
        db.session.rollback()
        current_app.logger.warning(f"Integrity error updating product {product_id}: {ie}")
        return error_response(_integrity_conflict(ie))
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
        return error_response(InternalError("Failed to update product"))


@supplier_bp.route("/products/<int:product_id>", methods=["DELETE"])
@role_required("supplier")
def delete_product(principal, product_id):
    try:
        if storage.get_owned_product(product_id, principal.id) is None:
            raise NotFound(PRODUCT_NOT_FOUND)
        if storage.product_has_orders(product_id):
            raise Conflict("Product is part of existing orders. Consider deactivating it instead.")
        if not storage.delete_product(product_id, principal.id):
            raise NotFound(PRODUCT_NOT_FOUND)
        db.session.commit()
        current_app.logger.info(f"Supplier {principal.id} deleted product {product_id}")
        return "", 204
    except ApiError as e:
        db.session.rollback()
        return error_response(e)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
        return error_response(InternalError("Failed to delete product"))


# --- Dashboard data ---

@supplier_bp.route("/stats", methods=["GET"])
@role_required("supplier")
def get_stats(principal):
    try:
        stats = storage.get_supplier_stats(principal.id, current_app.config["LOW_STOCK_THRESHOLD"])
        return jsonify(stats)
    except Exception as e:
        current_app.logger.error(f"Error fetching supplier stats: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch stats"))


@supplier_bp.route("/orders", methods=["GET"])
@role_required("supplier")
def get_orders(principal):
    """Orders that contain the caller's products, limited to the caller's line items."""
    try:
        orders = storage.get_supplier_orders(principal.id)
        return jsonify([
            order.to_dict(items=[item for item in order.items if item.product.supplier_id == principal.id])
            for order in orders
        ])
    except Exception as e:
        current_app.logger.error(f"Error fetching supplier orders: {e}", exc_info=True)
        return error_response(InternalError("Failed to fetch orders"))
