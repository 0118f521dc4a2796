"""Database access used by the API blueprints.

Each function is a single read or a single write against the session; the
callers own commit/rollback.
"""
from datetime import datetime

from sqlalchemy import func

from backoffice.extensions import db
from backoffice.models import User, Category, Product, Order, OrderItem, ContactMessage
from backoffice.models.mixins import format_money

ACTIVE_ORDER_FILTER = Order.status != "cancelled"


# --- Users ---

def get_user(user_id):
    return db.session.get(User, user_id)


def get_user_by_email(email):
    return User.query.filter(func.lower(User.email) == email.strip().lower()).first()


def get_users_with_stats():
    """All users, newest first, each paired with the number of products they own."""
    product_counts = (
        db.session.query(Product.supplier_id, func.count(Product.id).label("product_count"))
        .group_by(Product.supplier_id)
        .subquery()
    )
    rows = (
        db.session.query(User, func.coalesce(product_counts.c.product_count, 0))
        .outerjoin(product_counts, product_counts.c.supplier_id == User.id)
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )
    return [(user, count) for user, count in rows]


# --- Categories ---

def get_categories():
    return Category.query.order_by(Category.name).all()


def get_category(category_id):
    return db.session.get(Category, category_id)


# --- Products ---

def get_products(supplier_id=None):
    query = Product.query
    if supplier_id is not None:
        query = query.filter(Product.supplier_id == supplier_id)
    return query.order_by(Product.created_at.desc(), Product.id.desc()).all()


def get_product_by_slug(slug):
    return Product.query.filter(Product.slug == slug).first()


def get_owned_product(product_id, supplier_id):
    return Product.query.filter(Product.id == product_id, Product.supplier_id == supplier_id).first()


def create_product(values):
    product = Product(**values)
    db.session.add(product)
    db.session.flush()
    return product


def update_product(product_id, supplier_id, values):
    """Apply `values` only if the product exists and belongs to `supplier_id`.

    Ownership and the write happen in one UPDATE statement. Returns the
    refreshed product, or None when nothing matched.
    """
    values = dict(values, updated_at=datetime.utcnow())
    matched = (
        Product.query
        .filter(Product.id == product_id, Product.supplier_id == supplier_id)
        .update(values, synchronize_session=False)
    )
    if not matched:
        return None
    product = db.session.get(Product, product_id, populate_existing=True)
    return product


def delete_product(product_id, supplier_id):
    """Delete the product if `supplier_id` owns it. Returns whether a row was removed."""
    deleted = (
        Product.query
        .filter(Product.id == product_id, Product.supplier_id == supplier_id)
        .delete(synchronize_session=False)
    )
    return deleted > 0


def product_has_orders(product_id):
    return db.session.query(OrderItem.query.filter(OrderItem.product_id == product_id).exists()).scalar()


# --- Orders ---

def get_all_orders():
    return Order.query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_supplier_orders(supplier_id):
    """Orders holding at least one item whose product is owned by `supplier_id`."""
    return (
        Order.query
        .join(OrderItem, OrderItem.order_id == Order.id)
        .join(Product, OrderItem.product_id == Product.id)
        .filter(Product.supplier_id == supplier_id)
        .distinct()
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def update_order_status(order_id, status):
    order = db.session.get(Order, order_id)
    if order is None:
        return None
    order.status = status
    db.session.flush()
    return order


# --- Contact messages ---

def get_contact_messages():
    return ContactMessage.query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()


def create_contact_message(values):
    message = ContactMessage(**values, status="unread")
    db.session.add(message)
    db.session.flush()
    return message


def update_contact_message_status(message_id, status):
    message = db.session.get(ContactMessage, message_id)
    if message is None:
        return None
    message.status = status
    db.session.flush()
    return message


# --- Aggregates ---

def get_admin_stats():
    total_revenue = (
        db.session.query(func.coalesce(func.sum(Order.total_amount), 0))
        .filter(ACTIVE_ORDER_FILTER)
        .scalar()
    )
    return {
        "totalUsers": db.session.query(func.count(User.id)).scalar(),
        "activeSuppliers": (
            db.session.query(func.count(User.id))
            .filter(User.role == "supplier", User.is_active.is_(True))
            .scalar()
        ),
        "totalProducts": db.session.query(func.count(Product.id)).scalar(),
        "totalOrders": db.session.query(func.count(Order.id)).scalar(),
        "totalRevenue": format_money(total_revenue),
        "unreadMessages": (
            db.session.query(func.count(ContactMessage.id))
            .filter(ContactMessage.status == "unread")
            .scalar()
        ),
    }


def get_supplier_stats(supplier_id, low_stock_threshold=5):
    total_orders = (
        db.session.query(func.count(func.distinct(OrderItem.order_id)))
        .select_from(OrderItem)
        .join(Product, OrderItem.product_id == Product.id)
        .filter(Product.supplier_id == supplier_id)
        .scalar()
    )
    total_revenue = (
        db.session.query(func.coalesce(func.sum(OrderItem.quantity * OrderItem.price), 0))
        .select_from(OrderItem)
        .join(Product, OrderItem.product_id == Product.id)
        .join(Order, OrderItem.order_id == Order.id)
        .filter(Product.supplier_id == supplier_id, ACTIVE_ORDER_FILTER)
        .scalar()
    )
    low_stock = (
        db.session.query(func.count(Product.id))
        .filter(
            Product.supplier_id == supplier_id,
            Product.quantity <= func.coalesce(Product.low_stock_threshold, low_stock_threshold),
        )
        .scalar()
    )
    return {
        "totalProducts": db.session.query(func.count(Product.id)).filter(Product.supplier_id == supplier_id).scalar(),
        "totalOrders": total_orders,
        "totalRevenue": format_money(total_revenue),
        "lowStockProducts": low_stock,
    }
