from backoffice.models.user import User, ROLES
from backoffice.models.category import Category
from backoffice.models.product import Product
from backoffice.models.order import Order, OrderItem, ORDER_STATUSES
from backoffice.models.contact_message import ContactMessage, MESSAGE_STATUSES

__all__ = [
    "User", "ROLES",
    "Category",
    "Product",
    "Order", "OrderItem", "ORDER_STATUSES",
    "ContactMessage", "MESSAGE_STATUSES",
]
