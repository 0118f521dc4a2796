from backoffice.extensions import db
from backoffice.models.mixins import TimestampMixin, format_money, format_datetime

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")


class Order(TimestampMixin, db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)  # NULL for guest checkouts
    customer_name = db.Column(db.String(200))
    customer_email = db.Column(db.String(120))
    shipping_address = db.Column(db.Text)
    status = db.Column(db.String(50), nullable=False, default="pending")
    total_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    items = db.relationship("OrderItem", back_populates="order", lazy="selectin",
                            cascade="all, delete-orphan", order_by="OrderItem.id")
    customer = db.relationship("User", lazy=True)

    def __repr__(self):
        return f"Order({self.id}, '{self.status}', {self.total_amount})"

    def to_dict(self, items=None):
        """Serialize the order; `items` narrows the embedded line items."""
        if items is None:
            items = self.items
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "shippingAddress": self.shipping_address,
            "status": self.status,
            "totalAmount": format_money(self.total_amount),
            "items": [item.to_dict() for item in items],
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
        }


class OrderItem(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)  # Unit price at time of order

    order = db.relationship("Order", back_populates="items")
    product = db.relationship("Product", lazy="joined")

    def __repr__(self):
        return f"OrderItem(Order ID: {self.order_id}, Product ID: {self.product_id}, Qty: {self.quantity})"

    def to_dict(self):
        return {
            "id": self.id,
            "orderId": self.order_id,
            "productId": self.product_id,
            "productName": self.product.name if self.product else None,
            "quantity": self.quantity,
            "price": format_money(self.price),
        }
