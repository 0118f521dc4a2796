from backoffice.extensions import db
from backoffice.models.mixins import TimestampMixin, format_money, format_datetime


class Product(TimestampMixin, db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    # Owner; set from the session at creation and never rewritten afterwards
    supplier_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False)
    description = db.Column(db.Text)
    short_description = db.Column(db.String(500))
    price = db.Column(db.Numeric(10, 2), nullable=False)
    compare_price = db.Column(db.Numeric(10, 2))
    sku = db.Column(db.String(100))
    quantity = db.Column(db.Integer, nullable=False, default=0)
    low_stock_threshold = db.Column(db.Integer)  # NULL means the app-wide LOW_STOCK_THRESHOLD
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    active = db.Column(db.Boolean, nullable=False, default=True)

    supplier = db.relationship("User", back_populates="products")
    category = db.relationship("Category", back_populates="products")

    def __repr__(self):
        return f"Product('{self.name}', '{self.slug}', supplier={self.supplier_id})"

    def to_dict(self):
        return {
            "id": self.id,
            "supplierId": self.supplier_id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "shortDescription": self.short_description,
            "price": format_money(self.price),
            "comparePrice": format_money(self.compare_price),
            "sku": self.sku,
            "quantity": self.quantity,
            "lowStockThreshold": self.low_stock_threshold,
            "categoryId": self.category_id,
            "featured": self.featured,
            "active": self.active,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
        }
