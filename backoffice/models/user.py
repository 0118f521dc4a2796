from backoffice.extensions import db
from backoffice.models.mixins import TimestampMixin, format_datetime

ROLES = ("admin", "supplier", "customer")


class User(TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    profile_image_url = db.Column(db.String(255))
    password_hash = db.Column(db.String(128), nullable=False)
    # Assigned out-of-band through the CLI, never by the user
    role = db.Column(db.String(20), nullable=False, default="customer")
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    products = db.relationship("Product", back_populates="supplier", lazy="dynamic")

    def __repr__(self):
        return f"User('{self.email}', '{self.role}', Active: {self.is_active})"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImageUrl": self.profile_image_url,
            "role": self.role,
            "isActive": self.is_active,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
        }
