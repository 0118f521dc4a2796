import unittest
from decimal import Decimal

from backoffice import create_app
from backoffice.extensions import db, bcrypt
from backoffice.models import User, Category, Product, Order, OrderItem, ContactMessage

PASSWORD = "testpassword"

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test_secret_key",
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "WTF_CSRF_ENABLED": False,
    "BCRYPT_LOG_ROUNDS": 4,
}


class ApiTestCase(unittest.TestCase):
    """Fresh in-memory database with one account per role."""

    config_overrides = {}

    def setUp(self):
        self.app = create_app(dict(TEST_CONFIG, **self.config_overrides))
        with self.app.app_context():
            db.create_all()
            self.admin_id = self.create_user("admin@example.com", "admin")
            self.supplier_a_id = self.create_user("supplier-a@example.com", "supplier")
            self.supplier_b_id = self.create_user("supplier-b@example.com", "supplier")
            self.customer_id = self.create_user("customer@example.com", "customer")
            category = Category(name="Gadgets", slug="gadgets")
            db.session.add(category)
            db.session.commit()
            self.category_id = category.id

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    # --- fixtures ---

    def create_user(self, email, role, is_active=True):
        with self.app.app_context():
            user = User(
                email=email,
                role=role,
                is_active=is_active,
                password_hash=bcrypt.generate_password_hash(PASSWORD).decode("utf-8"),
            )
            db.session.add(user)
            db.session.commit()
            return user.id

    def create_product(self, supplier_id, slug, quantity=10, price="10.00", low_stock_threshold=None):
        with self.app.app_context():
            product = Product(supplier_id=supplier_id, name=slug.title(), slug=slug, price=Decimal(price),
                              quantity=quantity, low_stock_threshold=low_stock_threshold)
            db.session.add(product)
            db.session.commit()
            return product.id

    def create_order(self, lines, status="pending"):
        """`lines` is a list of (product_id, quantity, unit_price) tuples."""
        with self.app.app_context():
            total = sum(Decimal(price) * quantity for _, quantity, price in lines)
            order = Order(customer_id=self.customer_id, customer_name="Cal", status=status, total_amount=total)
            order.items = [OrderItem(product_id=pid, quantity=qty, price=Decimal(price)) for pid, qty, price in lines]
            db.session.add(order)
            db.session.commit()
            return order.id

    def create_message(self, message_id=None, status="unread"):
        with self.app.app_context():
            message = ContactMessage(id=message_id, name="Visitor", email="visitor@example.com",
                                     subject="Hello", message="Question about shipping", status=status)
            db.session.add(message)
            db.session.commit()
            return message.id

    # --- clients ---

    def login(self, email):
        """A test client holding an authenticated session for `email`."""
        client = self.app.test_client()
        response = client.post("/api/login", json={"email": email, "password": PASSWORD})
        self.assertEqual(response.status_code, 200, response.get_json())
        return client

    def admin_client(self):
        return self.login("admin@example.com")

    def supplier_a(self):
        return self.login("supplier-a@example.com")

    def supplier_b(self):
        return self.login("supplier-b@example.com")

    def customer_client(self):
        return self.login("customer@example.com")
