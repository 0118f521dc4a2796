"""Demo data for local dashboards. Run with `flask --app backoffice.main seed`."""
from decimal import Decimal

import click

from backoffice.extensions import db, bcrypt
from backoffice.models import User, Category, Product, Order, OrderItem, ContactMessage

DEFAULT_PASSWORD = "changethispassword"


def _user(email, role, first_name, last_name):
    return User(
        email=email,
        role=role,
        first_name=first_name,
        last_name=last_name,
        password_hash=bcrypt.generate_password_hash(DEFAULT_PASSWORD).decode("utf-8"),
    )


def seed_database():
    """Insert demo rows unless the database already has users. Returns True if it seeded."""
    if User.query.first() is not None:
        click.echo("Database already contains data. Skipping seeding.")
        return False

    click.echo("Seeding database with initial data...")

    admin = _user("admin@example.com", "admin", "Ada", "Admin")
    supplier1 = _user("supplier@example.com", "supplier", "Sam", "Supplier")
    supplier2 = _user("metalworks@example.com", "supplier", "Mia", "Metal")
    customer = _user("customer@example.com", "customer", "Cal", "Customer")
    db.session.add_all([admin, supplier1, supplier2, customer])

    electronics = Category(name="Electronics", slug="electronics", description="Components and devices")
    materials = Category(name="Raw Materials", slug="raw-materials", description="Sheet metal and stock")
    db.session.add_all([electronics, materials])
    db.session.flush()  # IDs for relationships

    cpu = Product(supplier_id=supplier1.id, category_id=electronics.id, name="Intel i7 Processor", slug="intel-i7",
                  sku="CPU-INT-i7", price=Decimal("350.00"), quantity=50, featured=True)
    ssd = Product(supplier_id=supplier1.id, category_id=electronics.id, name="1TB NVMe SSD", slug="nvme-ssd-1tb",
                  sku="SSD-NVME-1TB", price=Decimal("120.00"), compare_price=Decimal("149.00"), quantity=3)
    sheet = Product(supplier_id=supplier2.id, category_id=materials.id, name="Aluminum Sheet 1mm", slug="aluminum-sheet-1mm",
                    sku="ALU-SHEET-1MM", price=Decimal("25.00"), quantity=300)
    db.session.add_all([cpu, ssd, sheet])
    db.session.flush()

    order = Order(customer_id=customer.id, customer_name="Cal Customer", customer_email=customer.email,
                  shipping_address="1 Main Street", status="pending", total_amount=Decimal("445.00"))
    order.items = [
        OrderItem(product_id=cpu.id, quantity=1, price=cpu.price),
        OrderItem(product_id=sheet.id, quantity=3, price=sheet.price),
    ]
    db.session.add(order)

    db.session.add(ContactMessage(name="Visitor", email="visitor@example.com", subject="Wholesale pricing",
                                  message="Do you offer discounts for bulk orders?"))

    db.session.commit()
    click.echo(f"Database seeded successfully! Demo accounts use the password '{DEFAULT_PASSWORD}'.")
    return True
