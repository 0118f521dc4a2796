import unittest
from unittest import mock

from sqlalchemy.exc import OperationalError

from backoffice.extensions import db
from backoffice.models import User
from tests.helpers import ApiTestCase, PASSWORD

SUPPLIER_ROUTES = [
    ("get", "/api/supplier/products"),
    ("post", "/api/supplier/products"),
    ("put", "/api/supplier/products/1"),
    ("delete", "/api/supplier/products/1"),
    ("get", "/api/supplier/stats"),
    ("get", "/api/supplier/orders"),
]

ADMIN_ROUTES = [
    ("get", "/api/admin/stats"),
    ("get", "/api/admin/users"),
    ("get", "/api/admin/products"),
    ("get", "/api/admin/orders"),
    ("get", "/api/admin/messages"),
    ("put", "/api/admin/messages/1/status"),
    ("put", "/api/admin/orders/1/status"),
]

PROTECTED_ROUTES = SUPPLIER_ROUTES + ADMIN_ROUTES + [("get", "/api/auth/user")]


class AccessControlTestCase(ApiTestCase):

    def _call(self, client, method, path):
        return getattr(client, method)(path, json={})

    def test_protected_routes_without_session_return_401(self):
        client = self.app.test_client()
        for method, path in PROTECTED_ROUTES:
            with self.subTest(route=f"{method.upper()} {path}"):
                response = self._call(client, method, path)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.get_json(), {"message": "Unauthorized"})

    def test_missing_session_never_reaches_the_store(self):
        client = self.app.test_client()
        with mock.patch("backoffice.storage.get_user") as get_user, \
                mock.patch("backoffice.storage.get_products") as get_products:
            for method, path in PROTECTED_ROUTES:
                self._call(client, method, path)
        get_user.assert_not_called()
        get_products.assert_not_called()

    def test_customer_is_forbidden_everywhere_role_gated(self):
        client = self.customer_client()
        for method, path in SUPPLIER_ROUTES + ADMIN_ROUTES:
            with self.subTest(route=f"{method.upper()} {path}"):
                response = self._call(client, method, path)
                self.assertEqual(response.status_code, 403)
                self.assertEqual(response.get_json()["message"], "Forbidden")

    def test_admin_has_no_implicit_access_to_supplier_routes(self):
        client = self.admin_client()
        for method, path in SUPPLIER_ROUTES:
            with self.subTest(route=f"{method.upper()} {path}"):
                self.assertEqual(self._call(client, method, path).status_code, 403)

    def test_supplier_cannot_use_admin_routes(self):
        client = self.supplier_a()
        for method, path in ADMIN_ROUTES:
            with self.subTest(route=f"{method.upper()} {path}"):
                self.assertEqual(self._call(client, method, path).status_code, 403)

    def test_deactivated_account_is_forbidden(self):
        client = self.supplier_a()
        with self.app.app_context():
            db.session.get(User, self.supplier_a_id).is_active = False
            db.session.commit()
        self.assertEqual(client.get("/api/supplier/products").status_code, 403)

    def test_session_for_deleted_user_is_forbidden(self):
        client = self.supplier_a()
        with self.app.app_context():
            db.session.delete(db.session.get(User, self.supplier_a_id))
            db.session.commit()
        self.assertEqual(client.get("/api/supplier/products").status_code, 403)

    def test_store_failure_during_lookup_is_500(self):
        client = self.supplier_a()
        with mock.patch("backoffice.storage.get_user", side_effect=OperationalError("SELECT", {}, Exception("db down"))):
            response = client.get("/api/supplier/products")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {"message": "Internal server error"})

    def test_role_change_applies_to_existing_session(self):
        client = self.customer_client()
        self.assertEqual(client.get("/api/supplier/products").status_code, 403)
        with self.app.app_context():
            db.session.get(User, self.customer_id).role = "supplier"
            db.session.commit()
        self.assertEqual(client.get("/api/supplier/products").status_code, 200)


class AuthApiTestCase(ApiTestCase):

    def test_current_user_returns_the_principal(self):
        client = self.supplier_a()
        response = client.get("/api/auth/user")
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["id"], self.supplier_a_id)
        self.assertEqual(data["role"], "supplier")
        self.assertNotIn("passwordHash", data)

    def test_login_with_wrong_password(self):
        response = self.app.test_client().post("/api/login", json={"email": "admin@example.com", "password": "nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["message"], "Invalid email or password")

    def test_login_unknown_email(self):
        response = self.app.test_client().post("/api/login", json={"email": "ghost@example.com", "password": PASSWORD})
        self.assertEqual(response.status_code, 401)

    def test_login_email_is_case_insensitive(self):
        response = self.app.test_client().post("/api/login", json={"email": "Admin@Example.com", "password": PASSWORD})
        self.assertEqual(response.status_code, 200)

    def test_login_inactive_account(self):
        self.create_user("pending@example.com", "supplier", is_active=False)
        response = self.app.test_client().post("/api/login", json={"email": "pending@example.com", "password": PASSWORD})
        self.assertEqual(response.status_code, 403)

    def test_login_payload_is_validated(self):
        response = self.app.test_client().post("/api/login", json={"email": "not-an-email"})
        self.assertEqual(response.status_code, 400)
        errors = response.get_json()["errors"]
        self.assertIn("email", errors)
        self.assertIn("password", errors)

    def test_logout_ends_the_session(self):
        client = self.customer_client()
        self.assertEqual(client.post("/api/logout").status_code, 204)
        self.assertEqual(client.get("/api/auth/user").status_code, 401)

    def test_logout_requires_a_session(self):
        self.assertEqual(self.app.test_client().post("/api/logout").status_code, 401)


if __name__ == "__main__":
    unittest.main()
