from django.test import TestCase
from rest_framework.test import APIClient

from users.models import User


class AuthApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@acaizen.test",
            password="Zen2024",
            name="Dona",
            role="admin",
        )
        self.cashier = User.objects.create_user(
            email="caixa@acaizen.test",
            password="caixa",
            name="Caixa",
            role="cashier",
        )

    def test_login_returns_token_pair_and_profile(self):
        res = self.client.post(
            "/api/auth/login/",
            {"email": "admin@acaizen.test", "password": "Zen2024"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.assertIn("access", res.data)
        self.assertIn("refresh", res.data)
        self.assertEqual(res.data["user"]["id"], self.admin.id)
        self.assertNotIn("password", res.data["user"])

    def test_login_reports_unknown_email_and_wrong_password(self):
        res = self.client.post(
            "/api/auth/login/",
            {"email": "ghost@acaizen.test", "password": "x"},
            format="json",
        )
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["error"]["code"], "USER_NOT_FOUND")

        res = self.client.post(
            "/api/auth/login/",
            {"email": "admin@acaizen.test", "password": "x"},
            format="json",
        )
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["error"]["code"], "WRONG_PASSWORD")

    def test_bearer_token_authenticates_me(self):
        res = self.client.post(
            "/api/auth/login/",
            {"email": "caixa@acaizen.test", "password": "caixa"},
            format="json",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")

        me = self.client.get("/api/auth/me/")

        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["role"], "cashier")
        self.assertIn("pos.sell", me.data["capabilities"])
        self.assertNotIn("reports.view", me.data["capabilities"])


class UserManagementApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@acaizen.test", password="Zen2024", name="Dona", role="admin"
        )
        self.cashier = User.objects.create_user(
            email="caixa@acaizen.test", password="caixa", name="Caixa", role="cashier"
        )

    def test_cashier_cannot_manage_users(self):
        self.client.force_authenticate(self.cashier)

        res = self.client.get("/api/users/")

        self.assertEqual(res.status_code, 403)

    def test_admin_creates_user(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            "/api/users/",
            {"email": "novo@acaizen.test", "password": "123", "name": "Novo", "role": "cashier"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data["id"].startswith("user-"))
        self.assertEqual(User.objects.get(email="novo@acaizen.test").password, "123")

    def test_create_without_password_is_rejected(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            "/api/users/",
            {"email": "novo@acaizen.test", "name": "Novo", "role": "cashier"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)

    def test_admin_cannot_delete_self(self):
        self.client.force_authenticate(self.admin)

        res = self.client.delete(f"/api/users/{self.admin.id}/")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "SELF_DELETION")

    def test_patch_with_blank_password_keeps_it(self):
        self.client.force_authenticate(self.admin)

        res = self.client.patch(
            f"/api/users/{self.cashier.id}/",
            {"name": "Caixa 2", "password": ""},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        refreshed = User.objects.get(pk=self.cashier.pk)
        self.assertEqual(refreshed.name, "Caixa 2")
        self.assertEqual(refreshed.password, "caixa")
