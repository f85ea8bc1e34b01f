from django.test import TestCase
from rest_framework.test import APIClient

from products.models import Category, Product
from products.services.catalog_service import create_category, create_product
from users.models import User


class CatalogApiPermissionTests(TestCase):
    """
    Permission & access tests.

    GUARANTEES:
    - Anonymous users have no access
    - Cashiers read the catalog but cannot change it
    - Admins manage it; category-in-use deletion answers 400
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@acaizen.test", password="x", role="admin")
        self.cashier = User.objects.create_user(email="caixa@acaizen.test", password="x", role="cashier")

        self.acai = create_category(name="Açaí")
        self.product = create_product(name="Açaí 300ml", price="15.90", category=self.acai, stock=5)

    def test_anonymous_denied(self):
        res = self.client.get("/api/products/products/")
        self.assertEqual(res.status_code, 401)

    def test_cashier_reads_but_cannot_write(self):
        self.client.force_authenticate(self.cashier)

        self.assertEqual(self.client.get("/api/products/products/").status_code, 200)
        self.assertEqual(self.client.get("/api/products/categories/").status_code, 200)

        res = self.client.post(
            "/api/products/products/",
            {"name": "Novo", "price": "1.00", "category_id": self.acai.id},
            format="json",
        )
        self.assertEqual(res.status_code, 403)

    def test_admin_creates_product_and_addon(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            "/api/products/products/",
            {"name": "Açaí 500ml", "price": "20.90", "category_id": self.acai.id, "stock": 10},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        product_id = res.data["id"]
        self.assertFalse(res.data["has_addons"])

        res = self.client.post(
            "/api/products/addons/",
            {"product_id": product_id, "name": "Granola", "price": "2.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertTrue(Product.objects.get(pk=product_id).has_addons)

    def test_delete_category_in_use_returns_error_envelope(self):
        self.client.force_authenticate(self.admin)

        res = self.client.delete(f"/api/products/categories/{self.acai.id}/")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "CATEGORY_IN_USE")
        self.assertTrue(Category.objects.filter(pk=self.acai.pk).exists())

    def test_csv_import_and_export_endpoints(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            "/api/products/products/import/",
            {"csv": "Nome,Preço,Categoria\nBrigadeiro,3.50,Doces\n"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["imported"], 1)

        res = self.client.get("/api/products/products/export/")
        self.assertEqual(res.status_code, 200)
        self.assertIn("attachment; filename=\"produtos_acaizen_", res["Content-Disposition"])
        self.assertIn("Brigadeiro", res.content.decode("utf-8"))
