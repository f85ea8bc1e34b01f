from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from sales.models import Sale, SaleItem
from users.models import User


class SalesApiTests(TestCase):
    """
    Sales history, receipts and reports over HTTP.

    GUARANTEES:
    - Admin and cashier can read sales and receipts
    - Only admin can read reports
    - Print endpoints answer {"printed": bool} and never fail on printer errors
    """

    def setUp(self):
        self.client = APIClient()

        self.admin = User.objects.create_user(
            email="admin@acaizen.test", password="x", name="Dona", role="admin"
        )
        self.cashier = User.objects.create_user(
            email="caixa@acaizen.test", password="x", name="Caixa", role="cashier"
        )

        self.sale = Sale.objects.create(
            customer_name="Maria",
            total_amount=Decimal("35.80"),
            payment_method=Sale.PAYMENT_CASH,
            cash_received=Decimal("40.00"),
            change_amount=Decimal("4.20"),
            operator_id=self.cashier.id,
            operator_name="Caixa",
        )
        SaleItem.objects.create(
            sale=self.sale,
            product_id=1,
            product_name="Açaí 300ml",
            category_id=999,
            quantity=2,
            unit_price=Decimal("15.90"),
            addons=[{"id": 1, "name": "Granola", "price": "2.00"}],
            total_price=Decimal("35.80"),
        )

    def test_anonymous_is_rejected(self):
        res = self.client.get("/api/sales/")
        self.assertEqual(res.status_code, 401)

    def test_cashier_lists_sales(self):
        self.client.force_authenticate(self.cashier)

        res = self.client.get("/api/sales/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)
        row = res.data[0]
        self.assertEqual(row["order_number"], self.sale.pk)
        self.assertEqual(row["payment_method_label"], "Dinheiro")
        self.assertEqual(row["items"][0]["addons"][0]["name"], "Granola")

    def test_list_filters_by_payment_method(self):
        self.client.force_authenticate(self.admin)

        res = self.client.get("/api/sales/", {"payment_method": "pix"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 0)

    def test_receipt_json(self):
        self.client.force_authenticate(self.cashier)

        res = self.client.get(f"/api/sales/{self.sale.pk}/receipt/")

        self.assertEqual(res.status_code, 200)
        self.assertIn("Cliente: Maria", res.data["plain_text"])
        self.assertIn("R$35,80", res.data["html"])
        self.assertIsNone(res.data["kitchen_text"])

    def test_receipt_html_download(self):
        self.client.force_authenticate(self.cashier)

        res = self.client.get(f"/api/sales/{self.sale.pk}/receipt/html/", {"download": "1"})

        self.assertEqual(res.status_code, 200)
        self.assertTrue(res["Content-Type"].startswith("text/html"))
        self.assertIn('filename="cupom-acaizen-', res["Content-Disposition"])

    def test_receipt_print_view(self):
        self.client.force_authenticate(self.cashier)

        res = self.client.get(f"/api/sales/{self.sale.pk}/receipt/print-view/")

        self.assertEqual(res.status_code, 200)
        self.assertIn(b"window.print()", res.content)

    @patch("sales.services.sale_service.send_receipt", return_value=False)
    def test_print_reports_failure_without_error(self, send):
        self.client.force_authenticate(self.cashier)

        res = self.client.post(f"/api/sales/{self.sale.pk}/print/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, {"printed": False})
        send.assert_called_once()

    @patch("sales.services.sale_service.send_kitchen_receipt")
    def test_print_kitchen_without_kitchen_items_sends_nothing(self, send):
        self.client.force_authenticate(self.cashier)

        res = self.client.post(f"/api/sales/{self.sale.pk}/print-kitchen/")

        self.assertEqual(res.data, {"printed": False})
        send.assert_not_called()

    def test_cashier_cannot_read_reports(self):
        self.client.force_authenticate(self.cashier)

        res = self.client.get("/api/sales/reports/summary/")
        self.assertEqual(res.status_code, 403)

    def test_admin_reads_today_summary(self):
        self.client.force_authenticate(self.admin)

        res = self.client.get("/api/sales/reports/summary/", {"date_range": "today"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["total_sales"], 1)
        self.assertEqual(res.data["total_amount"], "35.80")
        self.assertEqual([p["method"] for p in res.data["payment_breakdown"]], ["cash", "credit", "debit", "pix"])
        self.assertEqual(res.data["top_products"][0]["name"], "Açaí 300ml")

    def test_invalid_report_filter_is_400(self):
        self.client.force_authenticate(self.admin)

        res = self.client.get("/api/sales/reports/summary/", {"date_range": "decade"})
        self.assertEqual(res.status_code, 400)

    def test_report_export_is_csv_attachment(self):
        self.client.force_authenticate(self.admin)

        res = self.client.get("/api/sales/reports/summary/export/", {"date_range": "today"})

        self.assertEqual(res.status_code, 200)
        self.assertIn('filename="relatorio_vendas_acaizen_', res["Content-Disposition"])
        self.assertTrue(res.content.decode("utf-8").startswith("Relatório de Vendas - Hoje"))
