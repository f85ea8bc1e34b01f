import json
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch
from urllib.error import URLError

from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from sales.models import Sale
from sales.services.printer_dispatcher import (
    receipt_download_filename,
    send_kitchen_receipt,
    send_receipt,
    send_test_page,
)
from sales.services.receipt_formatter import (
    RECEIPT_WIDTH,
    StoreInfo,
    align,
    build_kitchen_receipt,
    build_printer_test_page,
    build_receipt,
    format_brl,
)
from store.models import StoreConfig

STORE = StoreInfo(
    name="Açaízen SmartHUB",
    address="Rua Arthur Oscar, 220",
    phone="(24) 9933-9007",
    instagram="@acaizenn",
    facebook="@açaizen",
)


def _sale(**overrides):
    fields = {
        "id": 42,
        "customer_name": "Cliente",
        "total_amount": Decimal("35.80"),
        "payment_method": Sale.PAYMENT_CASH,
        "cash_received": Decimal("40.00"),
        "change_amount": Decimal("4.20"),
        "operator_id": "admin-1",
        "operator_name": "Administrador",
        "created_at": timezone.make_aware(datetime(2024, 5, 3, 14, 30, 5)),
    }
    fields.update(overrides)
    return Sale(**fields)


ITEMS = [
    {
        "product_name": "Açaí 300ml",
        "category_id": 1,
        "quantity": 2,
        "unit_price": Decimal("15.90"),
        "addons": [{"id": 1, "name": "Granola", "price": "2.00"}],
        "total_price": Decimal("35.80"),
    },
]


class FormattingHelperTests(SimpleTestCase):
    def test_format_brl_uses_comma_and_half_up(self):
        self.assertEqual(format_brl(Decimal("35.8")), "R$35,80")
        self.assertEqual(format_brl(Decimal("0.005")), "R$0,01")
        self.assertEqual(format_brl(None), "R$0,00")

    def test_align_fills_to_width(self):
        line = align("TOTAL:", "R$35,80")
        self.assertEqual(len(line), RECEIPT_WIDTH)
        self.assertTrue(line.startswith("TOTAL:"))
        self.assertTrue(line.endswith("R$35,80"))

    def test_align_keeps_one_space_when_too_long(self):
        left = "2x " + "A" * 45
        self.assertEqual(align(left, "R$1,00"), f"{left} R$1,00")


class ReceiptFormatterTests(SimpleTestCase):
    """
    GUARANTEES:
    - Plain text and HTML show the same total and per-line prices
    - Cash sales print received + change; other methods do not
    - The placeholder customer name is not printed
    """

    def test_plain_text_layout(self):
        text = build_receipt(_sale(), ITEMS, STORE).plain_text
        lines = text.splitlines()

        self.assertEqual(lines[0].strip(), "Açaízen SmartHUB")
        self.assertIn("-" * RECEIPT_WIDTH, lines)
        self.assertIn("Data: 03/05/2024 14:30:05", lines)
        self.assertIn(align("2x Açaí 300ml", "R$35,80"), lines)
        self.assertIn(align("  + Granola", "R$2,00"), lines)
        self.assertIn(align("TOTAL:", "R$35,80"), lines)
        self.assertIn(align("Forma de pagamento:", "Dinheiro"), lines)
        self.assertIn(align("Valor recebido:", "R$40,00"), lines)
        self.assertIn(align("Troco:", "R$4,20"), lines)
        self.assertIn("Obrigado pela preferência!", text)
        self.assertIn("@acaizenn | @açaizen", text)
        self.assertIn("Pedido #42", text)

    def test_placeholder_customer_is_omitted(self):
        text = build_receipt(_sale(), ITEMS, STORE).plain_text
        self.assertNotIn("Cliente:", text)

        text = build_receipt(_sale(customer_name="Maria"), ITEMS, STORE).plain_text
        self.assertIn("Cliente: Maria", text)

    def test_non_cash_sale_has_no_change_lines(self):
        sale = _sale(payment_method=Sale.PAYMENT_PIX, cash_received=None, change_amount=None)
        text = build_receipt(sale, ITEMS, STORE).plain_text

        self.assertIn(align("Forma de pagamento:", "PIX"), text.splitlines())
        self.assertNotIn("Troco:", text)
        self.assertNotIn("Valor recebido:", text)

    def test_text_and_html_agree_on_money(self):
        artifact = build_receipt(_sale(), ITEMS, STORE)

        for amount in ("R$35,80", "R$2,00", "R$40,00", "R$4,20"):
            self.assertIn(amount, artifact.plain_text)
            self.assertIn(amount, artifact.html)

    def test_print_variant_opens_and_closes_dialog(self):
        artifact = build_receipt(_sale(), ITEMS, STORE)

        self.assertNotIn("window.print()", artifact.html)
        self.assertIn('onload="window.print()"', artifact.print_html)
        self.assertIn('onafterprint="window.close()"', artifact.print_html)
        self.assertIn("5000", artifact.print_html)

    def test_kitchen_receipt_filters_by_category(self):
        items = ITEMS + [
            {
                "product_name": "Água",
                "category_id": 2,
                "quantity": 1,
                "addons": [],
                "total_price": Decimal("3.00"),
            }
        ]

        text = build_kitchen_receipt(_sale(), items, kitchen_category_id=1)
        self.assertIn("2x Açaí 300ml", text)
        self.assertNotIn("Água", text)

        self.assertIsNone(build_kitchen_receipt(_sale(), items[1:], kitchen_category_id=1))

    def test_printer_test_page(self):
        moment = timezone.make_aware(datetime(2024, 1, 2, 9, 0, 0))
        text = build_printer_test_page("Açaízen", now=moment)

        self.assertTrue(text.startswith("*** TESTE DE IMPRESSORA ***"))
        self.assertIn("Açaízen", text)
        self.assertIn("Data/Hora: 02/01/2024 09:00:00", text)
        self.assertIn("*** FIM DO TESTE ***", text)


def _ok_response(status=200):
    resp = MagicMock()
    resp.status = status
    cm = MagicMock()
    cm.__enter__.return_value = resp
    return cm


class PrinterDispatcherTests(TestCase):
    """
    GUARANTEES:
    - POSTs {"receipt": text} to /print and /print-kitchen on the configured helper
    - 2xx means printed; every failure returns False and never raises
    """

    def setUp(self):
        self.config = StoreConfig.load()
        self.config.printer_host = "192.168.0.50"
        self.config.printer_port = "4000"
        self.config.save()

    @patch("sales.services.printer_dispatcher.urlopen")
    def test_send_receipt_posts_json(self, urlopen):
        urlopen.return_value = _ok_response()

        self.assertTrue(send_receipt("hello"))

        req = urlopen.call_args[0][0]
        self.assertEqual(req.full_url, "http://192.168.0.50:4000/print")
        self.assertEqual(req.get_method(), "POST")
        self.assertEqual(json.loads(req.data.decode("utf-8")), {"receipt": "hello"})

    @patch("sales.services.printer_dispatcher.urlopen")
    def test_kitchen_path(self, urlopen):
        urlopen.return_value = _ok_response()

        self.assertTrue(send_kitchen_receipt("kitchen"))
        self.assertEqual(urlopen.call_args[0][0].full_url, "http://192.168.0.50:4000/print-kitchen")

    @patch("sales.services.printer_dispatcher.urlopen")
    def test_unreachable_helper_returns_false(self, urlopen):
        urlopen.side_effect = URLError("connection refused")

        with self.assertLogs("sales.services.printer_dispatcher", level="WARNING"):
            self.assertFalse(send_receipt("hello"))

    @patch("sales.services.printer_dispatcher.urlopen")
    def test_non_2xx_returns_false(self, urlopen):
        urlopen.return_value = _ok_response(status=302)

        with self.assertLogs("sales.services.printer_dispatcher", level="WARNING"):
            self.assertFalse(send_receipt("hello"))

    @patch("sales.services.printer_dispatcher.urlopen")
    def test_test_page_uses_store_name(self, urlopen):
        urlopen.return_value = _ok_response()

        self.assertTrue(send_test_page())

        body = json.loads(urlopen.call_args[0][0].data.decode("utf-8"))
        self.assertIn("*** TESTE DE IMPRESSORA ***", body["receipt"])
        self.assertIn(self.config.store_name, body["receipt"])

    def test_non_numeric_port_returns_false(self):
        self.config.printer_port = "abc"
        self.config.save()

        with self.assertLogs("sales.services.printer_dispatcher", level="WARNING"):
            self.assertFalse(send_receipt("hello", config=StoreConfig.load()))
            self.assertFalse(send_test_page())

    @patch("sales.services.printer_dispatcher.urlopen")
    def test_out_of_range_port_returns_false(self, urlopen):
        urlopen.side_effect = OverflowError("getsockaddrarg: port must be 0-65535.")

        with self.assertLogs("sales.services.printer_dispatcher", level="WARNING"):
            self.assertFalse(send_kitchen_receipt("kitchen"))

    def test_download_filename(self):
        self.assertEqual(receipt_download_filename(1700000000000), "cupom-acaizen-1700000000000.html")
