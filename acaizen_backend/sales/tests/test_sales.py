from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from sales.models import DEFAULT_CUSTOMER_NAME, Sale, SaleItem


class SaleModelTests(TestCase):
    """
    Tests for Sale / SaleItem immutability.

    GUARANTEES:
    - Sale fields cannot change after insert
    - SaleItem rows cannot be re-saved
    - Blank customer names fall back to the placeholder
    """

    def setUp(self):
        self.sale = Sale.objects.create(
            customer_name="",
            total_amount=Decimal("35.80"),
            payment_method=Sale.PAYMENT_CASH,
            cash_received=Decimal("40.00"),
            change_amount=Decimal("4.20"),
            operator_id="admin-1",
            operator_name="Administrador",
        )
        self.item = SaleItem.objects.create(
            sale=self.sale,
            product_id=1,
            product_name="Açaí 300ml",
            category_id=1,
            quantity=2,
            unit_price=Decimal("15.90"),
            addons=[{"id": 1, "name": "Granola", "price": "2.00"}],
            total_price=Decimal("35.80"),
        )

    # =====================================================
    # IMMUTABILITY
    # =====================================================

    def test_blank_customer_name_defaults_to_placeholder(self):
        self.assertEqual(self.sale.customer_name, DEFAULT_CUSTOMER_NAME)

    def test_sale_total_cannot_change(self):
        self.sale.total_amount = Decimal("999.00")

        with self.assertRaises(ValueError):
            self.sale.save()

        refreshed = Sale.objects.get(pk=self.sale.pk)
        self.assertEqual(refreshed.total_amount, Decimal("35.80"))

    def test_resaving_unchanged_sale_is_allowed(self):
        self.sale.save()
        self.assertEqual(Sale.objects.count(), 1)

    def test_sale_item_cannot_be_resaved(self):
        self.item.quantity = 5

        with self.assertRaises(ValidationError):
            self.item.save()

        self.assertEqual(SaleItem.objects.get(pk=self.item.pk).quantity, 2)

    def test_order_number_is_primary_key(self):
        self.assertEqual(self.sale.order_number, self.sale.pk)
