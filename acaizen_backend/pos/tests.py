# pos/tests.py

"""
POS TESTS

Run with:
    python manage.py test pos -v 2

Cart totals are pure in-memory math; checkout goes through
POS -> Sales (checkout orchestrator) -> Products (stock).
"""

from __future__ import annotations

import random
from decimal import Decimal

from django.apps import apps
from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from pos.cart import AddonSnapshot, Cart, CartRegistry, ProductSnapshot
from products.models import Addon, Category, Product
from sales.models import Sale
from users.models import User

ACAI = ProductSnapshot(id=1, name="Açaí 300ml", price=Decimal("15.90"), category_id=1)
WATER = ProductSnapshot(id=2, name="Água", price=Decimal("3.00"), category_id=2)
GRANOLA = AddonSnapshot(id=1, name="Granola", price=Decimal("2.00"))
MILK = AddonSnapshot(id=2, name="Leite Ninho", price=Decimal("3.50"))


def _expected_total(cart: Cart) -> Decimal:
    return sum(
        ((line.product.price + sum((a.price for a in line.addons), Decimal("0"))) * line.quantity
         for line in cart.lines),
        Decimal("0"),
    )


# =====================================================
# CART (pure)
# =====================================================

class CartTotalsTests(SimpleTestCase):
    """
    GUARANTEES:
    - total_amount == sum((price + addons) * qty) after any sequence of edits
    - Lines are never merged
    - Quantity must be >= 1
    - Out-of-range indexes are a no-op
    """

    def test_scenario_total(self):
        cart = Cart("user-1")
        cart.add_line(ACAI, 2, [GRANOLA])

        self.assertEqual(cart.total_amount, Decimal("35.80"))
        self.assertEqual(cart.total_item_count, 2)

    def test_same_product_twice_yields_two_lines(self):
        cart = Cart("user-1")
        cart.add_line(ACAI, 1)
        cart.add_line(ACAI, 1)

        self.assertEqual(len(cart.lines), 2)

    def test_total_holds_after_random_edits(self):
        rng = random.Random(7)
        cart = Cart("user-1")

        for _ in range(200):
            op = rng.choice(["add", "set", "remove"])
            if op == "add" or not cart.lines:
                addons = rng.sample([GRANOLA, MILK], rng.randint(0, 2))
                cart.add_line(rng.choice([ACAI, WATER]), rng.randint(1, 5), addons)
            elif op == "set":
                cart.set_line_quantity(rng.randrange(len(cart.lines)), rng.randint(1, 9))
            else:
                cart.remove_line(rng.randrange(len(cart.lines)))

            self.assertEqual(cart.total_amount, _expected_total(cart))
            self.assertEqual(cart.total_item_count, sum(l.quantity for l in cart.lines))

    def test_quantity_below_one_is_rejected(self):
        cart = Cart("user-1")
        with self.assertRaises(ValueError):
            cart.add_line(ACAI, 0)

        cart.add_line(ACAI, 1)
        with self.assertRaises(ValueError):
            cart.set_line_quantity(0, 0)
        self.assertEqual(cart.lines[0].quantity, 1)

    def test_out_of_range_index_is_noop(self):
        cart = Cart("user-1")
        cart.add_line(ACAI, 1)

        self.assertIsNone(cart.set_line_quantity(5, 3))
        self.assertIsNone(cart.remove_line(-1))
        self.assertEqual(cart.total_amount, Decimal("15.90"))

    def test_clear_empties_cart(self):
        cart = Cart("user-1")
        cart.add_line(ACAI, 1)
        cart.clear()

        self.assertTrue(cart.is_empty)
        self.assertEqual(cart.total_amount, Decimal("0.00"))

    def test_begin_checkout_refuses_while_in_flight(self):
        cart = Cart("user-1")

        self.assertTrue(cart.begin_checkout())
        self.assertFalse(cart.begin_checkout())

        cart.mark(Cart.STATE_REJECTED)
        self.assertTrue(cart.begin_checkout())


class CartRegistryTests(SimpleTestCase):
    def test_one_cart_per_operator(self):
        registry = CartRegistry()

        self.assertIs(registry.cart_for("a"), registry.cart_for("a"))
        self.assertIsNot(registry.cart_for("a"), registry.cart_for("b"))

        registry.discard("a")
        self.assertEqual(registry.cart_for("a").lines, [])


# =====================================================
# API
# =====================================================

class POSApiTests(TestCase):
    """
    GUARANTEES:
    - Each operator sees only their own cart
    - Prices come from the catalog, not the client
    - Checkout returns the sale + receipts and clears the cart
    - Rejections keep the cart and use the error envelope
    """

    def setUp(self):
        apps.get_app_config("pos").carts.reset()
        self.client = APIClient()

        self.cashier = User.objects.create_user(
            email="caixa@acaizen.test", password="x", name="Caixa", role="cashier"
        )
        self.other = User.objects.create_user(
            email="caixa2@acaizen.test", password="x", name="Caixa 2", role="cashier"
        )

        category = Category.objects.create(name="Açaí")
        self.acai = Product.objects.create(
            name="Açaí 300ml",
            price=Decimal("15.90"),
            category=category,
            stock=10,
            has_addons=True,
        )
        self.granola = Addon.objects.create(product=self.acai, name="Granola", price=Decimal("2.00"))

        other_product = Product.objects.create(name="Açaí 500ml", price=Decimal("19.90"), category=category)
        self.foreign_addon = Addon.objects.create(product=other_product, name="Paçoca", price=Decimal("2.50"))

        self.client.force_authenticate(self.cashier)

    def _add_scenario_line(self):
        return self.client.post(
            "/api/pos/cart/lines/",
            {"product_id": self.acai.id, "quantity": 2, "addon_ids": [self.granola.id]},
            format="json",
        )

    def test_anonymous_is_rejected(self):
        self.client.force_authenticate(None)
        res = self.client.get("/api/pos/cart/")
        self.assertEqual(res.status_code, 401)

    def test_add_line_snapshots_catalog_prices(self):
        res = self._add_scenario_line()

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["total_amount"], "35.80")
        self.assertEqual(res.data["total_item_count"], 2)
        line = res.data["lines"][0]
        self.assertEqual(line["index"], 0)
        self.assertEqual(line["unit_price"], "15.90")
        self.assertEqual(line["addons"][0]["name"], "Granola")

    def test_addon_from_another_product_is_rejected(self):
        res = self.client.post(
            "/api/pos/cart/lines/",
            {"product_id": self.acai.id, "addon_ids": [self.foreign_addon.id]},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_ADDON")

    def test_unknown_product_is_404(self):
        res = self.client.post("/api/pos/cart/lines/", {"product_id": 9999}, format="json")
        self.assertEqual(res.status_code, 404)

    def test_update_and_remove_line(self):
        self._add_scenario_line()

        res = self.client.patch("/api/pos/cart/lines/0/", {"quantity": 3}, format="json")
        self.assertEqual(res.data["total_amount"], "53.70")

        res = self.client.patch("/api/pos/cart/lines/7/", {"quantity": 3}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["total_amount"], "53.70")

        res = self.client.patch("/api/pos/cart/lines/0/", {"quantity": 0}, format="json")
        self.assertEqual(res.status_code, 400)

        res = self.client.delete("/api/pos/cart/lines/0/")
        self.assertEqual(res.data["lines"], [])

    def test_carts_are_per_operator(self):
        self._add_scenario_line()

        self.client.force_authenticate(self.other)
        res = self.client.get("/api/pos/cart/")

        self.assertEqual(res.data["lines"], [])

    def test_clear_cart(self):
        self._add_scenario_line()

        res = self.client.delete("/api/pos/cart/")
        self.assertEqual(res.data["total_item_count"], 0)

    def test_checkout_cash_scenario(self):
        self._add_scenario_line()

        res = self.client.post(
            "/api/pos/checkout/",
            {"payment_method": "cash", "cash_received": "40.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["sale"]["total_amount"], "35.80")
        self.assertEqual(res.data["change"], "4.20")
        self.assertIn("R$35,80", res.data["receipt"]["plain_text"])
        self.assertIn("R$4,20", res.data["receipt"]["html"])
        self.assertEqual(len(res.data["sale"]["items"]), 1)

        cart = self.client.get("/api/pos/cart/")
        self.assertEqual(cart.data["lines"], [])

        self.acai.refresh_from_db()
        self.assertEqual(self.acai.stock, 8)

    def test_checkout_insufficient_cash_keeps_cart(self):
        self._add_scenario_line()

        res = self.client.post(
            "/api/pos/checkout/",
            {"payment_method": "cash", "cash_received": "10.00"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_AMOUNT")
        self.assertEqual(Sale.objects.count(), 0)
        self.assertEqual(len(self.client.get("/api/pos/cart/").data["lines"]), 1)

    def test_checkout_empty_cart(self):
        res = self.client.post("/api/pos/checkout/", {"payment_method": "pix"}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "EMPTY_CART")
