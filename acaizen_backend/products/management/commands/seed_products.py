# products/management/commands/seed_products.py

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Category
from products.services.catalog_service import create_addon, create_category, create_product

CATEGORIES = [
    ("Açaí", "Açaí tradicional e especial"),
    ("Bebidas", "Sucos, refrigerantes e outras bebidas"),
    ("Lanches", "Sanduíches e outros lanches"),
]

# (name, price, description, category, stock)
PRODUCTS = [
    ("Açaí Tradicional 300ml", "15.90", "Açaí puro 300ml", "Açaí", 100),
    ("Açaí Tradicional 500ml", "20.90", "Açaí puro 500ml", "Açaí", 100),
    ("Refrigerante Lata", "5.00", "Refrigerante em lata", "Bebidas", 50),
    ("Suco Natural", "8.00", "Suco natural de frutas", "Bebidas", 20),
    ("Sanduíche Natural", "12.00", "Sanduíche natural com salada", "Lanches", 15),
]

ACAI_ADDONS = [
    ("Granola", "2.00"),
    ("Leite Condensado", "2.50"),
    ("Banana", "1.50"),
    ("Morango", "3.00"),
]


class Command(BaseCommand):
    help = "Seed sample categories, products and addons when the catalog is empty"

    @transaction.atomic
    def handle(self, *args, **options):
        if Category.objects.exists():
            self.stdout.write(self.style.WARNING("Catalog already has categories. Skipping."))
            return

        self.stdout.write(self.style.WARNING("Seeding catalog..."))

        # -------------------------------
        # CATEGORIES
        # -------------------------------
        category_objs = {
            name: create_category(name=name, description=description)
            for name, description in CATEGORIES
        }

        # -------------------------------
        # PRODUCTS
        # -------------------------------
        product_objs = {}
        for name, price, description, category, stock in PRODUCTS:
            product_objs[name] = create_product(
                name=name,
                price=Decimal(price),
                description=description,
                category=category_objs[category],
                stock=stock,
            )

        # -------------------------------
        # ADDONS (both açaí sizes)
        # -------------------------------
        for product_name in ("Açaí Tradicional 300ml", "Açaí Tradicional 500ml"):
            for addon_name, price in ACAI_ADDONS:
                create_addon(
                    product=product_objs[product_name],
                    name=addon_name,
                    price=Decimal(price),
                )

        self.stdout.write(self.style.SUCCESS("✅ Catalog seeded successfully."))
