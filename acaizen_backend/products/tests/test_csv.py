# products/tests/test_csv.py

import csv
import io
from decimal import Decimal

from django.test import TestCase

from products.models import Category, Product
from products.services.catalog_service import create_category, create_product
from products.services.csv_io import (
    CSV_HEADER,
    MissingColumnsError,
    export_products_csv,
    import_products_csv,
)


class ProductCSVTests(TestCase):
    def setUp(self):
        self.acai = create_category(name="Açaí")

    def test_unknown_category_is_created_and_nameless_rows_skipped(self):
        text = (
            "Nome,Preço,Descrição,Categoria,Estoque,Tem Adicionais\n"
            "Brigadeiro,3.50,Doce de chocolate,Doces,30,Não\n"
            ",9.99,Sem nome,Doces,1,Não\n"
            "Beijinho,3.00,\"Coco, leite condensado\",doces,25,Sim\n"
        )

        result = import_products_csv(text)

        self.assertEqual(result.imported, 2)
        self.assertEqual(result.created_categories, ["Doces"])

        doces = Category.objects.get(name="Doces")
        self.assertEqual(Category.objects.filter(name__iexact="doces").count(), 1)

        beijinho = Product.objects.get(name="Beijinho")
        self.assertEqual(beijinho.category_id, doces.id)
        self.assertEqual(beijinho.description, "Coco, leite condensado")
        self.assertTrue(beijinho.has_addons)
        self.assertEqual(beijinho.price, Decimal("3.00"))

        self.assertFalse(Product.objects.filter(description="Sem nome").exists())

    def test_existing_category_matched_case_insensitively(self):
        import_products_csv("nome,preço,categoria\nAçaí 700ml,25.90,AÇAÍ\n")

        self.assertEqual(Product.objects.get(name="Açaí 700ml").category_id, self.acai.id)
        self.assertEqual(Category.objects.count(), 1)

    def test_missing_category_falls_back_to_first_category(self):
        create_category(name="Bebidas")

        import_products_csv("Nome,Preço,Categoria\nÁgua,3.00,\n")

        self.assertEqual(Product.objects.get(name="Água").category_id, self.acai.id)

    def test_missing_required_columns_rejected(self):
        with self.assertRaises(MissingColumnsError):
            import_products_csv("Descrição,Categoria\nx,y\n")

        self.assertFalse(Product.objects.exists())

    def test_export_quotes_embedded_quotes_and_uses_sim_nao(self):
        create_product(
            name='Açaí "Especial"',
            price="18.50",
            description="Com frutas, granola",
            category=self.acai,
            stock=-3,
            has_addons=True,
        )

        text = export_products_csv()

        self.assertTrue(text.startswith(",".join(CSV_HEADER) + "\n"))
        self.assertIn('"Açaí ""Especial"""', text)

        rows = list(csv.reader(io.StringIO(text)))
        self.assertEqual(rows[1], ['Açaí "Especial"', "18.5", "Com frutas, granola", "Açaí", "-3", "Sim"])

    def test_export_quotes_text_columns_only(self):
        create_product(name="Água", price="3.00", description="", category=self.acai, stock=12)

        text = export_products_csv()

        self.assertEqual(text.splitlines()[1], '"Água",3,"","Açaí",12,Não')

    def test_export_round_trips_through_import(self):
        create_product(name='Açaí "Especial"', price="18.50", category=self.acai, stock=4)
        text = export_products_csv()
        Product.objects.all().delete()

        result = import_products_csv(text)

        self.assertEqual(result.imported, 1)
        product = Product.objects.get()
        self.assertEqual(product.name, 'Açaí "Especial"')
        self.assertEqual(product.price, Decimal("18.50"))
