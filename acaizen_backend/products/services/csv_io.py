# products/services/csv_io.py

"""
======================================================
PATH: products/services/csv_io.py
======================================================
PRODUCT CSV IMPORT / EXPORT

Format:
    Nome,Preço,Descrição,Categoria,Estoque,Tem Adicionais

Import rules:
- Header names matched case-insensitively; "nome" and "preço" are required.
- Rows without a name are skipped and NOT counted.
- Unknown category names are created (matched case-insensitively).
- Rows without a category fall back to the first known category.
- "Tem Adicionais" is "Sim" / "Não".
- The whole file is imported in one transaction.

Export rules:
- Nome, Descrição and Categoria are always quoted (embedded quotes doubled).
- Preço is a plain number without trailing zeros (15.9, 18).
- Nothing else is quoted.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from django.db import transaction

from products.models import Category, Product
from products.services.catalog_service import create_product, find_or_create_category

logger = logging.getLogger(__name__)

CSV_HEADER = ["Nome", "Preço", "Descrição", "Categoria", "Estoque", "Tem Adicionais"]


class CSVImportError(Exception):
    code = "CSV_IMPORT_ERROR"


class MissingColumnsError(CSVImportError):
    code = "CSV_MISSING_COLUMNS"


@dataclass
class CSVImportResult:
    imported: int = 0
    created_categories: list[str] = field(default_factory=list)


# =========================================================
# Export
# =========================================================
def _quoted(value) -> str:
    return '"' + str(value or "").replace('"', '""') + '"'


def _plain_number(value) -> str:
    # 15.90 -> "15.9", 18.00 -> "18"
    return format(Decimal(value).normalize(), "f")


def export_products_csv(products: Optional[Iterable[Product]] = None) -> str:
    """
    Name, description and category are always quoted; the other columns never are.
    """
    if products is None:
        products = Product.objects.select_related("category").order_by("id")

    lines = [",".join(CSV_HEADER)]

    for p in products:
        lines.append(
            ",".join(
                [
                    _quoted(p.name),
                    _plain_number(p.price),
                    _quoted(p.description),
                    _quoted(p.category.name if p.category_id else ""),
                    str(p.stock),
                    "Sim" if p.has_addons else "Não",
                ]
            )
        )

    return "\n".join(lines) + "\n"


# =========================================================
# Import
# =========================================================
def _parse_price(raw: str) -> Decimal:
    text = (raw or "").strip().replace("R$", "").strip().replace(",", ".")
    if not text:
        return Decimal("0.00")
    try:
        value = Decimal(text)
    except InvalidOperation:
        return Decimal("0.00")
    if not value.is_finite() or value < 0:
        return Decimal("0.00")
    return value


def _parse_int(raw: str) -> int:
    try:
        return int((raw or "").strip())
    except ValueError:
        return 0


def _cell(row: list[str], index: int) -> str:
    if index < 0 or index >= len(row):
        return ""
    return row[index]


@transaction.atomic
def import_products_csv(text: str) -> CSVImportResult:
    """
    Parse CSV text and create one Product per named row.

    Raises MissingColumnsError when the header lacks "nome" or "preço".
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))

    try:
        header = next(reader)
    except StopIteration as exc:
        raise MissingColumnsError("O arquivo CSV não contém as colunas necessárias") from exc

    columns = [h.strip().lower() for h in header]

    def idx(name: str) -> int:
        return columns.index(name) if name in columns else -1

    name_i = idx("nome")
    price_i = idx("preço")
    desc_i = idx("descrição")
    cat_i = idx("categoria")
    stock_i = idx("estoque")
    addons_i = idx("tem adicionais")

    if name_i == -1 or price_i == -1:
        raise MissingColumnsError("O arquivo CSV não contém as colunas necessárias")

    result = CSVImportResult()
    fallback = Category.objects.order_by("id").first()

    for row in reader:
        if not any(cell.strip() for cell in row):
            continue

        name = _cell(row, name_i).strip()
        if not name:
            continue

        category_name = _cell(row, cat_i).strip()
        if category_name:
            category, created = find_or_create_category(category_name)
            if created:
                result.created_categories.append(category.name)
        else:
            category = fallback

        if fallback is None and category is not None:
            fallback = Category.objects.order_by("id").first()

        create_product(
            name=name,
            price=_parse_price(_cell(row, price_i)),
            description=_cell(row, desc_i),
            category=category,
            stock=_parse_int(_cell(row, stock_i)),
            has_addons=_cell(row, addons_i).strip().lower() == "sim",
        )
        result.imported += 1

    logger.info(
        "CSV import finished imported=%s new_categories=%s",
        result.imported,
        len(result.created_categories),
    )
    return result
