# products/services/catalog_service.py

"""
======================================================
PATH: products/services/catalog_service.py
======================================================
CATALOG CORE SERVICES

Purpose:
- Category / Product / Addon writes with their referential bookkeeping
- Per-line stock decrement used by checkout

Rules:
- A Category cannot be deleted while any Product references it (checked before mutating).
- Deleting a Product removes its Addons.
- First Addon of a product sets has_addons=True; removing the last one sets it back to False.
- Prices are non-negative decimals with 2 places.
- Stock has NO floor: decrements may drive it negative.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from products.models import Addon, Category, Product

logger = logging.getLogger(__name__)

_TWOPLACES = Decimal("0.01")

PRODUCT_FIELDS = {"name", "price", "description", "image", "category", "stock", "has_addons"}
CATEGORY_FIELDS = {"name", "description"}


# =========================================================
# Errors
# =========================================================
class CatalogError(Exception):
    code = "CATALOG_ERROR"


class CategoryInUseError(CatalogError):
    code = "CATEGORY_IN_USE"


class InvalidPriceError(CatalogError):
    code = "INVALID_PRICE"


# =========================================================
# Helpers
# =========================================================
def _price(value: Any) -> Decimal:
    try:
        d = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidPriceError("Preço inválido") from exc

    if not d.is_finite() or d < Decimal("0.00"):
        raise InvalidPriceError("Preço não pode ser negativo")

    return d.quantize(_TWOPLACES, rounding=ROUND_HALF_UP)


def _apply(instance, fields: dict, allowed: set[str]) -> None:
    for key, value in fields.items():
        if key not in allowed:
            raise CatalogError(f"Campo desconhecido: {key}")
        setattr(instance, key, value)


# =========================================================
# Categories
# =========================================================
def create_category(*, name: str, description: str = "") -> Category:
    now = timezone.now()
    return Category.objects.create(
        name=name.strip(),
        description=description or "",
        created_at=now,
        updated_at=now,
    )


def update_category(*, category: Category, **fields) -> Category:
    _apply(category, fields, CATEGORY_FIELDS)
    category.updated_at = timezone.now()
    category.save()
    return category


@transaction.atomic
def delete_category(*, category: Category) -> None:
    if Product.objects.filter(category=category).exists():
        raise CategoryInUseError(
            "Existem produtos nesta categoria. Remova ou altere a categoria dos produtos antes de excluí-la."
        )
    category.delete()


def find_category_by_name(name: str) -> Optional[Category]:
    """Case-insensitive match, accented letters included ("AÇAÍ" == "Açaí")."""
    wanted = (name or "").strip().casefold()
    for category in Category.objects.order_by("id"):
        if category.name.strip().casefold() == wanted:
            return category
    return None


def find_or_create_category(name: str) -> tuple[Category, bool]:
    """Returns (category, created). Unknown names are created."""
    existing = find_category_by_name(name)
    if existing is not None:
        return existing, False
    return create_category(name=(name or "").strip()), True


# =========================================================
# Products
# =========================================================
def create_product(
    *,
    name: str,
    price: Any,
    category: Optional[Category] = None,
    description: str = "",
    image: str = "",
    stock: int = 0,
    has_addons: bool = False,
) -> Product:
    now = timezone.now()
    return Product.objects.create(
        name=name.strip(),
        price=_price(price),
        category=category,
        description=description or "",
        image=image or "",
        stock=int(stock or 0),
        has_addons=bool(has_addons),
        created_at=now,
        updated_at=now,
    )


def update_product(*, product: Product, **fields) -> Product:
    if "price" in fields:
        fields["price"] = _price(fields["price"])
    _apply(product, fields, PRODUCT_FIELDS)
    product.updated_at = timezone.now()
    product.save()
    return product


@transaction.atomic
def delete_product(*, product: Product) -> None:
    # addons go with it (FK CASCADE)
    product.delete()


# =========================================================
# Addons
# =========================================================
@transaction.atomic
def create_addon(*, product: Product, name: str, price: Any) -> Addon:
    addon = Addon.objects.create(product=product, name=name.strip(), price=_price(price))

    if not product.has_addons:
        Product.objects.filter(pk=product.pk).update(has_addons=True, updated_at=timezone.now())
        product.has_addons = True

    return addon


def update_addon(*, addon: Addon, name: Optional[str] = None, price: Any = None) -> Addon:
    if name is not None:
        addon.name = name.strip()
    if price is not None:
        addon.price = _price(price)
    addon.updated_at = timezone.now()
    addon.save()
    return addon


@transaction.atomic
def delete_addon(*, addon: Addon) -> None:
    product_id = addon.product_id
    addon.delete()

    if not Addon.objects.filter(product_id=product_id).exists():
        Product.objects.filter(pk=product_id).update(has_addons=False, updated_at=timezone.now())


# =========================================================
# Stock
# =========================================================
def decrement_stock(*, product_id: int, quantity: int) -> bool:
    """
    Single-row atomic decrement (no floor).

    Returns False when the product no longer exists; the caller decides whether
    that matters (checkout only logs it).
    """
    updated = Product.objects.filter(pk=product_id).update(
        stock=F("stock") - int(quantity),
        updated_at=timezone.now(),
    )
    return updated == 1
