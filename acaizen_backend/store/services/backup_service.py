# store/services/backup_service.py

"""
======================================================
PATH: store/services/backup_service.py
======================================================
BACKUP / RESTORE (whole database as one JSON document)

File shape (camelCase records, one array per collection):

    {
      "users":      [{"id", "email", "password", "name", "role", "createdAt"}],
      "products":   [{"id", "name", "price", "description", "image", "categoryId",
                      "stock", "hasAddons", "createdAt", "updatedAt"}],
      "categories": [{"id", "name", "description", "createdAt", "updatedAt"}],
      "addons":     [{"id", "name", "price", "productId", "createdAt", "updatedAt"}],
      "sales":      [{"id", "customerName", "total", "paymentMethod", "cashReceived",
                      "change", "createdAt", "operatorId", "operatorName",
                      "items": [{"id", "saleId", "productId", "productName", "categoryId",
                                 "quantity", "unitPrice", "addons", "totalPrice"}]}],
      "config":     [{"id", "storeName", "address", "phone", "instagram", "facebook",
                      "printerIpAddress", "printerPort"}]
    }

Restore rules:
- users, products and categories are required (anything else may be missing)
- every record is parsed BEFORE anything is deleted; a bad file changes nothing
- then: clear every table, bulk insert preserving ids, reset id sequences
- all of it in ONE transaction
- dangling references are dropped (product -> unknown category becomes uncategorized,
  addon -> unknown product is skipped)

Passwords travel in plaintext, as they are stored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from django.core.management.color import no_style
from django.db import IntegrityError, connection, transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from products.models import Addon, Category, Product
from sales.models import DEFAULT_CUSTOMER_NAME, Sale, SaleItem
from store.models import SINGLETON_ID, StoreConfig
from users.models import User
from users.services.account_service import ensure_default_admin

logger = logging.getLogger(__name__)

_TWOPLACES = Decimal("0.01")

REQUIRED_KEYS = ("users", "products", "categories")


# =========================================================
# Errors
# =========================================================
class BackupError(Exception):
    code = "BACKUP_ERROR"


class InvalidBackupError(BackupError):
    code = "INVALID_BACKUP"


@dataclass
class RestoreResult:
    counts: dict[str, int] = field(default_factory=dict)
    default_admin_created: bool = False


# =========================================================
# Value helpers
# =========================================================
def _iso(value) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def _number(value: Optional[Decimal]):
    # the file stores plain JSON numbers
    if value is None:
        return None
    return float(value)


def _money(value, *, where: str) -> Decimal:
    try:
        d = Decimal(str(value if value is not None else "0"))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidBackupError(f"Valor inválido em {where}: {value!r}")
    if not d.is_finite():
        raise InvalidBackupError(f"Valor inválido em {where}: {value!r}")
    return d.quantize(_TWOPLACES, rounding=ROUND_HALF_UP)


def _optional_money(value, *, where: str) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return _money(value, where=where)


def _int(value, *, where: str, default: Optional[int] = None) -> Optional[int]:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidBackupError(f"Número inválido em {where}: {value!r}")


def _moment(value):
    if not value:
        return timezone.now()
    parsed = parse_datetime(str(value))
    if parsed is None:
        return timezone.now()
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _records(data: dict, key: str) -> list[dict]:
    rows = data.get(key) or []
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise InvalidBackupError(f"'{key}' deve ser uma lista de registros")
    return rows


# =========================================================
# Export
# =========================================================
def _user_record(u: User) -> dict:
    return {
        "id": u.id,
        "email": u.email,
        "password": u.password,
        "name": u.name,
        "role": u.role,
        "createdAt": _iso(u.created_at),
    }


def _category_record(c: Category) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "description": c.description,
        "createdAt": _iso(c.created_at),
        "updatedAt": _iso(c.updated_at),
    }


def _product_record(p: Product) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "price": _number(p.price),
        "description": p.description,
        "image": p.image,
        "categoryId": p.category_id,
        "stock": p.stock,
        "hasAddons": p.has_addons,
        "createdAt": _iso(p.created_at),
        "updatedAt": _iso(p.updated_at),
    }


def _addon_record(a: Addon) -> dict:
    return {
        "id": a.id,
        "name": a.name,
        "price": _number(a.price),
        "productId": a.product_id,
        "createdAt": _iso(a.created_at),
        "updatedAt": _iso(a.updated_at),
    }


def _sale_record(s: Sale) -> dict:
    return {
        "id": s.id,
        "customerName": s.customer_name,
        "total": _number(s.total_amount),
        "paymentMethod": s.payment_method,
        "cashReceived": _number(s.cash_received),
        "change": _number(s.change_amount),
        "createdAt": _iso(s.created_at),
        "operatorId": s.operator_id,
        "operatorName": s.operator_name,
        "items": [
            {
                "id": i.id,
                "saleId": s.id,
                "productId": i.product_id,
                "productName": i.product_name,
                "categoryId": i.category_id,
                "quantity": i.quantity,
                "unitPrice": _number(i.unit_price),
                "addons": [
                    {"id": a.get("id"), "name": a.get("name", ""), "price": float(Decimal(str(a.get("price", 0))))}
                    for a in (i.addons or [])
                ],
                "totalPrice": _number(i.total_price),
            }
            for i in s.items.all()
        ],
    }


def _config_record(c: StoreConfig) -> dict:
    return {
        "id": c.id,
        "storeName": c.store_name,
        "address": c.address,
        "phone": c.phone,
        "instagram": c.instagram,
        "facebook": c.facebook,
        "printerIpAddress": c.printer_host,
        "printerPort": int(c.printer_port) if str(c.printer_port or "").isdigit() else None,
    }


def export_backup() -> dict[str, list[dict]]:
    StoreConfig.load()

    return {
        "users": [_user_record(u) for u in User.objects.order_by("created_at", "id")],
        "products": [_product_record(p) for p in Product.objects.order_by("id")],
        "categories": [_category_record(c) for c in Category.objects.order_by("id")],
        "addons": [_addon_record(a) for a in Addon.objects.order_by("id")],
        "sales": [
            _sale_record(s)
            for s in Sale.objects.prefetch_related("items").order_by("id")
        ],
        "config": [_config_record(c) for c in StoreConfig.objects.order_by("id")],
    }


def backup_filename(today: Optional[date] = None) -> str:
    day = today or timezone.localdate()
    return f"acaizen_backup_{day.isoformat()}.json"


# =========================================================
# Restore: parse (no writes)
# =========================================================
def _parse_users(rows: list[dict]) -> list[User]:
    users = []
    seen = set()
    for n, r in enumerate(rows):
        uid = str(r.get("id") or "").strip()
        email = str(r.get("email") or "").strip()
        if not uid or not email:
            raise InvalidBackupError(f"users[{n}] sem id ou email")
        if uid in seen:
            raise InvalidBackupError(f"users[{n}] id duplicado: {uid}")
        seen.add(uid)

        role = r.get("role") or "cashier"
        if role not in ("admin", "cashier"):
            raise InvalidBackupError(f"users[{n}] perfil inválido: {role}")

        users.append(
            User(
                id=uid,
                email=email,
                password=str(r.get("password") or ""),
                name=str(r.get("name") or ""),
                role=role,
                created_at=_moment(r.get("createdAt")),
            )
        )
    return users


def _parse_categories(rows: list[dict]) -> list[Category]:
    return [
        Category(
            id=_int(r.get("id"), where=f"categories[{n}].id"),
            name=str(r.get("name") or "").strip() or f"Categoria {n + 1}",
            description=str(r.get("description") or ""),
            created_at=_moment(r.get("createdAt")),
            updated_at=_moment(r.get("updatedAt")),
        )
        for n, r in enumerate(rows)
    ]


def _parse_products(rows: list[dict], category_ids: set[int]) -> list[Product]:
    products = []
    for n, r in enumerate(rows):
        category_id = _int(r.get("categoryId"), where=f"products[{n}].categoryId")
        if category_id is not None and category_id not in category_ids:
            logger.warning("Backup product %s references missing category %s", r.get("id"), category_id)
            category_id = None

        products.append(
            Product(
                id=_int(r.get("id"), where=f"products[{n}].id"),
                name=str(r.get("name") or "").strip(),
                price=_money(r.get("price"), where=f"products[{n}].price"),
                description=str(r.get("description") or ""),
                image=str(r.get("image") or ""),
                category_id=category_id,
                stock=_int(r.get("stock"), where=f"products[{n}].stock", default=0),
                has_addons=bool(r.get("hasAddons")),
                created_at=_moment(r.get("createdAt")),
                updated_at=_moment(r.get("updatedAt")),
            )
        )
    return products


def _parse_addons(rows: list[dict], product_ids: set[int]) -> list[Addon]:
    addons = []
    for n, r in enumerate(rows):
        product_id = _int(r.get("productId"), where=f"addons[{n}].productId")
        if product_id not in product_ids:
            logger.warning("Backup addon %s skipped, missing product %s", r.get("id"), product_id)
            continue

        addons.append(
            Addon(
                id=_int(r.get("id"), where=f"addons[{n}].id"),
                name=str(r.get("name") or "").strip(),
                price=_money(r.get("price"), where=f"addons[{n}].price"),
                product_id=product_id,
                created_at=_moment(r.get("createdAt")),
                updated_at=_moment(r.get("updatedAt")),
            )
        )
    return addons


def _parse_sale_addons(value, *, where: str) -> list[dict]:
    return [
        {
            "id": a.get("id"),
            "name": str(a.get("name") or ""),
            "price": f"{_money(a.get('price'), where=where):.2f}",
        }
        for a in (value or [])
        if isinstance(a, dict)
    ]


def _parse_sales(rows: list[dict]) -> tuple[list[Sale], list[SaleItem]]:
    sales, items = [], []
    for n, r in enumerate(rows):
        method = r.get("paymentMethod")
        if method not in Sale.PAYMENT_METHODS:
            raise InvalidBackupError(f"sales[{n}] forma de pagamento inválida: {method}")

        sale = Sale(
            id=_int(r.get("id"), where=f"sales[{n}].id"),
            customer_name=str(r.get("customerName") or "").strip() or DEFAULT_CUSTOMER_NAME,
            total_amount=_money(r.get("total"), where=f"sales[{n}].total"),
            payment_method=method,
            cash_received=_optional_money(r.get("cashReceived"), where=f"sales[{n}].cashReceived"),
            change_amount=_optional_money(r.get("change"), where=f"sales[{n}].change"),
            created_at=_moment(r.get("createdAt")),
            operator_id=str(r.get("operatorId") or ""),
            operator_name=str(r.get("operatorName") or ""),
        )
        sales.append(sale)

        rows_items = r.get("items") or []
        if not isinstance(rows_items, list) or not all(isinstance(it, dict) for it in rows_items):
            raise InvalidBackupError(f"sales[{n}].items deve ser uma lista de registros")

        for position, it in enumerate(rows_items):
            where = f"sales[{n}].items[{position}]"
            items.append(
                SaleItem(
                    id=_int(it.get("id"), where=f"{where}.id"),
                    sale=sale,
                    product_id=_int(it.get("productId"), where=f"{where}.productId"),
                    product_name=str(it.get("productName") or ""),
                    category_id=_int(it.get("categoryId"), where=f"{where}.categoryId"),
                    quantity=_int(it.get("quantity"), where=f"{where}.quantity", default=1),
                    unit_price=_money(it.get("unitPrice"), where=f"{where}.unitPrice"),
                    addons=_parse_sale_addons(it.get("addons"), where=f"{where}.addons"),
                    total_price=_money(it.get("totalPrice"), where=f"{where}.totalPrice"),
                    position=position,
                )
            )
    return sales, items


def _printer_port(value) -> str:
    if value is None or value == "":
        return ""
    port = str(value).strip()
    if not port.isdigit() or not 1 <= int(port) <= 65535:
        raise InvalidBackupError(f"Porta da impressora inválida: {value!r}")
    return port


def _printer_host(value) -> str:
    host = str(value or "").strip()
    if any(ch.isspace() or ch in "/?#@" for ch in host):
        raise InvalidBackupError(f"Endereço da impressora inválido: {value!r}")
    return host


def _parse_config(rows: list[dict]) -> Optional[StoreConfig]:
    if not rows:
        return None
    r = next((row for row in rows if _int(row.get("id"), where="config.id") == SINGLETON_ID), rows[0])
    return StoreConfig(
        id=SINGLETON_ID,
        store_name=str(r.get("storeName") or "").strip() or StoreConfig._meta.get_field("store_name").default,
        address=str(r.get("address") or ""),
        phone=str(r.get("phone") or ""),
        instagram=str(r.get("instagram") or ""),
        facebook=str(r.get("facebook") or ""),
        printer_host=_printer_host(r.get("printerIpAddress")),
        printer_port=_printer_port(r.get("printerPort")),
    )


# =========================================================
# Restore: write
# =========================================================
def _reset_sequences() -> None:
    statements = connection.ops.sequence_reset_sql(
        no_style(),
        [Category, Product, Addon, Sale, SaleItem],
    )
    if not statements:
        return
    with connection.cursor() as cursor:
        for sql in statements:
            cursor.execute(sql)


def restore_backup(data: Any) -> RestoreResult:
    """
    Destructive: replaces EVERY table with the file contents.
    Raises InvalidBackupError before touching the database when the file is unusable.
    """
    if not isinstance(data, dict) or any(data.get(k) is None for k in REQUIRED_KEYS):
        raise InvalidBackupError("O arquivo não contém dados válidos de backup")

    users = _parse_users(_records(data, "users"))
    categories = _parse_categories(_records(data, "categories"))
    products = _parse_products(_records(data, "products"), {c.id for c in categories})
    addons = _parse_addons(_records(data, "addons"), {p.id for p in products})
    sales, items = _parse_sales(_records(data, "sales"))
    config = _parse_config(_records(data, "config"))

    try:
        with transaction.atomic():
            SaleItem.objects.all().delete()
            Sale.objects.all().delete()
            Addon.objects.all().delete()
            Product.objects.all().delete()
            Category.objects.all().delete()
            User.objects.all().delete()
            StoreConfig.objects.all().delete()

            User.objects.bulk_create(users)
            Category.objects.bulk_create(categories)
            Product.objects.bulk_create(products)
            Addon.objects.bulk_create(addons)
            Sale.objects.bulk_create(sales)
            SaleItem.objects.bulk_create(items)
            if config is not None:
                config.save()

            _reset_sequences()

            _, admin_created = ensure_default_admin()
    except IntegrityError as exc:
        logger.exception("Backup restore failed")
        raise InvalidBackupError("Backup com registros duplicados ou inconsistentes") from exc

    result = RestoreResult(
        counts={
            "users": len(users),
            "categories": len(categories),
            "products": len(products),
            "addons": len(addons),
            "sales": len(sales),
            "config": 1 if config is not None else 0,
        },
        default_admin_created=admin_created,
    )
    logger.info("Backup restored counts=%s default_admin_created=%s", result.counts, admin_created)
    return result
