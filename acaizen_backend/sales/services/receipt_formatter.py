# sales/services/receipt_formatter.py

"""
======================================================
PATH: sales/services/receipt_formatter.py
======================================================
RECEIPT FORMATTER (pure)

Purpose:
- Sale + items + store info -> ReceiptArtifact(plain_text, html, print_html)
- Kitchen sub-receipt (names, quantities, addon names; no prices)
- Printer test page

Rules:
- Plain text is 40 columns. A priced row is:
      left + " " * max(1, 40 - len(left) - len(right)) + right
- Money: two decimals, ROUND_HALF_UP, "R$" prefix, comma separator (R$35,80)
- Both renderers consume the SAME pre-formatted strings (one receipt context),
  so text and HTML can never disagree on a number.
- No database access here: callers pass the sale, its items and the store info.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from django.template.loader import render_to_string
from django.utils import timezone

from sales.models import DEFAULT_CUSTOMER_NAME

RECEIPT_WIDTH = 40
SEPARATOR = "-" * RECEIPT_WIDTH

THANK_YOU = "Obrigado pela preferência!"

PAYMENT_LABELS = {
    "cash": "Dinheiro",
    "credit": "Cartão de Crédito",
    "debit": "Cartão de Débito",
    "pix": "PIX",
}

_TWOPLACES = Decimal("0.01")


# =========================================================
# Value types
# =========================================================
@dataclass(frozen=True)
class StoreInfo:
    name: str
    address: str = ""
    phone: str = ""
    instagram: str = ""
    facebook: str = ""

    @classmethod
    def from_config(cls, config) -> "StoreInfo":
        return cls(
            name=config.store_name,
            address=config.address,
            phone=config.phone,
            instagram=config.instagram,
            facebook=config.facebook,
        )

    @property
    def socials(self) -> str:
        return " | ".join(h for h in (self.instagram, self.facebook) if h)


@dataclass(frozen=True)
class ReceiptArtifact:
    """Immutable receipt output. Callers own it; nothing keeps a reference."""

    plain_text: str
    html: str
    print_html: str


# =========================================================
# Formatting helpers
# =========================================================
def _money(value: Any) -> Decimal:
    return Decimal(str(value if value is not None else "0")).quantize(
        _TWOPLACES, rounding=ROUND_HALF_UP
    )


def format_brl(value: Any) -> str:
    """Decimal -> "R$X,XX" (thousands are not grouped)."""
    return "R$" + f"{_money(value):.2f}".replace(".", ",")


def align(left: str, right: str, width: int = RECEIPT_WIDTH) -> str:
    gap = max(1, width - len(left) - len(right))
    return f"{left}{' ' * gap}{right}"


def _center(text: str, width: int = RECEIPT_WIDTH) -> str:
    return text.center(width).rstrip()


def _local_stamp(moment: datetime) -> str:
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return moment.strftime("%d/%m/%Y %H:%M:%S")


def _item_attr(item, name: str, default=None):
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _show_customer(name: Optional[str]) -> bool:
    n = (name or "").strip()
    return bool(n) and n != DEFAULT_CUSTOMER_NAME


# =========================================================
# Receipt context (single source for both renderers)
# =========================================================
def build_receipt_context(sale, items: Iterable, store: StoreInfo) -> dict:
    rows = []
    for item in items:
        addons = [
            {"label": f"  + {a.get('name', '')}", "price": format_brl(a.get("price"))}
            for a in (_item_attr(item, "addons") or [])
        ]
        rows.append(
            {
                "label": f"{_item_attr(item, 'quantity')}x {_item_attr(item, 'product_name')}",
                "price": format_brl(_item_attr(item, "total_price")),
                "addons": addons,
            }
        )

    summary = [
        {"label": "TOTAL:", "value": format_brl(sale.total_amount), "strong": True},
        {
            "label": "Forma de pagamento:",
            "value": PAYMENT_LABELS.get(sale.payment_method, sale.payment_method),
            "strong": False,
        },
    ]
    if sale.payment_method == "cash" and sale.cash_received is not None:
        summary.append(
            {"label": "Valor recebido:", "value": format_brl(sale.cash_received), "strong": False}
        )
        summary.append(
            {"label": "Troco:", "value": format_brl(sale.change_amount or 0), "strong": False}
        )

    return {
        "store": store,
        "stamp": _local_stamp(sale.created_at),
        "customer_name": sale.customer_name if _show_customer(sale.customer_name) else "",
        "order_number": sale.pk,
        "rows": rows,
        "summary": summary,
        "thank_you": THANK_YOU,
        "socials": store.socials,
    }


def render_plain_text(ctx: dict) -> str:
    store: StoreInfo = ctx["store"]

    lines = [_center(store.name)]
    if store.address:
        lines.append(_center(store.address))
    if store.phone:
        lines.append(_center(store.phone))
    lines.append(SEPARATOR)

    lines.append(f"Data: {ctx['stamp']}")
    if ctx["customer_name"]:
        lines.append(f"Cliente: {ctx['customer_name']}")
    if ctx["order_number"]:
        lines.append(f"Pedido #{ctx['order_number']}")
    lines.append(SEPARATOR)

    for row in ctx["rows"]:
        lines.append(align(row["label"], row["price"]))
        for addon in row["addons"]:
            lines.append(align(addon["label"], addon["price"]))

    lines.append(SEPARATOR)
    for entry in ctx["summary"]:
        lines.append(align(entry["label"], entry["value"]))
    lines.append(SEPARATOR)

    lines.append(_center(ctx["thank_you"]))
    if ctx["socials"]:
        lines.append(_center(ctx["socials"]))
    if ctx["order_number"]:
        lines.append(_center(f"Pedido #{ctx['order_number']}"))

    return "\n".join(lines) + "\n"


def render_html(ctx: dict, *, auto_print: bool = False) -> str:
    return render_to_string(
        "sales/receipt.html",
        {**ctx, "auto_print": auto_print, "auto_close_ms": 5000},
    )


# =========================================================
# Public API
# =========================================================
def build_receipt(sale, items: Iterable, store: StoreInfo) -> ReceiptArtifact:
    ctx = build_receipt_context(sale, list(items), store)
    return ReceiptArtifact(
        plain_text=render_plain_text(ctx),
        html=render_html(ctx),
        print_html=render_html(ctx, auto_print=True),
    )


def build_kitchen_receipt(sale, items: Iterable, *, kitchen_category_id) -> Optional[str]:
    """
    Items whose category snapshot equals kitchen_category_id; None when there are none.
    """
    kitchen_items = [
        item for item in items if _item_attr(item, "category_id") == kitchen_category_id
    ]
    if not kitchen_items:
        return None

    lines = [_center("*** COZINHA ***")]
    if sale.pk:
        lines.append(_center(f"Pedido #{sale.pk}"))
    lines.append(f"Data: {_local_stamp(sale.created_at)}")
    if _show_customer(sale.customer_name):
        lines.append(f"Cliente: {sale.customer_name}")
    lines.append(SEPARATOR)

    for item in kitchen_items:
        lines.append(f"{_item_attr(item, 'quantity')}x {_item_attr(item, 'product_name')}")
        for addon in _item_attr(item, "addons") or []:
            lines.append(f"  + {addon.get('name', '')}")

    lines.append(SEPARATOR)
    return "\n".join(lines) + "\n"


def build_printer_test_page(store_name: str, *, now: Optional[datetime] = None) -> str:
    moment = now or timezone.now()
    return (
        "*** TESTE DE IMPRESSORA ***\n\n"
        f"{store_name}\n"
        "Sistema de PDV\n\n"
        "Impressora configurada com sucesso!\n\n"
        f"Data/Hora: {_local_stamp(moment)}\n\n"
        "*** FIM DO TESTE ***\n\n\n\n"
    )
