# sales/services/sale_service.py

"""
PERSISTED SALE SERVICE

Rebuilds receipts for sales already in the log and re-sends them to the
print helper. Used by the sales history screens (reprint / download).
"""

from __future__ import annotations

from typing import Optional

from django.conf import settings

from sales.models import Sale
from sales.services.printer_dispatcher import send_kitchen_receipt, send_receipt
from sales.services.receipt_formatter import (
    ReceiptArtifact,
    StoreInfo,
    build_kitchen_receipt,
    build_receipt,
)
from store.models import StoreConfig


def _items(sale: Sale) -> list:
    return list(sale.items.all())


def receipt_for_sale(sale: Sale, *, config: Optional[StoreConfig] = None) -> ReceiptArtifact:
    config = config or StoreConfig.load()
    return build_receipt(sale, _items(sale), StoreInfo.from_config(config))


def kitchen_receipt_for_sale(sale: Sale) -> Optional[str]:
    return build_kitchen_receipt(
        sale,
        _items(sale),
        kitchen_category_id=getattr(settings, "KITCHEN_CATEGORY_ID", None),
    )


def print_sale(sale: Sale) -> bool:
    config = StoreConfig.load()
    return send_receipt(receipt_for_sale(sale, config=config).plain_text, config=config)


def print_sale_kitchen(sale: Sale) -> bool:
    """False when the sale has no kitchen items (nothing is sent)."""
    text = kitchen_receipt_for_sale(sale)
    if not text:
        return False
    return send_kitchen_receipt(text)
