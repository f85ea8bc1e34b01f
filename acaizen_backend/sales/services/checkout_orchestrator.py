# sales/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Finalize the operator's in-memory cart into a persisted Sale.
- Decrement product stock per sold line.
- Produce the customer receipt and the kitchen sub-receipt.

Hard rules:
- Money is exact Decimal; quantized to 2 places only for storage/presentation.
- Cash: cash_received must be present and >= total; change = received - total.
  Other methods carry neither value.
- Two-phase write: the Sale header is inserted first (yields the order number),
  then the items are attached in cart order. Both phases share ONE transaction,
  so a failed item insert never leaves an orphaned header.
- Stock is decremented AFTER the sale is committed, one line at a time.
  A failing line is logged and does not stop the others or fail the sale.
- On persistence failure the cart is left intact for a retry.
- Once the sale is committed the cart is cleared BEFORE stock, receipts and
  printing run, so a later failure never blocks the next checkout.
- A second checkout on the same cart while one is running is refused.

Cart state:
    IDLE -> VALIDATING -> PERSISTING -> RECEIPT_READY
    IDLE -> VALIDATING -> REJECTED
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from pos.cart import Cart, CartLine
from products.services.catalog_service import decrement_stock
from sales.models import DEFAULT_CUSTOMER_NAME, Sale, SaleItem
from sales.services.printer_dispatcher import send_kitchen_receipt, send_receipt
from sales.services.receipt_formatter import (
    ReceiptArtifact,
    StoreInfo,
    build_kitchen_receipt,
    build_receipt,
)
from store.models import StoreConfig

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_decimal(v) -> Optional[Decimal]:
    if v is None or v == "":
        return None
    try:
        d = Decimal(str(v))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return d if d.is_finite() else None


def _normalize_payment_method(method: Optional[str]) -> str:
    return (method or "").strip().lower()


# =====================================================
# Errors
# =====================================================

class CheckoutError(Exception):
    code = "CHECKOUT_FAILED"


class EmptyCartError(CheckoutError):
    code = "EMPTY_CART"


class InsufficientAmountError(CheckoutError):
    code = "INSUFFICIENT_AMOUNT"


class InvalidPaymentMethodError(CheckoutError):
    code = "INVALID_PAYMENT_METHOD"


class CheckoutInProgressError(CheckoutError):
    code = "CHECKOUT_IN_PROGRESS"


class SalePersistenceError(CheckoutError):
    code = "SALE_PERSISTENCE_FAILED"


# =====================================================
# Result
# =====================================================

@dataclass(frozen=True)
class CheckoutResult:
    sale: Sale
    items: tuple
    receipt: ReceiptArtifact
    kitchen_receipt: Optional[str] = None
    printed: Optional[bool] = None
    kitchen_printed: Optional[bool] = None

    @property
    def change(self) -> Optional[Decimal]:
        return self.sale.change_amount


# =====================================================
# Steps
# =====================================================

def _validate(*, cart: Cart, method: str, cash_received) -> tuple[Decimal, Optional[Decimal], Optional[Decimal]]:
    """
    Returns (total, received, change). received/change are None for non-cash.
    """
    if method not in Sale.PAYMENT_METHODS:
        raise InvalidPaymentMethodError(f"Forma de pagamento inválida: {method or '(vazia)'}")

    if cart.is_empty:
        raise EmptyCartError("empty cart")

    total = cart.total_amount

    if method != Sale.PAYMENT_CASH:
        return total, None, None

    received = _to_decimal(cash_received)
    if received is None or received < total:
        raise InsufficientAmountError("insufficient amount")

    return total, received, received - total


def _operator_name(operator) -> str:
    return (getattr(operator, "name", "") or getattr(operator, "email", "") or "").strip()


def _sale_item_for(*, sale: Sale, line: CartLine, position: int) -> SaleItem:
    return SaleItem(
        sale=sale,
        product_id=line.product.id,
        product_name=line.product.name,
        category_id=line.product.category_id,
        quantity=line.quantity,
        unit_price=_money(line.product.price),
        addons=[
            {"id": a.id, "name": a.name, "price": f"{_money(a.price):.2f}"}
            for a in line.addons
        ],
        total_price=_money(line.total),
        position=position,
    )


def _persist_sale(
    *,
    operator,
    lines: list[CartLine],
    method: str,
    total: Decimal,
    received: Optional[Decimal],
    change: Optional[Decimal],
    customer_name: Optional[str],
    now,
) -> tuple[Sale, list[SaleItem]]:
    with transaction.atomic():
        # phase 1: header
        sale = Sale.objects.create(
            customer_name=(customer_name or "").strip() or DEFAULT_CUSTOMER_NAME,
            total_amount=_money(total),
            payment_method=method,
            cash_received=_money(received) if received is not None else None,
            change_amount=_money(change) if change is not None else None,
            operator_id=str(operator.pk),
            operator_name=_operator_name(operator),
            created_at=now,
        )

        # phase 2: items, in cart order
        items = [
            _sale_item_for(sale=sale, line=line, position=position)
            for position, line in enumerate(lines)
        ]
        SaleItem.objects.bulk_create(items)

    return sale, items


def _decrement_stock_per_line(*, sale: Sale, lines: list[CartLine]) -> None:
    for line in lines:
        try:
            found = decrement_stock(product_id=line.product.id, quantity=line.quantity)
        except DatabaseError:
            logger.warning(
                "Stock decrement failed sale=%s product=%s qty=%s",
                sale.pk,
                line.product.id,
                line.quantity,
                exc_info=True,
            )
            continue

        if not found:
            logger.warning(
                "Stock decrement skipped, product missing sale=%s product=%s",
                sale.pk,
                line.product.id,
            )


# =====================================================
# Public API
# =====================================================

def checkout_cart(
    *,
    operator,
    cart: Cart,
    payment_method: Optional[str],
    cash_received=None,
    customer_name: Optional[str] = None,
    now=None,
) -> CheckoutResult:
    """
    Finalize `cart` for `operator`.

    Raises:
    - CheckoutInProgressError: another checkout is running on this cart
    - InvalidPaymentMethodError / EmptyCartError / InsufficientAmountError: nothing persisted
    - SalePersistenceError: database write failed, cart kept for retry
    """
    if not cart.begin_checkout():
        raise CheckoutInProgressError("Uma venda já está sendo processada")

    method = _normalize_payment_method(payment_method)

    try:
        total, received, change = _validate(cart=cart, method=method, cash_received=cash_received)
    except CheckoutError as exc:
        cart.mark(Cart.STATE_REJECTED)
        logger.info(
            "Checkout rejected operator=%s reason=%s method=%s",
            getattr(operator, "pk", None),
            exc.code,
            method,
        )
        raise

    cart.mark(Cart.STATE_PERSISTING)
    lines = list(cart.lines)

    committed = False
    try:
        sale, items = _persist_sale(
            operator=operator,
            lines=lines,
            method=method,
            total=total,
            received=received,
            change=change,
            customer_name=customer_name,
            now=now or timezone.now(),
        )
        committed = True
    except (DatabaseError, ValidationError) as exc:
        logger.exception("Sale persistence failed operator=%s", getattr(operator, "pk", None))
        raise SalePersistenceError(
            "Não foi possível finalizar a venda. Tente novamente."
        ) from exc
    finally:
        if not committed:
            cart.mark(Cart.STATE_IDLE)

    # sale committed: its lines must never be sold again
    cart.clear()
    cart.mark(Cart.STATE_RECEIPT_READY)

    _decrement_stock_per_line(sale=sale, lines=lines)

    config = StoreConfig.load()
    receipt = build_receipt(sale, items, StoreInfo.from_config(config))
    kitchen_receipt = build_kitchen_receipt(
        sale,
        items,
        kitchen_category_id=getattr(settings, "KITCHEN_CATEGORY_ID", None),
    )

    printed = kitchen_printed = None
    if getattr(settings, "AUTO_PRINT_ON_CHECKOUT", False):
        printed = send_receipt(receipt.plain_text, config=config)
        if kitchen_receipt:
            kitchen_printed = send_kitchen_receipt(kitchen_receipt, config=config)

    logger.info(
        "Checkout completed sale=%s total=%s method=%s items=%s operator=%s",
        sale.pk,
        sale.total_amount,
        sale.payment_method,
        len(items),
        sale.operator_id,
    )

    return CheckoutResult(
        sale=sale,
        items=tuple(items),
        receipt=receipt,
        kitchen_receipt=kitchen_receipt,
        printed=printed,
        kitchen_printed=kitchen_printed,
    )
