# pos/cart.py

"""
PATH: pos/cart.py

POS CART (in-memory, one per operator)

Purpose:
- Hold the lines an operator is ringing up before checkout.
- Keep per-line and cart-level totals exact (Decimal) and recomputed on every change.

Rules:
- Lines are never merged: adding the same product twice yields two lines.
- Quantity is a positive integer.
- A line freezes product + addon name/price at the moment it is added.
- Checkout state lives on the cart so a second submit is refused while one is running:
    IDLE -> VALIDATING -> PERSISTING -> RECEIPT_READY
    IDLE -> VALIDATING -> REJECTED

Nothing here touches the database; the registry is created by PosConfig.ready().
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

ZERO = Decimal("0.00")


# =====================================================
# SNAPSHOTS
# =====================================================

@dataclass(frozen=True)
class AddonSnapshot:
    id: int
    name: str
    price: Decimal

    @classmethod
    def from_addon(cls, addon) -> "AddonSnapshot":
        return cls(id=addon.id, name=addon.name, price=Decimal(addon.price))

    def as_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "price": str(self.price)}


@dataclass(frozen=True)
class ProductSnapshot:
    id: int
    name: str
    price: Decimal
    category_id: Optional[int] = None

    @classmethod
    def from_product(cls, product) -> "ProductSnapshot":
        return cls(
            id=product.id,
            name=product.name,
            price=Decimal(product.price),
            category_id=product.category_id,
        )


# =====================================================
# LINE
# =====================================================

@dataclass
class CartLine:
    product: ProductSnapshot
    quantity: int
    addons: tuple[AddonSnapshot, ...] = ()
    total: Decimal = ZERO

    def __post_init__(self):
        self.addons = tuple(self.addons)
        self.recompute()

    @property
    def unit_total(self) -> Decimal:
        """Product price plus every selected addon, for one unit."""
        return self.product.price + sum((a.price for a in self.addons), ZERO)

    def recompute(self) -> None:
        self.total = self.unit_total * self.quantity


def _require_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError("quantity must be an integer >= 1")
    return quantity


# =====================================================
# CART
# =====================================================

class Cart:
    STATE_IDLE = "idle"
    STATE_VALIDATING = "validating"
    STATE_PERSISTING = "persisting"
    STATE_RECEIPT_READY = "receipt_ready"
    STATE_REJECTED = "rejected"

    IN_PROGRESS_STATES = {STATE_VALIDATING, STATE_PERSISTING}

    def __init__(self, operator_id: str):
        self.operator_id = operator_id
        self.lines: list[CartLine] = []
        self.state = self.STATE_IDLE
        self._lock = threading.Lock()

    # -------------------------------------------------
    # Line operations
    # -------------------------------------------------
    def add_line(
        self,
        product: ProductSnapshot,
        quantity: int = 1,
        addons: Iterable[AddonSnapshot] = (),
    ) -> CartLine:
        line = CartLine(product=product, quantity=_require_quantity(quantity), addons=tuple(addons))
        self.lines.append(line)
        return line

    def set_line_quantity(self, index: int, quantity: int) -> Optional[CartLine]:
        """Out-of-range index is a silent no-op (returns None)."""
        _require_quantity(quantity)

        if not 0 <= index < len(self.lines):
            return None

        line = self.lines[index]
        line.quantity = quantity
        line.recompute()
        return line

    def remove_line(self, index: int) -> Optional[CartLine]:
        if not 0 <= index < len(self.lines):
            return None
        return self.lines.pop(index)

    def clear(self) -> None:
        self.lines = []

    # -------------------------------------------------
    # Totals (recomputed on every read)
    # -------------------------------------------------
    @property
    def total_item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_amount(self) -> Decimal:
        return sum((line.total for line in self.lines), ZERO)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    # -------------------------------------------------
    # Checkout state
    # -------------------------------------------------
    def begin_checkout(self) -> bool:
        """IDLE/RECEIPT_READY/REJECTED -> VALIDATING. False when one is already running."""
        with self._lock:
            if self.state in self.IN_PROGRESS_STATES:
                return False
            self.state = self.STATE_VALIDATING
            return True

    def mark(self, state: str) -> None:
        with self._lock:
            self.state = state


# =====================================================
# REGISTRY
# =====================================================

@dataclass
class CartRegistry:
    """One Cart per operator id, created on first use."""

    _carts: dict[str, Cart] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def cart_for(self, operator_id: str) -> Cart:
        with self._lock:
            cart = self._carts.get(operator_id)
            if cart is None:
                cart = Cart(operator_id)
                self._carts[operator_id] = cart
            return cart

    def discard(self, operator_id: str) -> None:
        with self._lock:
            self._carts.pop(operator_id, None)

    def reset(self) -> None:
        with self._lock:
            self._carts.clear()
