from .cart import (
    AddCartLineInputSerializer,
    CartSerializer,
    CheckoutInputSerializer,
    UpdateCartLineInputSerializer,
)

__all__ = [
    "AddCartLineInputSerializer",
    "CartSerializer",
    "CheckoutInputSerializer",
    "UpdateCartLineInputSerializer",
]
