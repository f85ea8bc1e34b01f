# products/serializers/__init__.py

from .category import CategorySerializer
from .product import AddonSerializer, ProductAddonSerializer, ProductSerializer

__all__ = [
    "AddonSerializer",
    "CategorySerializer",
    "ProductAddonSerializer",
    "ProductSerializer",
]
