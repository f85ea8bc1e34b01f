"""
PATH: products/models/__init__.py

Catalog models export surface.
"""

from .addon import Addon
from .category import Category
from .product import Product

__all__ = [
    "Addon",
    "Category",
    "Product",
]
