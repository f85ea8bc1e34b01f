# products/views/__init__.py

"""
Products views package exports.

Purpose:
- Central export point for router imports.
"""

from .category import CategoryViewSet
from .product import AddonViewSet, ProductViewSet

__all__ = [
    "AddonViewSet",
    "CategoryViewSet",
    "ProductViewSet",
]
