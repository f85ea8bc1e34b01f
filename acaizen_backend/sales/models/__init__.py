# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS

Purpose:
- Central export surface for sales app models.
"""

from .sale import DEFAULT_CUSTOMER_NAME, Sale
from .sale_item import SaleItem

__all__ = [
    "DEFAULT_CUSTOMER_NAME",
    "Sale",
    "SaleItem",
]
