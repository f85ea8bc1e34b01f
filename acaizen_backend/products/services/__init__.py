from .catalog_service import (
    CatalogError,
    CategoryInUseError,
    InvalidPriceError,
    decrement_stock,
)
from .csv_io import CSVImportError, export_products_csv, import_products_csv

__all__ = [
    "CatalogError",
    "CategoryInUseError",
    "InvalidPriceError",
    "decrement_stock",
    "CSVImportError",
    "export_products_csv",
    "import_products_csv",
]
