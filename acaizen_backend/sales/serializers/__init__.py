from .receipt import PrintResultSerializer, ReceiptSerializer
from .report import SalesReportQuerySerializer, SalesReportSerializer
from .sale import SaleSerializer
from .sale_item import SaleItemSerializer

__all__ = [
    "SaleSerializer",
    "SaleItemSerializer",
    "ReceiptSerializer",
    "PrintResultSerializer",
    "SalesReportSerializer",
    "SalesReportQuerySerializer",
]
