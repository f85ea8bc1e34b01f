# sales/api/urls.py

"""
SALES API URLS (CANONICAL)

Rules:
- Explicit non-PK routes (like "reports/...") MUST be registered BEFORE router URLs,
  otherwise the router will treat "reports" as a <pk> and you'll get 404.

Provides:
- Sales history:
    /api/sales/         (list)
    /api/sales/<id>/    (retrieve, receipt/, receipt/html/, receipt/print-view/,
                         print/, print-kitchen/)

- ✅ Reports (Admin-only):
    GET /api/sales/reports/summary/?date_range=today&payment_method=all
    GET /api/sales/reports/summary/export/

NOTE:
- Checkout lives in the pos app (/api/pos/checkout/): it finalizes the operator cart.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from sales.api.reports import SalesSummaryExportView, SalesSummaryReportView
from sales.api.viewsets.sale import SaleViewSet

app_name = "sales"

router = SimpleRouter()
router.register(r"", SaleViewSet, basename="sale")

urlpatterns = [
    # ✅ IMPORTANT: put explicit routes BEFORE router URLs
    path("reports/summary/", SalesSummaryReportView.as_view(), name="reports-summary"),
    path(
        "reports/summary/export/",
        SalesSummaryExportView.as_view(),
        name="reports-summary-export",
    ),

    path("", include(router.urls)),
]
