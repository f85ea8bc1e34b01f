# sales/api/reports.py

"""
SALES REPORTS (SALES MODULE)

PATH: sales/api/reports.py

Purpose:
- Summary report for the Reports screen (counts, totals, payment methods, top products).
- CSV export of the same report.

Contract:
- date_range: today | yesterday | week | month   (default: today, server timezone)
- payment_method: all | cash | credit | debit | pix   (default: all)

Security:
- Admin-only (reports.view)
"""

from __future__ import annotations

from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_REPORTS_VIEW, HasAnyCapability
from sales.serializers import SalesReportQuerySerializer, SalesReportSerializer
from sales.services.report_service import (
    export_report_csv,
    report_csv_filename,
    sales_report_for,
)


class _ReportView(APIView):
    required_any_capabilities = {CAP_REPORTS_VIEW}

    def get_permissions(self):
        return [IsAuthenticated(), HasAnyCapability()]

    def _report(self, request):
        query = SalesReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return sales_report_for(
            date_range=query.validated_data["date_range"],
            payment_method=query.validated_data["payment_method"],
        )


class SalesSummaryReportView(_ReportView):
    @extend_schema(
        parameters=[SalesReportQuerySerializer],
        responses={200: SalesReportSerializer},
    )
    def get(self, request):
        return Response(SalesReportSerializer(self._report(request)).data)


class SalesSummaryExportView(_ReportView):
    @extend_schema(
        parameters=[SalesReportQuerySerializer],
        responses={(200, "text/csv"): str},
    )
    def get(self, request):
        content = export_report_csv(self._report(request))
        filename = report_csv_filename(int(timezone.now().timestamp() * 1000))

        response = HttpResponse(content, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
