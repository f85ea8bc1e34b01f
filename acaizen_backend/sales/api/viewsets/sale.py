# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET (STAFF)

Purpose:
- Sales history: list + retrieve with basic filters.
- Receipts for a persisted sale:
    GET  /api/sales/:id/receipt/             -> {plain_text, html, kitchen_text}
    GET  /api/sales/:id/receipt/html/        -> text/html (?download=1 -> attachment)
    GET  /api/sales/:id/receipt/print-view/  -> text/html that opens the print dialog
- Reprint through the local print helper:
    POST /api/sales/:id/print/          -> {"printed": bool}
    POST /api/sales/:id/print-kitchen/  -> {"printed": bool}

Security:
- Requires IsAuthenticated
- Requires ANY of: pos.sell, reports.view

Printing never fails the request: an unreachable helper answers printed=false.
======================================================
"""

from __future__ import annotations

from datetime import datetime

from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import CAP_POS_SELL, CAP_REPORTS_VIEW, HasAnyCapability
from sales.models import Sale
from sales.serializers import PrintResultSerializer, ReceiptSerializer, SaleSerializer
from sales.services.printer_dispatcher import receipt_download_filename
from sales.services.sale_service import (
    kitchen_receipt_for_sale,
    print_sale,
    print_sale_kitchen,
    receipt_for_sale,
)


def _parse_date(s: str):
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def _truthy(value) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "sim"}


class SaleViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = SaleSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["payment_method", "operator_id"]

    required_any_capabilities = {
        CAP_POS_SELL,
        CAP_REPORTS_VIEW,
    }

    def get_permissions(self):
        return [IsAuthenticated(), HasAnyCapability()]

    # ======================================================
    # QUERYSET
    # ======================================================

    def get_queryset(self):
        qs = Sale.objects.all().prefetch_related("items").order_by("-created_at", "-id")

        params = self.request.query_params

        date_from = (params.get("date_from") or "").strip()
        if date_from:
            d1 = _parse_date(date_from)
            if d1:
                qs = qs.filter(created_at__date__gte=d1)

        date_to = (params.get("date_to") or "").strip()
        if date_to:
            d2 = _parse_date(date_to)
            if d2:
                qs = qs.filter(created_at__date__lte=d2)

        return qs

    @extend_schema(
        parameters=[
            OpenApiParameter("payment_method", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("date_from", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("date_to", str, OpenApiParameter.QUERY, required=False),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    # ======================================================
    # RECEIPTS
    # ======================================================

    @extend_schema(responses={200: ReceiptSerializer})
    @action(detail=True, methods=["get"], url_path="receipt")
    def receipt(self, request, pk=None):
        sale: Sale = self.get_object()
        artifact = receipt_for_sale(sale)

        payload = {
            "sale_id": sale.pk,
            "plain_text": artifact.plain_text,
            "html": artifact.html,
            "kitchen_text": kitchen_receipt_for_sale(sale),
        }
        return Response(ReceiptSerializer(payload).data, status=status.HTTP_200_OK)

    @extend_schema(
        parameters=[OpenApiParameter("download", bool, OpenApiParameter.QUERY, required=False)],
        responses={(200, "text/html"): str},
    )
    @action(detail=True, methods=["get"], url_path="receipt/html")
    def receipt_html(self, request, pk=None):
        sale: Sale = self.get_object()
        response = HttpResponse(receipt_for_sale(sale).html, content_type="text/html; charset=utf-8")

        if _truthy(request.query_params.get("download")):
            filename = receipt_download_filename(int(timezone.now().timestamp() * 1000))
            response["Content-Disposition"] = f'attachment; filename="{filename}"'

        return response

    @extend_schema(responses={(200, "text/html"): str})
    @action(detail=True, methods=["get"], url_path="receipt/print-view")
    def receipt_print_view(self, request, pk=None):
        sale: Sale = self.get_object()
        return HttpResponse(receipt_for_sale(sale).print_html, content_type="text/html; charset=utf-8")

    # ======================================================
    # PRINT HELPER
    # ======================================================

    @extend_schema(request=None, responses={200: PrintResultSerializer})
    @action(detail=True, methods=["post"], url_path="print")
    def print_receipt(self, request, pk=None):
        sale: Sale = self.get_object()
        return Response({"printed": print_sale(sale)}, status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: PrintResultSerializer})
    @action(detail=True, methods=["post"], url_path="print-kitchen")
    def print_kitchen(self, request, pk=None):
        sale: Sale = self.get_object()
        return Response({"printed": print_sale_kitchen(sale)}, status=status.HTTP_200_OK)
