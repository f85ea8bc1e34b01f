# products/views/product.py

"""
PRODUCT + ADDON VIEWSETS

Purpose:
- Catalog management endpoints (admin writes, staff reads)
- CSV export / import of the product list

Key rules:
- Every write goes through products.services.catalog_service
  (has_addons bookkeeping, price validation).
"""

from __future__ import annotations

from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.api_errors import domain_error_response
from permissions.roles import CAP_CATALOG_EDIT, CAP_CATALOG_VIEW, HasAnyCapability
from products.models import Addon, Product
from products.serializers.product import AddonSerializer, ProductSerializer
from products.services.catalog_service import (
    CatalogError,
    create_addon,
    create_product,
    delete_addon,
    delete_product,
    update_addon,
    update_product,
)
from products.services.csv_io import CSVImportError, export_products_csv, import_products_csv


class CatalogPermissionMixin:
    read_actions = {"list", "retrieve"}

    def get_permissions(self):
        if self.action in self.read_actions:
            self.required_any_capabilities = {CAP_CATALOG_VIEW, CAP_CATALOG_EDIT}
        else:
            self.required_any_capabilities = {CAP_CATALOG_EDIT}
        return [IsAuthenticated(), HasAnyCapability()]


class ProductImportInputSerializer(serializers.Serializer):
    file = serializers.FileField(required=False)
    csv = serializers.CharField(required=False, allow_blank=False, trim_whitespace=False)

    def validate(self, attrs):
        if not attrs.get("file") and not attrs.get("csv"):
            raise serializers.ValidationError("Envie um arquivo CSV (file) ou o texto (csv).")
        return attrs


class ProductViewSet(CatalogPermissionMixin, viewsets.ModelViewSet):
    """
    Product endpoints.

    - CRUD
    - GET  /products/products/export/  -> CSV attachment
    - POST /products/products/import/  -> {"imported": n, "created_categories": [...]}
    """

    serializer_class = ProductSerializer
    filterset_fields = ["category"]

    def get_queryset(self):
        qs = Product.objects.select_related("category").prefetch_related("addons").order_by("id")

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(name__icontains=q)

        return qs

    @extend_schema(
        parameters=[
            OpenApiParameter("q", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("category", int, OpenApiParameter.QUERY, required=False),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            product = create_product(**serializer.validated_data)
        except CatalogError as exc:
            return domain_error_response(exc)
        return Response(self.get_serializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        product = self.get_object()
        serializer = self.get_serializer(product, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        try:
            product = update_product(product=product, **serializer.validated_data)
        except CatalogError as exc:
            return domain_error_response(exc)
        return Response(self.get_serializer(product).data)

    def destroy(self, request, *args, **kwargs):
        delete_product(product=self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    # -------------------------------------------------
    # CSV
    # -------------------------------------------------
    @extend_schema(responses={(200, "text/csv"): str})
    @action(detail=False, methods=["get"], url_path="export")
    def export(self, request):
        content = export_products_csv()
        filename = f"produtos_acaizen_{int(timezone.now().timestamp() * 1000)}.csv"

        response = HttpResponse(content, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response

    @extend_schema(request=ProductImportInputSerializer, responses={200: dict})
    @action(detail=False, methods=["post"], url_path="import")
    def import_csv(self, request):
        serializer = ProductImportInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        upload = serializer.validated_data.get("file")
        if upload is not None:
            text = upload.read().decode("utf-8-sig", errors="replace")
        else:
            text = serializer.validated_data["csv"]

        try:
            result = import_products_csv(text)
        except CSVImportError as exc:
            return domain_error_response(exc)

        return Response(
            {
                "imported": result.imported,
                "created_categories": result.created_categories,
            }
        )


class AddonViewSet(CatalogPermissionMixin, viewsets.ModelViewSet):
    """
    Addon endpoints. Creating/deleting addons keeps Product.has_addons in sync.
    """

    queryset = Addon.objects.select_related("product").order_by("id")
    serializer_class = AddonSerializer
    filterset_fields = ["product"]

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = create_addon(
            product=data["product"],
            name=data["name"],
            price=data["price"],
        )

    def perform_update(self, serializer):
        data = serializer.validated_data
        serializer.instance = update_addon(
            addon=serializer.instance,
            name=data.get("name"),
            price=data.get("price"),
        )

    def perform_destroy(self, instance):
        delete_addon(addon=instance)
