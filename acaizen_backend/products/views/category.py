# products/views/category.py

from django.db.models import Count
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.api_errors import domain_error_response
from permissions.roles import CAP_CATALOG_EDIT, CAP_CATALOG_VIEW, HasAnyCapability
from products.models import Category
from products.serializers.category import CategorySerializer
from products.services.catalog_service import (
    CatalogError,
    create_category,
    delete_category,
    update_category,
)


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Category API

    Policy:
    - Any staff member can READ categories (POS tabs need this)
    - Only catalog editors (admin) can CREATE/UPDATE/DELETE
    - DELETE is refused while products still use the category
    """

    queryset = Category.objects.annotate(product_count=Count("products")).order_by("id")
    serializer_class = CategorySerializer

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            self.required_any_capabilities = {CAP_CATALOG_VIEW, CAP_CATALOG_EDIT}
        else:
            self.required_any_capabilities = {CAP_CATALOG_EDIT}
        return [IsAuthenticated(), HasAnyCapability()]

    def perform_create(self, serializer):
        serializer.instance = create_category(**serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = update_category(
            category=serializer.instance,
            **serializer.validated_data,
        )

    def destroy(self, request, *args, **kwargs):
        category = self.get_object()
        try:
            delete_category(category=category)
        except CatalogError as exc:
            return domain_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
