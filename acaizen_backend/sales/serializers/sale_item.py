# sales/serializers/sale_item.py

from rest_framework import serializers

from sales.models import SaleItem


class SaleItemAddonSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True, required=False)
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)


class SaleItemSerializer(serializers.ModelSerializer):
    """
    Sale line item serializer (read-only).
    Every field is the snapshot taken at checkout; nothing joins the live catalog.
    """

    addons = SaleItemAddonSerializer(many=True, read_only=True)

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "category_id",
            "quantity",
            "unit_price",
            "addons",
            "total_price",
            "position",
        ]
        read_only_fields = fields
