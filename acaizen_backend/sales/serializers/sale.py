# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale
from sales.serializers.sale_item import SaleItemSerializer


class SaleSerializer(serializers.ModelSerializer):
    """
    CANONICAL SALE SERIALIZER (read-only)

    - order_number mirrors the primary key ("Pedido #N")
    - cash_received / change_amount are null for non-cash sales
    - payment_method_label is the localized label shown on receipts
    """

    order_number = serializers.IntegerField(read_only=True)
    payment_method_label = serializers.CharField(
        source="get_payment_method_display",
        read_only=True,
    )
    items = SaleItemSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "order_number",
            "customer_name",
            "total_amount",
            "payment_method",
            "payment_method_label",
            "cash_received",
            "change_amount",
            "operator_id",
            "operator_name",
            "created_at",
            "items",
        ]
        read_only_fields = fields
