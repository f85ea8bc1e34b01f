# pos/serializers/cart.py

"""
CART SERIALIZER

Purpose:
- Return the operator's in-memory cart in a frontend-friendly shape.
- Money + totals are server-derived (never trusted from client).
- `index` is the handle used by /pos/cart/lines/<index>/.
"""

from rest_framework import serializers


class CartAddonSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)


class CartLineSerializer(serializers.Serializer):
    index = serializers.SerializerMethodField()
    product_id = serializers.IntegerField(source="product.id")
    product_name = serializers.CharField(source="product.name")
    category_id = serializers.IntegerField(source="product.category_id", allow_null=True)
    unit_price = serializers.DecimalField(source="product.price", max_digits=12, decimal_places=2)
    quantity = serializers.IntegerField()
    addons = CartAddonSerializer(many=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)

    def get_index(self, obj) -> int:
        return self.context["indexes"][id(obj)]


class CartSerializer(serializers.Serializer):
    """
    Serializer for the POS cart.

    Guarantees:
    - lines are read-only
    - totals are computed server-side
    """

    operator_id = serializers.CharField()
    state = serializers.CharField()
    lines = serializers.SerializerMethodField()
    total_item_count = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)

    def get_lines(self, obj) -> list:
        indexes = {id(line): i for i, line in enumerate(obj.lines)}
        return CartLineSerializer(obj.lines, many=True, context={"indexes": indexes}).data


class AddCartLineInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    addon_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)


class UpdateCartLineInputSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


class CheckoutInputSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=["cash", "credit", "debit", "pix"])
    cash_received = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        allow_null=True,
        min_value=0,
    )
    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
