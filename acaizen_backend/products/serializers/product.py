# products/serializers/product.py

"""
PRODUCT + ADDON SERIALIZERS

- category is written as `category_id` and echoed with `category_name`
- addons are read-only here; they are managed through /products/addons/
- has_addons is derived from the addon rows and is never written by clients
"""

from rest_framework import serializers

from products.models import Addon, Category, Product


class AddonSerializer(serializers.ModelSerializer):
    product_id = serializers.PrimaryKeyRelatedField(
        source="product",
        queryset=Product.objects.all(),
    )
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)

    class Meta:
        model = Addon
        fields = ["id", "product_id", "name", "price"]
        read_only_fields = ["id"]

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v


class ProductAddonSerializer(serializers.ModelSerializer):
    class Meta:
        model = Addon
        fields = ["id", "name", "price"]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """
    Canonical Product Serializer.

    GUARANTEES:
    - price is a non-negative decimal with 2 places
    - stock is a plain integer (may be negative after sales)
    """

    category_id = serializers.PrimaryKeyRelatedField(
        source="category",
        queryset=Category.objects.all(),
        required=False,
        allow_null=True,
    )
    category_name = serializers.CharField(source="category.name", read_only=True, default="")
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    addons = ProductAddonSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "description",
            "image",
            "category_id",
            "category_name",
            "stock",
            "has_addons",
            "addons",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "category_name",
            "has_addons",
            "addons",
            "created_at",
            "updated_at",
        ]

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v
