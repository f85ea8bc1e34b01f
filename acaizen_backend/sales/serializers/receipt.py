# sales/serializers/receipt.py

from rest_framework import serializers


class ReceiptSerializer(serializers.Serializer):
    """Plain-text + HTML receipt for one sale (kitchen_text is null without kitchen items)."""

    sale_id = serializers.IntegerField()
    plain_text = serializers.CharField()
    html = serializers.CharField()
    kitchen_text = serializers.CharField(allow_null=True)


class PrintResultSerializer(serializers.Serializer):
    printed = serializers.BooleanField()
