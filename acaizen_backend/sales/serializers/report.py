# sales/serializers/report.py

from rest_framework import serializers

from sales.services.report_service import DATE_RANGES, PAYMENT_FILTERS


class SalesReportQuerySerializer(serializers.Serializer):
    date_range = serializers.ChoiceField(choices=DATE_RANGES, required=False, default="today")
    payment_method = serializers.ChoiceField(choices=PAYMENT_FILTERS, required=False, default="all")


class PaymentBreakdownSerializer(serializers.Serializer):
    method = serializers.CharField()
    label = serializers.CharField()
    count = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class TopProductSerializer(serializers.Serializer):
    name = serializers.CharField()
    quantity = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2)


class SalesReportSerializer(serializers.Serializer):
    title = serializers.CharField()
    date_range = serializers.CharField()
    payment_method = serializers.CharField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    total_sales = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    average_ticket = serializers.DecimalField(max_digits=14, decimal_places=2)
    payment_breakdown = PaymentBreakdownSerializer(many=True)
    top_products = TopProductSerializer(many=True)
