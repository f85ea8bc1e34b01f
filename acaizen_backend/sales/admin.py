# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleItem


# ======================================================
# SALE ADMIN (read-only: sales are immutable)
# ======================================================


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    fields = ("position", "product_name", "quantity", "unit_price", "addons", "total_price")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer_name",
        "total_amount",
        "payment_method",
        "operator_name",
        "created_at",
    )
    readonly_fields = (
        "customer_name",
        "total_amount",
        "payment_method",
        "cash_received",
        "change_amount",
        "operator_id",
        "operator_name",
        "created_at",
    )
    search_fields = ("customer_name", "operator_name")
    list_filter = ("payment_method", "created_at")
    inlines = [SaleItemInline]

    def has_add_permission(self, request):
        return False
