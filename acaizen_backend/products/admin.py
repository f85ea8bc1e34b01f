# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:

- Addons are edited inline on the Product page.
- NEW / DELETED inline rows are routed through the catalog service so
  Product.has_addons stays in sync with the addon rows.
- Categories in use cannot be deleted (PROTECT on Product.category).
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Addon, Category, Product
from products.services.catalog_service import create_addon, delete_addon, update_addon


# =====================================================
# CATEGORY
# =====================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "description")
    search_fields = ("name",)
    ordering = ("id",)


# =====================================================
# ADDON INLINE
# =====================================================

class AddonInline(admin.TabularInline):
    model = Addon
    extra = 1
    fields = ("name", "price")


# =====================================================
# PRODUCT
# =====================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "category",
        "price",
        "stock",
        "has_addons",
        "updated_at",
    )
    list_filter = ("category", "has_addons")
    search_fields = ("name",)
    ordering = ("id",)
    readonly_fields = ("has_addons", "created_at", "updated_at")

    inlines = [AddonInline]

    def save_formset(self, request, form, formset, change):
        """
        Route Addon inline rows through the catalog service.

        Django admin expects new_objects/changed_objects/deleted_objects to exist.
        """
        if formset.model is not Addon:
            return super().save_formset(request, form, formset, change)

        product = form.instance
        created, changed, deleted = [], [], []

        for f in getattr(formset, "forms", []):
            cd = getattr(f, "cleaned_data", None)
            if not cd:
                continue

            inst = f.instance
            persisted = inst.pk is not None and not inst._state.adding

            if cd.get("DELETE"):
                if persisted:
                    delete_addon(addon=inst)
                    deleted.append(inst)
                continue

            if persisted:
                if f.has_changed():
                    changed.append((update_addon(addon=inst, name=cd["name"], price=cd["price"]), []))
                continue

            created.append(create_addon(product=product, name=cd["name"], price=cd["price"]))

        formset.new_objects = created
        formset.changed_objects = changed
        formset.deleted_objects = deleted
