# products/models/product.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .category import Category


class Product(models.Model):
    """
    Represents a sellable product.

    STOCK MODEL (IMPORTANT):
    - stock is a plain integer counter on the product
    - checkout decrements it per sold line; it has NO floor and may go negative
    - SaleItem keeps its own snapshot of name/price, so edits here never rewrite history

    has_addons mirrors "this product has at least one Addon" and is kept in sync
    by the catalog service.
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    description = models.TextField(blank=True, default="")

    # URL or data URI
    image = models.TextField(blank=True, default="")

    stock = models.IntegerField(default=0)
    has_addons = models.BooleanField(default=False)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} (R$ {self.price})"

    def clean(self):
        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError("Price cannot be negative")
