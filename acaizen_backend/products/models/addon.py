# products/models/addon.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .product import Product


class Addon(models.Model):
    """
    Optional extra sold together with a product (granola, leite condensado...).
    Removed together with its owning product.
    """

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="addons",
    )

    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} (+R$ {self.price})"

    def clean(self):
        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError("Price cannot be negative")
