# sales/models/sale_item.py

from django.core.exceptions import ValidationError
from django.db import models

from .sale import Sale


class SaleItem(models.Model):
    """
    One sold line, frozen at checkout.

    SNAPSHOT RULES:
    - product_id is a plain reference (not a FK): deleting a product keeps history intact
    - product_name / category_id / unit_price / addons are copied from the cart line
    - addons is a list of {"id", "name", "price"} with prices as decimal strings
    - position preserves cart order
    - rows are immutable after insert
    """

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product_id = models.BigIntegerField(null=True, blank=True, db_index=True)
    product_name = models.CharField(max_length=255)
    category_id = models.BigIntegerField(null=True, blank=True)

    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    addons = models.JSONField(default=list, blank=True)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)

    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["sale_id", "position", "id"]

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            raise ValidationError("SaleItem records are immutable")

        if int(self.quantity or 0) < 1:
            raise ValidationError("quantity must be >= 1")

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.quantity}x {self.product_name}"
