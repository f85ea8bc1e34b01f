# products/models/category.py

from django.db import models
from django.utils import timezone


class Category(models.Model):
    """
    Product grouping shown as POS tabs.

    Deletion is refused while any Product still points here
    (checked by the catalog service; PROTECT is the database backstop).
    """

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name
