# sales/models/sale.py

from decimal import Decimal

from django.db import models
from django.utils import timezone

DEFAULT_CUSTOMER_NAME = "Cliente"


class Sale(models.Model):
    """
    Represents a finalized POS transaction (the sale header).

    GUARANTEES:
    - Immutable financial record: once inserted, no field may change
    - Items are attached exactly once, right after the header insert
      (same transaction, see checkout orchestrator)
    - Operator identity + display name are COPIES taken at sale time,
      not a live join (renaming/deleting the account never rewrites history)

    CASH:
    - cash_received and change_amount are present only for cash sales
    - change_amount = cash_received - total_amount (never negative)
    """

    PAYMENT_CASH = "cash"
    PAYMENT_CREDIT = "credit"
    PAYMENT_DEBIT = "debit"
    PAYMENT_PIX = "pix"

    PAYMENT_METHOD_CHOICES = [
        (PAYMENT_CASH, "Dinheiro"),
        (PAYMENT_CREDIT, "Cartão de Crédito"),
        (PAYMENT_DEBIT, "Cartão de Débito"),
        (PAYMENT_PIX, "PIX"),
    ]

    # report ordering is fixed
    PAYMENT_METHODS = [PAYMENT_CASH, PAYMENT_CREDIT, PAYMENT_DEBIT, PAYMENT_PIX]

    customer_name = models.CharField(max_length=255, default=DEFAULT_CUSTOMER_NAME)

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    payment_method = models.CharField(max_length=16, choices=PAYMENT_METHOD_CHOICES)

    cash_received = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    change_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    operator_id = models.CharField(max_length=64, db_index=True)
    operator_name = models.CharField(max_length=150, blank=True, default="")

    # default (not auto_now_add) so backup restore can keep original timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    _IMMUTABLE_FIELDS = (
        "customer_name",
        "total_amount",
        "payment_method",
        "cash_received",
        "change_amount",
        "operator_id",
        "operator_name",
        "created_at",
    )

    class Meta:
        ordering = ["-created_at", "-id"]

    @property
    def order_number(self) -> int:
        return self.pk

    def _validate_immutable(self, previous: "Sale"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValueError(
                    f"Sale #{previous.pk} is immutable. Field '{field}' cannot be changed."
                )

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Sale.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        if not (self.customer_name or "").strip():
            self.customer_name = DEFAULT_CUSTOMER_NAME

        super().save(*args, **kwargs)

    def __str__(self):
        return f"Pedido #{self.pk} | {self.total_amount}"
