# products/models/stock_batch.py

"""
STOCK BATCH (DELIVERY-BASED INVENTORY)

Represents ONE received lot of a product.

RULES:
- Owned by exactly one Product; never addressed outside of it.
- quantity_received is immutable after creation.
- quantity_remaining is mutated ONLY via services
  (allocation commit, restock, explicit correction).
- 0 <= quantity_remaining <= quantity_received (model + DB enforced).
- Batches are never deleted: depleted / expired batches stay for history
  and are simply excluded from availability.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from .product import Product
from .supplier import Supplier


class StockBatch(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="stock_batches",
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_batches",
    )

    batch_number = models.CharField(
        max_length=128,
        help_text="Supplier / delivery batch reference",
    )

    expiration_date = models.DateField()
    received_date = models.DateField(default=timezone.localdate)

    quantity_received = models.PositiveIntegerField(
        help_text="Quantity delivered (immutable)"
    )

    quantity_remaining = models.PositiveIntegerField(
        default=0,
        help_text="Remaining quantity (service-managed only)",
    )

    unit_cost = models.DecimalField(max_digits=12, decimal_places=2)
    sale_price = models.DecimalField(max_digits=12, decimal_places=2)

    unit = models.CharField(max_length=32, blank=True, default="")
    unit_quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )

    notes = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["expiration_date", "created_at"]
        indexes = [
            models.Index(fields=["product", "expiration_date"], name="products_sb_prod_exp_idx"),
            models.Index(fields=["expiration_date"], name="products_sb_exp_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_received__gt=0),
                name="chk_stockbatch_qty_received_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(quantity_remaining__gte=0),
                name="chk_stockbatch_qty_remaining_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(quantity_remaining__lte=F("quantity_received")),
                name="chk_stockbatch_remaining_lte_received",
            ),
        ]

    # -------------------------------------------------
    # VALIDATION
    # -------------------------------------------------

    def clean(self):
        if self.quantity_received is None or self.quantity_received <= 0:
            raise ValidationError(
                {"quantity_received": "quantity_received must be greater than zero"}
            )

        if self.quantity_remaining is None or self.quantity_remaining < 0:
            raise ValidationError(
                {"quantity_remaining": "quantity_remaining cannot be negative"}
            )

        if self.quantity_remaining > self.quantity_received:
            raise ValidationError(
                {"quantity_remaining": "quantity_remaining cannot exceed quantity_received"}
            )

        if self.unit_cost is not None and self.unit_cost < Decimal("0.00"):
            raise ValidationError({"unit_cost": "unit_cost cannot be negative"})

        if self.sale_price is not None and self.sale_price < Decimal("0.00"):
            raise ValidationError({"sale_price": "sale_price cannot be negative"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            original = StockBatch.objects.only("quantity_received").get(pk=self.pk)
            if self.quantity_received != original.quantity_received:
                raise ValidationError({"quantity_received": "quantity_received is immutable"})

        self.full_clean(exclude=["product", "supplier"])
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockBatch records are kept for history and cannot be deleted"
        )

    # -------------------------------------------------
    # READ-ONLY HELPERS
    # -------------------------------------------------

    def is_available(self, today=None) -> bool:
        today = today or timezone.localdate()
        return int(self.quantity_remaining or 0) > 0 and self.expiration_date > today

    def is_expired(self, today=None) -> bool:
        today = today or timezone.localdate()
        return int(self.quantity_remaining or 0) > 0 and self.expiration_date <= today

    @property
    def total_remaining_value(self) -> Decimal:
        return (self.unit_cost or Decimal("0.00")) * Decimal(int(self.quantity_remaining or 0))

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | Batch {self.batch_number}"
