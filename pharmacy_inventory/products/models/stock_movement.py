# products/models/stock_movement.py

"""
INVENTORY LEDGER

Immutable record of every stock change.

GUARANTEES:
- Append-only (no updates, no deletes)
- Movement direction validated against reason
- unit_cost_snapshot copied from the batch at movement time
- reference_type / reference_id point at whatever caused the movement
  (an order, a POS transaction, a manual stock-out); they are free-form so
  the ledger does not depend on those apps.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .product import Product
from .stock_batch import StockBatch


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"

    class Reason(models.TextChoices):
        RECEIPT = "RECEIPT", "Stock Receipt"
        SALE = "SALE", "Sale"
        ADJUSTMENT = "ADJUSTMENT", "Manual Adjustment"
        EXPIRY = "EXPIRY", "Expired Stock"

    REASON_TO_MOVEMENT = {
        Reason.RECEIPT: MovementType.IN,
        Reason.SALE: MovementType.OUT,
        Reason.EXPIRY: MovementType.OUT,
        Reason.ADJUSTMENT: None,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="stock_movements"
    )
    batch = models.ForeignKey(
        StockBatch, on_delete=models.PROTECT, related_name="stock_movements"
    )

    movement_type = models.CharField(max_length=3, choices=MovementType.choices)
    reason = models.CharField(max_length=20, choices=Reason.choices)

    quantity = models.PositiveIntegerField()

    unit_cost_snapshot = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Unit cost snapshot from batch at movement time (immutable).",
    )

    reference_type = models.CharField(max_length=64, blank=True, default="")
    reference_id = models.CharField(max_length=128, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="products_sm_created_idx"),
            models.Index(fields=["reason"], name="products_sm_reason_idx"),
            models.Index(fields=["product", "created_at"], name="products_sm_prod_idx"),
            models.Index(fields=["batch", "created_at"], name="products_sm_batch_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="products_sm_ref_idx"),
        ]

    def clean(self):
        if not self.quantity or self.quantity <= 0:
            raise ValidationError("quantity must be greater than zero")

        if self.batch_id and self.product_id:
            batch_product_id = (
                StockBatch.objects.filter(id=self.batch_id)
                .values_list("product_id", flat=True)
                .first()
            )
            if batch_product_id and batch_product_id != self.product_id:
                raise ValidationError("Batch does not belong to product")

        expected_type = self.REASON_TO_MOVEMENT.get(self.reason)
        if expected_type and self.movement_type != expected_type:
            raise ValidationError(
                f"{self.reason} requires movement_type={expected_type}"
            )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        if self.unit_cost_snapshot is None and self.batch_id:
            self.unit_cost_snapshot = (
                StockBatch.objects.filter(id=self.batch_id)
                .values_list("unit_cost", flat=True)
                .first()
            )

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    @property
    def total_cost(self) -> Decimal:
        return (self.unit_cost_snapshot or Decimal("0.00")) * Decimal(int(self.quantity or 0))

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | {self.reason} | {self.quantity}"
