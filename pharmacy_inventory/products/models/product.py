# products/models/product.py

import random
import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Sum
from django.utils import timezone

from .category import Category
from .supplier import Supplier


class Product(models.Model):
    """
    Represents a sellable product (aggregate root for its stock batches).

    STOCK MODEL (IMPORTANT):
    - Stock lives in StockBatch rows owned by this product.
    - stock_quantity is a CACHE of available stock:
        sum(quantity_remaining) over batches with remaining > 0
        whose expiration_date is strictly after today.
    - The cache is recomputed from the batches after every batch mutation
      (services call recalculate_stock_quantity); it is never decremented
      incrementally.
    """

    class Classification(models.TextChoices):
        ANTIBIOTIC = "ANTIBIOTIC", "Antibiotic"
        ANALGESIC = "ANALGESIC", "Analgesic"
        ANTIPYRETIC = "ANTIPYRETIC", "Antipyretic"
        ANTI_INFLAMMATORY = "ANTI_INFLAMMATORY", "Anti-inflammatory"
        ANTACID = "ANTACID", "Antacid"
        ANTIHISTAMINE = "ANTIHISTAMINE", "Antihistamine"
        ANTIHYPERTENSIVE = "ANTIHYPERTENSIVE", "Antihypertensive"
        ANTIDIABETIC = "ANTIDIABETIC", "Antidiabetic"
        VITAMIN = "VITAMIN", "Vitamin"
        MINERAL = "MINERAL", "Mineral"
        SUPPLEMENT = "SUPPLEMENT", "Supplement"
        TOPICAL = "TOPICAL", "Topical"
        OTHER = "OTHER", "Other"

    STATUS_OUT_OF_STOCK = "Out of Stock"
    STATUS_LOW_STOCK = "Low Stock"
    STATUS_IN_STOCK = "In Stock"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product_code = models.CharField(max_length=32, unique=True, blank=True)
    name = models.CharField(max_length=255, db_index=True)
    generic_name = models.CharField(max_length=255, blank=True, default="")
    brand_name = models.CharField(max_length=255, blank=True, default="")
    manufacturer = models.CharField(max_length=255, blank=True, default="")

    classification = models.CharField(
        max_length=32,
        choices=Classification.choices,
        default=Classification.OTHER,
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    # Default supplier; restock falls back to it when none is given.
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    unit = models.CharField(max_length=32, default="piece")
    unit_quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("1.00"),
    )

    reorder_level = models.PositiveIntegerField(default=10)

    # Derived cache; written only by recalculate_stock_quantity().
    stock_quantity = models.PositiveIntegerField(default=0, editable=False)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["product_code"], name="products_pr_code_idx"),
            models.Index(fields=["name"], name="products_pr_name_idx"),
            models.Index(fields=["classification"], name="products_pr_class_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.product_code})"

    def clean(self):
        if self.unit_quantity is not None and Decimal(self.unit_quantity) <= Decimal("0.00"):
            raise ValidationError({"unit_quantity": "unit_quantity must be greater than zero"})

    def save(self, *args, **kwargs):
        if not (self.product_code or "").strip():
            self.product_code = self._generate_product_code()
        else:
            self.product_code = self.product_code.strip().upper()
        super().save(*args, **kwargs)

    @classmethod
    def _generate_product_code(cls) -> str:
        while True:
            code = f"P{random.randint(1000, 9999)}"
            if not cls.objects.filter(product_code=code).exists():
                return code

    # -------------------------------------------------
    # STOCK (derived from batches)
    # -------------------------------------------------

    def available_batches_qs(self, today=None):
        today = today or timezone.localdate()
        return self.stock_batches.filter(
            quantity_remaining__gt=0,
            expiration_date__gt=today,
        ).order_by("expiration_date", "created_at")

    def available_stock(self, today=None) -> int:
        return (
            self.available_batches_qs(today)
            .aggregate(total=Sum("quantity_remaining"))
            .get("total")
            or 0
        )

    def recalculate_stock_quantity(self, today=None, *, commit=True) -> int:
        self.stock_quantity = int(self.available_stock(today))
        if commit:
            self.save(update_fields=["stock_quantity", "updated_at"])
        return self.stock_quantity

    @property
    def is_low_stock(self) -> bool:
        return int(self.stock_quantity or 0) <= int(self.reorder_level or 0)

    @property
    def stock_status(self) -> str:
        if int(self.stock_quantity or 0) <= 0:
            return self.STATUS_OUT_OF_STOCK
        if self.is_low_stock:
            return self.STATUS_LOW_STOCK
        return self.STATUS_IN_STOCK

    def current_price(self, today=None) -> Decimal:
        """Sale price of the batch that would be sold next (earliest expiry)."""
        nxt = self.available_batches_qs(today).first()
        return nxt.sale_price if nxt else Decimal("0.00")
