# products/models/supplier.py

import uuid

from django.db import models


class Supplier(models.Model):
    """
    Supplier master.

    Products carry a default supplier; each StockBatch records the supplier
    that actually delivered it (falls back to the product default on restock).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=200, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="products_su_name_idx"),
            models.Index(fields=["is_active"], name="products_su_active_idx"),
        ]

    def __str__(self):
        return self.name
