# products/services/inventory.py

"""
INVENTORY READ HELPERS

Purpose:
- Batch overview for a product (available vs expired, with totals).
- Batches expiring within a window (alerting).
- Repair of the cached Product.stock_quantity.

Availability rules are the allocation engine's (products.services.allocation),
so what is shown here is exactly what a deduction could use.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from django.db import transaction

from products.models import Product, StockBatch
from products.services.allocation import available_batches, expired_batches
from products.services.clock import resolve_today
from products.services.stock_fifo import batches_for_allocation, lock_product

logger = logging.getLogger(__name__)


def batch_summary(product, *, clock=None) -> dict:
    batches = batches_for_allocation(product)
    available = available_batches(batches, clock=clock)
    expired = expired_batches(batches, clock=clock)

    return {
        "available_batches": available,
        "expired_batches": expired,
        "total_available": sum(int(b.quantity_remaining) for b in available),
        "total_expired": sum(int(b.quantity_remaining) for b in expired),
        "batch_count": len(available),
    }


def expiring_batches(*, days: int, clock=None):
    """Batches with stock left that expire after today and within `days`."""
    if days < 0:
        raise ValueError("days must be a non-negative integer")

    today = resolve_today(clock)
    cutoff = today + timedelta(days=days)

    return (
        StockBatch.objects.select_related("product")
        .filter(
            quantity_remaining__gt=0,
            expiration_date__gt=today,
            expiration_date__lte=cutoff,
        )
        .order_by("expiration_date", "created_at")
    )


@transaction.atomic
def recalculate_stock(product, *, clock=None) -> Product:
    locked = lock_product(product)
    before = int(locked.stock_quantity or 0)
    after = locked.recalculate_stock_quantity(resolve_today(clock))

    if before != after:
        logger.info(
            "Cached stock corrected",
            extra={"product_id": str(locked.id), "before": before, "after": after},
        )
    return locked
