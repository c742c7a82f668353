# products/services/stock_intake.py

"""
STOCK INTAKE / RESTOCK (APPLICATION SERVICE)

Purpose:
- Add a new StockBatch to a product (one delivery = one batch).
- Produce the matching StockMovement(RECEIPT) ledger record.
- Recompute the product's cached stock_quantity from its batches.

Defaults:
- received_date -> today
- supplier / unit / unit_quantity -> the product's own settings
- quantity_remaining -> quantity_received
  (an explicit quantity_remaining is for data-import paths only; the
  difference is written to the ledger as an ADJUSTMENT so IN - OUT always
  equals what is left in the batch)
"""

from __future__ import annotations

import logging
import uuid

from django.db import transaction

from products.models import StockBatch, StockMovement
from products.services.clock import resolve_today
from products.services.coercion import to_date, to_int, to_money
from products.services.exceptions import InvalidBatchDataError, InvalidQuantityError
from products.services.stock_fifo import lock_product

logger = logging.getLogger(__name__)


@transaction.atomic
def restock(
    *,
    product,
    quantity_received,
    unit_cost,
    sale_price,
    expiration_date,
    batch_number: str | None = None,
    received_date=None,
    supplier=None,
    notes: str | None = None,
    unit: str | None = None,
    unit_quantity=None,
    quantity_remaining=None,
    user=None,
    clock=None,
) -> StockBatch:
    if not product:
        raise InvalidBatchDataError("product is required", field="product")

    qty = to_int(quantity_received, field_name="quantity_received")
    if qty <= 0:
        raise InvalidQuantityError(
            "quantity_received must be greater than zero",
            field="quantity_received",
            value=quantity_received,
        )

    remaining = qty
    if quantity_remaining is not None:
        remaining = to_int(quantity_remaining, field_name="quantity_remaining")
        if remaining < 0 or remaining > qty:
            raise InvalidQuantityError(
                "quantity_remaining must be between 0 and quantity_received",
                field="quantity_remaining",
                value=quantity_remaining,
            )

    cost = to_money(unit_cost, field_name="unit_cost")
    price = to_money(sale_price, field_name="sale_price")

    if not expiration_date:
        raise InvalidBatchDataError("expiration_date is required", field="expiration_date")
    expires = to_date(expiration_date, field_name="expiration_date")

    today = resolve_today(clock)
    received = to_date(received_date, field_name="received_date") if received_date else today

    if expires <= received:
        raise InvalidBatchDataError(
            "expiration_date must be after received_date",
            field="expiration_date",
        )

    bn = (batch_number or "").strip()
    if not bn:
        bn = f"BATCH-{uuid.uuid4().hex[:10].upper()}"

    locked = lock_product(product)

    batch = StockBatch.objects.create(
        product=locked,
        supplier=supplier if supplier is not None else locked.supplier,
        batch_number=bn,
        expiration_date=expires,
        received_date=received,
        quantity_received=qty,
        quantity_remaining=remaining,
        unit_cost=cost,
        sale_price=price,
        unit=(unit or "").strip() or locked.unit,
        unit_quantity=unit_quantity if unit_quantity is not None else locked.unit_quantity,
        notes=notes,
    )

    StockMovement.objects.create(
        product=locked,
        batch=batch,
        movement_type=StockMovement.MovementType.IN,
        reason=StockMovement.Reason.RECEIPT,
        quantity=qty,
        unit_cost_snapshot=cost,
        notes=f"New batch added: {bn}",
        performed_by=user,
    )

    if remaining < qty:
        StockMovement.objects.create(
            product=locked,
            batch=batch,
            movement_type=StockMovement.MovementType.OUT,
            reason=StockMovement.Reason.ADJUSTMENT,
            quantity=qty - remaining,
            unit_cost_snapshot=cost,
            notes="Imported batch with partial remaining quantity",
            performed_by=user,
        )

    locked.recalculate_stock_quantity(today)

    logger.info(
        "Batch received",
        extra={
            "product_id": str(locked.id),
            "batch_id": str(batch.id),
            "batch_number": bn,
            "quantity_received": qty,
            "stock_quantity": locked.stock_quantity,
        },
    )
    return batch
