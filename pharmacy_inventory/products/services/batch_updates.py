# products/services/batch_updates.py

"""
BATCH CORRECTION SERVICE

Purpose:
- Amend fields of an existing batch (data-entry corrections).
- Shallow-merge the provided fields, then recompute the product's cached
  stock_quantity.

Rules:
- The batch must belong to the given product; otherwise BatchNotFoundError
  and nothing changes.
- quantity_received is immutable.
- quantity_remaining is NOT part of a normal correction: it only moves through
  allocation/deduction. allow_quantity_override=True opens an audited escape
  hatch (ADJUSTMENT movement for the delta).
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from products.models import StockBatch, StockMovement, Supplier
from products.services.clock import resolve_today
from products.services.coercion import to_date, to_int, to_money
from products.services.exceptions import (
    BatchNotFoundError,
    InvalidBatchDataError,
    InvalidQuantityError,
)
from products.services.identifiers import normalize_batch_id
from products.services.stock_fifo import lock_product

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "batch_number",
    "expiration_date",
    "received_date",
    "unit_cost",
    "sale_price",
    "supplier",
    "notes",
    "unit",
    "unit_quantity",
}

LOCKED_FIELDS = {"id", "product", "quantity_received", "created_at", "updated_at"}


def _resolve_supplier(value):
    if value in (None, ""):
        return None
    if isinstance(value, Supplier):
        return value
    try:
        return Supplier.objects.get(pk=value)
    except (Supplier.DoesNotExist, ValidationError, ValueError, TypeError):
        raise InvalidBatchDataError(f"Unknown supplier: {value}", field="supplier") from None


def _clean_changes(changes: dict) -> dict:
    cleaned = {}
    for key, value in changes.items():
        if key == "batch_number":
            bn = (value or "").strip()
            if not bn:
                raise InvalidBatchDataError("batch_number cannot be blank", field=key)
            cleaned[key] = bn
        elif key in ("expiration_date", "received_date"):
            cleaned[key] = to_date(value, field_name=key)
        elif key in ("unit_cost", "sale_price"):
            cleaned[key] = to_money(value, field_name=key)
        elif key == "supplier":
            cleaned[key] = _resolve_supplier(value)
        elif key == "unit":
            cleaned[key] = (value or "").strip()
        else:
            cleaned[key] = value
    return cleaned


@transaction.atomic
def update_batch(
    *,
    product,
    batch_id,
    changes: dict,
    user=None,
    clock=None,
    allow_quantity_override: bool = False,
) -> StockBatch:
    changes = dict(changes or {})
    canonical_id = normalize_batch_id(batch_id)

    locked = lock_product(product)
    batch = (
        StockBatch.objects.select_for_update()
        .filter(product=locked, id=canonical_id)
        .first()
    )
    if batch is None:
        raise BatchNotFoundError(batch_id)

    bad = sorted(k for k in changes if k in LOCKED_FIELDS)
    if bad:
        raise InvalidBatchDataError(f"Field(s) {bad} cannot be edited", field=bad[0])

    new_remaining = None
    if "quantity_remaining" in changes:
        raw = changes.pop("quantity_remaining")
        if not allow_quantity_override:
            raise InvalidBatchDataError(
                "quantity_remaining changes only through stock deduction",
                field="quantity_remaining",
            )
        new_remaining = to_int(raw, field_name="quantity_remaining")
        if new_remaining < 0 or new_remaining > int(batch.quantity_received):
            raise InvalidQuantityError(
                "quantity_remaining must be between 0 and quantity_received",
                field="quantity_remaining",
                value=raw,
            )

    unknown = sorted(k for k in changes if k not in EDITABLE_FIELDS)
    if unknown:
        raise InvalidBatchDataError(f"Unknown field(s) {unknown}", field=unknown[0])

    cleaned = _clean_changes(changes)

    expires = cleaned.get("expiration_date", batch.expiration_date)
    received = cleaned.get("received_date", batch.received_date)
    if expires <= received:
        raise InvalidBatchDataError(
            "expiration_date must be after received_date",
            field="expiration_date",
        )

    for key, value in cleaned.items():
        setattr(batch, key, value)

    delta = 0
    if new_remaining is not None:
        delta = new_remaining - int(batch.quantity_remaining or 0)
        batch.quantity_remaining = new_remaining

    try:
        batch.save()
    except ValidationError as exc:
        raise InvalidBatchDataError(str(exc)) from exc

    if delta:
        StockMovement.objects.create(
            product=locked,
            batch=batch,
            movement_type=(StockMovement.MovementType.IN if delta > 0 else StockMovement.MovementType.OUT),
            reason=StockMovement.Reason.ADJUSTMENT,
            quantity=abs(delta),
            unit_cost_snapshot=batch.unit_cost,
            notes="Batch quantity correction",
            performed_by=user,
        )

    locked.recalculate_stock_quantity(resolve_today(clock))

    logger.info(
        "Batch updated",
        extra={
            "product_id": str(locked.id),
            "batch_id": str(batch.id),
            "fields": sorted(cleaned) + (["quantity_remaining"] if new_remaining is not None else []),
            "stock_quantity": locked.stock_quantity,
        },
    )
    return batch
