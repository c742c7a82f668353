# products/services/stock_fifo.py

"""
FEFO STOCK DEDUCTION (COMMIT)

Purpose:
- Apply an AllocationPlan to the authoritative StockBatch rows.
- Offer deduct_stock(): plan + commit as ONE operation per product.

Concurrency rules:
- Every stock-mutating service locks the Product row first
  (select_for_update). That lock is the per-product mutex: plan + commit in
  deduct_stock() happen inside it, so two deductions cannot both plan against
  the same snapshot.
- commit_allocation() can also receive a plan computed earlier, outside the
  lock. It then re-checks every batch against remaining_at_plan and raises
  ConcurrentModificationError if anything moved (caller re-plans).

Integrity rules:
- All-or-nothing: any failure rolls back the whole transaction.
- stock_quantity is recomputed from the batches after the commit, never
  decremented from the previous cached value.
- Every deducted batch gets an OUT StockMovement with a cost snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import transaction

from products.models import Product, StockBatch, StockMovement
from products.services.allocation import AllocationPlan, allocate, to_requested_quantity
from products.services.clock import resolve_today
from products.services.exceptions import (
    BatchNotFoundError,
    ConcurrentModificationError,
    InsufficientStockError,
    InvalidQuantityError,
    InvalidReasonError,
)

logger = logging.getLogger(__name__)

OUT_REASONS = {
    StockMovement.Reason.SALE.value,
    StockMovement.Reason.EXPIRY.value,
    StockMovement.Reason.ADJUSTMENT.value,
}


@dataclass(frozen=True)
class StockDeduction:
    product: Product
    plan: AllocationPlan
    movements: list = field(default_factory=list)


def lock_product(product) -> Product:
    """Take the per-product row lock. Must be called inside a transaction."""
    pk = getattr(product, "pk", product)
    return Product.objects.select_for_update().get(pk=pk)


def batches_for_allocation(product) -> list:
    # Deterministic input order so equal expirations always resolve the same way.
    return list(
        StockBatch.objects.filter(product=product).order_by(
            "expiration_date", "created_at", "id"
        )
    )


def _check_reason(reason) -> str:
    value = str(reason or "").strip().upper()
    if value not in OUT_REASONS:
        raise InvalidReasonError(reason)
    return value


def _apply_plan(
    *,
    product: Product,
    plan: AllocationPlan,
    reason,
    reference_type: str,
    reference_id: str,
    notes: str,
    user,
    clock,
) -> list:
    batch_ids = [entry.batch_id for entry in plan.entries]
    locked_batches = {
        b.id: b
        for b in StockBatch.objects.select_for_update().filter(
            product=product, id__in=batch_ids
        )
    }

    movements = []
    for entry in plan.entries:
        batch = locked_batches.get(entry.batch_id)
        if batch is None:
            raise BatchNotFoundError(entry.batch_id)

        current = int(batch.quantity_remaining or 0)
        if current != entry.remaining_at_plan:
            raise ConcurrentModificationError(
                entry.batch_id,
                expected=entry.remaining_at_plan,
                actual=current,
            )

        if entry.quantity <= 0 or entry.quantity > current:
            raise InvalidQuantityError(
                f"Cannot take {entry.quantity} from batch {batch.batch_number} "
                f"(remaining {current})",
                field="quantity",
                value=entry.quantity,
            )

        batch.quantity_remaining = current - entry.quantity
        batch.save(update_fields=["quantity_remaining", "updated_at"])

        movements.append(
            StockMovement.objects.create(
                product=product,
                batch=batch,
                movement_type=StockMovement.MovementType.OUT,
                reason=reason,
                quantity=entry.quantity,
                unit_cost_snapshot=batch.unit_cost,
                reference_type=reference_type or "",
                reference_id=str(reference_id or ""),
                notes=notes or "",
                performed_by=user,
            )
        )

    product.recalculate_stock_quantity(resolve_today(clock))
    return movements


@transaction.atomic
def commit_allocation(
    *,
    product,
    plan: AllocationPlan,
    reason=StockMovement.Reason.SALE,
    reference_type: str = "",
    reference_id: str = "",
    notes: str = "",
    user=None,
    clock=None,
) -> Product:
    """
    Apply a previously computed plan to the product's batches.

    Raises:
    - InsufficientStockError: the plan is a shortage result.
    - BatchNotFoundError: a planned batch no longer exists on this product.
    - ConcurrentModificationError: a planned batch changed since planning.
    """
    reason = _check_reason(reason)

    if not plan.success:
        raise InsufficientStockError(
            requested=plan.requested,
            available=plan.available,
            product=product,
        )

    locked = lock_product(product)
    movements = _apply_plan(
        product=locked,
        plan=plan,
        reason=reason,
        reference_type=reference_type,
        reference_id=reference_id,
        notes=notes,
        user=user,
        clock=clock,
    )

    logger.info(
        "Allocation committed",
        extra={
            "product_id": str(locked.id),
            "quantity": plan.allocated_quantity,
            "batches": len(movements),
            "stock_quantity": locked.stock_quantity,
        },
    )
    return locked


@transaction.atomic
def deduct_stock(
    *,
    product,
    quantity,
    reason=StockMovement.Reason.SALE,
    reference_type: str = "",
    reference_id: str = "",
    notes: str = "",
    user=None,
    clock=None,
) -> StockDeduction:
    """
    Plan + commit under the product lock (earliest expiry first).

    Raises InsufficientStockError (nothing is reserved or changed) when the
    available stock cannot cover `quantity`.
    """
    reason = _check_reason(reason)
    qty = to_requested_quantity(quantity)

    locked = lock_product(product)
    plan = allocate(batches_for_allocation(locked), qty, clock=clock)

    if not plan.success:
        logger.warning(
            "Stock deduction refused: insufficient stock",
            extra={
                "product_id": str(locked.id),
                "requested": plan.requested,
                "available": plan.available,
            },
        )
        raise InsufficientStockError(
            requested=plan.requested,
            available=plan.available,
            product=locked,
        )

    movements = _apply_plan(
        product=locked,
        plan=plan,
        reason=reason,
        reference_type=reference_type,
        reference_id=reference_id,
        notes=notes,
        user=user,
        clock=clock,
    )

    logger.info(
        "Stock deducted",
        extra={
            "product_id": str(locked.id),
            "quantity": qty,
            "batches": len(movements),
            "stock_quantity": locked.stock_quantity,
        },
    )
    return StockDeduction(product=locked, plan=plan, movements=movements)


def plan_for_product(product, quantity, *, clock=None) -> AllocationPlan:
    """Read-only plan against the product's current batches (no lock taken)."""
    return allocate(batches_for_allocation(product), quantity, clock=clock)
