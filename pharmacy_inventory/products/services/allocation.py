# products/services/allocation.py

"""
FEFO ALLOCATION ENGINE (PURE)

Purpose:
- Decide which batches cover a requested quantity, earliest expiry first
  (FIFO-by-expiry, NOT FIFO-by-receipt).
- Produce an AllocationPlan the commit step can apply, or a shortage result.

Rules:
- A batch is AVAILABLE iff quantity_remaining > 0 and expiration_date is
  strictly after today.
- A batch is EXPIRED iff quantity_remaining > 0 and expiration_date is on or
  before today (reporting only, never allocated).
- Ties on expiration_date keep input order (stable sort).
- Nothing here touches the database or mutates the batches it is given.

Batches may be StockBatch instances or plain mappings (document-shaped data);
both expose: id, batch_number, expiration_date, quantity_remaining,
unit_cost, sale_price.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from django.utils.dateparse import parse_date

from products.services.clock import Clock, resolve_today
from products.services.exceptions import InvalidQuantityError
from products.services.identifiers import normalize_batch_id


ZERO = Decimal("0.00")


@dataclass(frozen=True)
class AllocationEntry:
    batch_id: UUID
    batch_number: str
    quantity: int
    unit_cost: Decimal
    sale_price: Decimal
    expiration_date: date
    # quantity_remaining seen at plan time; commit re-checks it.
    remaining_at_plan: int

    @property
    def line_cost(self) -> Decimal:
        return self.unit_cost * self.quantity

    @property
    def line_revenue(self) -> Decimal:
        return self.sale_price * self.quantity

    def as_dict(self) -> dict:
        return {
            "batch_id": str(self.batch_id),
            "batch_number": self.batch_number,
            "quantity": self.quantity,
            "unit_cost": str(self.unit_cost),
            "sale_price": str(self.sale_price),
            "expiration_date": self.expiration_date.isoformat(),
        }


@dataclass(frozen=True)
class AllocationPlan:
    requested: int
    success: bool
    entries: tuple[AllocationEntry, ...] = ()
    total_cost: Decimal = ZERO
    total_revenue: Decimal = ZERO
    shortage: int = 0
    available: int = 0

    @property
    def allocated_quantity(self) -> int:
        return sum(e.quantity for e in self.entries)

    def as_dict(self) -> dict:
        if not self.success:
            return {
                "success": False,
                "requested": self.requested,
                "shortage": self.shortage,
                "available": self.available,
            }
        return {
            "success": True,
            "requested": self.requested,
            "entries": [e.as_dict() for e in self.entries],
            "total_cost": str(self.total_cost),
            "total_revenue": str(self.total_revenue),
        }


# ============================================================
# FIELD ACCESS (model instances or mappings)
# ============================================================

def _field(batch, name: str, default=None):
    if isinstance(batch, Mapping):
        if name == "id" and "id" not in batch:
            return batch.get("_id", default)
        return batch.get(name, default)
    return getattr(batch, name, default)


def _remaining(batch) -> int:
    return int(_field(batch, "quantity_remaining", 0) or 0)


def _expiration(batch) -> date | None:
    value = _field(batch, "expiration_date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value.strip()[:10])
    return None


def _money(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    return Decimal(str(value))


def to_requested_quantity(value) -> int:
    """
    Quantity normalizer.
    HARD RULE: quantities are positive whole units.
    """
    if isinstance(value, bool):
        raise InvalidQuantityError("quantity must be a whole integer unit", value=value)

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise InvalidQuantityError("quantity must be a whole integer unit", value=value)

    if qty <= 0:
        raise InvalidQuantityError("quantity must be greater than zero", value=value)
    return qty


# ============================================================
# AVAILABILITY FILTER
# ============================================================

def available_batches(batches: Iterable, *, clock: Optional[Clock] = None) -> list:
    today = resolve_today(clock)
    eligible = []
    for batch in batches:
        exp = _expiration(batch)
        if _remaining(batch) > 0 and exp is not None and exp > today:
            eligible.append(batch)
    # list.sort is stable: equal expirations keep input order
    eligible.sort(key=_expiration)
    return eligible


def expired_batches(batches: Iterable, *, clock: Optional[Clock] = None) -> list:
    today = resolve_today(clock)
    return [
        b
        for b in batches
        if _remaining(b) > 0 and _expiration(b) is not None and _expiration(b) <= today
    ]


def available_quantity(batches: Iterable, *, clock: Optional[Clock] = None) -> int:
    return sum(_remaining(b) for b in available_batches(batches, clock=clock))


# ============================================================
# ALLOCATION
# ============================================================

def allocate(batches: Iterable, requested_quantity, *, clock: Optional[Clock] = None) -> AllocationPlan:
    qty = to_requested_quantity(requested_quantity)

    ordered = available_batches(batches, clock=clock)
    total_available = sum(_remaining(b) for b in ordered)

    if total_available < qty:
        return AllocationPlan(
            requested=qty,
            success=False,
            shortage=qty - total_available,
            available=total_available,
        )

    need = qty
    entries = []
    for batch in ordered:
        if need <= 0:
            break

        remaining = _remaining(batch)
        take = min(need, remaining)

        entries.append(
            AllocationEntry(
                batch_id=normalize_batch_id(_field(batch, "id")),
                batch_number=str(_field(batch, "batch_number", "") or ""),
                quantity=take,
                unit_cost=_money(_field(batch, "unit_cost")),
                sale_price=_money(_field(batch, "sale_price")),
                expiration_date=_expiration(batch),
                remaining_at_plan=remaining,
            )
        )
        need -= take

    return AllocationPlan(
        requested=qty,
        success=True,
        entries=tuple(entries),
        total_cost=sum((e.line_cost for e in entries), ZERO),
        total_revenue=sum((e.line_revenue for e in entries), ZERO),
        available=total_available,
    )
