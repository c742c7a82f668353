from .allocation import AllocationEntry, AllocationPlan, allocate, available_batches, expired_batches
from .batch_updates import update_batch
from .exceptions import (
    BatchNotFoundError,
    ConcurrentModificationError,
    InsufficientStockError,
    InvalidBatchDataError,
    InvalidQuantityError,
    InvalidReasonError,
    InventoryServiceError,
)
from .identifiers import normalize_batch_id
from .stock_fifo import commit_allocation, deduct_stock
from .stock_intake import restock

__all__ = [
    "AllocationEntry",
    "AllocationPlan",
    "allocate",
    "available_batches",
    "expired_batches",
    "update_batch",
    "BatchNotFoundError",
    "ConcurrentModificationError",
    "InsufficientStockError",
    "InvalidBatchDataError",
    "InvalidQuantityError",
    "InvalidReasonError",
    "InventoryServiceError",
    "normalize_batch_id",
    "commit_allocation",
    "deduct_stock",
    "restock",
]
