# products/services/exceptions.py

"""
INVENTORY SERVICE ERRORS

Centralized domain errors for stock allocation and batch services.
Each error carries the structured data a caller needs to build its own
user-facing message (shortage amount, offending batch id, ...).
"""


class InventoryServiceError(Exception):
    """Base exception for all inventory service failures."""


class InsufficientStockError(InventoryServiceError):
    """Requested quantity exceeds available stock. Not retried automatically."""

    def __init__(self, *, requested: int, available: int, product=None):
        self.requested = int(requested)
        self.available = int(available)
        self.shortage = self.requested - self.available
        self.product = product
        name = getattr(product, "name", None) or "product"
        super().__init__(
            f"Insufficient stock for {name}. "
            f"Requested: {self.requested}, Available: {self.available}, "
            f"Shortage: {self.shortage}"
        )


class BatchNotFoundError(InventoryServiceError):
    """A referenced batch does not exist on the product (stale plan or bad id)."""

    def __init__(self, batch_id):
        self.batch_id = batch_id
        super().__init__(f"Batch not found: {batch_id}")


class InvalidQuantityError(InventoryServiceError):
    """Non-positive requested quantity or an out-of-range stock field."""

    def __init__(self, message: str, *, field: str = "quantity", value=None):
        self.field = field
        self.value = value
        super().__init__(message)


class ConcurrentModificationError(InventoryServiceError):
    """A batch changed between planning and commit. Retry plan + commit."""

    def __init__(self, batch_id, *, expected: int, actual: int):
        self.batch_id = batch_id
        self.expected = int(expected)
        self.actual = int(actual)
        super().__init__(
            f"Batch {batch_id} changed since allocation was planned "
            f"(expected remaining {self.expected}, found {self.actual})"
        )


class InvalidBatchDataError(InventoryServiceError):
    """Restock / batch update payload failed validation."""

    def __init__(self, message: str, *, field: str | None = None):
        self.field = field
        super().__init__(message)


class InvalidReasonError(InvalidBatchDataError):
    """Stock-out reason outside SALE / EXPIRY / ADJUSTMENT."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Invalid stock-out reason: {reason!r}", field="reason")
