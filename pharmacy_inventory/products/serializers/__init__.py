# products/serializers/__init__.py

from .allocation import AllocationPlanSerializer, AllocationRequestSerializer, StockOutSerializer
from .category import CategorySerializer, SupplierSerializer
from .movement import StockMovementSerializer
from .product import ProductSerializer
from .stock_batch import BatchUpdateSerializer, RestockSerializer, StockBatchSerializer

__all__ = [
    "AllocationPlanSerializer",
    "AllocationRequestSerializer",
    "BatchUpdateSerializer",
    "CategorySerializer",
    "ProductSerializer",
    "RestockSerializer",
    "StockBatchSerializer",
    "StockMovementSerializer",
    "StockOutSerializer",
    "SupplierSerializer",
]
