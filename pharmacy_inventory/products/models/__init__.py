"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .category import Category
from .supplier import Supplier
from .product import Product
from .stock_batch import StockBatch
from .stock_movement import StockMovement

__all__ = [
    "Category",
    "Supplier",
    "Product",
    "StockBatch",
    "StockMovement",
]
