# products/views/__init__.py

"""
Products views package exports (router imports).
"""

from .category import CategoryViewSet, SupplierViewSet
from .movement import StockMovementViewSet
from .product import ProductViewSet

__all__ = [
    "CategoryViewSet",
    "ProductViewSet",
    "StockMovementViewSet",
    "SupplierViewSet",
]
