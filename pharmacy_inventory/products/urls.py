# products/urls.py

"""
PRODUCTS URLS (mounted at /api/products/)

- categories/, suppliers/              master data
- products/                            products + nested batch / allocation actions
- movements/                           stock ledger (read-only)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import (
    CategoryViewSet,
    ProductViewSet,
    StockMovementViewSet,
    SupplierViewSet,
)

router = DefaultRouter()

router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"suppliers", SupplierViewSet, basename="suppliers")
router.register(r"products", ProductViewSet, basename="products")
router.register(r"movements", StockMovementViewSet, basename="movements")

urlpatterns = [
    path("", include(router.urls)),
]
