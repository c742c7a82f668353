# products/views/category.py

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from products.models import Category, Supplier
from products.serializers.category import CategorySerializer, SupplierSerializer


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Category API (any authenticated user).
    """

    queryset = Category.objects.all().order_by("name")
    serializer_class = CategorySerializer
    permission_classes = [IsAuthenticated]
    search_fields = ["name"]


class SupplierViewSet(viewsets.ModelViewSet):
    queryset = Supplier.objects.all().order_by("name")
    serializer_class = SupplierSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["is_active"]
    search_fields = ["name", "contact_person", "email"]
