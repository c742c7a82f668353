# products/serializers/product.py

"""
PRODUCT SERIALIZER

- stock_quantity is the cached available stock; it is never writable here.
  It changes only through the batch services (restock / stock-out / update).
- product_code is optional on create; the model generates one.
"""

from rest_framework import serializers

from products.models import Category, Product, Supplier


class ProductSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)

    supplier = serializers.PrimaryKeyRelatedField(
        queryset=Supplier.objects.all(), required=False, allow_null=True
    )
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)

    product_code = serializers.CharField(required=False, allow_blank=True, max_length=32)

    stock_status = serializers.CharField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "product_code",
            "name",
            "generic_name",
            "brand_name",
            "manufacturer",
            "classification",
            "category",
            "category_name",
            "supplier",
            "supplier_name",
            "unit",
            "unit_quantity",
            "reorder_level",
            "stock_quantity",
            "stock_status",
            "is_low_stock",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "stock_quantity",
            "created_at",
            "updated_at",
        ]

    def validate_product_code(self, value):
        code = (value or "").strip().upper()
        if not code:
            return ""
        qs = Product.objects.filter(product_code=code)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("product_code already exists")
        return code

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v

    def validate_unit_quantity(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("unit_quantity must be greater than zero")
        return value

    def update(self, instance, validated_data):
        # Keep the existing code when the client clears it
        if "product_code" in validated_data and not validated_data["product_code"]:
            validated_data.pop("product_code")
        return super().update(instance, validated_data)
