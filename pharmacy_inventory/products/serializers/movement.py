# products/serializers/movement.py

from rest_framework import serializers

from products.models import StockMovement


class StockMovementSerializer(serializers.ModelSerializer):
    product = serializers.UUIDField(source="product_id", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    batch = serializers.UUIDField(source="batch_id", read_only=True)
    batch_number = serializers.CharField(source="batch.batch_number", read_only=True)
    performed_by = serializers.CharField(source="performed_by.get_username", read_only=True, default=None)
    total_cost = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "created_at",
            "product",
            "product_name",
            "batch",
            "batch_number",
            "movement_type",
            "reason",
            "quantity",
            "unit_cost_snapshot",
            "total_cost",
            "reference_type",
            "reference_id",
            "notes",
            "performed_by",
        ]
        read_only_fields = fields
