# products/serializers/allocation.py

from rest_framework import serializers

from products.models import StockMovement


class AllocationRequestSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


class StockOutSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    reason = serializers.ChoiceField(
        choices=[
            StockMovement.Reason.SALE,
            StockMovement.Reason.EXPIRY,
            StockMovement.Reason.ADJUSTMENT,
        ],
        default=StockMovement.Reason.SALE,
    )
    reference_type = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")
    reference_id = serializers.CharField(required=False, allow_blank=True, max_length=128, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class AllocationEntrySerializer(serializers.Serializer):
    batch_id = serializers.UUIDField()
    batch_number = serializers.CharField()
    quantity = serializers.IntegerField()
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    sale_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    expiration_date = serializers.DateField()


class AllocationPlanSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    requested = serializers.IntegerField()
    entries = AllocationEntrySerializer(many=True)
    total_cost = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    shortage = serializers.IntegerField()
    available = serializers.IntegerField()
