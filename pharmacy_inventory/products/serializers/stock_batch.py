# products/serializers/stock_batch.py
"""
STOCK BATCH SERIALIZERS

- StockBatchSerializer: read shape for batches (never used to write).
- RestockSerializer: input for POST /products/{id}/batches/.
- BatchUpdateSerializer: input for PATCH /products/{id}/batches/{batch_id}/.

Quantities are never written through a ModelSerializer; the views hand the
validated data to the batch services, which own every stock mutation.
"""

from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from products.models import StockBatch, Supplier


class StockBatchSerializer(serializers.ModelSerializer):
    product = serializers.UUIDField(source="product_id", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    supplier = serializers.UUIDField(source="supplier_id", read_only=True, allow_null=True)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)
    is_expired = serializers.SerializerMethodField()

    class Meta:
        model = StockBatch
        fields = [
            "id",
            "product",
            "product_name",
            "batch_number",
            "expiration_date",
            "received_date",
            "quantity_received",
            "quantity_remaining",
            "unit_cost",
            "sale_price",
            "supplier",
            "supplier_name",
            "unit",
            "unit_quantity",
            "notes",
            "is_expired",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_expired(self, obj) -> bool:
        today = self.context.get("today") or timezone.localdate()
        return obj.expiration_date <= today


class RestockSerializer(serializers.Serializer):
    batch_number = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=128,
        help_text="Supplier / delivery batch reference (auto-generated if missing).",
    )
    expiration_date = serializers.DateField()
    received_date = serializers.DateField(required=False, allow_null=True)
    quantity_received = serializers.IntegerField(min_value=1)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    sale_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    supplier = serializers.PrimaryKeyRelatedField(
        queryset=Supplier.objects.all(), required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    unit = serializers.CharField(required=False, allow_blank=True, max_length=32)
    unit_quantity = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0
    )

    def validate_expiration_date(self, value):
        if value <= timezone.localdate():
            raise serializers.ValidationError("expiration_date must be after today")
        return value

    def validate_received_date(self, value):
        if value is not None and value > timezone.localdate():
            raise serializers.ValidationError("received_date cannot be in the future")
        return value


class BatchUpdateSerializer(serializers.Serializer):
    """
    PATCH payload. Only the keys actually sent are passed to update_batch().
    quantity_remaining is accepted here but refused by the service unless
    the caller asked for a correction (?correction=true).
    """

    batch_number = serializers.CharField(required=False, max_length=128)
    expiration_date = serializers.DateField(required=False)
    received_date = serializers.DateField(required=False)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    sale_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    supplier = serializers.PrimaryKeyRelatedField(
        queryset=Supplier.objects.all(), required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    unit = serializers.CharField(required=False, allow_blank=True, max_length=32)
    unit_quantity = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0
    )
    quantity_remaining = serializers.IntegerField(required=False, min_value=0)

    def validate(self, attrs):
        unknown = sorted(set(self.initial_data) - set(self.fields))
        if unknown:
            raise serializers.ValidationError(
                {"detail": f"Field(s) {unknown} cannot be edited on a batch."}
            )
        if not attrs:
            raise serializers.ValidationError({"detail": "No fields to update."})
        return attrs
