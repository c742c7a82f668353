# products/views/movement.py

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from products.models import StockMovement
from products.serializers.movement import StockMovementSerializer


class StockMovementViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Stock ledger (read-only). Newest first.

    Filters: ?product=<uuid>&batch=<uuid>&reason=SALE&movement_type=OUT
    """

    serializer_class = StockMovementSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["product", "batch", "reason", "movement_type", "reference_type", "reference_id"]
    ordering_fields = ["created_at", "quantity"]

    def get_queryset(self):
        return StockMovement.objects.select_related(
            "product", "batch", "performed_by"
        ).order_by("-created_at")
