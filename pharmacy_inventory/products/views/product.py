# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Product CRUD (stock_quantity is read-only; it is derived from batches)
- Batch endpoints nested under a product (the product owns its batches):
    GET   /products/{id}/batches/                 available + expired summary
    POST  /products/{id}/batches/                 restock (new batch)
    PATCH /products/{id}/batches/{batch_id}/      batch correction
- Allocation:
    POST  /products/{id}/allocation-preview/      FEFO plan, nothing changes
    POST  /products/{id}/stock-out/               FEFO deduction
- Alerts:
    GET   /products/low-stock/
    GET   /products/expiring-soon/?days=30

All stock mutations go through products.services; this module only
validates input, calls the service and maps service errors to responses.
"""

from __future__ import annotations

from django.conf import settings
from django.db.models import F
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from products.models import Product
from products.serializers import (
    AllocationPlanSerializer,
    AllocationRequestSerializer,
    BatchUpdateSerializer,
    ProductSerializer,
    RestockSerializer,
    StockBatchSerializer,
    StockOutSerializer,
)
from products.services.exceptions import InventoryServiceError
from products.services.inventory import batch_summary, expiring_batches
from products.services.stock_fifo import deduct_stock, plan_for_product
from products.services.batch_updates import update_batch
from products.services.stock_intake import restock
from products.views.errors import inventory_error_response

TRUTHY = {"1", "true", "yes"}


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["classification", "category", "supplier", "is_active"]
    search_fields = ["name", "generic_name", "brand_name", "product_code", "manufacturer"]
    ordering_fields = ["name", "product_code", "stock_quantity", "created_at"]

    def get_queryset(self):
        return Product.objects.select_related("category", "supplier").order_by("name")

    def _batch_context(self):
        return {**self.get_serializer_context(), "today": timezone.localdate()}

    # -----------------------------
    # Delete (only products that never held stock)
    # -----------------------------
    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        available = product.available_stock()
        if available > 0:
            return Response(
                {
                    "detail": "Cannot delete product with available stock",
                    "available": available,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        # batches and ledger rows are history; deactivate instead
        if product.stock_batches.exists():
            return Response(
                {
                    "detail": "Cannot delete product with batch history; set is_active=false instead",
                    "batch_count": product.stock_batches.count(),
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        return super().destroy(request, *args, **kwargs)

    # -----------------------------
    # Batches: summary + restock
    # -----------------------------
    @extend_schema(
        methods=["GET"],
        responses={200: OpenApiResponse(description="Available and expired batches with totals")},
    )
    @extend_schema(
        methods=["POST"],
        request=RestockSerializer,
        responses={201: StockBatchSerializer, 400: dict},
    )
    @action(detail=True, methods=["get", "post"], url_path="batches")
    def batches(self, request, pk=None):
        product = self.get_object()

        if request.method == "GET":
            summary = batch_summary(product)
            ctx = self._batch_context()
            return Response(
                {
                    "product_id": str(product.id),
                    "available_batches": StockBatchSerializer(
                        summary["available_batches"], many=True, context=ctx
                    ).data,
                    "expired_batches": StockBatchSerializer(
                        summary["expired_batches"], many=True, context=ctx
                    ).data,
                    "summary": {
                        "total_available": summary["total_available"],
                        "total_expired": summary["total_expired"],
                        "batch_count": summary["batch_count"],
                    },
                }
            )

        s = RestockSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            batch = restock(
                product=product,
                batch_number=data.get("batch_number"),
                expiration_date=data["expiration_date"],
                received_date=data.get("received_date"),
                quantity_received=data["quantity_received"],
                unit_cost=data["unit_cost"],
                sale_price=data["sale_price"],
                supplier=data.get("supplier"),
                notes=data.get("notes"),
                unit=data.get("unit"),
                unit_quantity=data.get("unit_quantity"),
                user=request.user,
            )
        except InventoryServiceError as exc:
            return inventory_error_response(exc)

        product.refresh_from_db()
        return Response(
            {
                "batch": StockBatchSerializer(batch, context=self._batch_context()).data,
                "product_stock": product.stock_quantity,
            },
            status=status.HTTP_201_CREATED,
        )

    # -----------------------------
    # Batch correction
    # -----------------------------
    @extend_schema(
        request=BatchUpdateSerializer,
        parameters=[
            OpenApiParameter(
                name="correction",
                type=bool,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Allow quantity_remaining to be corrected (recorded as ADJUSTMENT).",
            ),
        ],
        responses={200: StockBatchSerializer, 400: dict, 404: dict},
    )
    @action(detail=True, methods=["patch"], url_path=r"batches/(?P<batch_id>[^/]+)")
    def batch_detail(self, request, pk=None, batch_id=None):
        product = self.get_object()

        s = BatchUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        correction = (request.query_params.get("correction") or "").strip().lower() in TRUTHY

        try:
            batch = update_batch(
                product=product,
                batch_id=batch_id,
                changes=dict(s.validated_data),
                user=request.user,
                allow_quantity_override=correction,
            )
        except InventoryServiceError as exc:
            return inventory_error_response(exc)

        return Response(StockBatchSerializer(batch, context=self._batch_context()).data)

    # -----------------------------
    # Allocation
    # -----------------------------
    @extend_schema(request=AllocationRequestSerializer, responses={200: AllocationPlanSerializer})
    @action(detail=True, methods=["post"], url_path="allocation-preview")
    def allocation_preview(self, request, pk=None):
        product = self.get_object()

        s = AllocationRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            plan = plan_for_product(product, s.validated_data["quantity"])
        except InventoryServiceError as exc:
            return inventory_error_response(exc)

        return Response(AllocationPlanSerializer(plan).data)

    @extend_schema(request=StockOutSerializer, responses={200: dict, 400: dict, 409: dict})
    @action(detail=True, methods=["post"], url_path="stock-out")
    def stock_out(self, request, pk=None):
        product = self.get_object()

        s = StockOutSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = deduct_stock(
                product=product,
                quantity=data["quantity"],
                reason=data["reason"],
                reference_type=data.get("reference_type", ""),
                reference_id=data.get("reference_id", ""),
                notes=data.get("notes", ""),
                user=request.user,
            )
        except InventoryServiceError as exc:
            return inventory_error_response(exc)

        plan = AllocationPlanSerializer(result.plan).data
        return Response(
            {
                "detail": "Stock reduced successfully",
                "batches_used": plan["entries"],
                "total_cost": plan["total_cost"],
                "total_revenue": plan["total_revenue"],
                "new_stock": result.product.stock_quantity,
            }
        )

    # -----------------------------
    # Alerts
    # -----------------------------
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        """
        Products still in stock but at or under their reorder level.
        Out-of-stock products are not included.
        """
        qs = self.get_queryset().filter(
            is_active=True,
            stock_quantity__gt=0,
            stock_quantity__lte=F("reorder_level"),
        )
        data = self.get_serializer(qs, many=True).data
        return Response({"count": len(data), "results": data})

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="days",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Window in days (default INVENTORY_EXPIRING_SOON_DAYS).",
            ),
        ],
        responses={200: StockBatchSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="expiring-soon")
    def expiring_soon(self, request):
        raw_days = (request.query_params.get("days") or "").strip()
        days = settings.INVENTORY_EXPIRING_SOON_DAYS
        if raw_days:
            try:
                days = int(raw_days)
                if days < 0:
                    raise ValueError
            except ValueError:
                return Response(
                    {"detail": "days must be a non-negative integer"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        qs = expiring_batches(days=days)
        data = StockBatchSerializer(qs, many=True, context=self._batch_context()).data
        return Response({"days": days, "count": len(data), "results": data})
