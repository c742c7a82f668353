# products/admin.py
"""
Admin rules:

- Products, categories and suppliers are ordinary master data.
- Stock batches are shown inline on the product, read-only. New stock comes in
  through restock() (API or seed command) so every batch gets its RECEIPT
  movement and the cached stock_quantity is recomputed.
- Stock batches and stock movements are view-only; neither can be deleted.
"""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.contrib import admin
from django.utils import timezone

from products.models import Category, Product, StockBatch, StockMovement, Supplier
from products.services.inventory import recalculate_stock


def _expiry_status(batch: StockBatch) -> str:
    today = timezone.localdate()
    if batch.expiration_date <= today:
        return "EXPIRED"
    if batch.expiration_date <= today + timedelta(days=settings.INVENTORY_EXPIRING_SOON_DAYS):
        return "SOON"
    return "OK"


# =====================================================
# MASTER DATA
# =====================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)
    ordering = ("name",)


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "contact_person", "phone", "email", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "contact_person", "email")
    ordering = ("name",)


# =====================================================
# PRODUCT (+ read-only batch inline)
# =====================================================

class StockBatchInline(admin.TabularInline):
    model = StockBatch
    extra = 0
    can_delete = False
    show_change_link = True

    fields = (
        "batch_number",
        "expiration_date",
        "received_date",
        "quantity_received",
        "quantity_remaining",
        "unit_cost",
        "sale_price",
        "expiry_status",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False

    @admin.display(description="Expiry")
    def expiry_status(self, obj):
        return _expiry_status(obj)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "product_code",
        "name",
        "classification",
        "category",
        "stock_quantity",
        "reorder_level",
        "stock_status",
        "is_active",
    )
    list_filter = ("is_active", "classification", "category")
    search_fields = ("product_code", "name", "generic_name", "brand_name")
    ordering = ("name",)
    readonly_fields = ("stock_quantity", "created_at", "updated_at")

    inlines = [StockBatchInline]

    actions = ["recalculate_stock_action"]

    @admin.display(description="Status")
    def stock_status(self, obj):
        return obj.stock_status

    @admin.action(description="Recalculate cached stock from batches")
    def recalculate_stock_action(self, request, queryset):
        for product in queryset:
            recalculate_stock(product)
        self.message_user(request, f"Recalculated stock for {queryset.count()} product(s).")


# =====================================================
# STOCK BATCH (VIEW-ONLY)
# =====================================================

@admin.register(StockBatch)
class StockBatchAdmin(admin.ModelAdmin):
    list_display = (
        "product",
        "batch_number",
        "expiration_date",
        "quantity_received",
        "quantity_remaining",
        "unit_cost",
        "sale_price",
        "expiry_status",
    )
    list_filter = ("expiration_date", "supplier")
    search_fields = ("batch_number", "product__name", "product__product_code")
    ordering = ("expiration_date", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description="Expiry")
    def expiry_status(self, obj):
        return _expiry_status(obj)


# =====================================================
# STOCK MOVEMENT (VIEW-ONLY LEDGER)
# =====================================================

@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = (
        "created_at",
        "product",
        "batch",
        "movement_type",
        "reason",
        "quantity",
        "unit_cost_snapshot",
        "reference_type",
        "reference_id",
        "performed_by",
    )
    list_filter = ("movement_type", "reason", "created_at")
    search_fields = ("product__name", "batch__batch_number", "reference_id")
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
