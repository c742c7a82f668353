import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Supplier",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("contact_person", models.CharField(blank=True, default="", max_length=200)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("address", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="products_su_name_idx"),
                    models.Index(fields=["is_active"], name="products_su_active_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("product_code", models.CharField(blank=True, max_length=32, unique=True)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("generic_name", models.CharField(blank=True, default="", max_length=255)),
                ("brand_name", models.CharField(blank=True, default="", max_length=255)),
                ("manufacturer", models.CharField(blank=True, default="", max_length=255)),
                (
                    "classification",
                    models.CharField(
                        choices=[
                            ("ANTIBIOTIC", "Antibiotic"),
                            ("ANALGESIC", "Analgesic"),
                            ("ANTIPYRETIC", "Antipyretic"),
                            ("ANTI_INFLAMMATORY", "Anti-inflammatory"),
                            ("ANTACID", "Antacid"),
                            ("ANTIHISTAMINE", "Antihistamine"),
                            ("ANTIHYPERTENSIVE", "Antihypertensive"),
                            ("ANTIDIABETIC", "Antidiabetic"),
                            ("VITAMIN", "Vitamin"),
                            ("MINERAL", "Mineral"),
                            ("SUPPLEMENT", "Supplement"),
                            ("TOPICAL", "Topical"),
                            ("OTHER", "Other"),
                        ],
                        default="OTHER",
                        max_length=32,
                    ),
                ),
                ("unit", models.CharField(default="piece", max_length=32)),
                ("unit_quantity", models.DecimalField(decimal_places=2, default=Decimal("1.00"), max_digits=10)),
                ("reorder_level", models.PositiveIntegerField(default=10)),
                ("stock_quantity", models.PositiveIntegerField(default=0, editable=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                        to="products.category",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                        to="products.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["product_code"], name="products_pr_code_idx"),
                    models.Index(fields=["name"], name="products_pr_name_idx"),
                    models.Index(fields=["classification"], name="products_pr_class_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockBatch",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("batch_number", models.CharField(help_text="Supplier / delivery batch reference", max_length=128)),
                ("expiration_date", models.DateField()),
                ("received_date", models.DateField(default=django.utils.timezone.localdate)),
                ("quantity_received", models.PositiveIntegerField(help_text="Quantity delivered (immutable)")),
                (
                    "quantity_remaining",
                    models.PositiveIntegerField(default=0, help_text="Remaining quantity (service-managed only)"),
                ),
                ("unit_cost", models.DecimalField(decimal_places=2, max_digits=12)),
                ("sale_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("unit", models.CharField(blank=True, default="", max_length=32)),
                ("unit_quantity", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_batches",
                        to="products.product",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_batches",
                        to="products.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["expiration_date", "created_at"],
                "indexes": [
                    models.Index(fields=["product", "expiration_date"], name="products_sb_prod_exp_idx"),
                    models.Index(fields=["expiration_date"], name="products_sb_exp_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity_received__gt", 0)),
                        name="chk_stockbatch_qty_received_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_remaining__gte", 0)),
                        name="chk_stockbatch_qty_remaining_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_remaining__lte", models.F("quantity_received"))),
                        name="chk_stockbatch_remaining_lte_received",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "movement_type",
                    models.CharField(choices=[("IN", "Stock In"), ("OUT", "Stock Out")], max_length=3),
                ),
                (
                    "reason",
                    models.CharField(
                        choices=[
                            ("RECEIPT", "Stock Receipt"),
                            ("SALE", "Sale"),
                            ("ADJUSTMENT", "Manual Adjustment"),
                            ("EXPIRY", "Expired Stock"),
                        ],
                        max_length=20,
                    ),
                ),
                ("quantity", models.PositiveIntegerField()),
                (
                    "unit_cost_snapshot",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit cost snapshot from batch at movement time (immutable).",
                        max_digits=12,
                    ),
                ),
                ("reference_type", models.CharField(blank=True, default="", max_length=64)),
                ("reference_id", models.CharField(blank=True, default="", max_length=128)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "batch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="products.stockbatch",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_movements",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["created_at"], name="products_sm_created_idx"),
                    models.Index(fields=["reason"], name="products_sm_reason_idx"),
                    models.Index(fields=["product", "created_at"], name="products_sm_prod_idx"),
                    models.Index(fields=["batch", "created_at"], name="products_sm_batch_idx"),
                    models.Index(fields=["reference_type", "reference_id"], name="products_sm_ref_idx"),
                ],
            },
        ),
    ]
