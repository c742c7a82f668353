import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from products.models import Category, Product, Supplier
from products.services.stock_intake import restock


CATEGORIES = [
    "Antibiotics",
    "Pain Relief",
    "Vitamins",
    "Cold & Flu",
    "Antimalarial",
]

# (code, name, generic, classification, category, unit cost)
PRODUCTS = [
    ("AMOX-500", "Amoxicillin 500mg", "Amoxicillin", Product.Classification.ANTIBIOTIC, "Antibiotics", "8.50"),
    ("PARA-500", "Paracetamol 500mg", "Paracetamol", Product.Classification.ANALGESIC, "Pain Relief", "1.20"),
    ("VITA-C", "Vitamin C 1000mg", "Ascorbic acid", Product.Classification.VITAMIN, "Vitamins", "3.75"),
    ("FLU-STOP", "Flu Stop Syrup", "Chlorphenamine", Product.Classification.ANTIHISTAMINE, "Cold & Flu", "6.00"),
    ("ART-LUM", "Artemether/Lumefantrine", "Artemether", Product.Classification.OTHER, "Antimalarial", "12.00"),
]


class Command(BaseCommand):
    help = "Seed categories, a supplier, products and FEFO stock batches"

    def add_arguments(self, parser):
        parser.add_argument("--batches", type=int, default=2, help="Batches per product (default 2)")
        parser.add_argument("--seed", type=int, default=None, help="Random seed for quantities")

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options["seed"])
        batches_per_product = max(1, int(options["batches"]))
        today = timezone.localdate()

        self.stdout.write(self.style.WARNING("Seeding products and stock..."))

        category_objs = {}
        for name in CATEGORIES:
            obj, _ = Category.objects.get_or_create(name=name)
            category_objs[name] = obj

        supplier, _ = Supplier.objects.get_or_create(
            name="Default Pharma Distributors",
            defaults={"contact_person": "Stock Desk", "email": "orders@example.com"},
        )

        for code, name, generic, classification, cat, cost in PRODUCTS:
            product, created = Product.objects.get_or_create(
                product_code=code,
                defaults={
                    "name": name,
                    "generic_name": generic,
                    "classification": classification,
                    "category": category_objs[cat],
                    "supplier": supplier,
                },
            )
            if not created:
                self.stdout.write(f"  skip {code} (exists)")
                continue

            unit_cost = Decimal(cost)
            for i in range(batches_per_product):
                restock(
                    product=product,
                    batch_number=f"{code}-B{i + 1}",
                    expiration_date=today + timedelta(days=180 + i * 60),
                    quantity_received=rng.randint(20, 50),
                    unit_cost=unit_cost,
                    sale_price=(unit_cost * Decimal("1.35")).quantize(Decimal("0.01")),
                )

            product.refresh_from_db()
            self.stdout.write(f"  {code}: {product.stock_quantity} units in {batches_per_product} batch(es)")

        self.stdout.write(self.style.SUCCESS("Products and stock seeded successfully."))
