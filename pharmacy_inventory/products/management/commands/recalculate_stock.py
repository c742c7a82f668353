from django.core.management.base import BaseCommand, CommandError

from products.models import Product
from products.services.inventory import recalculate_stock


class Command(BaseCommand):
    help = (
        "Recompute Product.stock_quantity from batch rows. "
        "Run daily: batches that expired since the last stock change are still "
        "counted in the cached value until the product is recalculated."
    )

    def add_arguments(self, parser):
        parser.add_argument("--product", dest="product_code", default=None, help="Only this product_code")

    def handle(self, *args, **options):
        qs = Product.objects.all().order_by("product_code")

        code = options.get("product_code")
        if code:
            qs = qs.filter(product_code=code.strip().upper())
            if not qs.exists():
                raise CommandError(f"Unknown product_code: {code}")

        changed = 0
        for product in qs.iterator():
            before = int(product.stock_quantity or 0)
            after = recalculate_stock(product).stock_quantity
            if before != after:
                changed += 1
                self.stdout.write(f"{product.product_code}: {before} -> {after}")

        self.stdout.write(self.style.SUCCESS(f"Done. {changed} product(s) corrected."))
