# products/tests/test_commands.py

from datetime import timedelta
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase
from django.utils import timezone

from products.models import Product, StockBatch, StockMovement
from products.tests.helpers import make_batch


class SeedProductsCommandTests(TestCase):
    """
    GUARANTEES:
    - Seeded stock comes in through restock (batches + RECEIPT movements)
    - Re-running does not duplicate products
    """

    def test_seed_creates_products_with_batches(self):
        call_command("seed_products", "--batches", "2", "--seed", "7", stdout=StringIO())

        self.assertEqual(Product.objects.count(), 5)
        self.assertEqual(StockBatch.objects.count(), 10)
        self.assertEqual(
            StockMovement.objects.filter(reason=StockMovement.Reason.RECEIPT).count(),
            10,
        )
        for product in Product.objects.all():
            self.assertGreater(product.stock_quantity, 0)
            self.assertEqual(product.stock_quantity, product.available_stock())

    def test_seed_is_idempotent(self):
        call_command("seed_products", stdout=StringIO())
        out = StringIO()
        call_command("seed_products", stdout=out)

        self.assertEqual(Product.objects.count(), 5)
        self.assertIn("skip", out.getvalue())


class RecalculateStockCommandTests(TestCase):
    """
    GUARANTEES:
    - A stale cache (batch expired since the last stock change) is corrected
    - Unknown product codes are a command error
    """

    def setUp(self):
        today = timezone.localdate()
        self.product = Product.objects.create(name="Cough Syrup", product_code="CS-100")
        make_batch(self.product, number="S1", received=today - timedelta(days=200),
                   expires=today - timedelta(days=1), remaining=6)
        make_batch(self.product, number="S2", received=today - timedelta(days=10),
                   expires=today + timedelta(days=100), remaining=4)
        # cache as it was before S1 expired
        Product.objects.filter(pk=self.product.pk).update(stock_quantity=10)

    def test_corrects_stale_cache(self):
        out = StringIO()
        call_command("recalculate_stock", stdout=out)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 4)
        self.assertIn("CS-100: 10 -> 4", out.getvalue())
        self.assertIn("Done. 1 product(s) corrected.", out.getvalue())

    def test_single_product(self):
        out = StringIO()
        call_command("recalculate_stock", "--product", "cs-100", stdout=out)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 4)

    def test_unknown_product_code(self):
        with self.assertRaises(CommandError):
            call_command("recalculate_stock", "--product", "NOPE", stdout=StringIO())
