# products/tests/test_stock_intake.py

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from products.models import Product, StockMovement, Supplier
from products.services.clock import fixed_clock
from products.services.exceptions import InvalidBatchDataError, InvalidQuantityError
from products.services.stock_intake import restock
from products.tests.helpers import make_batch

User = get_user_model()

TODAY = date(2024, 12, 1)
CLOCK = fixed_clock(TODAY)


class RestockTests(TestCase):
    """
    GUARANTEES:
    - quantity_remaining defaults to quantity_received
    - Defaults come from the product (unit, unit_quantity, supplier) and the clock
    - A RECEIPT movement is written for every new batch
    - stock_quantity is recomputed
    - Bad input is rejected before anything is written
    """

    def setUp(self):
        self.user = User.objects.create_user(username="storekeeper", password="pass1234")
        self.supplier = Supplier.objects.create(name="MedSupply Ltd")
        self.product = Product.objects.create(
            name="Paracetamol 500mg",
            product_code="PARA-500",
            unit="box",
            unit_quantity=Decimal("10.00"),
            supplier=self.supplier,
        )
        make_batch(self.product, number="EXISTING", expires=date(2025, 3, 1), remaining=5)
        self.product.recalculate_stock_quantity(TODAY)

    def _restock(self, **overrides):
        kwargs = {
            "product": self.product,
            "batch_number": "PARA-B2",
            "expiration_date": date(2025, 12, 31),
            "quantity_received": 50,
            "unit_cost": Decimal("1.20"),
            "sale_price": Decimal("2.00"),
            "user": self.user,
            "clock": CLOCK,
        }
        kwargs.update(overrides)
        return restock(**kwargs)

    def test_new_batch_is_full_and_stock_increases(self):
        batch = self._restock()
        self.product.refresh_from_db()

        self.assertEqual(batch.quantity_received, 50)
        self.assertEqual(batch.quantity_remaining, 50)
        self.assertEqual(self.product.stock_quantity, 55)

    def test_defaults_from_product_and_clock(self):
        batch = self._restock()

        self.assertEqual(batch.received_date, TODAY)
        self.assertEqual(batch.unit, "box")
        self.assertEqual(batch.unit_quantity, Decimal("10.00"))
        self.assertEqual(batch.supplier, self.supplier)

    def test_explicit_overrides_win(self):
        other = Supplier.objects.create(name="Backup Pharma")
        batch = self._restock(
            supplier=other,
            unit="strip",
            unit_quantity=Decimal("8.00"),
            received_date=date(2024, 11, 20),
            notes="Cold chain",
        )

        self.assertEqual(batch.supplier, other)
        self.assertEqual(batch.unit, "strip")
        self.assertEqual(batch.unit_quantity, Decimal("8.00"))
        self.assertEqual(batch.received_date, date(2024, 11, 20))
        self.assertEqual(batch.notes, "Cold chain")

    def test_receipt_movement_written(self):
        batch = self._restock()

        movement = StockMovement.objects.get(batch=batch)
        self.assertEqual(movement.movement_type, StockMovement.MovementType.IN)
        self.assertEqual(movement.reason, StockMovement.Reason.RECEIPT)
        self.assertEqual(movement.quantity, 50)
        self.assertEqual(movement.unit_cost_snapshot, Decimal("1.20"))
        self.assertEqual(movement.performed_by, self.user)

    def test_batch_number_generated_when_missing(self):
        batch = self._restock(batch_number="   ")
        self.assertTrue(batch.batch_number.startswith("BATCH-"))

    def test_string_inputs_are_coerced(self):
        batch = self._restock(
            quantity_received="12",
            unit_cost="3.5",
            sale_price="5",
            expiration_date="2025-08-01",
        )

        self.assertEqual(batch.quantity_received, 12)
        self.assertEqual(batch.unit_cost, Decimal("3.50"))
        self.assertEqual(batch.sale_price, Decimal("5.00"))
        self.assertEqual(batch.expiration_date, date(2025, 8, 1))

    def test_remaining_override_is_ledgered(self):
        batch = self._restock(quantity_remaining=30)
        self.product.refresh_from_db()

        self.assertEqual(batch.quantity_remaining, 30)
        self.assertEqual(self.product.stock_quantity, 35)

        adjustment = StockMovement.objects.get(batch=batch, reason=StockMovement.Reason.ADJUSTMENT)
        self.assertEqual(adjustment.movement_type, StockMovement.MovementType.OUT)
        self.assertEqual(adjustment.quantity, 20)

    def test_already_expired_delivery_is_not_available(self):
        batch = self._restock(received_date=date(2024, 10, 1), expiration_date=date(2024, 11, 1))
        self.product.refresh_from_db()

        self.assertEqual(batch.quantity_remaining, 50)
        self.assertEqual(self.product.stock_quantity, 5)

    def test_rejects_bad_quantities(self):
        for bad in (0, -5, True, None, "many", 2.9, Decimal("3.5"), "2.5"):
            with self.subTest(quantity_received=bad):
                with self.assertRaises(InvalidQuantityError):
                    self._restock(quantity_received=bad)

        for bad in (-1, 51, 30.5, Decimal("12.4")):
            with self.subTest(quantity_remaining=bad):
                with self.assertRaises(InvalidQuantityError):
                    self._restock(quantity_remaining=bad)

    def test_rejects_expiration_not_after_received(self):
        for expires in (TODAY, date(2024, 11, 30)):
            with self.subTest(expires=expires):
                with self.assertRaises(InvalidBatchDataError) as ctx:
                    self._restock(expiration_date=expires)
                self.assertEqual(ctx.exception.field, "expiration_date")

    def test_rejects_bad_money(self):
        with self.assertRaises(InvalidBatchDataError):
            self._restock(unit_cost="-1.00")
        with self.assertRaises(InvalidBatchDataError):
            self._restock(sale_price="abc")
        with self.assertRaises(InvalidBatchDataError):
            self._restock(unit_cost=None)

    def test_rejected_restock_writes_nothing(self):
        with self.assertRaises(InvalidBatchDataError):
            self._restock(expiration_date=TODAY)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_batches.count(), 1)
        self.assertEqual(self.product.stock_quantity, 5)
        self.assertFalse(StockMovement.objects.exists())
