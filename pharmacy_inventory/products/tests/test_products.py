# products/tests/test_products.py

import re
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.test import TestCase

from products.models import Product, StockBatch, StockMovement
from products.tests.helpers import make_batch

TODAY = date(2024, 12, 1)


class ProductModelTests(TestCase):
    """
    Product model tests.

    GUARANTEES:
    - product_code is generated when missing and stored upper-case
    - product_code uniqueness is enforced
    - Stock status is derived from the cached quantity
    """

    def test_product_code_generated(self):
        product = Product.objects.create(name="Amoxicillin 250mg")
        self.assertRegex(product.product_code, re.compile(r"^P\d{4}$"))

    def test_product_code_normalized(self):
        product = Product.objects.create(name="Ibuprofen", product_code="  ibu-200 ")
        self.assertEqual(product.product_code, "IBU-200")

    def test_product_code_must_be_unique(self):
        Product.objects.create(name="Ibuprofen", product_code="IBU-200")

        with self.assertRaises(IntegrityError):
            Product.objects.create(name="Ibuprofen Duplicate", product_code="ibu-200")

    def test_stock_status(self):
        product = Product(name="Vitamin C", reorder_level=10)

        product.stock_quantity = 0
        self.assertEqual(product.stock_status, Product.STATUS_OUT_OF_STOCK)

        product.stock_quantity = 10
        self.assertTrue(product.is_low_stock)
        self.assertEqual(product.stock_status, Product.STATUS_LOW_STOCK)

        product.stock_quantity = 11
        self.assertFalse(product.is_low_stock)
        self.assertEqual(product.stock_status, Product.STATUS_IN_STOCK)

    def test_unit_quantity_must_be_positive(self):
        product = Product(name="Zinc", product_code="ZN-1", unit_quantity=Decimal("0"))
        with self.assertRaises(ValidationError):
            product.full_clean()


class ProductStockTests(TestCase):
    """
    GUARANTEES:
    - available_stock counts only unexpired batches with stock left
    - current_price is the price of the next batch to be sold
    """

    def setUp(self):
        self.product = Product.objects.create(name="Omeprazole 20mg", product_code="OME-20")
        make_batch(self.product, number="LATE", expires=date(2025, 6, 1), remaining=10, sale_price="6.00")
        make_batch(self.product, number="EARLY", expires=date(2025, 1, 1), remaining=5, sale_price="5.50")
        make_batch(self.product, number="EMPTY", expires=date(2024, 12, 15), remaining=0, sale_price="4.00")
        make_batch(self.product, number="OLD", expires=date(2024, 11, 1), remaining=7, sale_price="4.00")

    def test_available_stock(self):
        self.assertEqual(self.product.available_stock(TODAY), 15)

    def test_recalculate_stock_quantity(self):
        self.assertEqual(self.product.stock_quantity, 0)

        self.assertEqual(self.product.recalculate_stock_quantity(TODAY), 15)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 15)

    def test_recalculate_without_commit(self):
        self.product.recalculate_stock_quantity(TODAY, commit=False)

        self.assertEqual(Product.objects.get(pk=self.product.pk).stock_quantity, 0)

    def test_current_price(self):
        self.assertEqual(self.product.current_price(TODAY), Decimal("5.50"))
        self.assertEqual(self.product.current_price(date(2025, 1, 1)), Decimal("6.00"))
        self.assertEqual(self.product.current_price(date(2025, 6, 1)), Decimal("0.00"))


class StockBatchModelTests(TestCase):
    """
    GUARANTEES:
    - 0 <= quantity_remaining <= quantity_received
    - quantity_received is immutable
    - Batches are never deleted
    """

    def setUp(self):
        self.product = Product.objects.create(name="Metformin 500mg", product_code="MET-500")
        self.batch = make_batch(self.product, number="M1", expires=date(2025, 3, 1), remaining=8,
                                quantity_received=10)

    def test_remaining_cannot_exceed_received(self):
        with self.assertRaises(ValidationError):
            make_batch(self.product, number="M2", expires=date(2025, 3, 1), remaining=11,
                       quantity_received=10)

    def test_quantity_received_is_immutable(self):
        self.batch.quantity_received = 12
        with self.assertRaises(ValidationError):
            self.batch.save()

    def test_batch_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.batch.delete()

    def test_deleting_product_does_not_cascade_to_batches(self):
        with self.assertRaises(ProtectedError):
            self.product.delete()

        self.assertTrue(Product.objects.filter(pk=self.product.pk).exists())
        self.assertEqual(self.product.stock_batches.count(), 1)

    def test_availability_helpers(self):
        self.assertTrue(self.batch.is_available(TODAY))
        self.assertFalse(self.batch.is_expired(TODAY))
        self.assertFalse(self.batch.is_available(date(2025, 3, 1)))
        self.assertTrue(self.batch.is_expired(date(2025, 3, 1)))


class StockMovementModelTests(TestCase):
    """
    GUARANTEES:
    - Ledger rows are append-only
    - Direction must match the reason
    """

    def setUp(self):
        self.product = Product.objects.create(name="Losartan 50mg", product_code="LOS-50")
        self.batch = make_batch(self.product, number="L1", expires=date(2025, 3, 1), remaining=8,
                                unit_cost="1.75")

    def _movement(self, **overrides):
        kwargs = {
            "product": self.product,
            "batch": self.batch,
            "movement_type": StockMovement.MovementType.OUT,
            "reason": StockMovement.Reason.SALE,
            "quantity": 2,
        }
        kwargs.update(overrides)
        return StockMovement(**kwargs)

    def test_cost_snapshot_taken_from_batch(self):
        movement = self._movement()
        movement.save()

        self.assertEqual(movement.unit_cost_snapshot, Decimal("1.75"))
        self.assertEqual(movement.total_cost, Decimal("3.50"))

    def test_movement_is_immutable(self):
        movement = self._movement()
        movement.save()

        movement.quantity = 3
        with self.assertRaises(ValidationError):
            movement.save()

    def test_movement_cannot_be_deleted(self):
        movement = self._movement()
        movement.save()

        with self.assertRaises(ValidationError):
            movement.delete()

    def test_ledger_survives_product_and_batch_deletion(self):
        self._movement().save()

        with self.assertRaises(ProtectedError):
            StockBatch.objects.filter(pk=self.batch.pk).delete()
        with self.assertRaises(ProtectedError):
            Product.objects.filter(pk=self.product.pk).delete()

        self.assertEqual(StockMovement.objects.filter(product=self.product).count(), 1)

    def test_sale_must_go_out(self):
        with self.assertRaises(ValidationError):
            self._movement(movement_type=StockMovement.MovementType.IN).save()

    def test_adjustment_may_go_either_way(self):
        self._movement(reason=StockMovement.Reason.ADJUSTMENT, movement_type=StockMovement.MovementType.IN).save()
        self._movement(reason=StockMovement.Reason.ADJUSTMENT).save()

        self.assertEqual(StockMovement.objects.filter(reason=StockMovement.Reason.ADJUSTMENT).count(), 2)
