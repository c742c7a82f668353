# products/tests/test_batch_updates.py

import uuid
from datetime import date
from decimal import Decimal

from django.test import TestCase

from products.models import Product, StockMovement, Supplier
from products.services.batch_updates import update_batch
from products.services.clock import fixed_clock
from products.services.exceptions import (
    BatchNotFoundError,
    InvalidBatchDataError,
    InvalidQuantityError,
)
from products.tests.helpers import make_batch

TODAY = date(2024, 12, 1)
CLOCK = fixed_clock(TODAY)


class UpdateBatchTests(TestCase):
    """
    GUARANTEES:
    - Only the batch addressed (by any id form) on this product is changed
    - Unknown / foreign / unparseable ids raise BatchNotFoundError, nothing changes
    - quantity_received is never editable
    - quantity_remaining moves only with an explicit correction, which is ledgered
    - stock_quantity is recomputed after the change
    """

    def setUp(self):
        self.product = Product.objects.create(name="Cetirizine 10mg", product_code="CET-10")
        self.b1 = make_batch(self.product, number="C1", expires=date(2025, 1, 1), remaining=5,
                             quantity_received=10)
        self.b2 = make_batch(self.product, number="C2", expires=date(2025, 6, 1), remaining=10)
        self.product.recalculate_stock_quantity(TODAY)

    def _update(self, batch_id, changes, **kwargs):
        return update_batch(product=self.product, batch_id=batch_id, changes=changes, clock=CLOCK, **kwargs)

    def test_updates_editable_fields(self):
        supplier = Supplier.objects.create(name="Healthline")

        batch = self._update(
            self.b2.id,
            {
                "batch_number": " C2-A ",
                "sale_price": "4.75",
                "unit_cost": Decimal("2.10"),
                "supplier": str(supplier.id),
                "notes": "Relabelled",
            },
        )

        batch.refresh_from_db()
        self.assertEqual(batch.batch_number, "C2-A")
        self.assertEqual(batch.sale_price, Decimal("4.75"))
        self.assertEqual(batch.unit_cost, Decimal("2.10"))
        self.assertEqual(batch.supplier, supplier)
        self.assertEqual(batch.notes, "Relabelled")
        self.assertEqual(batch.quantity_remaining, 10)

    def test_only_the_addressed_batch_changes(self):
        self._update(self.b2.id, {"sale_price": "9.00"})

        self.b1.refresh_from_db()
        self.assertEqual(self.b1.sale_price, Decimal("3.00"))

    def test_accepts_every_id_form(self):
        forms = [
            self.b1.id,
            str(self.b1.id),
            str(self.b1.id).upper(),
            {"$oid": str(self.b1.id)},
            self.b1,
        ]
        for i, form in enumerate(forms):
            with self.subTest(form=form):
                batch = self._update(form, {"notes": f"pass {i}"})
                self.assertEqual(batch.id, self.b1.id)

    def test_unknown_batch_changes_nothing(self):
        missing = uuid.uuid4()

        with self.assertRaises(BatchNotFoundError) as ctx:
            self._update(missing, {"sale_price": "9.00"})

        self.assertEqual(ctx.exception.batch_id, missing)
        self.b1.refresh_from_db()
        self.b2.refresh_from_db()
        self.assertEqual((self.b1.sale_price, self.b2.sale_price), (Decimal("3.00"), Decimal("3.00")))

    def test_batch_of_another_product_is_not_found(self):
        other = Product.objects.create(name="Loratadine", product_code="LOR-10")
        foreign = make_batch(other, number="L1", expires=date(2025, 2, 1), remaining=4)

        with self.assertRaises(BatchNotFoundError):
            self._update(foreign.id, {"sale_price": "9.00"})

        foreign.refresh_from_db()
        self.assertEqual(foreign.sale_price, Decimal("3.00"))

    def test_unparseable_id_is_not_found(self):
        for bad in ("not-a-uuid", "", {"id": "x"}, 42):
            with self.subTest(batch_id=bad):
                with self.assertRaises(BatchNotFoundError):
                    self._update(bad, {"notes": "x"})

    def test_quantity_received_is_locked(self):
        with self.assertRaises(InvalidBatchDataError) as ctx:
            self._update(self.b1.id, {"quantity_received": 20})

        self.assertEqual(ctx.exception.field, "quantity_received")
        self.b1.refresh_from_db()
        self.assertEqual(self.b1.quantity_received, 10)

    def test_quantity_remaining_needs_correction_flag(self):
        with self.assertRaises(InvalidBatchDataError) as ctx:
            self._update(self.b1.id, {"quantity_remaining": 8})

        self.assertEqual(ctx.exception.field, "quantity_remaining")
        self.b1.refresh_from_db()
        self.assertEqual(self.b1.quantity_remaining, 5)

    def test_quantity_correction_is_ledgered(self):
        self._update(self.b1.id, {"quantity_remaining": 8}, allow_quantity_override=True)
        self._update(self.b1.id, {"quantity_remaining": 6}, allow_quantity_override=True)

        self.b1.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self.b1.quantity_remaining, 6)
        self.assertEqual(self.product.stock_quantity, 16)

        movements = list(
            StockMovement.objects.filter(batch=self.b1).values_list("movement_type", "reason", "quantity")
        )
        self.assertCountEqual(
            movements,
            [
                (StockMovement.MovementType.IN, StockMovement.Reason.ADJUSTMENT, 3),
                (StockMovement.MovementType.OUT, StockMovement.Reason.ADJUSTMENT, 2),
            ],
        )

    def test_quantity_correction_out_of_range(self):
        for bad in (-1, 11, 1.7, Decimal("2.5"), "3.2"):
            with self.subTest(quantity_remaining=bad):
                with self.assertRaises(InvalidQuantityError):
                    self._update(self.b1.id, {"quantity_remaining": bad}, allow_quantity_override=True)

        self.b1.refresh_from_db()
        self.assertEqual(self.b1.quantity_remaining, 5)
        self.assertFalse(StockMovement.objects.exists())

    def test_expiration_must_stay_after_received(self):
        with self.assertRaises(InvalidBatchDataError) as ctx:
            self._update(self.b1.id, {"expiration_date": "2024-09-30"})

        self.assertEqual(ctx.exception.field, "expiration_date")

    def test_moving_expiration_into_the_past_drops_stock(self):
        self._update(self.b1.id, {"expiration_date": date(2024, 11, 15)})

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 10)

    def test_unknown_field_rejected(self):
        with self.assertRaises(InvalidBatchDataError) as ctx:
            self._update(self.b1.id, {"colour": "blue"})

        self.assertEqual(ctx.exception.field, "colour")
