# products/tests/helpers.py

from datetime import date
from decimal import Decimal

from products.models import StockBatch

RECEIVED = date(2024, 10, 1)


def make_batch(
    product,
    *,
    number,
    expires,
    remaining,
    received=None,
    quantity_received=None,
    unit_cost="2.00",
    sale_price="3.00",
):
    """
    Insert a batch row directly (no ledger entry). Tests use this to build
    exact batch states, including already-expired ones.
    """
    return StockBatch.objects.create(
        product=product,
        batch_number=number,
        expiration_date=expires,
        received_date=received or RECEIVED,
        quantity_received=quantity_received if quantity_received is not None else max(remaining, 1),
        quantity_remaining=remaining,
        unit_cost=Decimal(unit_cost),
        sale_price=Decimal(sale_price),
    )
