# products/services/coercion.py

"""
Input coercion shared by the batch services.

Values arrive from serializers (already typed), admin forms, management
commands and imported documents (strings). Coerce once, raise domain errors.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.utils.dateparse import parse_date

from products.services.exceptions import InvalidBatchDataError, InvalidQuantityError

TWOPLACES = Decimal("0.01")


def to_money(value, *, field_name: str) -> Decimal:
    if value is None or value == "":
        raise InvalidBatchDataError(f"{field_name} is required", field=field_name)
    try:
        amount = Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise InvalidBatchDataError(f"{field_name} must be a valid decimal", field=field_name) from None
    if amount < Decimal("0.00"):
        raise InvalidBatchDataError(f"{field_name} cannot be negative", field=field_name)
    return amount


def to_date(value, *, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            parsed = parse_date(value.strip())
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed
    raise InvalidBatchDataError(f"{field_name} must be a date (YYYY-MM-DD)", field=field_name)


def to_int(value, *, field_name: str) -> int:
    # bool is an int subclass in Python
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        s = value.strip()
        sign = -1 if s.startswith("-") else 1
        digits = s[1:] if s[:1] in ("-", "+") else s
        if digits.isdigit():
            return sign * int(digits)
    # floats, Decimals and anything else: whole units only, never truncated
    raise InvalidQuantityError(
        f"{field_name} must be a whole integer", field=field_name, value=value
    )
