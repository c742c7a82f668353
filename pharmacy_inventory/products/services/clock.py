# products/services/clock.py

"""
Evaluation-date provider.

Every availability decision compares batch expiration dates with "today".
Services accept an optional zero-argument `clock` callable so tests can pin
the date; without one we use the project's local date.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from django.utils import timezone

Clock = Callable[[], "date | datetime"]


def resolve_today(clock: Optional[Clock] = None) -> date:
    if clock is None:
        return timezone.localdate()

    value = clock()
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localtime(value).date()
        return value.date()
    if isinstance(value, date):
        return value

    raise TypeError("clock() must return a date or datetime")


def fixed_clock(value) -> Clock:
    """Clock that always returns `value` (handy for tests and backfills)."""
    return lambda: value
