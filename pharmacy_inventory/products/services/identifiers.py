# products/services/identifiers.py

"""
Batch identifier normalizer.

Batch ids reach us in several shapes:
- native uuid.UUID (ORM instances)
- plain strings (URL kwargs, JSON bodies), with or without dashes / braces
- document-store style wrappers: {"$oid": "<id>"}

Everything is normalized to uuid.UUID at the boundary so the rest of the
inventory code compares one canonical type.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping

from products.services.exceptions import BatchNotFoundError


def normalize_batch_id(value) -> uuid.UUID:
    raw = value

    if isinstance(raw, Mapping):
        if "$oid" not in raw:
            raise BatchNotFoundError(value)
        raw = raw["$oid"]

    if isinstance(raw, uuid.UUID):
        return raw

    # StockBatch (or anything with an id attribute)
    inner = getattr(raw, "id", None)
    if isinstance(inner, uuid.UUID):
        return inner

    if isinstance(raw, str):
        s = raw.strip()
        if not s:
            raise BatchNotFoundError(value)
        try:
            return uuid.UUID(s)
        except ValueError:
            raise BatchNotFoundError(value) from None

    raise BatchNotFoundError(value)
