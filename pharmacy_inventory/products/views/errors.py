# products/views/errors.py

"""
Inventory service errors -> HTTP responses.

- InsufficientStockError        400 (+ requested / available / shortage)
- InvalidQuantityError          400 (+ field)
- InvalidBatchDataError         400 (+ field)
- InvalidReasonError            400 (field "reason")
- BatchNotFoundError            404 (+ batch_id)
- ConcurrentModificationError   409 (client should re-plan and retry)
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response

from products.services.exceptions import (
    BatchNotFoundError,
    ConcurrentModificationError,
    InsufficientStockError,
    InvalidBatchDataError,
    InvalidQuantityError,
    InventoryServiceError,
)

logger = logging.getLogger(__name__)


def inventory_error_response(exc: InventoryServiceError) -> Response:
    body = {"detail": str(exc)}

    if isinstance(exc, InsufficientStockError):
        body.update(
            requested=exc.requested,
            available=exc.available,
            shortage=exc.shortage,
        )
        return Response(body, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, BatchNotFoundError):
        body["batch_id"] = str(exc.batch_id)
        return Response(body, status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, ConcurrentModificationError):
        logger.warning(
            "Stale allocation plan rejected",
            extra={"batch_id": str(exc.batch_id), "expected": exc.expected, "actual": exc.actual},
        )
        body["batch_id"] = str(exc.batch_id)
        return Response(body, status=status.HTTP_409_CONFLICT)

    if isinstance(exc, (InvalidQuantityError, InvalidBatchDataError)):
        if exc.field:
            body["field"] = exc.field
        return Response(body, status=status.HTTP_400_BAD_REQUEST)

    return Response(body, status=status.HTTP_400_BAD_REQUEST)
