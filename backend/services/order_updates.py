# backend/services/order_updates.py
"""
Decoding of order update bodies.

A PUT body targets exactly one axis of the order. Precedence rule: when the
fulfillment ``status`` field is present it wins, even if ``paymentStatus``
is sent as well; ``paymentStatus`` is only considered when ``status`` is
absent.
"""

from typing import Any

from pydantic import ValidationError

from schemas.orders import (
    StatusUpdate, PaymentUpdate, InvalidUpdate, OrderUpdate,
    INVALID_STATUS_MESSAGE, INVALID_PAYMENT_STATUS_MESSAGE,
)


def _present(body: dict, field: str) -> bool:
    value = body.get(field)
    return value is not None and value != ""


def decode_order_update(body: Any) -> OrderUpdate:
    if not isinstance(body, dict):
        return InvalidUpdate()

    if _present(body, "status"):
        try:
            return StatusUpdate(status=body["status"])
        except ValidationError:
            return InvalidUpdate(reason=INVALID_STATUS_MESSAGE)

    if _present(body, "paymentStatus"):
        reference = body.get("paymentReference")
        try:
            return PaymentUpdate(
                payment_status=body["paymentStatus"],
                payment_reference=str(reference) if reference else None,
            )
        except ValidationError:
            return InvalidUpdate(reason=INVALID_PAYMENT_STATUS_MESSAGE)

    return InvalidUpdate()
