# backend/services/order_identifier.py
"""
Order identifier resolution.

A path identifier is either an order number ("ORD-..."), looked up by its
full token, or anything else, which is treated as a primary key.
"""

from dataclasses import dataclass
from typing import Optional, Union

from config.settings import ORDER_NUMBER_PREFIX


@dataclass(frozen=True)
class NumericId:
    raw: str

    @property
    def value(self) -> Optional[int]:
        """The integer key, or None when the raw string is not one."""
        raw = self.raw.strip()
        if not raw.isascii() or not raw.isdigit():
            return None
        return int(raw)


@dataclass(frozen=True)
class OrderNumber:
    token: str


OrderIdentifier = Union[NumericId, OrderNumber]


def resolve_order_identifier(raw: str) -> OrderIdentifier:
    if raw.startswith(ORDER_NUMBER_PREFIX):
        return OrderNumber(token=raw)
    return NumericId(raw=raw)
