# backend/services/order_access.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, valid for a single request."""
    id: int
    email: Optional[str] = None
    is_admin: bool = False


class AccessDecision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def authorize(principal: Principal, order) -> AccessDecision:
    """Owner or admin may access an order."""
    if principal.is_admin:
        return AccessDecision.ALLOW
    # ids may arrive as int or str depending on the source
    if order.user_id is not None and str(order.user_id) == str(principal.id):
        return AccessDecision.ALLOW
    return AccessDecision.DENY
