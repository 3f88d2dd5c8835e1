# backend/services/order_gateway.py
"""
Order access gateway for /orders/{id}.

Request handling runs in a fixed order:

    method check -> identifier present -> authenticate -> resolve
    -> look up -> authorize -> mutate / serialize -> respond

Authorization is decided on the fetched record before anything is
serialized, so a denied caller never receives order fields. The caller is
passed explicitly from step to step; nothing is stored on the request.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Response
from fastapi.responses import JSONResponse

from models.order_model import Order
from schemas.orders import OrderItemOut, OrderOut, StatusUpdate, PaymentUpdate, InvalidUpdate
from services.errors import ApiError, ClientError, AuthError, AuthzError, MethodError, NotFoundError
from services.order_access import AccessDecision, Principal, authorize
from services.order_identifier import NumericId, OrderIdentifier, OrderNumber, resolve_order_identifier
from services.order_store import OrderStore
from services.order_updates import decode_order_update

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "PUT", "DELETE", "OPTIONS")
CORS_ALLOW_METHODS = "GET, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization"

FORBIDDEN_MESSAGE = "Forbidden - You do not have permission to access this order"

Authenticator = Callable[[], Optional[Principal]]


class OrderAccessGateway:
    def __init__(self, store: OrderStore, allow_origin: str = "*"):
        self.store = store
        self.allow_origin = allow_origin

    @property
    def cors_headers(self) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        }

    def handle(
        self,
        method: str,
        raw_id: Optional[str],
        authenticate: Authenticator,
        body: Any = None,
    ) -> Response:
        method = method.upper()

        if method == "OPTIONS":
            return Response(status_code=200, headers=self.cors_headers)

        try:
            if method not in ALLOWED_METHODS:
                raise MethodError(headers={"Allow": ", ".join(ALLOWED_METHODS)})
            payload = self._dispatch(method, raw_id, authenticate, body)
        except ApiError as e:
            headers = {**self.cors_headers, **(e.headers or {})}
            return JSONResponse({"error": e.detail}, status_code=e.status_code, headers=headers)
        except Exception:
            logger.exception(f"Error in order handler ({method} {raw_id})")
            return JSONResponse({"error": "Internal server error"}, status_code=500, headers=self.cors_headers)

        return JSONResponse(payload, status_code=200, headers=self.cors_headers)

    # ---------- steps ----------

    def _dispatch(self, method: str, raw_id: Optional[str], authenticate: Authenticator, body: Any) -> dict:
        if raw_id is None or not raw_id.strip():
            raise ClientError("Order ID is required")

        principal = authenticate()
        if principal is None or principal.id is None:
            logger.info("User not authenticated or user ID missing")
            raise AuthError()

        identifier = self.resolve(raw_id)

        if method == "GET":
            return self.read(identifier, principal)
        if method == "PUT":
            return self.update(identifier, principal, body)
        return self.delete(identifier, principal)

    def resolve(self, raw_id: str) -> OrderIdentifier:
        identifier = resolve_order_identifier(raw_id.strip())
        # a numeric id that is not a number can only miss in the store
        if isinstance(identifier, NumericId) and identifier.value is None:
            logger.info(f"Invalid order ID: {raw_id} is not a number and not an order number")
            raise ClientError("Invalid order ID format")
        return identifier

    def find_order(self, identifier: OrderIdentifier, exact: bool = False) -> Order:
        """Reads may fall back to a partial order-number match; mutations pass exact=True."""
        if isinstance(identifier, OrderNumber):
            order = self.store.find_by_number(identifier.token, exact=exact)
        else:
            order = self.store.find_by_id(identifier.value)
        if order is None:
            logger.info(f"Order {identifier} not found")
            raise NotFoundError("Order not found")
        return order

    def check_access(self, principal: Principal, order: Order) -> None:
        if authorize(principal, order) is AccessDecision.DENY:
            logger.warning(
                f"User {principal.id} is not authorized to access order {order.id} "
                f"belonging to user {order.user_id}"
            )
            raise AuthzError(FORBIDDEN_MESSAGE)

    def read(self, identifier: OrderIdentifier, principal: Principal) -> dict:
        order = self.find_order(identifier)
        self.check_access(principal, order)
        return {"order": _serialize(order)}

    def read_items(self, identifier: OrderIdentifier, principal: Principal) -> dict:
        order = self.find_order(identifier)
        self.check_access(principal, order)
        items = self.store.list_items(order.id)
        return {"items": [OrderItemOut.model_validate(i).model_dump(mode="json") for i in items]}

    def update(self, identifier: OrderIdentifier, principal: Principal, body: Any) -> dict:
        # decided before the store is touched at all
        update = decode_order_update(body)
        if isinstance(update, InvalidUpdate):
            raise ClientError(update.reason)

        order = self.find_order(identifier, exact=True)
        self.check_access(principal, order)

        if isinstance(update, StatusUpdate):
            updated = self.store.update_status(order.id, update.status)
            message = "Order status updated"
        elif isinstance(update, PaymentUpdate):
            updated = self.store.update_payment_status(
                order.id, update.payment_status, update.payment_reference
            )
            message = "Order payment status updated"

        if updated is None:
            raise NotFoundError("Order not found")

        logger.info(f"{message}: order {updated.id} by user {principal.id}")
        return {"message": message, "order": _serialize(updated)}

    def delete(self, identifier: OrderIdentifier, principal: Principal) -> dict:
        order = self.find_order(identifier, exact=True)
        self.check_access(principal, order)

        if not self.store.delete(order.id):
            raise NotFoundError("Order not found")

        logger.info(f"Order {order.id} deleted by user {principal.id}")
        return {"message": "Order deleted successfully"}


def _serialize(order: Order) -> dict:
    return OrderOut.model_validate(order).model_dump(mode="json")
