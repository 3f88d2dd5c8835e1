# backend/routers/orders_router.py
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from config import settings
from database.session import get_db
from schemas.orders import OrderItemsOut, OrderListOut, OrderOut
from services.auth_service import authenticate_request, require_principal
from services.order_access import Principal
from services.order_gateway import OrderAccessGateway
from services.order_store import SqlAlchemyOrderStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

# anything outside GET/PUT/DELETE/OPTIONS still reaches the gateway so it can answer 405
GATEWAY_METHODS = ["GET", "PUT", "DELETE", "OPTIONS", "POST", "PATCH"]


async def _read_json_body(request: Request):
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        # undecodable bodies are treated like a body without update fields
        return None


# must be registered before /{order_id}
@router.get("/user", response_model=OrderListOut)
def get_my_orders(principal: Principal = Depends(require_principal), db: Session = Depends(get_db)):
    orders = SqlAlchemyOrderStore(db).list_for_user(principal.id)
    logger.info(f"Fetched {len(orders)} orders for user {principal.id}")
    return OrderListOut(orders=[OrderOut.model_validate(o) for o in orders])


@router.get("/{order_id}/items", response_model=OrderItemsOut)
def get_order_items(
    order_id: str,
    principal: Principal = Depends(require_principal),
    db: Session = Depends(get_db),
):
    # same lookup and owner/admin rule as the order itself
    gateway = OrderAccessGateway(SqlAlchemyOrderStore(db))
    return gateway.read_items(gateway.resolve(order_id), principal)


@router.api_route("/{order_id}", methods=GATEWAY_METHODS)
async def order_gateway(order_id: str, request: Request, db: Session = Depends(get_db)):
    body = await _read_json_body(request) if request.method == "PUT" else None
    gateway = OrderAccessGateway(
        SqlAlchemyOrderStore(db),
        allow_origin=settings.ORDER_GATEWAY_ALLOW_ORIGIN,
    )
    authorization = request.headers.get("Authorization")
    return await run_in_threadpool(
        gateway.handle,
        request.method,
        order_id,
        lambda: authenticate_request(authorization),
        body,
    )
