# backend/schemas/orders.py
from typing import List, Optional, Literal, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from models.order_model import ORDER_STATUSES, PAYMENT_STATUSES

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "awaiting_payment", "paid", "completed", "failed", "refunded"]

# ---------- update requests (decoded by services.order_updates) ----------

class StatusUpdate(BaseModel):
    kind: Literal["status"] = "status"
    status: OrderStatus

class PaymentUpdate(BaseModel):
    kind: Literal["payment_status"] = "payment_status"
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None

class InvalidUpdate(BaseModel):
    kind: Literal["invalid"] = "invalid"
    reason: str = "Invalid update data"

OrderUpdate = Union[StatusUpdate, PaymentUpdate, InvalidUpdate]

INVALID_STATUS_MESSAGE = "Invalid status. Must be one of: " + ", ".join(ORDER_STATUSES)
INVALID_PAYMENT_STATUS_MESSAGE = "Invalid payment status. Must be one of: " + ", ".join(PAYMENT_STATUSES)

# ---------- responses ----------

class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    price: float
    size: Optional[str] = None

class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    user_id: Optional[int] = None
    status: str
    payment_status: Optional[str] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    payment_date: Optional[datetime] = None
    total_amount: float
    currency_code: Optional[str] = None
    shipping_address: str
    shipping_method: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemOut] = []

class OrderEnvelope(BaseModel):
    order: OrderOut

class OrderMutationResult(BaseModel):
    message: str
    order: OrderOut

class OrderListOut(BaseModel):
    orders: List[OrderOut]

class OrderItemsOut(BaseModel):
    items: List[OrderItemOut]
