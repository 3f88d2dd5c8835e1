
# products
from .products import ProductCreate, ProductUpdate, ProductOut, ProductImageOut, ImageDeleteResponse

# users
from .users import (
    IdentifierCheckPayload, IdentifierCheckResponse,
    EmailCheckPayload, EmailAvailability, EmailResetCheck,
)

# orders
from .orders import (
    OrderStatus, PaymentStatus,
    StatusUpdate, PaymentUpdate, InvalidUpdate, OrderUpdate,
    OrderItemOut, OrderOut, OrderEnvelope, OrderMutationResult, OrderListOut, OrderItemsOut,
)

__all__ = [
    # products
    "ProductCreate", "ProductUpdate", "ProductOut", "ProductImageOut", "ImageDeleteResponse",
    # users
    "IdentifierCheckPayload", "IdentifierCheckResponse",
    "EmailCheckPayload", "EmailAvailability", "EmailResetCheck",
    # orders
    "OrderStatus", "PaymentStatus",
    "StatusUpdate", "PaymentUpdate", "InvalidUpdate", "OrderUpdate",
    "OrderItemOut", "OrderOut", "OrderEnvelope", "OrderMutationResult", "OrderListOut", "OrderItemsOut",
]
