# backend/models/order_model.py
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Numeric, func
from sqlalchemy.types import Unicode, UnicodeText
from sqlalchemy.orm import relationship
from database.session import Base

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "awaiting_payment", "paid", "completed", "failed", "refunded")
# payment_date is stamped when an order reaches one of these
SETTLED_PAYMENT_STATUSES = ("paid", "completed")


class Order(Base):
    __tablename__ = "orders"
    id                = Column(Integer, primary_key=True, index=True)
    order_number      = Column(Unicode(50), unique=True, nullable=False, index=True)  # "ORD-<millis>-<n>"
    user_id           = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    total_amount      = Column(Numeric(10, 2), nullable=False)
    currency_code     = Column(Unicode(10), default="USD")
    currency_rate     = Column(Numeric(10, 6), default=1)
    status            = Column(Unicode(50), nullable=False, default="pending")
    shipping_address  = Column(UnicodeText, nullable=False)
    shipping_method   = Column(Unicode(100))
    payment_method    = Column(Unicode(100))
    payment_reference = Column(Unicode(255))
    payment_status    = Column(Unicode(50), default="pending")
    payment_date      = Column(DateTime)
    created_at        = Column(DateTime, server_default=func.now())
    updated_at        = Column(DateTime, server_default=func.now())

    user  = relationship("User", foreign_keys=[user_id])
    items = relationship(
        "OrderItem",
        cascade="all, delete-orphan",
        back_populates="order",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"
    id           = Column(Integer, primary_key=True, index=True)
    order_id     = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id   = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    product_name = Column(Unicode(255), nullable=False)
    quantity     = Column(Integer, nullable=False)
    price        = Column(Numeric(10, 2), nullable=False)
    size         = Column(Unicode(20))
    created_at   = Column(DateTime, server_default=func.now())

    order   = relationship("Order", back_populates="items")
    product = relationship("Product")
