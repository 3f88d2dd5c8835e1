# backend/services/order_store.py
import logging
from datetime import datetime
from typing import List, Optional, Protocol

from sqlalchemy.orm import Session, joinedload

from models.order_model import Order, OrderItem, SETTLED_PAYMENT_STATUSES

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class OrderStore(Protocol):
    def find_by_id(self, order_id: int) -> Optional[Order]: ...
    def find_by_number(self, order_number: str, exact: bool = False) -> Optional[Order]: ...
    def update_status(self, order_id: int, status: str) -> Optional[Order]: ...
    def update_payment_status(
        self, order_id: int, payment_status: str, payment_reference: Optional[str] = None
    ) -> Optional[Order]: ...
    def delete(self, order_id: int) -> bool: ...
    def list_items(self, order_id: int) -> List[OrderItem]: ...


class SqlAlchemyOrderStore:
    """Order persistence over a request-scoped SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Order).options(joinedload(Order.items))

    def find_by_id(self, order_id: int) -> Optional[Order]:
        return self._query().filter(Order.id == order_id).first()

    def find_by_number(self, order_number: str, exact: bool = False) -> Optional[Order]:
        order = self._query().filter(Order.order_number == order_number).first()
        if order or exact:
            return order

        # the number may have been sent embedded in a longer reference
        order = (
            self._query()
            .filter(Order.order_number.like(f"%{_escape_like(order_number)}%", escape="\\"))
            .order_by(Order.id)
            .first()
        )
        if order:
            logger.info(f"Found order {order.id} by partial match for order number {order_number}")
        return order

    def list_for_user(self, user_id: int) -> List[Order]:
        return (
            self._query()
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def list_items(self, order_id: int) -> List[OrderItem]:
        return (
            self.db.query(OrderItem)
            .filter(OrderItem.order_id == order_id)
            .order_by(OrderItem.created_at, OrderItem.id)
            .all()
        )

    def update_status(self, order_id: int, status: str) -> Optional[Order]:
        o = self.db.get(Order, order_id)
        if not o:
            return None
        o.status = status
        o.updated_at = datetime.utcnow()
        return self._commit(o)

    def update_payment_status(
        self, order_id: int, payment_status: str, payment_reference: Optional[str] = None
    ) -> Optional[Order]:
        o = self.db.get(Order, order_id)
        if not o:
            return None
        now = datetime.utcnow()
        o.payment_status = payment_status
        if payment_reference:
            o.payment_reference = payment_reference
        if payment_status in SETTLED_PAYMENT_STATUSES:
            o.payment_date = now
        o.updated_at = now
        return self._commit(o)

    def delete(self, order_id: int) -> bool:
        o = self.db.get(Order, order_id)
        if not o:
            return False
        try:
            # items go through the delete-orphan cascade in the same transaction
            self.db.delete(o)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return True

    def _commit(self, o: Order) -> Order:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(o)
        return o
