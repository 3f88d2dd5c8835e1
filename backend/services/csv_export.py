# backend/services/csv_export.py
import logging
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

import pandas as pd
from sqlalchemy.orm import Session

from models.order_model import Order
from models.product_model import Product
from models.user_model import User
from services.errors import ClientError

logger = logging.getLogger(__name__)

# column header -> attribute
EXPORT_COLUMNS: Dict[str, List[Tuple[str, str]]] = {
    "orders": [
        ("Order ID", "id"),
        ("Order Number", "order_number"),
        ("User ID", "user_id"),
        ("Total Amount", "total_amount"),
        ("Currency", "currency_code"),
        ("Status", "status"),
        ("Payment Status", "payment_status"),
        ("Payment Method", "payment_method"),
        ("Shipping Method", "shipping_method"),
        ("Created At", "created_at"),
    ],
    "products": [
        ("Product ID", "id"),
        ("Name", "name"),
        ("Price", "price"),
        ("Stock", "stock"),
        ("Active", "is_active"),
        ("Created At", "created_at"),
    ],
    "users": [
        ("User ID", "id"),
        ("Email", "email"),
        ("First Name", "first_name"),
        ("Last Name", "last_name"),
        ("Phone", "phone"),
        ("Admin", "is_admin"),
        ("Created At", "created_at"),
    ],
}

_MODELS = {"orders": Order, "products": Product, "users": User}


def _parse_date(value: Optional[str], field: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ClientError(f"Invalid {field}, expected YYYY-MM-DD")


def export_csv(
    db: Session,
    data_type: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> str:
    """Renders one table as CSV; the date range applies to orders and users."""
    if data_type not in EXPORT_COLUMNS:
        raise ClientError("Invalid data type for export")

    model = _MODELS[data_type]
    start = _parse_date(start_date, "startDate")
    end = _parse_date(end_date, "endDate")

    q = db.query(model)
    if data_type in ("orders", "users"):
        if start:
            q = q.filter(model.created_at >= datetime.combine(start, time.min))
        if end:
            # end date is inclusive
            q = q.filter(model.created_at < datetime.combine(end + timedelta(days=1), time.min))
    rows = q.order_by(model.id).all()

    columns = EXPORT_COLUMNS[data_type]
    df = pd.DataFrame(
        [[getattr(r, attr) for _, attr in columns] for r in rows],
        columns=[header for header, _ in columns],
    )
    logger.info(f"Exported {len(df)} {data_type} rows")
    return df.to_csv(index=False)
