# backend/routers/admin_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from database.session import get_db
from services.auth_service import require_admin
from services.csv_export import export_csv
from services.order_access import Principal

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/export/{data_type}")
def export_data(
    data_type: str,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """CSV download of orders, products or users."""
    content = export_csv(db, data_type, start_date, end_date)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={data_type}_export.csv"},
    )
