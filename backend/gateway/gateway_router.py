# backend/gateway/gateway_router.py
from fastapi import APIRouter

from routers.orders_router import router as orders_router
from routers.products_router import router as products_router
from routers.users_router import router as users_router
from routers.admin_router import router as admin_router

gateway_router = APIRouter()

gateway_router.include_router(users_router)      # /identifier/check, /email/check
gateway_router.include_router(orders_router)     # /orders/...
gateway_router.include_router(products_router)   # /products/...
gateway_router.include_router(admin_router)      # /admin/export/...
