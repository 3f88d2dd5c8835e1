# backend/main.py
import os
import re
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database.session import Base, engine
import models  # noqa: F401  registers the tables on Base.metadata

# single entry point that aggregates every router under /api
from gateway.gateway_router import gateway_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("storefront")

VERSION = "1.0.0"

# /api/orders/{id} answers its own preflights (see services/order_gateway.py)
ORDER_GATEWAY_PATH = re.compile(r"^/api/orders/(?!user/?$)[^/]+/?$")


class StorefrontCORSMiddleware(CORSMiddleware):
    """CORSMiddleware for every route except the order gateway."""

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and ORDER_GATEWAY_PATH.match(scope["path"]):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Storefront API is starting")
    try:
        Base.metadata.create_all(bind=engine)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")

    if not all([settings.CLOUDINARY_CLOUD_NAME, settings.CLOUDINARY_API_KEY, settings.CLOUDINARY_API_SECRET]):
        logger.warning("Cloudinary is not configured, product image uploads are disabled")

    yield
    logger.info("Shutting down")


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    return f"Invalid {field}: {first.get('msg')}" if field else str(first.get("msg"))


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        description="Orders, products and account checks for the storefront",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        StorefrontCORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials="*" not in settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # every error leaves as {"error": "..."}
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _error_response(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(500, "Internal server error")

    @app.get("/health")
    async def health():
        status = {"status": "healthy", "service": "storefront-api", "version": VERSION}
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            status["database"] = "connected"
        except Exception as e:
            status["database"] = f"error: {e.__class__.__name__}"
            status["status"] = "degraded"
        return status

    @app.get("/")
    async def root():
        return {
            "message": "Storefront API",
            "version": VERSION,
            "api_base": "/api",
            "docs": "/docs",
        }

    app.include_router(gateway_router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "False").lower() == "true",
        log_level=settings.LOG_LEVEL.lower(),
    )
