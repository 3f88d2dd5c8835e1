# backend/config/settings.py
import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# JWT - tokens are issued by the auth service, here we only verify them
JWT_SECRET = os.getenv("JWT_SECRET", "").strip()
if not JWT_SECRET:
    JWT_SECRET = "your_jwt_secret_key"
    logger.warning("JWT_SECRET environment variable not set, using fallback secret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# CORS
ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()
]
ORDER_GATEWAY_ALLOW_ORIGIN = os.getenv("ORDER_GATEWAY_ALLOW_ORIGIN", "*")

# Orders
ORDER_NUMBER_PREFIX = "ORD-"

# Cloudinary
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
