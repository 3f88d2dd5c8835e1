# backend/services/auth_service.py
"""
Bearer token verification.

Tokens are HS256 JWTs issued by the login flow with the claims
``userId``, ``email`` and ``isAdmin``. This module only verifies them and
turns them into a Principal; issuing tokens is not its job.
"""

import logging
from typing import Optional

import jwt
from fastapi import Header

from config import settings
from services.errors import AuthError, AuthzError
from services.order_access import Principal

logger = logging.getLogger(__name__)


def authenticate_request(authorization: Optional[str]) -> Optional[Principal]:
    """Returns the caller for an Authorization header value, or None."""
    if not authorization:
        logger.debug("No Authorization header found")
        return None
    if not authorization.startswith("Bearer "):
        logger.debug("Invalid Authorization header format")
        return None

    token = authorization[len("Bearer "):].strip()
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f"JWT verification error: {e}")
        return None

    user_id = payload.get("userId")
    if user_id is None:
        return None
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None

    return Principal(
        id=user_id,
        email=payload.get("email"),
        is_admin=bool(payload.get("isAdmin", False)),
    )


# ---------- FastAPI dependencies ----------

def require_principal(authorization: Optional[str] = Header(default=None)) -> Principal:
    principal = authenticate_request(authorization)
    if principal is None:
        raise AuthError()
    return principal


def require_admin(authorization: Optional[str] = Header(default=None)) -> Principal:
    principal = require_principal(authorization)
    if not principal.is_admin:
        raise AuthzError("Admin access required")
    return principal
