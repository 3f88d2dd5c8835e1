# backend/services/errors.py
"""
API error taxonomy.

Every error is an HTTPException, so routers can simply raise them and
FastAPI (or the order gateway) renders them as {"error": "<detail>"}.
"""

from typing import Dict, Optional
from fastapi import HTTPException


class ApiError(HTTPException):
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ClientError(ApiError):
    """Missing or malformed input."""
    status_code = 400
    default_detail = "Bad request"


class AuthError(ApiError):
    status_code = 401
    default_detail = "Unauthorized - User not authenticated"


class AuthzError(ApiError):
    status_code = 403
    default_detail = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    default_detail = "Not found"


class MethodError(ApiError):
    status_code = 405
    default_detail = "Method not allowed"


class InternalError(ApiError):
    status_code = 500


class ServiceUnavailableError(ApiError):
    status_code = 503
    default_detail = "Service not available"
