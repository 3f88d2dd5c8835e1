from datetime import datetime, timedelta, timezone

import jwt
import pytest

from config import settings
from services.auth_service import authenticate_request, require_admin, require_principal
from services.errors import AuthError, AuthzError


def _bearer(payload, secret=None):
    token = jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return f"Bearer {token}"


def _claims(**overrides):
    claims = {
        "userId": 1,
        "email": "ada@storefront.io",
        "isAdmin": False,
        "exp": datetime.now(tz=timezone.utc) + timedelta(hours=1),
    }
    claims.update(overrides)
    return claims


def test_valid_token():
    principal = authenticate_request(_bearer(_claims()))

    assert principal.id == 1
    assert principal.email == "ada@storefront.io"
    assert principal.is_admin is False


def test_admin_claim():
    assert authenticate_request(_bearer(_claims(userId=3, isAdmin=True))).is_admin is True


def test_string_user_id_is_accepted():
    assert authenticate_request(_bearer(_claims(userId="12"))).id == 12


@pytest.mark.parametrize("header", [None, "", "Basic dXNlcjpwYXNz", "bearer abc", "Bearer   "])
def test_missing_or_malformed_header(header):
    assert authenticate_request(header) is None


def test_wrong_signature():
    assert authenticate_request(_bearer(_claims(), secret="someone-elses-secret")) is None


def test_expired():
    expired = _claims(exp=datetime.now(tz=timezone.utc) - timedelta(seconds=30))

    assert authenticate_request(_bearer(expired)) is None


@pytest.mark.parametrize("user_id", [None, "abc"])
def test_unusable_user_id(user_id):
    claims = _claims()
    if user_id is None:
        del claims["userId"]
    else:
        claims["userId"] = user_id

    assert authenticate_request(_bearer(claims)) is None


def test_require_principal():
    assert require_principal(_bearer(_claims())).id == 1
    with pytest.raises(AuthError) as exc:
        require_principal(None)
    assert exc.value.status_code == 401


def test_require_admin():
    assert require_admin(_bearer(_claims(isAdmin=True))).is_admin
    with pytest.raises(AuthzError) as exc:
        require_admin(_bearer(_claims()))
    assert exc.value.detail == "Admin access required"
    with pytest.raises(AuthError):
        require_admin("Bearer nope")
