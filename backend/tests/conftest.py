"""
Shared fixtures: an in-memory SQLite database wired into the app through
the get_db override, seed users/orders, and bearer tokens.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
for _var in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"):
    os.environ.pop(_var, None)

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings
from database.session import Base, get_db
from main import app
from models import Order, OrderItem, Product, User

OWNER_ID = 1
OTHER_USER_ID = 2
ADMIN_ID = 3
NO_CONTACT_USER_ID = 4


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db_session):
    """Four users, one product and three orders."""
    db_session.add_all([
        User(id=OWNER_ID, email="ada@storefront.io", first_name="Ada", last_name="Obi",
             phone="2348012345678", is_admin=False),
        User(id=OTHER_USER_ID, email="ben@storefront.io", first_name="Ben", last_name="Hale",
             whatsapp="447700900123", is_admin=False),
        User(id=ADMIN_ID, email="admin@storefront.io", first_name="Ayo", last_name="Admin",
             phone="15551234567", is_admin=True),
        User(id=NO_CONTACT_USER_ID, email="quiet@storefront.io", is_admin=False),
    ])
    db_session.add(Product(id=7, name="Linen Shirt", price=Decimal("25.00"), stock=10, is_active=True))
    db_session.flush()

    db_session.add_all([
        Order(id=1001, order_number="ORD-1001", user_id=OWNER_ID, total_amount=Decimal("50.00"),
              status="pending", payment_status="pending", payment_method="manual_transfer",
              shipping_address="12 Marina Rd, Lagos", shipping_method="standard",
              created_at=datetime(2026, 10, 1, 9, 30)),
        Order(id=9, order_number="ORD-1700000000009-42", user_id=OWNER_ID, total_amount=Decimal("19.99"),
              status="processing", payment_status="awaiting_payment",
              shipping_address="12 Marina Rd, Lagos", created_at=datetime(2026, 10, 5, 12, 0)),
        Order(id=55, order_number="ORD-1700000000055-7", user_id=OTHER_USER_ID, total_amount=Decimal("80.00"),
              status="shipped", payment_status="paid",
              shipping_address="3 Baker St, London", created_at=datetime(2026, 9, 20, 8, 0)),
    ])
    db_session.flush()

    db_session.add_all([
        OrderItem(order_id=1001, product_id=7, product_name="Linen Shirt", quantity=2,
                  price=Decimal("25.00"), size="M"),
        OrderItem(order_id=55, product_id=7, product_name="Linen Shirt", quantity=1,
                  price=Decimal("80.00"), size="L"),
    ])
    db_session.commit()
    return db_session


def _token(user_id, is_admin=False, email=None, expires_in=timedelta(hours=1)):
    payload = {
        "userId": user_id,
        "email": email,
        "isAdmin": is_admin,
        "exp": datetime.now(tz=timezone.utc) + expires_in,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def make_token():
    return _token


@pytest.fixture
def auth_headers():
    def _headers(user_id, is_admin=False):
        return {"Authorization": f"Bearer {_token(user_id, is_admin=is_admin)}"}
    return _headers


@pytest.fixture
def owner_headers(auth_headers):
    return auth_headers(OWNER_ID)


@pytest.fixture
def other_user_headers(auth_headers):
    return auth_headers(OTHER_USER_ID)


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers(ADMIN_ID, is_admin=True)
