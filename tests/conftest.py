import os
import uuid
from decimal import Decimal

# Must be set before the app (and its settings) is imported
os.environ["ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from main import app
from core.database import Base
from models import Product, Cart, CartItem
from utils.deps import get_db

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
async def client(session: Session):
    """
    Yields an HTTP client that talks to the app using the test database.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass  # Session cleanup handled by session fixture

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_product(session):
    """Factory for catalog products. Price defaults to 10.00 with 5 in stock."""
    def _make(price="10.00", stock=5, title="Test Product", **fields):
        product = Product(title=title, price=Decimal(price), stock=stock, **fields)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product
    return _make


@pytest.fixture
def product(make_product):
    return make_product()


@pytest.fixture
def make_cart(session):
    """Factory for carts holding the given (product, quantity) lines, with consistent totals."""
    def _make(user_id, lines=()):
        cart = Cart(
            user_id=user_id,
            items=[CartItem(product_id=p.id, quantity=q) for p, q in lines],
            total_items=sum(q for _, q in lines),
            total_price=sum((p.price * q for p, q in lines), Decimal("0")),
        )
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart
    return _make


@pytest.fixture
def user_id():
    return str(uuid.uuid4())


@pytest.fixture
def other_user_id():
    return str(uuid.uuid4())
