import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_JSON"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DB_CONNECT_RETRIES"] = "1"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from stockledger.db.base import Base
from stockledger.db.session import SessionLocal, engine
from stockledger.main import app
from stockledger.models import Product, StockTransaction, User


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    row = User(email="clerk@example.com", full_name="Stock Clerk")
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def factory(quantity: int = 0, **fields) -> Product:
        counter["n"] += 1
        product = Product(
            sku=fields.pop("sku", f"SKU-{counter['n']:03d}"),
            name=fields.pop("name", f"Product {counter['n']}"),
            description=fields.pop("description", "Test product"),
            price=fields.pop("price", 9.99),
            quantity=quantity,
            category=fields.pop("category", "General"),
            vendor=fields.pop("vendor", "Acme"),
            **fields,
        )
        db.add(product)
        db.commit()
        return product

    return factory


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(user):
    return {"X-User-Id": str(user.id)}


@pytest.fixture
def stock_of(db):
    def read(product_id: int) -> int:
        return db.scalar(select(Product.quantity).where(Product.id == product_id))

    return read


@pytest.fixture
def transaction_count(db):
    def read() -> int:
        return db.scalar(select(func.count(StockTransaction.id)))

    return read
