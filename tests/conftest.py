# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - DATABASE_URL points at in-memory SQLite before salebook is imported
# - Schema is created and dropped around every test
# - API tests and service tests share one session per test
# ---------------------------------------------------------------------
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""

import pytest
from fastapi.testclient import TestClient

from salebook.main import app
from salebook.database import Base, SessionLocal, engine, get_db
from salebook.clients import schemas as client_schemas, service as client_service
from salebook.stock.products import schemas as product_schemas, service as product_service
from salebook.vendor import schemas as vendor_schemas, service as vendor_service


# ---------- Schema per test ----------
@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ---------- HTTP ----------
@pytest.fixture
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------- Seed helpers ----------
@pytest.fixture
def make_product(db):
    def _make(name="Phone Case", price=10.0, cost=4.0, stock=10, low_stock=2):
        return product_service.create_product(
            db,
            product_schemas.ProductCreate(
                name=name, price=price, cost=cost, stock=stock, low_stock=low_stock
            ),
        )
    return _make


@pytest.fixture
def make_client(db):
    def _make(name="Dara", phone="012345678", province="Phnom Penh", location="BKK1"):
        return client_service.create_client(
            db,
            client_schemas.ClientCreate(
                name=name, phone=phone, province=province, location=location
            ),
        )
    return _make


@pytest.fixture
def make_vendor(db):
    def _make(name="Global Supplies", phone="099111222"):
        return vendor_service.create_vendor(
            db, vendor_schemas.VendorCreate(name=name, phone=phone)
        )
    return _make
