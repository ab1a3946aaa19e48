"""
Shared test fixtures for the inventory backend tests

Provides database setup, client creation and sample stock fixtures
"""
import os
import tempfile

# Settings are read at import time; keep the app away from real files
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="inventory-uploads-")
os.environ["LOG_FORMAT"] = "text"
os.environ.pop("SHOPIFY_WEBHOOK_SECRET", None)
os.environ.pop("DEFAULT_ADMIN_PASSWORD", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.main import app  # noqa: E402
from app.core.settings import settings  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402


# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine):
    """Create all tables for testing using SQLAlchemy metadata"""
    # Import all models to ensure they're registered with Base
    from app.models import (  # noqa: F401
        Product, StockTransaction, ShopifyOrder, BOMComponent, User, Attachment
    )
    Base.metadata.create_all(bind=engine)


def drop_tables(engine):
    """Drop all tables after testing"""
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Create a fresh database session for each test"""
    create_tables(engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        drop_tables(engine)


@pytest.fixture
def client(db_session):
    """Create a test client with database override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Point attachment storage at a per-test directory"""
    directory = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture
def admin_user(db_session):
    """Create an admin user for testing"""
    from tests.factories import create_test_user

    user = create_test_user(db_session, name="admin", password="AdminPass123!", role="admin")
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_oil(db_session):
    """Lavender oil with SKUs for every bottle variant, 10 L in stock"""
    from tests.factories import create_test_product

    oil = create_test_product(
        db_session,
        id="oils_1",
        product_code="SA_OIL_00001",
        name="Lavender",
        category="OILS",
        unit="mL",
        current_stock=10000,
        shopify_skus={
            "SA_CA": "SA_CA_00001",
            "SA_HF": "SA_HF_00001",
            "SA_1L": "SA_1L_00001",
        },
    )
    db_session.commit()
    return oil


@pytest.fixture
def sample_cartridge_bom(db_session):
    """
    SA_CA BOM as imported from the spreadsheet: header row, the finished
    cartridge itself, then two raw materials (one under its SA_RAWM_ code).
    """
    from tests.factories import create_test_bom, create_test_product

    cap = create_test_product(
        db_session, product_code="SA_RM_00010", name="Cartridge Cap",
        category="RAW_MATERIALS", current_stock=100,
    )
    label = create_test_product(
        db_session, product_code="SA_RM_00011", name="Cartridge Label",
        category="RAW_MATERIALS", current_stock=50, unit_per_box=12, stock_boxes=4,
    )
    create_test_bom(db_session, "SA_CA", [
        {"component_code": "PRODUCT_CODE", "component_name": "PRODUCT NAME", "quantity": "QTY"},
        {"component_code": "SA_CA Oil Cartridge", "component_name": "Oil Cartridge 400ml", "quantity": 1},
        {"component_code": "SA_RM_00010", "component_name": "Cartridge Cap", "quantity": "1 UNIT"},
        {"component_code": "SA_RAWM_00011", "component_name": "Cartridge Label", "quantity": 2},
    ])
    db_session.commit()
    return {"cap": cap, "label": label}
