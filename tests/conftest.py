from datetime import date, datetime, timedelta

import pytest

from meat_inventory import settings
from meat_inventory.schemas import (
    ActivityLogEntry,
    ActivityType,
    EntityType,
    ProductRecord,
    StockTransaction,
    TransactionType,
)

TODAY = date(2024, 6, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every file and network setting at throwaway locations."""
    monkeypatch.setattr(settings, "INPUT_DIR", tmp_path / "input")
    monkeypatch.setattr(settings, "OUTPUT_DIR", tmp_path / "output")
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(settings, "WEBHOOK_URL", None)
    monkeypatch.setattr(settings, "BACKEND_URL", None)
    monkeypatch.setattr(settings, "BACKEND_API_KEY", None)
    monkeypatch.setattr(settings, "SAVE_JSON_OUTPUT", True)
    (tmp_path / "input").mkdir()
    return tmp_path


def make_record(id, name, category="Beef", current=10, minimum=5, price=100.0,
                expires=None, created=None):
    return ProductRecord(
        id=id,
        name=name,
        category_name=category,
        current_stock=current,
        min_stock_level=minimum,
        price=price,
        expiration_date=expires,
        created_at=created,
    )


@pytest.fixture
def records(today):
    """A small mixed catalog; newest products have the highest ids."""
    base = datetime(2024, 6, 1, 9, 0)
    return [
        make_record("1", "Ribeye", "Beef", current=2, minimum=10, price=850.0,
                    expires=today + timedelta(days=2), created=base),
        make_record("2", "Pork Belly", "Pork", current=40, minimum=10, price=320.0,
                    expires=today + timedelta(days=30), created=base + timedelta(days=1)),
        make_record("3", "Chicken Thigh", "Chicken", current=8, minimum=10, price=180.0,
                    expires=today - timedelta(days=1), created=base + timedelta(days=2)),
        make_record("4", "Tilapia", "Fish", current=0, minimum=0, price=150.0,
                    created=base + timedelta(days=3)),
        make_record("5", "Brisket", "Beef", current=5, minimum=10, price=600.0,
                    expires=today, created=base + timedelta(days=4)),
    ]


@pytest.fixture
def transactions():
    return [
        StockTransaction(product_id="1", transaction_type=TransactionType.SALE, quantity=2,
                         created_at=datetime(2024, 6, 10, 12, 0)),
        StockTransaction(product_id="2", transaction_type=TransactionType.SALE, quantity=1,
                         created_at=datetime(2024, 4, 1, 12, 0)),
        StockTransaction(product_id="2", transaction_type=TransactionType.ADDITION, quantity=20,
                         created_at=datetime(2024, 6, 12, 8, 0)),
    ]


@pytest.fixture
def activities():
    return [
        ActivityLogEntry(activity_type=ActivityType.PRODUCT_CREATED, entity_type=EntityType.PRODUCT,
                         entity_id="1", entity_name="Ribeye", description="Created beef product: Ribeye",
                         created_at=datetime(2024, 6, 1, 9, 0)),
        ActivityLogEntry(activity_type=ActivityType.STOCK_ADDED, entity_type=EntityType.STOCK,
                         entity_id="2", entity_name="Pork Belly",
                         description="addition - 20 units for Pork Belly",
                         created_at=datetime(2024, 6, 12, 8, 0)),
        ActivityLogEntry(activity_type=ActivityType.STOCK_REMOVED, entity_type=EntityType.STOCK,
                         entity_id="1", entity_name="Ribeye & Co",
                         description="removal - 2 units for Ribeye & Co",
                         created_at=datetime(2024, 6, 10, 12, 0)),
    ]


@pytest.fixture
def record_factory():
    return make_record
