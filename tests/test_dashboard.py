from datetime import datetime

from meat_inventory.dashboard import (
    build_dashboard,
    category_overview,
    compute_dashboard_stats,
    count_recent_sales,
    expiring_alerts,
    low_stock_alerts,
)
from meat_inventory.schemas import StockTransaction, TransactionType


def test_dashboard_stats(records, transactions, today):
    stats = compute_dashboard_stats(records, transactions, today)
    assert stats.total_products == 5
    assert stats.low_stock_products == 4
    assert stats.total_value == 18940.0
    assert stats.expiring_soon == 2
    assert stats.expired == 1
    assert stats.recent_sales == 1


def test_recent_sales_window_edges(today):
    txns = [
        StockTransaction(product_id="1", transaction_type=TransactionType.SALE, quantity=1,
                         created_at=datetime(2024, 5, 16, 0, 0)),
        StockTransaction(product_id="1", transaction_type=TransactionType.SALE, quantity=1,
                         created_at=datetime(2024, 5, 15, 23, 59)),
        StockTransaction(product_id="1", transaction_type=TransactionType.SALE, quantity=1),
    ]
    assert count_recent_sales(txns, today) == 1


def test_category_overview(records, record_factory):
    overview = category_overview(records + [record_factory("9", "Lamb Chops", "Lamb", current=4)])
    assert [(c.name, c.product_count, c.total_stock, c.route) for c in overview] == [
        ("Beef", 2, 7, "/beef"),
        ("Pork", 1, 40, "/pork"),
        ("Chicken", 1, 8, "/chicken"),
        ("Fish", 1, 0, "/fish"),
        ("Lamb", 1, 4, "/products"),
    ]


def test_category_overview_lists_empty_categories():
    overview = category_overview([])
    assert [c.name for c in overview] == ["Beef", "Pork", "Chicken", "Fish"]
    assert all(c.product_count == 0 for c in overview)


def test_low_stock_alerts_most_depleted_first(records):
    alerts = low_stock_alerts(records)
    assert [(a.id, a.severity) for a in alerts] == [
        ("4", "Critical"),
        ("1", "Critical"),
        ("5", "Low"),
        ("3", "Warning"),
    ]


def test_low_stock_alerts_limit(records):
    assert [a.id for a in low_stock_alerts(records, limit=2)] == ["4", "1"]


def test_expiring_alerts(records, today):
    alerts = expiring_alerts(records, today)
    assert [(a.id, a.days_remaining, a.label, a.variant) for a in alerts] == [
        ("3", -1, "-1d", "destructive"),
        ("5", 0, "0d", "destructive"),
        ("1", 2, "2d", "destructive"),
    ]


def test_build_dashboard_uses_clock(records, transactions, today):
    dashboard = build_dashboard(records, transactions, clock=lambda: today)
    assert dashboard.generated_on == today
    assert dashboard.stats.expiring_soon == 2
    assert len(dashboard.categories) == 4
    assert dashboard.low_stock[0].id == "4"
    assert dashboard.expiring[0].id == "3"


def test_build_dashboard_empty_catalog(today):
    dashboard = build_dashboard([], clock=lambda: today)
    assert dashboard.stats.total_products == 0
    assert dashboard.low_stock == []
    assert dashboard.expiring == []
