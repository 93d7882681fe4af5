"""
Dashboard aggregates: headline stats, the category overview and the two
alert widgets (low stock, expiring products).

The current date comes from a clock callable so the whole dashboard is
computed against a single reference date.
"""

import logging
from datetime import date, timedelta
from typing import Callable, Sequence

from . import settings
from .catalog import route_for
from .classification import (
    ExpirationStatus,
    StockStatus,
    UrgencyKind,
    classify_expiration,
    classify_stock,
    days_until_expiration,
    expiration_badge_variant,
    is_low_stock,
    rank_urgency,
)
from .schemas import (
    CategorySummary,
    Dashboard,
    DashboardStats,
    ExpirationAlert,
    ProductRecord,
    StockAlert,
    StockTransaction,
    TransactionType,
)

logger = logging.getLogger(__name__)


def count_recent_sales(
    transactions: Sequence[StockTransaction],
    today: date,
    window_days: int = settings.RECENT_SALES_WINDOW_DAYS,
) -> int:
    """Sale transactions dated within the last `window_days` days."""
    since = today - timedelta(days=window_days)
    return sum(
        1
        for txn in transactions
        if txn.transaction_type is TransactionType.SALE
        and txn.created_at is not None
        and txn.created_at.date() >= since
    )


def compute_dashboard_stats(
    records: Sequence[ProductRecord],
    transactions: Sequence[StockTransaction],
    today: date,
) -> DashboardStats:
    expiration = [classify_expiration(r.expiration_date, today) for r in records]
    return DashboardStats(
        total_products=len(records),
        low_stock_products=sum(
            1 for r in records if is_low_stock(r.current_stock, r.min_stock_level)
        ),
        total_value=round(sum(r.current_stock * r.price for r in records), 2),
        expiring_soon=expiration.count(ExpirationStatus.EXPIRING_SOON),
        expired=expiration.count(ExpirationStatus.EXPIRED),
        recent_sales=count_recent_sales(transactions, today),
    )


def category_overview(records: Sequence[ProductRecord]) -> list[CategorySummary]:
    """Product count and units per category; fixed categories first, always listed."""
    summaries = {
        name: CategorySummary(name=name, route=route_for(name))
        for name in settings.CATEGORY_ORDER
    }
    for record in records:
        summary = summaries.setdefault(
            record.category_name,
            CategorySummary(name=record.category_name, route=route_for(record.category_name)),
        )
        summary.product_count += 1
        summary.total_stock += record.current_stock
    return list(summaries.values())


def low_stock_alerts(
    records: Sequence[ProductRecord], limit: int = settings.ALERT_WIDGET_LIMIT
) -> list[StockAlert]:
    """Products at or below their minimum, most depleted first."""
    low = [
        r
        for r in records
        if classify_stock(r.current_stock, r.min_stock_level) is not StockStatus.OK
    ]
    alerts = []
    for record in rank_urgency(low, UrgencyKind.STOCK)[:limit]:
        severity = classify_stock(record.current_stock, record.min_stock_level, detailed=True)
        alerts.append(
            StockAlert(
                id=record.id,
                name=record.name,
                category_name=record.category_name,
                current_stock=record.current_stock,
                min_stock_level=record.min_stock_level,
                severity=severity.label,
            )
        )
    return alerts


def expiring_alerts(
    records: Sequence[ProductRecord],
    today: date,
    limit: int = settings.ALERT_WIDGET_LIMIT,
) -> list[ExpirationAlert]:
    """Expired and expiring products, most imminent first."""
    at_risk = [
        r
        for r in records
        if classify_expiration(r.expiration_date, today)
        in (ExpirationStatus.EXPIRED, ExpirationStatus.EXPIRING_SOON)
    ]
    alerts = []
    for record in rank_urgency(at_risk, UrgencyKind.EXPIRATION, reference_date=today)[:limit]:
        days = days_until_expiration(record.expiration_date, today)
        alerts.append(
            ExpirationAlert(
                id=record.id,
                name=record.name,
                category_name=record.category_name,
                expiration_date=record.expiration_date,
                days_remaining=days,
                label=f"{days}d",
                variant=expiration_badge_variant(days),
            )
        )
    return alerts


def build_dashboard(
    records: Sequence[ProductRecord],
    transactions: Sequence[StockTransaction] = (),
    clock: Callable[[], date] = date.today,
) -> Dashboard:
    today = clock()
    stats = compute_dashboard_stats(records, transactions, today)
    logger.info(
        f"Dashboard for {today}: {stats.total_products} products, "
        f"{stats.low_stock_products} low, {stats.expiring_soon} expiring, "
        f"{stats.expired} expired"
    )
    return Dashboard(
        generated_on=today,
        stats=stats,
        categories=category_overview(records),
        low_stock=low_stock_alerts(records),
        expiring=expiring_alerts(records, today),
    )
