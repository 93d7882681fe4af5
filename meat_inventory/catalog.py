import math
from datetime import date
from typing import Optional, Sequence, TypeVar

from . import settings
from .classification import (
    ExpirationStatus,
    StockStatus,
    classify_expiration,
    classify_stock,
)
from .schemas import Page, ProductRecord

T = TypeVar("T")

CATEGORY_ROUTES = {name: f"/{name.lower()}" for name in settings.CATEGORY_ORDER}

_EXPIRATION_BADGES = {
    ExpirationStatus.EXPIRED: "Expired",
    ExpirationStatus.EXPIRING_SOON: "Expiring Soon",
}


def paginate(items: Sequence[T], page: int = 1, per_page: int = settings.ITEMS_PER_PAGE) -> Page:
    """1-based pagination. Pages past the end come back empty."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")

    start = (page - 1) * per_page
    return Page(
        items=list(items[start : start + per_page]),
        page=page,
        per_page=per_page,
        total_count=len(items),
        total_pages=math.ceil(len(items) / per_page),
    )


def newest_first(records: Sequence[ProductRecord]) -> list[ProductRecord]:
    return sorted(
        records,
        key=lambda r: r.created_at.timestamp() if r.created_at else float("-inf"),
        reverse=True,
    )


def category_page(
    records: Sequence[ProductRecord],
    category: str,
    page: int = 1,
    per_page: int = settings.ITEMS_PER_PAGE,
) -> Page:
    """One page of a category view, newest products first."""
    wanted = category.strip().lower()
    in_category = [r for r in records if r.category_name.strip().lower() == wanted]
    return paginate(newest_first(in_category), page, per_page)


def product_badges(
    record: ProductRecord, reference_date: Optional[date] = None
) -> dict[str, Optional[str]]:
    """Stock and expiration badge text for a product card."""
    status = classify_stock(record.current_stock, record.min_stock_level)
    expiration = classify_expiration(record.expiration_date, reference_date)
    return {
        "stock": "In Stock" if status is StockStatus.OK else "Low Stock",
        "expiration": _EXPIRATION_BADGES.get(expiration),
    }


def route_for(category: str) -> str:
    return CATEGORY_ROUTES.get(category, "/products")



def search_products(
    records: Sequence[ProductRecord],
    query: Optional[str] = None,
    page: int = 1,
    per_page: int = settings.PRODUCT_LIST_PER_PAGE,
) -> Page:
    """
    The all-products list: case-insensitive substring match on name or SKU,
    newest first. A blank query lists everything.
    """
    needle = (query or "").strip().lower()
    if needle:
        records = [
            r
            for r in records
            if needle in r.name.lower() or (r.sku and needle in r.sku.lower())
        ]
    return paginate(newest_first(records), page, per_page)
