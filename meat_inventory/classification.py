"""
Stock and expiration classification shared by the dashboard, the category
pages and the product list.

Every function here is a pure function of its arguments (plus today's date
when no reference date is given). Nothing is cached between calls. Inputs
outside the documented domain raise pydantic's ``ValidationError`` instead of
producing a best-effort classification.
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

__all__ = [
    "CRITICAL_STOCK_RATIO",
    "LOW_STOCK_RATIO",
    "MIN_STOCK_RATIO",
    "EXPIRING_SOON_DAYS",
    "EXPIRY_DANGER_DAYS",
    "EXPIRY_WARNING_DAYS",
    "ExpirationStatus",
    "Product",
    "StockStatus",
    "UrgencyKind",
    "ValidationError",
    "classify_expiration",
    "classify_stock",
    "days_until_expiration",
    "expiration_badge_variant",
    "is_low_stock",
    "parse_calendar_date",
    "rank_urgency",
    "stock_urgency",
]

# --- Thresholds ---
# Ratios are current_stock / min_stock_level.
CRITICAL_STOCK_RATIO = 0.25
LOW_STOCK_RATIO = 0.5  # detailed mode only
MIN_STOCK_RATIO = 1.0

EXPIRING_SOON_DAYS = 7
# Badge colouring for the expiring-products widget.
EXPIRY_DANGER_DAYS = 2
EXPIRY_WARNING_DAYS = 5

T = TypeVar("T")

_QUANTITY = TypeAdapter(Annotated[int, Field(strict=True, ge=0)])
_DATE = TypeAdapter(date)
_DATETIME = TypeAdapter(datetime)


class StockStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    LOW = "low"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ExpirationStatus(str, Enum):
    NONE = "none"
    FRESH = "fresh"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


class UrgencyKind(str, Enum):
    STOCK = "stock"
    EXPIRATION = "expiration"


_URGENCY_KIND = TypeAdapter(UrgencyKind)


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Normalizes an expiration value to a calendar date.

    None and blank strings mean "no date". Datetimes (and ISO timestamps) are
    truncated to their date. Anything else that pydantic cannot read as a date
    raises ValidationError.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if "T" in text or " " in text:
            return _DATETIME.validate_python(text).date()
        return _DATE.validate_python(text)
    return _DATE.validate_python(value)


class Product(BaseModel):
    """The three fields classification needs, nothing from the backend row."""

    current_stock: int = Field(..., ge=0, strict=True, alias="currentStock")
    min_stock_level: int = Field(default=0, ge=0, strict=True, alias="minStockLevel")
    expiration_date: Optional[date] = Field(default=None, alias="expirationDate")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("expiration_date", mode="before")
    @classmethod
    def _truncate_to_day(cls, value: Any) -> Optional[date]:
        return parse_calendar_date(value)


def is_low_stock(current_stock: int, min_stock_level: int) -> bool:
    """Low stock is current_stock <= min_stock_level."""
    return _QUANTITY.validate_python(current_stock) <= _QUANTITY.validate_python(
        min_stock_level
    )


def classify_stock(
    current_stock: int, min_stock_level: int, detailed: bool = False
) -> StockStatus:
    """
    Classifies a stock level against its configured minimum.

    Two-tier (default): CRITICAL at or below 25% of the minimum, LOW at or
    below the minimum, OK above it.

    Detailed: the LOW band is split for alert labels into LOW (at or below
    50%) and WARNING (above 50%). CRITICAL and OK have the same boundaries in
    both modes.

    A minimum of 0 means no minimum is configured: zero stock is CRITICAL,
    anything else is OK.
    """
    current_stock = _QUANTITY.validate_python(current_stock)
    min_stock_level = _QUANTITY.validate_python(min_stock_level)

    if min_stock_level == 0:
        return StockStatus.CRITICAL if current_stock == 0 else StockStatus.OK

    ratio = current_stock / min_stock_level
    if ratio <= CRITICAL_STOCK_RATIO:
        return StockStatus.CRITICAL
    if ratio > MIN_STOCK_RATIO:
        return StockStatus.OK
    if detailed and ratio > LOW_STOCK_RATIO:
        return StockStatus.WARNING
    return StockStatus.LOW


def days_until_expiration(
    expiration_date: Any, reference_date: Optional[date] = None
) -> Optional[int]:
    """Whole calendar days from reference_date to expiration_date, or None."""
    expires_on = parse_calendar_date(expiration_date)
    if expires_on is None:
        return None
    reference = parse_calendar_date(reference_date) or date.today()
    return (expires_on - reference).days


def classify_expiration(
    expiration_date: Any, reference_date: Optional[date] = None
) -> ExpirationStatus:
    """
    EXPIRED once the date has fully elapsed, EXPIRING_SOON from the day
    itself up to EXPIRING_SOON_DAYS ahead, FRESH beyond that.
    """
    days = days_until_expiration(expiration_date, reference_date)
    if days is None:
        return ExpirationStatus.NONE
    if days < 0:
        return ExpirationStatus.EXPIRED
    if days <= EXPIRING_SOON_DAYS:
        return ExpirationStatus.EXPIRING_SOON
    return ExpirationStatus.FRESH


def expiration_badge_variant(days_remaining: int) -> str:
    if days_remaining <= EXPIRY_DANGER_DAYS:
        return "destructive"
    if days_remaining <= EXPIRY_WARNING_DAYS:
        return "secondary"
    return "outline"


def stock_urgency(product: Product) -> float:
    """
    Sort key for stock alerts, smaller is more urgent.
    Without a configured minimum, zero stock ranks first and anything else last.
    """
    if product.min_stock_level == 0:
        return 0.0 if product.current_stock == 0 else math.inf
    return product.current_stock / product.min_stock_level


def _as_product(item: Any) -> Product:
    if isinstance(item, Product):
        return item
    return item.as_product()


def rank_urgency(
    items: Iterable[T],
    kind: UrgencyKind | str,
    reference_date: Optional[date] = None,
    key: Optional[Callable[[T], Product]] = None,
) -> list[T]:
    """
    Orders items most urgent first.

    STOCK sorts by stock_urgency. EXPIRATION sorts by days until expiration
    and drops items without an expiration date. The sort is stable, so items
    with equal urgency keep their input order.
    """
    kind = _URGENCY_KIND.validate_python(kind)
    to_product = key or _as_product
    reference = reference_date or date.today()

    if kind is UrgencyKind.STOCK:
        return sorted(items, key=lambda item: stock_urgency(to_product(item)))

    dated = []
    for item in items:
        days = days_until_expiration(to_product(item).expiration_date, reference)
        if days is not None:
            dated.append((days, item))
    dated.sort(key=lambda pair: pair[0])
    return [item for _, item in dated]
