from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from .classification import Product, parse_calendar_date


class TransactionType(str, Enum):
    ADDITION = "addition"
    REMOVAL = "removal"
    SALE = "sale"
    ADJUSTMENT = "adjustment"


class ActivityType(str, Enum):
    PRODUCT_CREATED = "product_created"
    PRODUCT_UPDATED = "product_updated"
    PRODUCT_DELETED = "product_deleted"
    STOCK_ADDED = "stock_added"
    STOCK_REMOVED = "stock_removed"
    STOCK_ADJUSTED = "stock_adjusted"
    CATEGORY_CREATED = "category_created"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_DELETED = "category_deleted"


class EntityType(str, Enum):
    PRODUCT = "product"
    CATEGORY = "category"
    STOCK = "stock"


class ProductRecord(BaseModel):
    """
    A product row as stored by the backend. Only the fields used by reports
    are modelled; unknown columns are ignored.
    """

    id: str
    name: str
    sku: Optional[str] = None
    category_name: str = "Uncategorized"
    current_stock: int = Field(default=0, ge=0)
    min_stock_level: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = None
    batch_number: Optional[str] = None
    storage_location: Optional[str] = None
    expiration_date: Optional[date] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("expiration_date", mode="before")
    @classmethod
    def _truncate_to_day(cls, value: Any) -> Optional[date]:
        return parse_calendar_date(value)

    def as_product(self) -> Product:
        return Product(
            current_stock=self.current_stock,
            min_stock_level=self.min_stock_level,
            expiration_date=self.expiration_date,
        )


class StockTransaction(BaseModel):
    product_id: str
    transaction_type: TransactionType
    quantity: int = Field(..., ge=1)
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


class ActivityLogEntry(BaseModel):
    activity_type: ActivityType
    entity_type: EntityType
    description: str
    entity_id: Optional[str] = None
    entity_name: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class ProductStatusRow(BaseModel):
    """One row of the per-product status report."""

    id: str = Field(..., alias="ID")
    name: str = Field(..., alias="Product")
    category_name: str = Field(..., alias="Category")
    current_stock: int = Field(..., ge=0, alias="Current Stock")
    min_stock_level: int = Field(..., ge=0, alias="Min Stock Level")
    stock_status: str = Field(..., alias="Stock Status")
    expiration_date: Optional[date] = Field(default=None, alias="Expiration Date")
    days_until_expiration: Optional[int] = Field(default=None, alias="Days Left")
    expiration_status: str = Field(..., alias="Expiration Status")
    report_date: date = Field(..., alias="Report Date")

    class Config:
        populate_by_name = True


class StockAlert(BaseModel):
    id: str
    name: str
    category_name: str
    current_stock: int
    min_stock_level: int
    severity: str


class ExpirationAlert(BaseModel):
    id: str
    name: str
    category_name: str
    expiration_date: date
    days_remaining: int
    label: str
    variant: str


class CategorySummary(BaseModel):
    name: str
    product_count: int = 0
    total_stock: int = 0
    route: str


class DashboardStats(BaseModel):
    total_products: int = 0
    low_stock_products: int = 0
    total_value: float = 0.0
    expiring_soon: int = 0
    expired: int = 0
    recent_sales: int = 0


class Dashboard(BaseModel):
    generated_on: date
    stats: DashboardStats
    categories: list[CategorySummary]
    low_stock: list[StockAlert]
    expiring: list[ExpirationAlert]


class Page(BaseModel):
    items: list[Any]
    page: int
    per_page: int
    total_count: int
    total_pages: int
