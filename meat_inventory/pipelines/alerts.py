import logging
import pandas as pd
from pydantic import ValidationError

from meat_inventory import data_handler, parsers, settings
from meat_inventory.classification import classify_expiration, classify_stock, days_until_expiration
from meat_inventory.dashboard import build_dashboard
from meat_inventory.pipeline import DataPipeline
from meat_inventory.schemas import Dashboard, ProductRecord, ProductStatusRow, StockTransaction

logger = logging.getLogger(__name__)


class InventoryAlertsPipeline(DataPipeline):
    """
    Products (+ stock transactions) -> per-product status report and the
    dashboard snapshot (stats, category overview, alert widgets).
    """

    def __init__(self, **kwargs):
        super().__init__("inventory", **kwargs)
        self.transactions_df: pd.DataFrame | None = None
        self.transactions: list[StockTransaction] = []
        self.dashboard: Dashboard | None = None

    def extract(self) -> pd.DataFrame | None:
        logger.info("--- Starting Inventory Status Process ---")

        products_df = self.read_source(
            "Products",
            table="products",
            filename_prefix=settings.PRODUCTS_FILENAME_PREFIX,
            parser_func=parsers.parse_products_export,
            column_map=parsers.PRODUCT_COLUMN_MAP,
        )
        self.transactions_df = self.read_source(
            "Transactions",
            table="inventory_transactions",
            filename_prefix=settings.TRANSACTIONS_FILENAME_PREFIX,
            parser_func=parsers.parse_transactions_export,
            column_map=parsers.TRANSACTION_COLUMN_MAP,
        )
        return products_df

    def transform(self, products_df: pd.DataFrame) -> list[ProductStatusRow] | None:
        today = self.clock()

        try:
            logger.info("Validating products against schema...")
            records = [ProductRecord(**row) for row in parsers.to_records(products_df)]
            if self.transactions_df is not None and not self.transactions_df.empty:
                self.transactions = [
                    StockTransaction(**row)
                    for row in parsers.to_records(self.transactions_df)
                ]
            logger.info("✅ Data validation successful.")
        except ValidationError as e:
            logger.error("❌ Data validation failed! Check the export for bad rows.")
            logger.error(e)
            return None

        self.dashboard = build_dashboard(records, self.transactions, clock=lambda: today)

        rows = []
        for record in records:
            rows.append(
                ProductStatusRow(
                    id=record.id,
                    name=record.name,
                    category_name=record.category_name,
                    current_stock=record.current_stock,
                    min_stock_level=record.min_stock_level,
                    stock_status=classify_stock(
                        record.current_stock, record.min_stock_level, detailed=True
                    ).value,
                    expiration_date=record.expiration_date,
                    days_until_expiration=days_until_expiration(record.expiration_date, today),
                    expiration_status=classify_expiration(record.expiration_date, today).value,
                    report_date=today,
                )
            )

        # Category order first, then by name, for a stable report layout.
        category_rank = {name: i for i, name in enumerate(settings.CATEGORY_ORDER)}
        rows.sort(
            key=lambda r: (category_rank.get(r.category_name, len(category_rank)), r.name)
        )
        return rows

    def load(self, validated_data: list[ProductStatusRow]):
        super().load(validated_data)

        if validated_data:
            data_handler.save_outputs(validated_data, f"{self.report_type}_status")
        else:
            logger.warning("No data to save to disk.")

        if self.test_mode:
            logger.info("🧪 Test Mode: Skipping webhook post.")
            return

        payload = {
            "statusSummary": {
                source: dt.isoformat() if dt else None
                for source, dt in self.status_summary.items()
            },
            "dashboard": self.dashboard.model_dump(mode="json") if self.dashboard else None,
        }
        data_handler.post_to_webhook(payload, self.report_type)
