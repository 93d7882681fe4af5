import json
import logging
from pathlib import Path
from typing import Any
import pandas as pd

from .utils import load_csv

logger = logging.getLogger(__name__)

# Export headers as produced by the backend's table editor, mapped to the
# internal column names. Snake_case headers pass through unchanged.
PRODUCT_COLUMN_MAP = {
    "ID": "id",
    "Name": "name",
    "Product": "name",
    "SKU": "sku",
    "Category": "category_name",
    "Current Stock": "current_stock",
    "Min Stock Level": "min_stock_level",
    "Price": "price",
    "Weight": "weight",
    "Unit": "unit",
    "Batch Number": "batch_number",
    "Storage Location": "storage_location",
    "Expiration Date": "expiration_date",
    "Image URL": "image_url",
    "Created At": "created_at",
}

TRANSACTION_COLUMN_MAP = {
    "Product ID": "product_id",
    "Type": "transaction_type",
    "Transaction Type": "transaction_type",
    "Quantity": "quantity",
    "Notes": "notes",
    "Created By": "created_by",
    "Created At": "created_at",
}

ACTIVITY_COLUMN_MAP = {
    "Activity": "activity_type",
    "Activity Type": "activity_type",
    "Entity Type": "entity_type",
    "Entity ID": "entity_id",
    "Entity": "entity_name",
    "Entity Name": "entity_name",
    "Description": "description",
    "Metadata": "metadata",
    "User ID": "user_id",
    "Created At": "created_at",
}

ID_COLUMNS = ("id", "sku", "product_id", "entity_id", "user_id", "created_by")


def _normalize_export(df: pd.DataFrame, column_map: dict[str, str]) -> pd.DataFrame:
    """
    Shared clean-up for every export:
    - Renames display headers to internal names.
    - Strips whitespace from text cells and turns blank cells into missing values.
    - Keeps identifier columns as text (numeric IDs would otherwise load as ints).
    """
    df = df.rename(columns=lambda c: column_map.get(str(c).strip(), str(c).strip()))

    for column in df.columns:
        if df[column].dtype == object or pd.api.types.is_string_dtype(df[column]):
            df[column] = df[column].map(_clean_text)

    for column in ID_COLUMNS:
        if column in df.columns:
            df[column] = df[column].map(_id_to_text)

    return df


def _clean_text(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return value.strip() or None


def _id_to_text(value: Any) -> Any:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_metadata(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning(f"  > Unreadable metadata kept as text: {value[:40]}")
        return {"raw": value}


def to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """
    DataFrame -> list of dicts ready for model validation.
    Missing cells are dropped so model defaults apply.
    """
    rows = []
    for row in df.to_dict("records"):
        rows.append({k: v for k, v in row.items() if v is not None and not _is_missing(v)})
    return rows


def _is_missing(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Containers (e.g. metadata dicts) are never "missing".
        return False


def parse_products_export(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    """Loads a products export and transforms it into the internal column layout."""
    df = load_csv(file_paths["primary"])
    if df is None:
        return None

    df_normalized = _normalize_export(df, PRODUCT_COLUMN_MAP)
    missing = {"id", "name"} - set(df_normalized.columns)
    if missing:
        logger.error(
            f"❌ {file_paths['primary'].name} is missing required columns: {sorted(missing)}"
        )
        return None

    logger.info(f"✅ Parsed {file_paths['primary'].name}: {len(df_normalized)} products.")
    return df_normalized


def parse_transactions_export(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    df = load_csv(file_paths["primary"])
    if df is None:
        return None

    df_normalized = _normalize_export(df, TRANSACTION_COLUMN_MAP)
    if "transaction_type" in df_normalized.columns:
        df_normalized["transaction_type"] = df_normalized["transaction_type"].map(
            lambda v: v.lower() if isinstance(v, str) else v
        )

    logger.info(
        f"✅ Parsed {file_paths['primary'].name}: {len(df_normalized)} transactions."
    )
    return df_normalized


def parse_activity_export(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    df = load_csv(file_paths["primary"])
    if df is None:
        return None

    df_normalized = _normalize_export(df, ACTIVITY_COLUMN_MAP)
    if "metadata" in df_normalized.columns:
        df_normalized["metadata"] = df_normalized["metadata"].map(_parse_metadata)

    logger.info(
        f"✅ Parsed {file_paths['primary'].name}: {len(df_normalized)} activity entries."
    )
    return df_normalized


def frame_from_rows(rows: list[dict[str, Any]], column_map: dict[str, str]) -> pd.DataFrame:
    """Backend rows go through the same normalization as CSV exports."""
    return _normalize_export(pd.DataFrame(rows), column_map)
