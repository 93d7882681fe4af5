import logging
from typing import Annotated

from pydantic import Field, TypeAdapter

from .schemas import (
    ActivityLogEntry,
    ActivityType,
    EntityType,
    ProductRecord,
    StockTransaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

_STOCK_LEVEL = TypeAdapter(Annotated[int, Field(strict=True, ge=0)])

# Sales and recounts are logged as generic adjustments.
_ACTIVITY_BY_TRANSACTION = {
    TransactionType.ADDITION: ActivityType.STOCK_ADDED,
    TransactionType.REMOVAL: ActivityType.STOCK_REMOVED,
    TransactionType.SALE: ActivityType.STOCK_ADJUSTED,
    TransactionType.ADJUSTMENT: ActivityType.STOCK_ADJUSTED,
}


def apply_transaction(current_stock: int, transaction: StockTransaction) -> int:
    """
    Returns the stock level after the transaction.

    Additions add, removals and sales subtract, an adjustment is an absolute
    recount. Raises ValidationError if the result would be negative.
    """
    current_stock = _STOCK_LEVEL.validate_python(current_stock)

    if transaction.transaction_type is TransactionType.ADDITION:
        new_stock = current_stock + transaction.quantity
    elif transaction.transaction_type in (TransactionType.REMOVAL, TransactionType.SALE):
        new_stock = current_stock - transaction.quantity
    else:
        new_stock = transaction.quantity

    return _STOCK_LEVEL.validate_python(new_stock)


def activity_for_transaction(
    product: ProductRecord, transaction: StockTransaction
) -> ActivityLogEntry:
    """Builds the activity log entry recorded after a stock transaction."""
    return ActivityLogEntry(
        activity_type=_ACTIVITY_BY_TRANSACTION[transaction.transaction_type],
        entity_type=EntityType.STOCK,
        entity_id=product.id,
        entity_name=product.name,
        description=(
            f"{transaction.transaction_type.value} - "
            f"{transaction.quantity} units for {product.name}"
        ),
        user_id=transaction.created_by,
    )


def adjust_stock(
    product: ProductRecord, transaction: StockTransaction
) -> tuple[ProductRecord, ActivityLogEntry]:
    """
    Applies a transaction to a product, returning the updated copy and the
    activity entry to record. The input record is left untouched.
    """
    if transaction.product_id != product.id:
        raise ValueError(
            f"Transaction for product {transaction.product_id} applied to {product.id}"
        )

    new_stock = apply_transaction(product.current_stock, transaction)
    logger.info(
        f"{product.name}: {transaction.transaction_type.value} "
        f"{transaction.quantity} ({product.current_stock} -> {new_stock})"
    )
    updated = product.model_copy(update={"current_stock": new_stock})
    return updated, activity_for_transaction(product, transaction)
