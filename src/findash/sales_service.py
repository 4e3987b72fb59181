# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
Point of sale and cash register.

Selling a product removes the sold units from the warehouse and records
the matching income transaction, in a single database transaction (see
`db.record_sale`). The cash register is the list of those sale
transactions: incomes recorded under the configured sales category or
carrying a product name.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

from .config import AppConfig
from .db import Product, Transaction, TransactionsFilter
from .db import (
    delete_sales_transactions as _db_delete_sales_transactions,
)
from .db import (
    list_products as _db_list_products,
)
from .db import (
    record_sale as _db_record_sale,
)
from .db import (
    search_transactions as _db_search_transactions,
)
from .errors import ValidationError
from .periods import Period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleReceipt:
    """
    Outcome of a sale.

    Attributes
    ----------
    product:
        The product after the stock decrement.
    transaction:
        The income transaction recorded for the sale.
    """

    product: Product
    transaction: Transaction

    @property
    def quantity(self) -> int:
        return int(self.transaction.quantity or 0)

    @property
    def total(self) -> float:
        return self.transaction.amount


def sell_product(
    app_config: AppConfig,
    product_id: int,
    quantity: int,
    sold_on: Optional[date] = None,
) -> SaleReceipt:
    """
    Sell `quantity` units of a product.

    The sale total is the selling price times the quantity. Discount, tax
    and duty percentages stored on the product are not applied.

    Raises
    ------
    ValidationError
        If the quantity is not a positive whole number.
    InsufficientStockError
        If the product does not hold enough units.
    NotFoundError
        If the product does not exist.
    """
    if isinstance(quantity, bool) or int(quantity) != quantity or quantity <= 0:
        raise ValidationError(
            f"Sale quantity must be a positive whole number, got {quantity}."
        )

    record = _db_record_sale(
        app_config.database,
        product_id,
        int(quantity),
        sold_on=sold_on or date.today(),
        category=app_config.categories.sales,
    )
    logger.info(
        "Sold %d x %r for %.2f (stock left: %d)",
        quantity,
        record.product.name,
        record.transaction.amount,
        record.product.quantity,
    )
    return SaleReceipt(product=record.product, transaction=record.transaction)


def available_products(app_config: AppConfig) -> pd.DataFrame:
    """Products that can be sold (at least one unit in stock)."""
    return _db_list_products(app_config.database, in_stock_only=True)


def sales_history(
    app_config: AppConfig,
    period: Optional[Period] = None,
    *,
    limit: Optional[int] = None,
) -> pd.DataFrame:
    """
    Return the cash register: sale transactions, newest first.

    Columns are those of `db.search_transactions`.
    """
    filters = TransactionsFilter(
        start=period.start if period is not None else None,
        end=period.end if period is not None else None,
        sales_category=app_config.categories.sales,
    )
    return _db_search_transactions(
        app_config.database,
        filters,
        limit=limit,
        order_by=("date", "DESC"),
    )


def sales_total(app_config: AppConfig, period: Optional[Period] = None) -> float:
    """Sum of the cash register amounts."""
    history = sales_history(app_config, period)
    if history.empty:
        return 0.0
    return round(float(history["amount"].sum()), 2)


def clear_sales_history(app_config: AppConfig) -> int:
    """
    Permanently delete every sale transaction.

    Product stock is left unchanged. Returns the number of deleted
    transactions.
    """
    deleted = _db_delete_sales_transactions(
        app_config.database,
        app_config.categories.sales,
    )
    logger.warning("Cleared sales history (%d transactions deleted)", deleted)
    return deleted
