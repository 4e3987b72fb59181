# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
High-level services for income and expense transactions.

This module sits between:
- the low-level database helpers in `db.py`, and
- user-facing layers such as the CLI.

Responsibilities
----------------
1) CRUD Operations
   - Create transactions after validating title, amount and type.
   - Edit existing transactions using partial updates.
   - Delete transactions.
   - Load individual transactions.

2) Listing & Searching
   - List transactions for a reporting period (MTD, last month, YTD,
     custom range or the whole history).
   - Refine listings with the TransactionsFilter dataclass (type,
     category, title substring, amount bounds).

3) Import
   - Bulk-import a CSV file read by `io.read_transactions`.

4) Categories
   - Suggest the configured categories for each transaction type.

Design notes
------------
- Validation lives here, not in `db.py`: the database layer stores what it
  is given, while these services reject empty titles, non-positive amounts
  and unknown types with `ValidationError`.
- Sale transactions are created by `sales_service.sell_product`, never
  through `add_transaction`.
"""

import logging
import os
from dataclasses import replace
from datetime import date
from typing import Optional, Union

import pandas as pd

from .config import AppConfig
from .db import (
    TRANSACTION_TYPES,
    DatabaseConfig,
    NewTransaction,
    Transaction,
    TransactionsFilter,
    TransactionUpdate,
    to_cents,
)
from .db import (
    delete_transaction as _db_delete_transaction,
)
from .db import (
    get_transaction_by_id as _db_get_transaction_by_id,
)
from .db import (
    insert_transaction as _db_insert_transaction,
)
from .db import (
    insert_transactions as _db_insert_transactions,
)
from .db import (
    load_transactions as _db_load_transactions,
)
from .db import (
    search_transactions as _db_search_transactions,
)
from .db import (
    update_transaction as _db_update_transaction,
)
from .errors import ValidationError
from .io import read_transactions
from .periods import Period

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _get_db_config(app_config: AppConfig) -> DatabaseConfig:
    """Return the database configuration of the application."""
    return app_config.database


def _validate_type(tx_type: str) -> None:
    if tx_type not in TRANSACTION_TYPES:
        raise ValidationError(
            f"Invalid transaction type: {tx_type!r}. Expected 'income' or 'expense'."
        )


def _validate_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise ValidationError("Transaction title cannot be empty.")
    return cleaned


def _validate_amount(amount: float) -> float:
    if amount <= 0 or to_cents(amount) <= 0:
        raise ValidationError(f"Transaction amount must be positive, got {amount}.")
    return float(amount)


def _merge_filters(
    base: TransactionsFilter,
    override: Optional[TransactionsFilter],
) -> TransactionsFilter:
    """
    Merge a period-derived filter with user-provided filters.

    Values from `override` win when they are not None.
    """
    if override is None:
        return base

    def pick(name: str):
        value = getattr(override, name)
        return value if value is not None else getattr(base, name)

    return TransactionsFilter(
        start=pick("start"),
        end=pick("end"),
        type=pick("type"),
        category=pick("category"),
        title_contains=pick("title_contains"),
        min_amount=pick("min_amount"),
        max_amount=pick("max_amount"),
        sales_category=pick("sales_category"),
    )


# ---------------------------------------------------------------------------
# Listing and search
# ---------------------------------------------------------------------------


def list_transactions(
    app_config: AppConfig,
    period: Optional[Period] = None,
    extra_filters: Optional[TransactionsFilter] = None,
    *,
    limit: Optional[int] = None,
    offset: int = 0,
    order_by: tuple[str, str] = ("date", "DESC"),
) -> pd.DataFrame:
    """
    List transactions, newest first by default.

    Parameters
    ----------
    app_config:
        Global application configuration.
    period:
        Optional reporting period (inclusive bounds). None lists the whole
        history.
    extra_filters:
        Optional additional filters merged with the period bounds.
    limit, offset:
        Optional pagination.
    order_by:
        Sorting instructions as (column, direction). Supported columns:
        "date", "amount", "title", "category", "id".

    Returns
    -------
    pandas.DataFrame
        Columns as returned by `db.search_transactions`.
    """
    base_filter = TransactionsFilter()
    if period is not None:
        base_filter = TransactionsFilter(start=period.start, end=period.end)
    merged_filter = _merge_filters(base_filter, extra_filters)

    return _db_search_transactions(
        _get_db_config(app_config),
        merged_filter,
        limit=limit,
        offset=offset,
        order_by=order_by,
    )


def search_transactions(
    app_config: AppConfig,
    filters: TransactionsFilter,
    *,
    limit: Optional[int] = None,
    offset: int = 0,
    order_by: tuple[str, str] = ("date", "DESC"),
) -> pd.DataFrame:
    """Search transactions with a caller-built TransactionsFilter."""
    return _db_search_transactions(
        _get_db_config(app_config),
        filters,
        limit=limit,
        offset=offset,
        order_by=order_by,
    )


def load_transactions_for_period(
    app_config: AppConfig,
    period: Optional[Period] = None,
) -> pd.DataFrame:
    """
    Load the transactions used by the metrics and insights layers.

    Returns the DataFrame of `db.load_transactions`, in chronological order.
    """
    start = period.start if period is not None else None
    end = period.end if period is not None else None
    return _db_load_transactions(_get_db_config(app_config), start, end)


def load_transaction(
    app_config: AppConfig,
    transaction_id: int,
) -> Optional[Transaction]:
    """Load a single transaction by id, or None if it does not exist."""
    return _db_get_transaction_by_id(_get_db_config(app_config), transaction_id)


# ---------------------------------------------------------------------------
# Create / update / delete operations
# ---------------------------------------------------------------------------


def add_transaction(
    app_config: AppConfig,
    title: str,
    amount: float,
    tx_type: str,
    category: str,
    tx_date: Optional[date] = None,
) -> Transaction:
    """
    Record a new income or expense.

    Parameters
    ----------
    app_config:
        Global application configuration.
    title:
        Label of the transaction; surrounding whitespace is removed.
    amount:
        Strictly positive amount.
    tx_type:
        "income" or "expense".
    category:
        Category name. An empty category is stored as "Other".
    tx_date:
        Date of the transaction, today when omitted.

    Returns
    -------
    Transaction
        The stored transaction.

    Raises
    ------
    ValidationError
        If the title is empty, the amount is not positive or the type is
        unknown.
    """
    _validate_type(tx_type)
    new_tx = NewTransaction(
        date=tx_date or date.today(),
        title=_validate_title(title),
        type=tx_type,
        category=category.strip() or "Other",
        amount=_validate_amount(amount),
    )

    created = _db_insert_transaction(_get_db_config(app_config), new_tx)
    logger.info(
        "Added %s transaction #%d (%s, %.2f)",
        created.type,
        created.id,
        created.category,
        created.amount,
    )
    return created


def edit_transaction(
    app_config: AppConfig,
    transaction_id: int,
    update: TransactionUpdate,
) -> Transaction:
    """
    Edit an existing transaction using a partial update.

    Raises
    ------
    ValidationError
        If an updated title, amount or type is invalid.
    ValueError
        If no fields are provided for update.
    NotFoundError
        If the transaction does not exist.
    """
    if update.type is not None:
        _validate_type(update.type)
    if update.title is not None:
        update = replace(update, title=_validate_title(update.title))
    if update.category is not None:
        update = replace(update, category=update.category.strip() or "Other")
    if update.amount is not None:
        _validate_amount(update.amount)

    return _db_update_transaction(_get_db_config(app_config), transaction_id, update)


def remove_transaction(app_config: AppConfig, transaction_id: int) -> Transaction:
    """
    Permanently delete a transaction.

    Returns
    -------
    Transaction
        The deleted transaction.

    Raises
    ------
    NotFoundError
        If the transaction does not exist.
    """
    deleted = _db_delete_transaction(_get_db_config(app_config), transaction_id)
    logger.info("Deleted transaction #%d", transaction_id)
    return deleted


# ---------------------------------------------------------------------------
# Import & categories
# ---------------------------------------------------------------------------


def import_transactions_csv(
    app_config: AppConfig,
    path: Union[str, "os.PathLike[str]"],
) -> int:
    """
    Import transactions from a CSV file.

    See `io.read_transactions` for the supported formats. The whole file is
    inserted in a single SQL transaction.

    Returns
    -------
    int
        Number of imported transactions.

    Raises
    ------
    ValueError
        If the file structure or its values are invalid.
    """
    df = read_transactions(path)
    if df.empty:
        logger.warning("No transactions found in %s", path)
        return 0

    inserted = _db_insert_transactions(_get_db_config(app_config), df)
    logger.info("Imported %d transactions from %s", inserted, path)
    return inserted


def suggested_categories(app_config: AppConfig, tx_type: str) -> tuple[str, ...]:
    """
    Return the categories offered for a transaction type.

    Raises
    ------
    ValidationError
        If the type is not "income" or "expense".
    """
    _validate_type(tx_type)
    if tx_type == "income":
        return app_config.categories.income
    return app_config.categories.expense
