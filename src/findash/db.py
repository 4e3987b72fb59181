# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
Database layer for FinDash.

This module provides all low-level accessors and utilities for interacting
with the SQLite database used by the application. It is responsible for:

- Initializing and migrating the database schema.
- CRUD operations on transactions, product categories, products and
  suppliers.
- Recording point-of-sale operations atomically (stock decrement + income
  transaction).
- Providing query utilities returning pandas DataFrames for listings and
  for the metrics layer.

The database is the single source of truth for every view of the
dashboard: the metrics, the warehouse, the cash register and the insights
report are always computed from it.

------------------------------------------------------------------------------
Schema Overview (as of version 0.2.0)
------------------------------------------------------------------------------

1) transactions
   One row per income or expense.

   Columns:
   - id            INTEGER PRIMARY KEY AUTOINCREMENT
   - date          TEXT    NOT NULL  -- ISO date "YYYY-MM-DD"
   - title         TEXT    NOT NULL
   - type          TEXT    NOT NULL  -- "income" | "expense"
   - category      TEXT    NOT NULL
   - amount_cents  INTEGER NOT NULL  -- positive integer amount in cents

   -- Sale metadata (added in v0.2.0, NULL for regular transactions)
   - product_id    INTEGER           -- product sold (no FK: history survives
                                        product deletion)
   - product_name  TEXT              -- product name at the time of the sale
   - quantity      INTEGER           -- units sold

   - created_at    TEXT    NOT NULL  -- UTC timestamp
   - updated_at    TEXT              -- UTC timestamp of last modification


2) categories
   Product categories used to organize the warehouse.

   Columns:
   - id           INTEGER PRIMARY KEY AUTOINCREMENT
   - name         TEXT    NOT NULL UNIQUE
   - description  TEXT
   - image        TEXT              -- data URL or path
   - created_at   TEXT    NOT NULL


3) products
   Warehouse items.

   Columns:
   - id                   INTEGER PRIMARY KEY AUTOINCREMENT
   - name                 TEXT    NOT NULL
   - unit                 TEXT    NOT NULL  -- "Bag 25kg", "Box 12x1L", ...
   - quantity             INTEGER NOT NULL  -- units in stock, never negative
   - purchase_price_cents INTEGER NOT NULL
   - selling_price_cents  INTEGER NOT NULL
   - discount             REAL    NOT NULL DEFAULT 0  -- percent
   - tax                  REAL    NOT NULL DEFAULT 0  -- percent
   - duty                 REAL    NOT NULL DEFAULT 0  -- percent
   - image                TEXT              -- added in v0.2.0
   - category_id          INTEGER           -- added in v0.2.0, FK categories.id
   - created_at           TEXT    NOT NULL
   - updated_at           TEXT


4) suppliers
   Supplier contracts and what has been paid so far.

   Columns:
   - id                 INTEGER PRIMARY KEY AUTOINCREMENT
   - name               TEXT    NOT NULL
   - product_supplied   TEXT    NOT NULL
   - total_value_cents  INTEGER NOT NULL
   - amount_paid_cents  INTEGER NOT NULL DEFAULT 0
   - created_at         TEXT    NOT NULL
   - updated_at         TEXT

   The debt status ("paid" / "debt") is derived from total_value and
   amount_paid on read by `compute_debt_status` and is never stored.


------------------------------------------------------------------------------
Key Responsibilities
------------------------------------------------------------------------------

1) Schema creation & migration
   - `init_database` creates missing tables and indexes, then upgrades
     databases created by v0.1.x (no sale metadata on transactions, no
     image / category on products) in place.

2) Transactions
   - `insert_transaction`, `insert_transactions` (bulk, from a DataFrame),
     `get_transaction_by_id`, `update_transaction`, `delete_transaction`,
     `delete_sales_transactions`, `search_transactions`,
     `load_transactions`.

3) Categories
   - `insert_category` (optionally assigning products in the same SQL
     transaction), `assign_products_to_category`, `get_category_by_id`,
     `list_categories`, `delete_category`.

4) Products
   - `insert_product`, `get_product_by_id`, `update_product`,
     `delete_product`, `list_products`.

5) Sales
   - `record_sale` decrements the stock with a conditional UPDATE
     (`quantity >= requested`) and inserts the matching income transaction
     before committing. Either both writes happen or neither does.

6) Suppliers
   - `insert_supplier`, `get_supplier_by_id`, `update_supplier`,
     `add_supplier_payment`, `delete_supplier`, `list_suppliers`.

------------------------------------------------------------------------------
SQLite Notes
------------------------------------------------------------------------------

- All timestamps are stored as ISO-8601 text (UTC).
- Amounts are stored as integer cents to avoid floating point drift.
- Foreign key enforcement is explicitly enabled.

------------------------------------------------------------------------------
End of module description.
------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Literal

import pandas as pd

from .errors import InsufficientStockError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

TransactionType = Literal["income", "expense"]
TRANSACTION_TYPES: tuple[str, ...] = ("income", "expense")

DebtStatus = Literal["paid", "debt"]

# Remaining debts at or below this amount count as fully paid.
DEBT_TOLERANCE = 0.01

TRANSACTION_COLUMNS = [
    "id",
    "date",
    "title",
    "type",
    "category",
    "amount",
    "product_id",
    "product_name",
    "quantity",
    "created_at",
    "updated_at",
]

CATEGORY_COLUMNS = [
    "id",
    "name",
    "description",
    "image",
    "product_count",
    "created_at",
]

PRODUCT_COLUMNS = [
    "id",
    "name",
    "unit",
    "quantity",
    "purchase_price",
    "selling_price",
    "discount",
    "tax",
    "duty",
    "image",
    "category_id",
    "category_name",
    "created_at",
    "updated_at",
]

SUPPLIER_COLUMNS = [
    "id",
    "name",
    "product_supplied",
    "total_value",
    "amount_paid",
    "remaining_debt",
    "status",
    "created_at",
    "updated_at",
]


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Database configuration for FinDash.

    Attributes
    ----------
    engine:
        Database engine identifier. Only "sqlite" is supported.
    path:
        Path to the SQLite database file.
    """

    engine: str
    path: Path


@dataclass(frozen=True)
class Transaction:
    """
    A stored income or expense.

    Sale transactions recorded by the point of sale additionally carry the
    product id, the product name at the time of the sale and the quantity
    sold.
    """

    id: int
    date: date
    title: str
    type: str
    category: str
    amount: float
    product_id: int | None
    product_name: str | None
    quantity: int | None
    created_at: datetime
    updated_at: datetime | None

    @property
    def signed_amount(self) -> float:
        """Amount with expenses counted negatively."""
        return self.amount if self.type == "income" else -self.amount


@dataclass(frozen=True)
class NewTransaction:
    """Data required to create a new transaction."""

    date: date
    title: str
    type: str
    category: str
    amount: float
    product_id: int | None = None
    product_name: str | None = None
    quantity: int | None = None


@dataclass(frozen=True)
class TransactionUpdate:
    """
    Fields that can be updated on an existing transaction.

    Each attribute is optional. Only non-None values are applied. Sale
    metadata cannot be edited.
    """

    date: date | None = None
    title: str | None = None
    type: str | None = None
    category: str | None = None
    amount: float | None = None


@dataclass(frozen=True)
class TransactionsFilter:
    """
    Filters used to search transactions.

    The filters can be combined. Date bounds are inclusive.

    Attributes
    ----------
    start, end:
        Inclusive date bounds.
    type:
        "income" or "expense".
    category:
        Exact category match.
    title_contains:
        Case-insensitive substring search on the title.
    min_amount, max_amount:
        Bounds on the (positive) amount, in monetary units.
    sales_category:
        When set, restrict to sale transactions: income recorded under this
        category or carrying a product name.
    """

    start: date | None = None
    end: date | None = None
    type: str | None = None
    category: str | None = None
    title_contains: str | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    sales_category: str | None = None


@dataclass(frozen=True)
class Category:
    """A product category, with the number of products assigned to it."""

    id: int
    name: str
    description: str | None
    image: str | None
    product_count: int
    created_at: datetime


@dataclass(frozen=True)
class NewCategory:
    """Data required to create a product category."""

    name: str
    description: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class Product:
    """
    A warehouse item.

    `discount`, `tax` and `duty` are percentages in [0, 100]. They are
    informational: the sale price charged by the point of sale is
    `selling_price`.
    """

    id: int
    name: str
    unit: str
    quantity: int
    purchase_price: float
    selling_price: float
    discount: float
    tax: float
    duty: float
    image: str | None
    category_id: int | None
    category_name: str | None
    created_at: datetime
    updated_at: datetime | None

    @property
    def stock_value(self) -> float:
        """Value of the stock at purchase price."""
        return self.purchase_price * self.quantity

    @property
    def potential_revenue(self) -> float:
        """Revenue if the whole stock is sold at selling price."""
        return self.selling_price * self.quantity

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0


@dataclass(frozen=True)
class NewProduct:
    """Data required to create a product."""

    name: str
    unit: str
    quantity: int
    purchase_price: float
    selling_price: float
    discount: float = 0.0
    tax: float = 0.0
    duty: float = 0.0
    image: str | None = None
    category_id: int | None = None


@dataclass(frozen=True)
class ProductUpdate:
    """
    Fields that can be updated on an existing product.

    Only non-None values are applied. Use `clear_category` / `clear_image`
    to reset the corresponding column to NULL.
    """

    name: str | None = None
    unit: str | None = None
    quantity: int | None = None
    purchase_price: float | None = None
    selling_price: float | None = None
    discount: float | None = None
    tax: float | None = None
    duty: float | None = None
    image: str | None = None
    category_id: int | None = None
    clear_category: bool = False
    clear_image: bool = False


@dataclass(frozen=True)
class SaleRecord:
    """Result of a point-of-sale operation."""

    product: Product
    transaction: Transaction


@dataclass(frozen=True)
class Supplier:
    """A supplier contract with the amount already paid."""

    id: int
    name: str
    product_supplied: str
    total_value: float
    amount_paid: float
    created_at: datetime
    updated_at: datetime | None

    @property
    def remaining_debt(self) -> float:
        return remaining_debt(self.total_value, self.amount_paid)

    @property
    def status(self) -> DebtStatus:
        return compute_debt_status(self.total_value, self.amount_paid)


@dataclass(frozen=True)
class NewSupplier:
    """Data required to create a supplier."""

    name: str
    product_supplied: str
    total_value: float
    amount_paid: float = 0.0


@dataclass(frozen=True)
class SupplierUpdate:
    """Fields that can be updated on an existing supplier."""

    name: str | None = None
    product_supplied: str | None = None
    total_value: float | None = None
    amount_paid: float | None = None


# ---------------------------------------------------------------------------
# Debt status
# ---------------------------------------------------------------------------


def remaining_debt(total_value: float, amount_paid: float) -> float:
    """Return what is still owed to a supplier (never negative)."""
    return max(0.0, round(total_value - amount_paid, 2))


def compute_debt_status(total_value: float, amount_paid: float) -> DebtStatus:
    """
    Derive the debt status of a supplier.

    Returns "debt" when more than DEBT_TOLERANCE is still owed, "paid"
    otherwise (including overpayments). The remainder is rounded to the
    cent first, so exactly one cent left over still counts as paid.
    """
    if remaining_debt(total_value, amount_paid) > DEBT_TOLERANCE:
        return "debt"
    return "paid"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ensure_sqlite(cfg: DatabaseConfig) -> None:
    """Raise if the configuration does not refer to a supported engine."""
    if cfg.engine.lower() != "sqlite":
        msg = (
            f"Unsupported database engine: {cfg.engine!r}. "
            "Only 'sqlite' is supported for now."
        )
        raise ValueError(msg)


def _connect(cfg: DatabaseConfig) -> sqlite3.Connection:
    """
    Open a SQLite connection with foreign keys enabled.

    The caller is responsible for closing the connection.
    """
    _ensure_sqlite(cfg)
    conn = sqlite3.connect(cfg.path)
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def _get_table_columns(conn: sqlite3.Connection, table: str) -> set[str]:
    """Return the set of column names for the given table."""
    cur = conn.execute(f"PRAGMA table_info({table});")
    return {row[1] for row in cur.fetchall()}


def _migrate_schema_if_needed(conn: sqlite3.Connection) -> None:
    """
    Migrate a v0.1.x database to the 0.2.x layout if required.

    This function is idempotent. Missing columns are added in place with
    NULL values, so existing rows are preserved:

    - transactions: `product_id`, `product_name`, `quantity`,
    - products: `image`, `category_id`.
    """
    transaction_columns = _get_table_columns(conn, "transactions")
    for column, ddl in (
        ("product_id", "INTEGER"),
        ("product_name", "TEXT"),
        ("quantity", "INTEGER"),
    ):
        if column not in transaction_columns:
            logger.info("Migrating schema: adding transactions.%s", column)
            conn.execute(f"ALTER TABLE transactions ADD COLUMN {column} {ddl};")

    product_columns = _get_table_columns(conn, "products")
    if "image" not in product_columns:
        logger.info("Migrating schema: adding products.image")
        conn.execute("ALTER TABLE products ADD COLUMN image TEXT;")
    if "category_id" not in product_columns:
        logger.info("Migrating schema: adding products.category_id")
        conn.execute(
            "ALTER TABLE products ADD COLUMN category_id INTEGER "
            "REFERENCES categories(id) ON DELETE SET NULL;"
        )


def _create_schema_if_needed(conn: sqlite3.Connection) -> None:
    """
    Create tables and indexes if they do not exist yet and migrate the schema.

    This function is idempotent and can be called multiple times safely.
    """
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id            INTEGER PRIMARY KEY AUTOINCREMENT,
            date          TEXT    NOT NULL,  -- ISO date 'YYYY-MM-DD'
            title         TEXT    NOT NULL,
            type          TEXT    NOT NULL,  -- 'income' | 'expense'
            category      TEXT    NOT NULL,
            amount_cents  INTEGER NOT NULL,
            product_id    INTEGER,
            product_name  TEXT,
            quantity      INTEGER,
            created_at    TEXT    NOT NULL,
            updated_at    TEXT
        );
        """
    )

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS categories (
            id           INTEGER PRIMARY KEY AUTOINCREMENT,
            name         TEXT    NOT NULL UNIQUE,
            description  TEXT,
            image        TEXT,
            created_at   TEXT    NOT NULL
        );
        """
    )

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS products (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            name                 TEXT    NOT NULL,
            unit                 TEXT    NOT NULL,
            quantity             INTEGER NOT NULL DEFAULT 0,
            purchase_price_cents INTEGER NOT NULL DEFAULT 0,
            selling_price_cents  INTEGER NOT NULL DEFAULT 0,
            discount             REAL    NOT NULL DEFAULT 0,
            tax                  REAL    NOT NULL DEFAULT 0,
            duty                 REAL    NOT NULL DEFAULT 0,
            image                TEXT,
            category_id          INTEGER,
            created_at           TEXT    NOT NULL,
            updated_at           TEXT,

            FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE SET NULL
        );
        """
    )

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS suppliers (
            id                 INTEGER PRIMARY KEY AUTOINCREMENT,
            name               TEXT    NOT NULL,
            product_supplied   TEXT    NOT NULL,
            total_value_cents  INTEGER NOT NULL DEFAULT 0,
            amount_paid_cents  INTEGER NOT NULL DEFAULT 0,
            created_at         TEXT    NOT NULL,
            updated_at         TEXT
        );
        """
    )

    _migrate_schema_if_needed(conn)

    # Indexes
    conn.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_transactions_date
            ON transactions(date);
        """
    )
    conn.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_transactions_type_category
            ON transactions(type, category);
        """
    )
    conn.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_products_category
            ON products(category_id);
        """
    )

    conn.commit()


def _ensure_dataframe_columns(df: pd.DataFrame) -> None:
    """Validate that the DataFrame contains the expected transaction columns."""
    required = {"date", "title", "type", "category", "amount"}
    missing = required.difference(df.columns)
    if missing:
        cols = ", ".join(sorted(missing))
        msg = f"DataFrame is missing required column(s): {cols}"
        raise ValueError(msg)


def _to_iso_date(value) -> str:
    """Convert a date-like value to ISO 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return date.fromisoformat(str(value)[:10]).isoformat()


def _now_utc_iso() -> str:
    """Return the current UTC datetime as ISO string."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def to_cents(amount: float) -> int:
    return int(round(float(amount) * 100))


def _from_cents(cents: int | None) -> float:
    return float(cents or 0) / 100.0


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value is not None else None


def _check_transaction_type(value: str) -> None:
    if value not in TRANSACTION_TYPES:
        raise ValueError(
            f"Invalid transaction type: {value!r}. Expected 'income' or 'expense'."
        )


# ---------------------------------------------------------------------------
# Public API: schema
# ---------------------------------------------------------------------------


def init_database(cfg: DatabaseConfig) -> None:
    """
    Initialize the database schema if needed.

    - Creates the SQLite file if it does not exist.
    - Creates tables and indexes if they are missing and migrates older
      layouts.
    - This function is idempotent: calling it multiple times is safe.

    Raises
    ------
    ValueError
        If cfg.engine is not supported.
    sqlite3.Error
        If schema creation fails.
    """
    cfg.path.parent.mkdir(parents=True, exist_ok=True)

    conn = _connect(cfg)
    try:
        _create_schema_if_needed(conn)
    finally:
        conn.close()


def is_empty(cfg: DatabaseConfig) -> bool:
    """
    Return True if the database holds no transaction, product nor supplier.

    Used to decide whether demo data may be seeded and to warn the user
    when the dashboard is requested on an empty database.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        for table in ("transactions", "products", "suppliers"):
            cur.execute(f"SELECT 1 FROM {table} LIMIT 1;")
            if cur.fetchone() is not None:
                return False
        return True
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

_TRANSACTION_SELECT = """
    SELECT
        id,
        date,
        title,
        type,
        category,
        amount_cents,
        product_id,
        product_name,
        quantity,
        created_at,
        updated_at
    FROM transactions
"""


def _row_to_transaction(row: tuple) -> Transaction:
    """
    Convert a database row into a Transaction instance.

    Expected row layout:
      (id, date, title, type, category, amount_cents, product_id,
       product_name, quantity, created_at, updated_at)
    """
    (
        tx_id,
        date_str,
        title,
        tx_type,
        category,
        amount_cents,
        product_id,
        product_name,
        quantity,
        created_at_str,
        updated_at_str,
    ) = row

    return Transaction(
        id=tx_id,
        date=date.fromisoformat(date_str),
        title=title,
        type=tx_type,
        category=category,
        amount=_from_cents(amount_cents),
        product_id=product_id,
        product_name=product_name,
        quantity=quantity,
        created_at=datetime.fromisoformat(created_at_str),
        updated_at=_parse_timestamp(updated_at_str),
    )


def _insert_transaction_row(
    cur: sqlite3.Cursor,
    new_tx: NewTransaction,
    created_at_iso: str,
) -> int:
    """Insert one transaction with an open cursor and return its id."""
    _check_transaction_type(new_tx.type)
    amount_cents = to_cents(new_tx.amount)
    if amount_cents <= 0:
        raise ValueError(
            f"Transaction amount must be at least one cent, got {new_tx.amount}."
        )
    cur.execute(
        """
        INSERT INTO transactions (
            date,
            title,
            type,
            category,
            amount_cents,
            product_id,
            product_name,
            quantity,
            created_at,
            updated_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, NULL);
        """,
        (
            _to_iso_date(new_tx.date),
            new_tx.title,
            new_tx.type,
            new_tx.category,
            amount_cents,
            new_tx.product_id,
            new_tx.product_name,
            new_tx.quantity,
            created_at_iso,
        ),
    )
    return cur.lastrowid


def get_transaction_by_id(cfg: DatabaseConfig, transaction_id: int) -> Transaction | None:
    """
    Load a single transaction by id.

    Returns
    -------
    Transaction | None
        The matching transaction, or None if not found.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(_TRANSACTION_SELECT + " WHERE id = ?;", (transaction_id,))
        row = cur.fetchone()
    finally:
        conn.close()

    if row is None:
        return None
    return _row_to_transaction(row)


def insert_transaction(cfg: DatabaseConfig, new_tx: NewTransaction) -> Transaction:
    """
    Insert a new transaction into the database.

    Raises
    ------
    ValueError
        If the transaction type is not "income" or "expense".
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        tx_id = _insert_transaction_row(cur, new_tx, _now_utc_iso())
        conn.commit()
    finally:
        conn.close()

    result = get_transaction_by_id(cfg, tx_id)
    if result is None:
        msg = f"Transaction #{tx_id} was just inserted but could not be reloaded."
        raise RuntimeError(msg)
    return result


def insert_transactions(cfg: DatabaseConfig, df: pd.DataFrame) -> int:
    """
    Insert a batch of transactions in a single SQL transaction.

    Parameters
    ----------
    df:
        Normalized transactions with columns date, title, type, category
        and amount (positive).

    Returns
    -------
    int
        Number of rows inserted. Nothing is inserted if any row is invalid.

    Raises
    ------
    ValueError
        If df does not contain the required columns, holds an invalid
        transaction type or an amount that rounds to zero cents.
    """
    _ensure_dataframe_columns(df)
    init_database(cfg)

    created_at_iso = _now_utc_iso()
    rows_inserted = 0

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        for _, row in df.iterrows():
            new_tx = NewTransaction(
                date=row["date"],
                title=str(row["title"]),
                type=str(row["type"]),
                category=str(row["category"]),
                amount=float(row["amount"]),
            )
            _insert_transaction_row(cur, new_tx, created_at_iso)
            rows_inserted += 1
        conn.commit()
    finally:
        conn.close()

    logger.info("Inserted %d transactions", rows_inserted)
    return rows_inserted


def update_transaction(
    cfg: DatabaseConfig,
    transaction_id: int,
    update: TransactionUpdate,
) -> Transaction:
    """
    Apply a partial update to an existing transaction.

    Raises
    ------
    ValueError
        If no fields are provided for update or the type is invalid.
    NotFoundError
        If the transaction does not exist.
    """
    init_database(cfg)

    fields: list[str] = []
    params: list[object] = []

    if update.date is not None:
        fields.append("date = ?")
        params.append(_to_iso_date(update.date))
    if update.title is not None:
        fields.append("title = ?")
        params.append(update.title)
    if update.type is not None:
        _check_transaction_type(update.type)
        fields.append("type = ?")
        params.append(update.type)
    if update.category is not None:
        fields.append("category = ?")
        params.append(update.category)
    if update.amount is not None:
        amount_cents = to_cents(update.amount)
        if amount_cents <= 0:
            raise ValueError(
                f"Transaction amount must be at least one cent, got {update.amount}."
            )
        fields.append("amount_cents = ?")
        params.append(amount_cents)

    if not fields:
        raise ValueError("No fields to update in TransactionUpdate.")

    fields.append("updated_at = ?")
    params.append(_now_utc_iso())
    params.append(transaction_id)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            f"""
            UPDATE transactions
               SET {", ".join(fields)}
             WHERE id = ?;
            """,
            params,
        )
        updated = cur.rowcount
        conn.commit()
    finally:
        conn.close()

    if updated == 0:
        raise NotFoundError(f"Transaction #{transaction_id} does not exist.")

    result = get_transaction_by_id(cfg, transaction_id)
    if result is None:
        msg = f"Transaction #{transaction_id} was updated but could not be reloaded."
        raise RuntimeError(msg)
    return result


def delete_transaction(cfg: DatabaseConfig, transaction_id: int) -> Transaction:
    """
    Permanently delete a transaction.

    Returns
    -------
    Transaction
        The transaction as it was before deletion.

    Raises
    ------
    NotFoundError
        If the transaction does not exist.
    """
    existing = get_transaction_by_id(cfg, transaction_id)
    if existing is None:
        raise NotFoundError(f"Transaction #{transaction_id} does not exist.")

    conn = _connect(cfg)
    try:
        conn.execute("DELETE FROM transactions WHERE id = ?;", (transaction_id,))
        conn.commit()
    finally:
        conn.close()

    return existing


def delete_sales_transactions(cfg: DatabaseConfig, sales_category: str) -> int:
    """
    Delete every sale transaction (the cash register history).

    A sale is an income recorded under `sales_category` or carrying a
    product name. Product stock is not changed.

    Returns
    -------
    int
        Number of deleted rows.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            DELETE FROM transactions
             WHERE type = 'income'
               AND (category = ? OR product_name IS NOT NULL);
            """,
            (sales_category,),
        )
        deleted = cur.rowcount
        conn.commit()
    finally:
        conn.close()

    logger.info("Deleted %d sale transactions", deleted)
    return deleted


def _empty_transactions_frame() -> pd.DataFrame:
    return pd.DataFrame(columns=TRANSACTION_COLUMNS)


def _transactions_frame(rows: list[tuple]) -> pd.DataFrame:
    """Build the listing DataFrame from rows laid out like _TRANSACTION_SELECT."""
    raw_columns = [c if c != "amount" else "amount_cents" for c in TRANSACTION_COLUMNS]
    df = pd.DataFrame(rows, columns=raw_columns)

    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d").dt.date
    df["created_at"] = pd.to_datetime(df["created_at"])
    df["updated_at"] = pd.to_datetime(df["updated_at"], errors="coerce")
    df["product_id"] = df["product_id"].astype("Int64")
    df["quantity"] = df["quantity"].astype("Int64")

    df["amount"] = df["amount_cents"].astype(float) / 100.0
    df = df.drop(columns=["amount_cents"])
    return df[TRANSACTION_COLUMNS]


def search_transactions(
    cfg: DatabaseConfig,
    filters: TransactionsFilter,
    *,
    limit: int | None = None,
    offset: int = 0,
    order_by: tuple[str, str] = ("date", "DESC"),
) -> pd.DataFrame:
    """
    Search transactions using the given filters.

    Result columns
    --------------
    id, date, title, type, category, amount, product_id, product_name,
    quantity, created_at, updated_at

    Raises
    ------
    ValueError
        If the order_by column or direction is not supported.
    """
    init_database(cfg)

    where_clauses: list[str] = ["1 = 1"]
    params: list[object] = []

    if filters.start is not None:
        where_clauses.append("date >= ?")
        params.append(filters.start.isoformat())
    if filters.end is not None:
        where_clauses.append("date <= ?")
        params.append(filters.end.isoformat())

    if filters.type is not None:
        _check_transaction_type(filters.type)
        where_clauses.append("type = ?")
        params.append(filters.type)

    if filters.category is not None:
        where_clauses.append("category = ?")
        params.append(filters.category)

    if filters.title_contains is not None:
        where_clauses.append("LOWER(title) LIKE ?")
        params.append(f"%{filters.title_contains.lower()}%")

    if filters.min_amount is not None:
        where_clauses.append("amount_cents >= ?")
        params.append(to_cents(filters.min_amount))
    if filters.max_amount is not None:
        where_clauses.append("amount_cents <= ?")
        params.append(to_cents(filters.max_amount))

    if filters.sales_category is not None:
        where_clauses.append(
            "type = 'income' AND (category = ? OR product_name IS NOT NULL)"
        )
        params.append(filters.sales_category)

    allowed_order_columns = {"date", "amount", "title", "category", "id"}
    order_column, order_direction = order_by
    if order_column not in allowed_order_columns:
        raise ValueError(f"Invalid order_by column: {order_column!r}")
    order_direction_upper = order_direction.upper()
    if order_direction_upper not in {"ASC", "DESC"}:
        raise ValueError(f"Invalid order_by direction: {order_direction!r}")

    order_expr = "amount_cents" if order_column == "amount" else order_column
    order_clause = (
        f"ORDER BY {order_expr} {order_direction_upper}, id {order_direction_upper}"
    )

    limit_clause = ""
    if limit is not None:
        limit_clause = " LIMIT ? OFFSET ?"
        params.extend([limit, offset])

    query = f"""
        {_TRANSACTION_SELECT}
       WHERE {' AND '.join(where_clauses)}
       {order_clause}
       {limit_clause};
    """

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(query, params)
        rows = cur.fetchall()
    finally:
        conn.close()

    if not rows:
        return _empty_transactions_frame()
    return _transactions_frame(rows)


def load_transactions(
    cfg: DatabaseConfig,
    start: date | None = None,
    end: date | None = None,
) -> pd.DataFrame:
    """
    Load transactions for the metrics layer.

    Parameters
    ----------
    start, end:
        Optional inclusive date bounds. None means unbounded.

    Returns
    -------
    pandas.DataFrame
        Columns: date (datetime64[ns]), title, type, category, amount,
        product_name, quantity. Sorted chronologically. If no transaction
        matches, an empty DataFrame with the same columns is returned.
    """
    init_database(cfg)

    where_clauses: list[str] = ["1 = 1"]
    params: list[object] = []
    if start is not None:
        where_clauses.append("date >= ?")
        params.append(start.isoformat())
    if end is not None:
        where_clauses.append("date <= ?")
        params.append(end.isoformat())

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            f"""
            SELECT date, title, type, category, amount_cents, product_name, quantity
              FROM transactions
             WHERE {' AND '.join(where_clauses)}
             ORDER BY date, id;
            """,
            params,
        )
        rows = cur.fetchall()
    finally:
        conn.close()

    columns = ["date", "title", "type", "category", "amount", "product_name", "quantity"]
    if not rows:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame(
        rows,
        columns=[
            "date",
            "title",
            "type",
            "category",
            "amount_cents",
            "product_name",
            "quantity",
        ],
    )
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d")
    df["amount"] = df["amount_cents"].astype(float) / 100.0
    df["quantity"] = df["quantity"].astype("Int64")
    return df[columns]


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

_CATEGORY_SELECT = """
    SELECT
        c.id,
        c.name,
        c.description,
        c.image,
        (SELECT COUNT(*) FROM products AS p WHERE p.category_id = c.id),
        c.created_at
    FROM categories AS c
"""


def _row_to_category(row: tuple) -> Category:
    cat_id, name, description, image, product_count, created_at_str = row
    return Category(
        id=cat_id,
        name=name,
        description=description,
        image=image,
        product_count=int(product_count),
        created_at=datetime.fromisoformat(created_at_str),
    )


def _assign_products(
    cur: sqlite3.Cursor,
    category_id: int,
    product_ids: Iterable[int],
) -> int:
    """
    Set category_id on the given products with an open cursor.

    Raises NotFoundError if any product id does not exist; the caller must
    not commit in that case.
    """
    unique_ids = sorted(set(product_ids))
    if not unique_ids:
        return 0

    now_iso = _now_utc_iso()
    assigned = 0
    missing: list[int] = []
    for product_id in unique_ids:
        cur.execute(
            """
            UPDATE products
               SET category_id = ?,
                   updated_at  = ?
             WHERE id = ?;
            """,
            (category_id, now_iso, product_id),
        )
        if cur.rowcount == 0:
            missing.append(product_id)
        else:
            assigned += 1

    if missing:
        ids = ", ".join(f"#{i}" for i in missing)
        raise NotFoundError(f"Product(s) {ids} do not exist.")
    return assigned


def get_category_by_id(cfg: DatabaseConfig, category_id: int) -> Category | None:
    """Load a single category by id, with its product count."""
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(_CATEGORY_SELECT + " WHERE c.id = ?;", (category_id,))
        row = cur.fetchone()
    finally:
        conn.close()

    if row is None:
        return None
    return _row_to_category(row)


def insert_category(
    cfg: DatabaseConfig,
    new_category: NewCategory,
    product_ids: Iterable[int] = (),
) -> Category:
    """
    Create a category and assign the selected products to it.

    Products already belonging to another category are moved to the new
    one. Both writes are committed together.

    Raises
    ------
    ValidationError
        If a category with the same name already exists.
    NotFoundError
        If one of the product ids does not exist (nothing is written).
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        try:
            cur.execute(
                """
                INSERT INTO categories (name, description, image, created_at)
                VALUES (?, ?, ?, ?);
                """,
                (
                    new_category.name,
                    new_category.description,
                    new_category.image,
                    _now_utc_iso(),
                ),
            )
        except sqlite3.IntegrityError as exc:
            raise ValidationError(
                f"Category {new_category.name!r} already exists."
            ) from exc
        category_id = cur.lastrowid
        _assign_products(cur, category_id, product_ids)
        conn.commit()
    finally:
        conn.close()

    result = get_category_by_id(cfg, category_id)
    if result is None:
        msg = f"Category #{category_id} was just inserted but could not be reloaded."
        raise RuntimeError(msg)
    return result


def assign_products_to_category(
    cfg: DatabaseConfig,
    category_id: int,
    product_ids: Iterable[int],
) -> Category:
    """
    Assign existing products to an existing category.

    Raises
    ------
    NotFoundError
        If the category or one of the products does not exist.
    """
    if get_category_by_id(cfg, category_id) is None:
        raise NotFoundError(f"Category #{category_id} does not exist.")

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        _assign_products(cur, category_id, product_ids)
        conn.commit()
    finally:
        conn.close()

    result = get_category_by_id(cfg, category_id)
    if result is None:
        msg = f"Category #{category_id} was updated but could not be reloaded."
        raise RuntimeError(msg)
    return result


def list_categories(cfg: DatabaseConfig) -> pd.DataFrame:
    """
    Return all categories ordered by name.

    Columns: id, name, description, image, product_count, created_at.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(_CATEGORY_SELECT + " ORDER BY c.name COLLATE NOCASE, c.id;")
        rows = cur.fetchall()
    finally:
        conn.close()

    if not rows:
        return pd.DataFrame(columns=CATEGORY_COLUMNS)

    df = pd.DataFrame(rows, columns=CATEGORY_COLUMNS)
    df["product_count"] = df["product_count"].astype(int)
    df["created_at"] = pd.to_datetime(df["created_at"])
    return df


def delete_category(cfg: DatabaseConfig, category_id: int) -> Category:
    """
    Delete a category. Its products stay in the warehouse, uncategorized.

    Returns
    -------
    Category
        The category as it was before deletion.

    Raises
    ------
    NotFoundError
        If the category does not exist.
    """
    existing = get_category_by_id(cfg, category_id)
    if existing is None:
        raise NotFoundError(f"Category #{category_id} does not exist.")

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE products
               SET category_id = NULL,
                   updated_at  = ?
             WHERE category_id = ?;
            """,
            (_now_utc_iso(), category_id),
        )
        cur.execute("DELETE FROM categories WHERE id = ?;", (category_id,))
        conn.commit()
    finally:
        conn.close()

    return existing


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

_PRODUCT_SELECT = """
    SELECT
        p.id,
        p.name,
        p.unit,
        p.quantity,
        p.purchase_price_cents,
        p.selling_price_cents,
        p.discount,
        p.tax,
        p.duty,
        p.image,
        p.category_id,
        c.name,
        p.created_at,
        p.updated_at
    FROM products AS p
    LEFT JOIN categories AS c
      ON p.category_id = c.id
"""


def _row_to_product(row: tuple) -> Product:
    (
        product_id,
        name,
        unit,
        quantity,
        purchase_cents,
        selling_cents,
        discount,
        tax,
        duty,
        image,
        category_id,
        category_name,
        created_at_str,
        updated_at_str,
    ) = row

    return Product(
        id=product_id,
        name=name,
        unit=unit,
        quantity=int(quantity),
        purchase_price=_from_cents(purchase_cents),
        selling_price=_from_cents(selling_cents),
        discount=float(discount),
        tax=float(tax),
        duty=float(duty),
        image=image,
        category_id=category_id,
        category_name=category_name,
        created_at=datetime.fromisoformat(created_at_str),
        updated_at=_parse_timestamp(updated_at_str),
    )


def get_product_by_id(cfg: DatabaseConfig, product_id: int) -> Product | None:
    """Load a single product by id, including its category name."""
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(_PRODUCT_SELECT + " WHERE p.id = ?;", (product_id,))
        row = cur.fetchone()
    finally:
        conn.close()

    if row is None:
        return None
    return _row_to_product(row)


def insert_product(cfg: DatabaseConfig, new_product: NewProduct) -> Product:
    """
    Insert a new product into the warehouse.

    Raises
    ------
    NotFoundError
        If `category_id` is set but does not reference an existing category.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        try:
            cur.execute(
                """
                INSERT INTO products (
                    name,
                    unit,
                    quantity,
                    purchase_price_cents,
                    selling_price_cents,
                    discount,
                    tax,
                    duty,
                    image,
                    category_id,
                    created_at,
                    updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, NULL);
                """,
                (
                    new_product.name,
                    new_product.unit,
                    int(new_product.quantity),
                    to_cents(new_product.purchase_price),
                    to_cents(new_product.selling_price),
                    float(new_product.discount),
                    float(new_product.tax),
                    float(new_product.duty),
                    new_product.image,
                    new_product.category_id,
                    _now_utc_iso(),
                ),
            )
        except sqlite3.IntegrityError as exc:
            if new_product.category_id is None:
                raise
            raise NotFoundError(
                f"Category #{new_product.category_id} does not exist."
            ) from exc
        product_id = cur.lastrowid
        conn.commit()
    finally:
        conn.close()

    result = get_product_by_id(cfg, product_id)
    if result is None:
        msg = f"Product #{product_id} was just inserted but could not be reloaded."
        raise RuntimeError(msg)
    return result


def update_product(
    cfg: DatabaseConfig,
    product_id: int,
    update: ProductUpdate,
) -> Product:
    """
    Apply a partial update to an existing product.

    Raises
    ------
    ValueError
        If no fields are provided for update.
    NotFoundError
        If the product, or the referenced category, does not exist.
    """
    init_database(cfg)

    fields: list[str] = []
    params: list[object] = []

    if update.name is not None:
        fields.append("name = ?")
        params.append(update.name)
    if update.unit is not None:
        fields.append("unit = ?")
        params.append(update.unit)
    if update.quantity is not None:
        fields.append("quantity = ?")
        params.append(int(update.quantity))
    if update.purchase_price is not None:
        fields.append("purchase_price_cents = ?")
        params.append(to_cents(update.purchase_price))
    if update.selling_price is not None:
        fields.append("selling_price_cents = ?")
        params.append(to_cents(update.selling_price))
    if update.discount is not None:
        fields.append("discount = ?")
        params.append(float(update.discount))
    if update.tax is not None:
        fields.append("tax = ?")
        params.append(float(update.tax))
    if update.duty is not None:
        fields.append("duty = ?")
        params.append(float(update.duty))

    if update.clear_image:
        fields.append("image = NULL")
    elif update.image is not None:
        fields.append("image = ?")
        params.append(update.image)

    if update.clear_category:
        fields.append("category_id = NULL")
    elif update.category_id is not None:
        fields.append("category_id = ?")
        params.append(update.category_id)

    if not fields:
        raise ValueError("No fields to update in ProductUpdate.")

    fields.append("updated_at = ?")
    params.append(_now_utc_iso())
    params.append(product_id)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        try:
            cur.execute(
                f"""
                UPDATE products
                   SET {", ".join(fields)}
                 WHERE id = ?;
                """,
                params,
            )
        except sqlite3.IntegrityError as exc:
            raise NotFoundError(
                f"Category #{update.category_id} does not exist."
            ) from exc
        updated = cur.rowcount
        conn.commit()
    finally:
        conn.close()

    if updated == 0:
        raise NotFoundError(f"Product #{product_id} does not exist.")

    result = get_product_by_id(cfg, product_id)
    if result is None:
        msg = f"Product #{product_id} was updated but could not be reloaded."
        raise RuntimeError(msg)
    return result


def delete_product(cfg: DatabaseConfig, product_id: int) -> Product:
    """
    Permanently delete a product.

    Sale transactions referencing the product are kept: they carry the
    product name and quantity of the sale.

    Raises
    ------
    NotFoundError
        If the product does not exist.
    """
    existing = get_product_by_id(cfg, product_id)
    if existing is None:
        raise NotFoundError(f"Product #{product_id} does not exist.")

    conn = _connect(cfg)
    try:
        conn.execute("DELETE FROM products WHERE id = ?;", (product_id,))
        conn.commit()
    finally:
        conn.close()

    return existing


def list_products(
    cfg: DatabaseConfig,
    *,
    category_id: int | None = None,
    in_stock_only: bool = False,
) -> pd.DataFrame:
    """
    Return warehouse products, most recently added first.

    Parameters
    ----------
    category_id:
        Restrict to the products of one category.
    in_stock_only:
        Restrict to products with quantity > 0.

    Result columns
    --------------
    id, name, unit, quantity, purchase_price, selling_price, discount, tax,
    duty, image, category_id, category_name, created_at, updated_at
    """
    init_database(cfg)

    where_clauses: list[str] = ["1 = 1"]
    params: list[object] = []
    if category_id is not None:
        where_clauses.append("p.category_id = ?")
        params.append(category_id)
    if in_stock_only:
        where_clauses.append("p.quantity > 0")

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            f"""
            {_PRODUCT_SELECT}
            WHERE {' AND '.join(where_clauses)}
            ORDER BY p.id DESC;
            """,
            params,
        )
        rows = cur.fetchall()
    finally:
        conn.close()

    if not rows:
        return pd.DataFrame(columns=PRODUCT_COLUMNS)

    df = pd.DataFrame(
        rows,
        columns=[
            "id",
            "name",
            "unit",
            "quantity",
            "purchase_price_cents",
            "selling_price_cents",
            "discount",
            "tax",
            "duty",
            "image",
            "category_id",
            "category_name",
            "created_at",
            "updated_at",
        ],
    )
    df["quantity"] = df["quantity"].astype(int)
    df["purchase_price"] = df["purchase_price_cents"].astype(float) / 100.0
    df["selling_price"] = df["selling_price_cents"].astype(float) / 100.0
    df["category_id"] = df["category_id"].astype("Int64")
    df["created_at"] = pd.to_datetime(df["created_at"])
    df["updated_at"] = pd.to_datetime(df["updated_at"], errors="coerce")
    return df[PRODUCT_COLUMNS]


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------


def record_sale(
    cfg: DatabaseConfig,
    product_id: int,
    quantity: int,
    *,
    sold_on: date,
    category: str,
) -> SaleRecord:
    """
    Sell `quantity` units of a product.

    In a single SQL transaction:
    - the product stock is decremented, only if it holds at least
      `quantity` units,
    - an income transaction "Sale: <product name>" is recorded under
      `category`, for selling_price x quantity, with the sale metadata.

    Raises
    ------
    ValueError
        If quantity is not strictly positive.
    NotFoundError
        If the product does not exist.
    InsufficientStockError
        If the product holds fewer units than requested. Nothing is written.
    """
    if quantity <= 0:
        raise ValueError(f"Sale quantity must be positive, got {quantity}.")

    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            "SELECT name, quantity, selling_price_cents FROM products WHERE id = ?;",
            (product_id,),
        )
        row = cur.fetchone()
        if row is None:
            raise NotFoundError(f"Product #{product_id} does not exist.")
        name, stock, selling_cents = row

        now_iso = _now_utc_iso()
        cur.execute(
            """
            UPDATE products
               SET quantity   = quantity - ?,
                   updated_at = ?
             WHERE id = ?
               AND quantity >= ?;
            """,
            (quantity, now_iso, product_id, quantity),
        )
        if cur.rowcount == 0:
            conn.rollback()
            raise InsufficientStockError(name, quantity, int(stock))

        tx_id = _insert_transaction_row(
            cur,
            NewTransaction(
                date=sold_on,
                title=f"Sale: {name}",
                type="income",
                category=category,
                amount=_from_cents(selling_cents * quantity),
                product_id=product_id,
                product_name=name,
                quantity=quantity,
            ),
            now_iso,
        )
        conn.commit()
    finally:
        conn.close()

    product = get_product_by_id(cfg, product_id)
    transaction = get_transaction_by_id(cfg, tx_id)
    if product is None or transaction is None:
        msg = f"Sale of product #{product_id} was recorded but could not be reloaded."
        raise RuntimeError(msg)
    return SaleRecord(product=product, transaction=transaction)


# ---------------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------------

_SUPPLIER_SELECT = """
    SELECT
        id,
        name,
        product_supplied,
        total_value_cents,
        amount_paid_cents,
        created_at,
        updated_at
    FROM suppliers
"""


def _row_to_supplier(row: tuple) -> Supplier:
    (
        supplier_id,
        name,
        product_supplied,
        total_cents,
        paid_cents,
        created_at_str,
        updated_at_str,
    ) = row
    return Supplier(
        id=supplier_id,
        name=name,
        product_supplied=product_supplied,
        total_value=_from_cents(total_cents),
        amount_paid=_from_cents(paid_cents),
        created_at=datetime.fromisoformat(created_at_str),
        updated_at=_parse_timestamp(updated_at_str),
    )


def get_supplier_by_id(cfg: DatabaseConfig, supplier_id: int) -> Supplier | None:
    """Load a single supplier by id."""
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(_SUPPLIER_SELECT + " WHERE id = ?;", (supplier_id,))
        row = cur.fetchone()
    finally:
        conn.close()

    if row is None:
        return None
    return _row_to_supplier(row)


def insert_supplier(cfg: DatabaseConfig, new_supplier: NewSupplier) -> Supplier:
    """Insert a new supplier."""
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO suppliers (
                name,
                product_supplied,
                total_value_cents,
                amount_paid_cents,
                created_at,
                updated_at
            )
            VALUES (?, ?, ?, ?, ?, NULL);
            """,
            (
                new_supplier.name,
                new_supplier.product_supplied,
                to_cents(new_supplier.total_value),
                to_cents(new_supplier.amount_paid),
                _now_utc_iso(),
            ),
        )
        supplier_id = cur.lastrowid
        conn.commit()
    finally:
        conn.close()

    result = get_supplier_by_id(cfg, supplier_id)
    if result is None:
        msg = f"Supplier #{supplier_id} was just inserted but could not be reloaded."
        raise RuntimeError(msg)
    return result


def update_supplier(
    cfg: DatabaseConfig,
    supplier_id: int,
    update: SupplierUpdate,
) -> Supplier:
    """
    Apply a partial update to an existing supplier.

    Raises
    ------
    ValueError
        If no fields are provided for update.
    NotFoundError
        If the supplier does not exist.
    """
    init_database(cfg)

    fields: list[str] = []
    params: list[object] = []

    if update.name is not None:
        fields.append("name = ?")
        params.append(update.name)
    if update.product_supplied is not None:
        fields.append("product_supplied = ?")
        params.append(update.product_supplied)
    if update.total_value is not None:
        fields.append("total_value_cents = ?")
        params.append(to_cents(update.total_value))
    if update.amount_paid is not None:
        fields.append("amount_paid_cents = ?")
        params.append(to_cents(update.amount_paid))

    if not fields:
        raise ValueError("No fields to update in SupplierUpdate.")

    fields.append("updated_at = ?")
    params.append(_now_utc_iso())
    params.append(supplier_id)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            f"""
            UPDATE suppliers
               SET {", ".join(fields)}
             WHERE id = ?;
            """,
            params,
        )
        updated = cur.rowcount
        conn.commit()
    finally:
        conn.close()

    if updated == 0:
        raise NotFoundError(f"Supplier #{supplier_id} does not exist.")

    result = get_supplier_by_id(cfg, supplier_id)
    if result is None:
        msg = f"Supplier #{supplier_id} was updated but could not be reloaded."
        raise RuntimeError(msg)
    return result


def add_supplier_payment(
    cfg: DatabaseConfig,
    supplier_id: int,
    amount: float,
) -> Supplier:
    """
    Add a payment to the amount already paid to a supplier.

    The increment is applied in SQL so concurrent payments add up.

    Raises
    ------
    NotFoundError
        If the supplier does not exist.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE suppliers
               SET amount_paid_cents = amount_paid_cents + ?,
                   updated_at        = ?
             WHERE id = ?;
            """,
            (to_cents(amount), _now_utc_iso(), supplier_id),
        )
        updated = cur.rowcount
        conn.commit()
    finally:
        conn.close()

    if updated == 0:
        raise NotFoundError(f"Supplier #{supplier_id} does not exist.")

    result = get_supplier_by_id(cfg, supplier_id)
    if result is None:
        msg = f"Supplier #{supplier_id} was updated but could not be reloaded."
        raise RuntimeError(msg)
    return result


def delete_supplier(cfg: DatabaseConfig, supplier_id: int) -> Supplier:
    """
    Permanently delete a supplier.

    Raises
    ------
    NotFoundError
        If the supplier does not exist.
    """
    existing = get_supplier_by_id(cfg, supplier_id)
    if existing is None:
        raise NotFoundError(f"Supplier #{supplier_id} does not exist.")

    conn = _connect(cfg)
    try:
        conn.execute("DELETE FROM suppliers WHERE id = ?;", (supplier_id,))
        conn.commit()
    finally:
        conn.close()

    return existing


def list_suppliers(cfg: DatabaseConfig, *, status: str | None = None) -> pd.DataFrame:
    """
    Return suppliers, most recently added first, with the derived debt.

    Parameters
    ----------
    status:
        Optional filter on the derived status ("paid" or "debt").

    Result columns
    --------------
    id, name, product_supplied, total_value, amount_paid, remaining_debt,
    status, created_at, updated_at
    """
    if status is not None and status not in ("paid", "debt"):
        raise ValueError(f"Invalid supplier status filter: {status!r}")

    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        cur.execute(_SUPPLIER_SELECT + " ORDER BY id DESC;")
        rows = cur.fetchall()
    finally:
        conn.close()

    if not rows:
        return pd.DataFrame(columns=SUPPLIER_COLUMNS)

    df = pd.DataFrame(
        rows,
        columns=[
            "id",
            "name",
            "product_supplied",
            "total_value_cents",
            "amount_paid_cents",
            "created_at",
            "updated_at",
        ],
    )
    df["total_value"] = df["total_value_cents"].astype(float) / 100.0
    df["amount_paid"] = df["amount_paid_cents"].astype(float) / 100.0
    df["remaining_debt"] = [
        remaining_debt(total, paid)
        for total, paid in zip(df["total_value"], df["amount_paid"])
    ]
    df["status"] = [
        compute_debt_status(total, paid)
        for total, paid in zip(df["total_value"], df["amount_paid"])
    ]
    df["created_at"] = pd.to_datetime(df["created_at"])
    df["updated_at"] = pd.to_datetime(df["updated_at"], errors="coerce")

    if status is not None:
        df = df[df["status"] == status].reset_index(drop=True)

    return df[SUPPLIER_COLUMNS]
