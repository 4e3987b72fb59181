# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for FinDash.

This module wires together the building blocks of FinDash:

- configuration (business, database, categories, display, logging),
- the database and the service modules (transactions, inventory, sales,
  suppliers),
- the metrics and insights layers,
- view helpers (tabular rendering and CSV export).

The CLI is intentionally thin: it does not implement business logic
itself. It parses arguments, calls the services and prints their results.


Default action: the dashboard
-----------------------------

Running ``findash`` without subcommand prints the dashboard for the
selected period:

1) summary cards (income, expenses, balance, savings rate, estimated
   savings),
2) monthly cash flow,
3) expenses by category,
4) recent transactions,
5) a quick tip.

Depending on ``--display-mode`` (or ``[display].mode`` in the config),
these tables are printed (``table``), written as timestamped CSV files
(``csv``) or both (``both``). CSV files go to ``data/output`` unless
``--output DIR`` is given.

Period selection
----------------

    --period all|mtd|last-month|ytd
    --from-date YYYY-MM-DD / --to-date YYYY-MM-DD

Without any of these, the whole history is used.

Subcommands
-----------

    transactions add|list|delete|categories
    products add|list|edit|delete
    warehouse
    categories add|list|assign|delete
    sales sell|history|clear
    suppliers add|list|pay|delete
    insights
    seed

Examples
--------

Load the sample data and show the dashboard:

    findash seed
    findash --period ytd

Record an expense and sell two bags of rice:

    findash transactions add --title "Electricity" --amount 15000 \\
        --type expense --category Housing
    findash sales sell 1 2

Import a bank export and write the dashboard as CSV:

    findash --import data/input/october.csv --display-mode csv


End of module description.
"""

import argparse
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .config import DISPLAY_MODES, AppConfig, load_app_config
from .db import (
    NewProduct,
    NewSupplier,
    ProductUpdate,
    TransactionsFilter,
    init_database,
    is_empty,
)
from .demo import load_demo_data
from .errors import FinDashError
from .insights import QUICK_TIP, generate_insights
from .inventory_service import (
    add_category,
    add_product,
    assign_products,
    edit_product,
    list_categories,
    list_products,
    remove_category,
    remove_product,
    warehouse_summary,
)
from .io import encode_image_file
from .logger import setup_logging
from .metrics import (
    compute_summary,
    expenses_by_category,
    monthly_cash_flow,
    recent_transactions,
)
from .periods import PERIOD_CHOICES, determine_period_from_args, period_label
from .sales_service import (
    clear_sales_history,
    sales_history,
    sales_total,
    sell_product,
)
from .suppliers_service import (
    add_supplier,
    debt_summary,
    list_suppliers,
    record_payment,
    remove_supplier,
)
from .transactions_service import (
    add_transaction,
    import_transactions_csv,
    list_transactions,
    load_transactions_for_period,
    remove_transaction,
    suggested_categories,
)
from .views import (
    categories_view,
    format_currency,
    key_values_to_dataframe,
    products_view,
    summary_to_dataframe,
    suppliers_view,
    transactions_view,
)

logger = logging.getLogger(__name__)


def _add_period_arguments(
    parser: argparse.ArgumentParser, default: object = None
) -> None:
    """
    Add --period / --from-date / --to-date to a (sub)parser.

    Subparsers pass `argparse.SUPPRESS` so that values given before the
    subcommand are not reset by the subcommand defaults.
    """
    parser.add_argument(
        "--period",
        default=default,
        choices=list(PERIOD_CHOICES),
        help=(
            "Predefined reporting period. One of: all, mtd, last-month, ytd. "
            "If not provided, the whole history is used."
        ),
    )
    parser.add_argument(
        "--from-date",
        dest="from_date",
        default=default,
        help="Custom period start date (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--to-date",
        dest="to_date",
        default=default,
        help="Custom period end date (YYYY-MM-DD).",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="findash",
        description=(
            "FinDash - Financial Dashboard & Inventory application for small "
            "businesses. Tracks income and expenses, warehouse stock, sales and "
            "supplier debts, and renders a financial dashboard."
        ),
    )

    # Generic options
    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of findash and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. "
            "If omitted, 'findash_config.toml' in the current directory is used "
            "when it exists, otherwise built-in defaults."
        ),
    )
    ap.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the logging.level setting from the configuration file.",
    )

    # Optional import: feed the database from a CSV file before running
    ap.add_argument(
        "--import",
        dest="import_path",
        metavar="CSV_PATH",
        help="Import transactions from the given CSV file before running.",
    )

    _add_period_arguments(ap)

    # Display options
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=list(DISPLAY_MODES),
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints results to stdout, "
            "'csv' writes CSV files only, "
            "'both' does both."
        ),
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help=(
            "Output directory where CSV files will be written when display "
            "mode includes 'csv'. If omitted, 'data/output' is used."
        ),
    )

    subparsers = ap.add_subparsers(
        dest="command",
        metavar="command",
        help="Optional subcommands. Without one, the dashboard is shown.",
    )

    # ------------------------------------------------------------------
    # transactions
    # ------------------------------------------------------------------
    tx_parser = subparsers.add_parser(
        "transactions",
        help="Record, list and delete income and expense transactions.",
    )
    tx_sub = tx_parser.add_subparsers(
        dest="transactions_command",
        metavar="transactions-command",
    )

    tx_add = tx_sub.add_parser("add", help="Record a new transaction.")
    tx_add.add_argument("--title", required=True, help="Transaction label.")
    tx_add.add_argument("--amount", type=float, required=True, help="Positive amount.")
    tx_add.add_argument(
        "--type",
        dest="tx_type",
        choices=["income", "expense"],
        required=True,
        help="Transaction type.",
    )
    tx_add.add_argument("--category", default="Other", help="Category name.")
    tx_add.add_argument(
        "--date",
        dest="tx_date",
        help="Transaction date (YYYY-MM-DD). Defaults to today.",
    )

    tx_list = tx_sub.add_parser("list", help="List transactions, newest first.")
    _add_period_arguments(tx_list, default=argparse.SUPPRESS)
    tx_list.add_argument(
        "--type",
        dest="tx_type",
        choices=["income", "expense"],
        help="Only list this type.",
    )
    tx_list.add_argument("--category", help="Filter by exact category.")
    tx_list.add_argument(
        "--title-contains",
        dest="title_contains",
        help="Case-insensitive substring to search in the title.",
    )
    tx_list.add_argument(
        "--min-amount",
        dest="min_amount",
        type=float,
        help="Minimum amount (inclusive).",
    )
    tx_list.add_argument(
        "--max-amount",
        dest="max_amount",
        type=float,
        help="Maximum amount (inclusive).",
    )
    tx_list.add_argument("--limit", type=int, help="Maximum number of rows.")
    tx_list.add_argument("--offset", type=int, default=0, help="Rows to skip.")
    tx_list.add_argument(
        "--order-by",
        dest="order_by",
        choices=["date", "amount", "title", "category", "id"],
        default="date",
        help="Column used to sort transactions (default: date).",
    )
    tx_list.add_argument(
        "--order-direction",
        dest="order_direction",
        choices=["asc", "desc"],
        default="desc",
        help="Sort direction (default: desc).",
    )

    tx_delete = tx_sub.add_parser("delete", help="Delete a transaction by id.")
    tx_delete.add_argument("transaction_id", type=int)

    tx_categories = tx_sub.add_parser(
        "categories",
        help="Show the suggested categories for each transaction type.",
    )
    tx_categories.add_argument(
        "--type",
        dest="tx_type",
        choices=["income", "expense"],
        help="Only show the categories of this type.",
    )

    # ------------------------------------------------------------------
    # products
    # ------------------------------------------------------------------
    products_parser = subparsers.add_parser(
        "products",
        help="Manage warehouse products.",
    )
    products_sub = products_parser.add_subparsers(
        dest="products_command",
        metavar="products-command",
    )

    products_add = products_sub.add_parser("add", help="Add a product.")
    products_add.add_argument("--name", required=True)
    products_add.add_argument("--unit", required=True, help="e.g. 'Bag 25kg'.")
    products_add.add_argument("--quantity", type=int, default=0)
    products_add.add_argument(
        "--purchase-price", dest="purchase_price", type=float, required=True
    )
    products_add.add_argument(
        "--selling-price", dest="selling_price", type=float, required=True
    )
    products_add.add_argument("--discount", type=float, default=0.0, help="Percent.")
    products_add.add_argument("--tax", type=float, default=0.0, help="Percent.")
    products_add.add_argument("--duty", type=float, default=0.0, help="Percent.")
    products_add.add_argument(
        "--image",
        dest="image_path",
        help="Image file stored with the product.",
    )
    products_add.add_argument("--category-id", dest="category_id", type=int)

    products_list = products_sub.add_parser("list", help="List products.")
    products_list.add_argument("--category-id", dest="category_id", type=int)
    products_list.add_argument(
        "--in-stock",
        dest="in_stock",
        action="store_true",
        help="Only list products with stock.",
    )

    products_edit = products_sub.add_parser("edit", help="Edit a product.")
    products_edit.add_argument("product_id", type=int)
    products_edit.add_argument("--name")
    products_edit.add_argument("--unit")
    products_edit.add_argument("--quantity", type=int)
    products_edit.add_argument("--purchase-price", dest="purchase_price", type=float)
    products_edit.add_argument("--selling-price", dest="selling_price", type=float)
    products_edit.add_argument("--discount", type=float)
    products_edit.add_argument("--tax", type=float)
    products_edit.add_argument("--duty", type=float)
    products_edit.add_argument("--image", dest="image_path")
    products_edit.add_argument("--category-id", dest="category_id", type=int)
    products_edit.add_argument(
        "--clear-category",
        dest="clear_category",
        action="store_true",
        help="Remove the product from its category.",
    )
    products_edit.add_argument(
        "--clear-image",
        dest="clear_image",
        action="store_true",
        help="Remove the product image.",
    )

    products_delete = products_sub.add_parser("delete", help="Delete a product.")
    products_delete.add_argument("product_id", type=int)

    # ------------------------------------------------------------------
    # warehouse
    # ------------------------------------------------------------------
    subparsers.add_parser(
        "warehouse",
        help="Show stock value and potential revenue of the warehouse.",
    )

    # ------------------------------------------------------------------
    # categories
    # ------------------------------------------------------------------
    categories_parser = subparsers.add_parser(
        "categories",
        help="Manage product categories.",
    )
    categories_sub = categories_parser.add_subparsers(
        dest="categories_command",
        metavar="categories-command",
    )

    categories_add = categories_sub.add_parser("add", help="Create a category.")
    categories_add.add_argument("--name", required=True)
    categories_add.add_argument("--description")
    categories_add.add_argument("--image", dest="image_path")
    categories_add.add_argument(
        "--product-id",
        dest="product_ids",
        type=int,
        action="append",
        default=[],
        help="Product to assign to the new category (repeatable).",
    )

    categories_sub.add_parser("list", help="List categories.")

    categories_assign = categories_sub.add_parser(
        "assign",
        help="Assign products to a category.",
    )
    categories_assign.add_argument("category_id", type=int)
    categories_assign.add_argument(
        "--product-id",
        dest="product_ids",
        type=int,
        action="append",
        required=True,
        help="Product to assign (repeatable).",
    )

    categories_delete = categories_sub.add_parser("delete", help="Delete a category.")
    categories_delete.add_argument("category_id", type=int)

    # ------------------------------------------------------------------
    # sales
    # ------------------------------------------------------------------
    sales_parser = subparsers.add_parser(
        "sales",
        help="Point of sale and cash register.",
    )
    sales_sub = sales_parser.add_subparsers(
        dest="sales_command",
        metavar="sales-command",
    )

    sales_sell = sales_sub.add_parser("sell", help="Sell units of a product.")
    sales_sell.add_argument("product_id", type=int)
    sales_sell.add_argument("quantity", type=int)
    sales_sell.add_argument(
        "--date",
        dest="sale_date",
        help="Sale date (YYYY-MM-DD). Defaults to today.",
    )

    sales_history_parser = sales_sub.add_parser(
        "history",
        help="Show the cash register (sales, newest first).",
    )
    _add_period_arguments(sales_history_parser, default=argparse.SUPPRESS)
    sales_history_parser.add_argument("--limit", type=int)

    sales_clear = sales_sub.add_parser(
        "clear",
        help="Permanently delete the sales history.",
    )
    sales_clear.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation.",
    )

    # ------------------------------------------------------------------
    # suppliers
    # ------------------------------------------------------------------
    suppliers_parser = subparsers.add_parser(
        "suppliers",
        help="Track what is owed to suppliers.",
    )
    suppliers_sub = suppliers_parser.add_subparsers(
        dest="suppliers_command",
        metavar="suppliers-command",
    )

    suppliers_add = suppliers_sub.add_parser("add", help="Register a supplier.")
    suppliers_add.add_argument("--name", required=True)
    suppliers_add.add_argument("--product", dest="product_supplied", required=True)
    suppliers_add.add_argument("--total", dest="total_value", type=float, required=True)
    suppliers_add.add_argument("--paid", dest="amount_paid", type=float, default=0.0)

    suppliers_list = suppliers_sub.add_parser("list", help="List suppliers.")
    suppliers_list.add_argument("--status", choices=["paid", "debt"])

    suppliers_pay = suppliers_sub.add_parser("pay", help="Record a payment.")
    suppliers_pay.add_argument("supplier_id", type=int)
    suppliers_pay.add_argument("amount", type=float)

    suppliers_delete = suppliers_sub.add_parser("delete", help="Delete a supplier.")
    suppliers_delete.add_argument("supplier_id", type=int)

    # ------------------------------------------------------------------
    # insights / seed
    # ------------------------------------------------------------------
    insights_parser = subparsers.add_parser(
        "insights",
        help="Generate the financial insights report.",
    )
    _add_period_arguments(insights_parser, default=argparse.SUPPRESS)

    seed_parser = subparsers.add_parser(
        "seed",
        help="Load the sample transactions and products.",
    )
    seed_parser.add_argument(
        "--force",
        action="store_true",
        help="Load the sample data even if the database is not empty.",
    )

    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD).

    Raises
    ------
    SystemExit
        If the date format is invalid.
    """
    if value is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid date format: {value!r}. Expected YYYY-MM-DD."
        raise SystemExit(msg) from exc


def _print_table(title: str, df: pd.DataFrame, empty_message: str) -> None:
    print()
    print(f"=== {title} ===")
    if df.empty:
        print(empty_message)
    else:
        print(df.to_string(index=False))


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def _run_dashboard(args: argparse.Namespace, config: AppConfig) -> None:
    """
    Render the dashboard for the selected period.

    Tables are printed and/or written to CSV according to the display mode.
    """
    period = determine_period_from_args(args)
    transactions = load_transactions_for_period(config, period)

    print(f"{config.business_name} - financial dashboard")
    print(f"Applied period: {period_label(period)}")
    print(f"Transactions retrieved from database for period: {len(transactions)}")

    symbol = config.currency_symbol
    summary = compute_summary(transactions)

    tables = [
        (
            "summary",
            "Summary",
            summary_to_dataframe(summary, symbol, config.decimals),
        ),
        (
            "monthly_cash_flow",
            "Monthly cash flow",
            monthly_cash_flow(transactions),
        ),
        (
            "expenses_by_category",
            "Expenses by category",
            expenses_by_category(transactions),
        ),
        (
            "recent_transactions",
            "Recent transactions",
            transactions_view(
                recent_transactions(transactions, config.recent_count),
                config.decimals,
            ),
        ),
    ]

    # Display mode: config value overridden by CLI if provided.
    display_mode = args.display_mode or config.display_mode

    if display_mode in {"table", "both"}:
        for _, title, df in tables:
            _print_table(title, df, "No data for the selected period.")
        print()
        print(f"Tip: {QUICK_TIP}")

    if display_mode in {"csv", "both"}:
        output_dir = Path(args.output_dir) if args.output_dir else Path("data/output")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        for name, _, df in tables:
            path = output_dir / f"{name}_{timestamp}.csv"
            df.to_csv(path, index=False)
            print(f"Wrote {path} ({len(df)} rows)")


# ---------------------------------------------------------------------------
# transactions
# ---------------------------------------------------------------------------


def _handle_transactions_add(args: argparse.Namespace, config: AppConfig) -> None:
    tx = add_transaction(
        config,
        title=args.title,
        amount=args.amount,
        tx_type=args.tx_type,
        category=args.category,
        tx_date=_parse_optional_date(args.tx_date),
    )
    print(
        f"Recorded {tx.type} #{tx.id}: {tx.title} "
        f"({tx.category}, {tx.date.isoformat()}) "
        f"{format_currency(tx.amount, config.currency_symbol, config.decimals)}"
    )


def _handle_transactions_list(args: argparse.Namespace, config: AppConfig) -> None:
    period = determine_period_from_args(args)
    extra_filters = TransactionsFilter(
        type=args.tx_type,
        category=args.category,
        title_contains=args.title_contains,
        min_amount=args.min_amount,
        max_amount=args.max_amount,
    )

    df = list_transactions(
        config,
        period,
        extra_filters,
        limit=args.limit,
        offset=args.offset,
        order_by=(args.order_by, args.order_direction.upper()),
    )

    print(f"Applied period: {period_label(period)}")
    if df.empty:
        print("No transactions found for the given criteria.")
        return

    print()
    print(transactions_view(df, config.decimals).to_string(index=False))

    summary = compute_summary(df)
    symbol = config.currency_symbol
    print()
    print(
        f"Total transactions: {len(df)} | "
        f"Income: {format_currency(summary.income, symbol, config.decimals)} | "
        f"Expenses: {format_currency(summary.expense, symbol, config.decimals)}"
    )


def _handle_transactions_delete(args: argparse.Namespace, config: AppConfig) -> None:
    tx = remove_transaction(config, args.transaction_id)
    print(f"Deleted transaction #{tx.id}: {tx.title} ({tx.date.isoformat()})")


def _handle_transactions_categories(args: argparse.Namespace, config: AppConfig) -> None:
    types = [args.tx_type] if args.tx_type else ["income", "expense"]
    for tx_type in types:
        names = ", ".join(suggested_categories(config, tx_type))
        print(f"{tx_type}: {names}")
    print(f"sales: {config.categories.sales}")


def _handle_transactions_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Dispatch function for the 'transactions' subcommands."""
    subcmd = getattr(args, "transactions_command", None)

    if subcmd == "add":
        _handle_transactions_add(args, config)
    elif subcmd == "list":
        _handle_transactions_list(args, config)
    elif subcmd == "delete":
        _handle_transactions_delete(args, config)
    elif subcmd == "categories":
        _handle_transactions_categories(args, config)
    else:
        print(
            "No transactions subcommand specified. "
            "Available subcommands are: 'add', 'list', 'delete', 'categories'."
        )


# ---------------------------------------------------------------------------
# products / warehouse
# ---------------------------------------------------------------------------


def _handle_products_add(args: argparse.Namespace, config: AppConfig) -> None:
    image = encode_image_file(args.image_path) if args.image_path else None
    product = add_product(
        config,
        NewProduct(
            name=args.name,
            unit=args.unit,
            quantity=args.quantity,
            purchase_price=args.purchase_price,
            selling_price=args.selling_price,
            discount=args.discount,
            tax=args.tax,
            duty=args.duty,
            image=image,
            category_id=args.category_id,
        ),
    )
    print(f"Added product #{product.id}: {product.name} ({product.quantity} x {product.unit})")


def _handle_products_list(args: argparse.Namespace, config: AppConfig) -> None:
    df = list_products(config, category_id=args.category_id, in_stock_only=args.in_stock)
    if df.empty:
        print("No products found.")
        return
    print(products_view(df, config.decimals).to_string(index=False))


def _handle_products_edit(args: argparse.Namespace, config: AppConfig) -> None:
    image = encode_image_file(args.image_path) if args.image_path else None
    update = ProductUpdate(
        name=args.name,
        unit=args.unit,
        quantity=args.quantity,
        purchase_price=args.purchase_price,
        selling_price=args.selling_price,
        discount=args.discount,
        tax=args.tax,
        duty=args.duty,
        image=image,
        category_id=args.category_id,
        clear_category=args.clear_category,
        clear_image=args.clear_image,
    )
    product = edit_product(config, args.product_id, update)
    print(f"Updated product #{product.id}: {product.name} ({product.quantity} in stock)")


def _handle_products_delete(args: argparse.Namespace, config: AppConfig) -> None:
    product = remove_product(config, args.product_id)
    print(f"Deleted product #{product.id}: {product.name}")


def _handle_products_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Dispatch function for the 'products' subcommands."""
    subcmd = getattr(args, "products_command", None)

    if subcmd == "add":
        _handle_products_add(args, config)
    elif subcmd == "list":
        _handle_products_list(args, config)
    elif subcmd == "edit":
        _handle_products_edit(args, config)
    elif subcmd == "delete":
        _handle_products_delete(args, config)
    else:
        print(
            "No products subcommand specified. "
            "Available subcommands are: 'add', 'list', 'edit', 'delete'."
        )


def _handle_warehouse(args: argparse.Namespace, config: AppConfig) -> None:
    summary = warehouse_summary(config)
    symbol = config.currency_symbol
    decimals = config.decimals

    table = key_values_to_dataframe(
        [
            ("Products", summary.product_count),
            ("Available", summary.available_count),
            ("Out of stock", summary.out_of_stock_count),
            ("Units in stock", summary.total_units),
            ("Stock value (cost)", format_currency(summary.stock_value, symbol, decimals)),
            (
                "Potential revenue",
                format_currency(summary.potential_revenue, symbol, decimals),
            ),
            (
                "Potential margin",
                format_currency(summary.potential_margin, symbol, decimals),
            ),
        ]
    )
    _print_table("Warehouse", table, "")

    df = list_products(config)
    _print_table("Products", products_view(df, decimals), "No products in the warehouse.")


# ---------------------------------------------------------------------------
# categories
# ---------------------------------------------------------------------------


def _handle_categories_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Dispatch function for the 'categories' subcommands."""
    subcmd = getattr(args, "categories_command", None)

    if subcmd == "add":
        image = encode_image_file(args.image_path) if args.image_path else None
        category = add_category(
            config,
            args.name,
            description=args.description,
            image=image,
            product_ids=args.product_ids,
        )
        print(
            f"Created category #{category.id}: {category.name} "
            f"({category.product_count} product(s))"
        )
    elif subcmd == "list":
        df = list_categories(config)
        if df.empty:
            print("No categories found.")
            return
        print(categories_view(df).to_string(index=False))
    elif subcmd == "assign":
        category = assign_products(config, args.category_id, args.product_ids)
        print(
            f"Category #{category.id} {category.name} now holds "
            f"{category.product_count} product(s)."
        )
    elif subcmd == "delete":
        category = remove_category(config, args.category_id)
        print(f"Deleted category #{category.id}: {category.name}")
    else:
        print(
            "No categories subcommand specified. "
            "Available subcommands are: 'add', 'list', 'assign', 'delete'."
        )


# ---------------------------------------------------------------------------
# sales
# ---------------------------------------------------------------------------


def _handle_sales_sell(args: argparse.Namespace, config: AppConfig) -> None:
    receipt = sell_product(
        config,
        args.product_id,
        args.quantity,
        sold_on=_parse_optional_date(args.sale_date),
    )
    symbol = config.currency_symbol
    print(
        f"Sold {receipt.quantity} x {receipt.product.name} for "
        f"{format_currency(receipt.total, symbol, config.decimals)} "
        f"(transaction #{receipt.transaction.id})."
    )
    print(f"Remaining stock: {receipt.product.quantity} {receipt.product.unit}")


def _handle_sales_history(args: argparse.Namespace, config: AppConfig) -> None:
    period = determine_period_from_args(args)
    df = sales_history(config, period, limit=args.limit)

    print(f"Applied period: {period_label(period)}")
    if df.empty:
        print("No sales recorded.")
        return

    columns = ["id", "date", "title", "product_name", "quantity", "amount"]
    print()
    print(df[columns].to_string(index=False))

    total = sales_total(config, period)
    print()
    print(
        f"Sales shown: {len(df)} | "
        f"Cash register: {format_currency(total, config.currency_symbol, config.decimals)}"
    )


def _handle_sales_clear(args: argparse.Namespace, config: AppConfig) -> None:
    if not args.yes:
        answer = input(
            "This permanently deletes the whole sales history. Continue? [y/N] "
        )
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted.")
            return

    deleted = clear_sales_history(config)
    print(f"Deleted {deleted} sale transaction(s).")


def _handle_sales_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Dispatch function for the 'sales' subcommands."""
    subcmd = getattr(args, "sales_command", None)

    if subcmd == "sell":
        _handle_sales_sell(args, config)
    elif subcmd == "history":
        _handle_sales_history(args, config)
    elif subcmd == "clear":
        _handle_sales_clear(args, config)
    else:
        print(
            "No sales subcommand specified. "
            "Available subcommands are: 'sell', 'history', 'clear'."
        )


# ---------------------------------------------------------------------------
# suppliers
# ---------------------------------------------------------------------------


def _handle_suppliers_list(args: argparse.Namespace, config: AppConfig) -> None:
    df = list_suppliers(config, status=args.status)
    if df.empty:
        print("No suppliers found.")
    else:
        print(suppliers_view(df).to_string(index=False))

    summary = debt_summary(config)
    symbol = config.currency_symbol
    print()
    print(
        f"Suppliers: {summary.supplier_count} | In debt: {summary.suppliers_in_debt} | "
        f"Outstanding: {format_currency(summary.outstanding_debt, symbol, config.decimals)}"
    )


def _handle_suppliers_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Dispatch function for the 'suppliers' subcommands."""
    subcmd = getattr(args, "suppliers_command", None)
    symbol = config.currency_symbol

    if subcmd == "add":
        supplier = add_supplier(
            config,
            NewSupplier(
                name=args.name,
                product_supplied=args.product_supplied,
                total_value=args.total_value,
                amount_paid=args.amount_paid,
            ),
        )
        print(
            f"Added supplier #{supplier.id}: {supplier.name} "
            f"[{supplier.status}] remaining "
            f"{format_currency(supplier.remaining_debt, symbol, config.decimals)}"
        )
    elif subcmd == "list":
        _handle_suppliers_list(args, config)
    elif subcmd == "pay":
        supplier = record_payment(config, args.supplier_id, args.amount)
        print(
            f"Payment recorded for {supplier.name}: paid "
            f"{format_currency(supplier.amount_paid, symbol, config.decimals)} of "
            f"{format_currency(supplier.total_value, symbol, config.decimals)} "
            f"[{supplier.status}]"
        )
    elif subcmd == "delete":
        supplier = remove_supplier(config, args.supplier_id)
        print(f"Deleted supplier #{supplier.id}: {supplier.name}")
    else:
        print(
            "No suppliers subcommand specified. "
            "Available subcommands are: 'add', 'list', 'pay', 'delete'."
        )


# ---------------------------------------------------------------------------
# insights / seed
# ---------------------------------------------------------------------------


def _handle_insights(args: argparse.Namespace, config: AppConfig) -> None:
    period = determine_period_from_args(args)
    transactions = load_transactions_for_period(config, period)
    report = generate_insights(
        transactions,
        config.currency_symbol,
        recent_count=config.insights_recent_count,
    )

    print(f"Applied period: {period_label(period)}")
    print()
    print(report.to_markdown(), end="")


def _handle_seed(args: argparse.Namespace, config: AppConfig) -> None:
    result = load_demo_data(config, force=args.force)
    if result.transactions == 0 and result.products == 0:
        print("Database is not empty: demo data not loaded (use --force to load anyway).")
        return
    print(
        f"Loaded demo data: {result.transactions} transactions, "
        f"{result.products} products."
    )


_COMMAND_HANDLERS = {
    "transactions": _handle_transactions_command,
    "products": _handle_products_command,
    "warehouse": _handle_warehouse,
    "categories": _handle_categories_command,
    "sales": _handle_sales_command,
    "suppliers": _handle_suppliers_command,
    "insights": _handle_insights,
    "seed": _handle_seed,
}


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the FinDash CLI.

    This function parses command-line arguments, loads the configuration,
    sets up logging, initializes the database, optionally imports
    transactions from a CSV file, and then either runs the requested
    subcommand or renders the dashboard.

    Business errors (invalid input, unknown ids, insufficient stock) are
    reported as a one-line message and a non-zero exit status.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # --version: short-circuit and exit early.
    if args.version:
        print(f"findash version {__version__}")
        return

    # 1) Load application configuration
    config = load_app_config(args.config_path)

    # 2) Logging
    setup_logging(args.log_level or config.log_level, config.log_file)
    logger.debug("Using database %s", config.database.path)

    # 3) Initialize the database (create file and schema if needed)
    init_database(config.database)

    try:
        # 4) Optional import from CSV into the database
        if args.import_path:
            csv_path = Path(args.import_path)
            if not csv_path.is_file():
                parser.error(f"CSV file for --import not found: {csv_path}")

            print(f"Importing transactions from {csv_path} into the database...")
            inserted = import_transactions_csv(config, csv_path)
            print(f"Imported {inserted} transactions.")

        command = getattr(args, "command", None)
        if command is not None:
            _COMMAND_HANDLERS[command](args, config)
            return

        if not args.import_path and is_empty(config.database):
            print(
                "Warning: database is empty - use 'findash seed' to load sample "
                "data or --import to load transactions."
            )

        _run_dashboard(args, config)
    except (FinDashError, ValueError, FileNotFoundError) as exc:
        logger.debug("Command failed", exc_info=True)
        raise SystemExit(f"Error: {exc}") from exc


if __name__ == "__main__":
    main()
