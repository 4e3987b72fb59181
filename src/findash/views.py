# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for FinDash.

This module turns records and metrics into DataFrames ready for console
display or CSV export. It does not compute anything: the figures come from
`metrics.py` and the service modules.

The main views are:

- summary:      the four dashboard cards (income, expenses, balance,
                savings),
- transactions: listing with a signed, human-readable amount,
- products:     warehouse listing with stock value and margin,
- suppliers:    supplier listing with the remaining debt and status.
"""

from typing import Optional

import pandas as pd

from .metrics import FinancialSummary


def format_currency(amount: float, symbol: str, decimals: int = 2) -> str:
    """
    Format an amount for display, e.g. ``format_currency(-1234.5, "Kz")``
    gives ``"-Kz 1,234.50"``.
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {abs(amount):,.{decimals}f}"


def summary_to_dataframe(
    summary: FinancialSummary,
    symbol: str,
    decimals: int = 2,
) -> pd.DataFrame:
    """Return the dashboard cards as a two-column (metric, value) table."""
    rows = [
        ("Total income", format_currency(summary.income, symbol, decimals)),
        ("Total expenses", format_currency(summary.expense, symbol, decimals)),
        ("Balance", format_currency(summary.balance, symbol, decimals)),
        ("Savings rate", f"{summary.savings_rate:.1f}%"),
        ("Estimated savings", format_currency(summary.estimated_savings, symbol, decimals)),
        ("Transactions", str(summary.transactions_count)),
    ]
    return pd.DataFrame(rows, columns=["metric", "value"])


def transactions_view(df: pd.DataFrame, decimals: int = 2) -> pd.DataFrame:
    """
    Select and order the columns shown for a transactions listing.

    The amount is signed (expenses negative) so that a listing reads like
    a bank statement. Sale metadata is only shown when present.
    """
    columns = ["id", "date", "title", "category", "type", "amount"]
    if df.empty:
        return pd.DataFrame(columns=columns)

    out = df.copy()
    signs = out["type"].map({"income": 1.0, "expense": -1.0})
    out["amount"] = (out["amount"].astype(float) * signs).round(decimals)
    out["date"] = pd.to_datetime(out["date"]).dt.date

    if "product_name" in out.columns and out["product_name"].notna().any():
        columns = columns + ["product_name", "quantity"]

    return out[[c for c in columns if c in out.columns]].reset_index(drop=True)


def products_view(df: pd.DataFrame, decimals: int = 2) -> pd.DataFrame:
    """Warehouse listing with stock value at cost and unit margin."""
    columns = [
        "id",
        "name",
        "unit",
        "quantity",
        "purchase_price",
        "selling_price",
        "margin",
        "stock_value",
        "discount",
        "tax",
        "duty",
        "category_name",
    ]
    if df.empty:
        return pd.DataFrame(columns=columns)

    out = df.copy()
    out["margin"] = (out["selling_price"] - out["purchase_price"]).round(decimals)
    out["stock_value"] = (out["purchase_price"] * out["quantity"]).round(decimals)
    out["category_name"] = out["category_name"].fillna("")
    return out[columns].reset_index(drop=True)


def suppliers_view(df: pd.DataFrame) -> pd.DataFrame:
    """Supplier listing without timestamps."""
    columns = [
        "id",
        "name",
        "product_supplied",
        "total_value",
        "amount_paid",
        "remaining_debt",
        "status",
    ]
    if df.empty:
        return pd.DataFrame(columns=columns)
    return df[columns].reset_index(drop=True)


def categories_view(df: pd.DataFrame) -> pd.DataFrame:
    """Category listing; images are reduced to a yes/no flag."""
    columns = ["id", "name", "description", "product_count", "has_image"]
    if df.empty:
        return pd.DataFrame(columns=columns)

    out = df.copy()
    out["description"] = out["description"].fillna("")
    out["has_image"] = out["image"].notna().map({True: "yes", False: "no"})
    return out[columns].reset_index(drop=True)


def key_values_to_dataframe(
    items: list[tuple[str, object]],
    columns: Optional[list[str]] = None,
) -> pd.DataFrame:
    """Build a two-column table from (label, value) pairs."""
    return pd.DataFrame(items, columns=columns or ["metric", "value"])
