# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Derived financial metrics for FinDash.

This module computes everything the dashboard shows on top of the raw
transactions. All functions are pure: they take a transactions DataFrame
(as returned by `db.load_transactions`, with at least the columns date,
title, type, category and amount) and return plain values or DataFrames.

1. Summary cards
   -------------
   `compute_summary()` returns a FinancialSummary with total income,
   total expense, balance, savings rate and estimated savings.

2. Chart series
   ------------
   - `monthly_cash_flow()`: income and expense per calendar month.
   - `expenses_by_category()`: expense totals per category (the data
     behind the category breakdown).
   - `totals_by_category()`: totals per (type, category).

3. Recent activity
   ---------------
   `recent_transactions()` returns the newest transactions first.

Amounts in the input are positive; the `type` column tells incomes from
expenses.
"""

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class FinancialSummary:
    """
    Headline figures of the dashboard.

    Attributes
    ----------
    income, expense:
        Sums of income and expense amounts.
    balance:
        income - expense.
    savings_rate:
        Percentage of income kept: balance / income * 100, or 0.0 when
        there is no income.
    estimated_savings:
        The positive part of the balance.
    transactions_count:
        Number of transactions summarized.
    """

    income: float
    expense: float
    balance: float
    savings_rate: float
    estimated_savings: float
    transactions_count: int


def _sum_by_type(transactions: pd.DataFrame, tx_type: str) -> float:
    if transactions.empty:
        return 0.0
    mask = transactions["type"] == tx_type
    return round(float(transactions.loc[mask, "amount"].astype(float).sum()), 2)


def compute_summary(transactions: pd.DataFrame) -> FinancialSummary:
    """Compute the summary cards over a transactions DataFrame."""
    income = _sum_by_type(transactions, "income")
    expense = _sum_by_type(transactions, "expense")
    balance = round(income - expense, 2)
    savings_rate = (balance / income) * 100.0 if income > 0 else 0.0

    return FinancialSummary(
        income=income,
        expense=expense,
        balance=balance,
        savings_rate=savings_rate,
        estimated_savings=max(balance, 0.0),
        transactions_count=int(len(transactions)),
    )


def monthly_cash_flow(transactions: pd.DataFrame) -> pd.DataFrame:
    """
    Income and expense per calendar month, in chronological order.

    Months are keyed by year and month, so that the same month of two
    different years never merges.

    Returns
    -------
    pandas.DataFrame
        Columns: month ("YYYY-MM"), label ("Jan 2025"), income, expense,
        balance. Months without any transaction are not listed.
    """
    columns = ["month", "label", "income", "expense", "balance"]
    if transactions.empty:
        return pd.DataFrame(columns=columns)

    df = transactions[["date", "type", "amount"]].copy()
    df["date"] = pd.to_datetime(df["date"])
    df["month"] = df["date"].dt.strftime("%Y-%m")
    df["amount"] = df["amount"].astype(float)

    pivot = df.pivot_table(
        index="month",
        columns="type",
        values="amount",
        aggfunc="sum",
        fill_value=0.0,
    )
    for tx_type in ("income", "expense"):
        if tx_type not in pivot.columns:
            pivot[tx_type] = 0.0

    out = pivot[["income", "expense"]].sort_index().reset_index()
    out.columns.name = None
    out["income"] = out["income"].round(2)
    out["expense"] = out["expense"].round(2)
    out["balance"] = (out["income"] - out["expense"]).round(2)
    out["label"] = pd.to_datetime(out["month"], format="%Y-%m").dt.strftime("%b %Y")
    return out[columns]


def expenses_by_category(transactions: pd.DataFrame) -> pd.DataFrame:
    """
    Expense totals per category, largest first.

    Returns
    -------
    pandas.DataFrame
        Columns: category, amount, share (percentage of total expenses).
        Ties are broken by category name.
    """
    columns = ["category", "amount", "share"]
    if transactions.empty:
        return pd.DataFrame(columns=columns)

    expenses = transactions[transactions["type"] == "expense"]
    if expenses.empty:
        return pd.DataFrame(columns=columns)

    out = (
        expenses.assign(amount=expenses["amount"].astype(float))
        .groupby("category", as_index=False)["amount"]
        .sum()
    )
    total = float(out["amount"].sum())
    out["amount"] = out["amount"].round(2)
    out["share"] = (out["amount"] / total * 100.0).round(2) if total else 0.0
    out = out.sort_values(
        ["amount", "category"], ascending=[False, True], kind="stable"
    ).reset_index(drop=True)
    return out[columns]


def totals_by_category(transactions: pd.DataFrame) -> pd.DataFrame:
    """
    Totals per (type, category), incomes first then expenses, largest first.

    Returns
    -------
    pandas.DataFrame
        Columns: type, category, amount, count.
    """
    columns = ["type", "category", "amount", "count"]
    if transactions.empty:
        return pd.DataFrame(columns=columns)

    df = transactions.assign(amount=transactions["amount"].astype(float))
    out = df.groupby(["type", "category"], as_index=False).agg(
        amount=("amount", "sum"),
        count=("amount", "size"),
    )
    out["amount"] = out["amount"].round(2)
    out["__type_order__"] = out["type"].map({"income": 0, "expense": 1})
    out = out.sort_values(
        ["__type_order__", "amount", "category"],
        ascending=[True, False, True],
        kind="stable",
    ).drop(columns=["__type_order__"])
    return out.reset_index(drop=True)[columns]


def recent_transactions(transactions: pd.DataFrame, n: int = 4) -> pd.DataFrame:
    """
    Return the `n` most recent transactions, newest first.

    Transactions sharing a date keep their reverse insertion order.
    """
    if transactions.empty or n <= 0:
        return transactions.head(0).copy()

    df = transactions.copy()
    df["__pos__"] = range(len(df))
    df["__date__"] = pd.to_datetime(df["date"])
    df = df.sort_values(["__date__", "__pos__"], ascending=[False, False])
    return df.drop(columns=["__pos__", "__date__"]).head(n).reset_index(drop=True)
