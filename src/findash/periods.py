# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for FinDash.

This module defines a Period value object and helpers to derive the
dashboard periods (month to date, last month, year to date) from today's
date and CLI arguments. Without any period argument the dashboard covers
the whole history, which is represented by `None`.
"""

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

import pandas as pd

PERIOD_CHOICES = ("all", "mtd", "last-month", "ytd")


@dataclass
class Period:
    """Represents a reporting period with a human-readable label."""

    start: date
    end: date
    label: str


def _today() -> date:
    """Return today's date as a date object (isolated for easier testing)."""
    return datetime.today().date()


def period_mtd() -> Period:
    """Current month, from the 1st to today."""
    today = _today()
    return Period(start=today.replace(day=1), end=today, label="Month to date")


def period_last_month() -> Period:
    """Full previous calendar month."""
    today = _today()

    if today.month == 1:
        year = today.year - 1
        month = 12
    else:
        year = today.year
        month = today.month - 1

    start = date(year, month, 1)
    end = date(year, month, monthrange(year, month)[1])
    return Period(start=start, end=end, label=f"Last month ({start:%B %Y})")


def period_ytd() -> Period:
    """Calendar year to date."""
    today = _today()
    return Period(start=date(today.year, 1, 1), end=today, label="Year to date")


def determine_period_from_args(args) -> Optional[Period]:
    """
    Determine the reporting period to use based on CLI args.

    Priority (highest to lowest):

        1. args.period (all, mtd, last-month, ytd)
        2. args.from_date / args.to_date (custom period, open-ended on
           the missing side)
        3. None: the whole history

    Raises
    ------
    ValueError
        If the period name is unknown, a date is not ISO formatted, or the
        custom end date is before the start date.
    """
    # 1) Predefined period wins over everything else
    if getattr(args, "period", None):
        p = args.period
        if p == "all":
            return None
        if p == "mtd":
            return period_mtd()
        if p == "last-month":
            return period_last_month()
        if p == "ytd":
            return period_ytd()
        raise ValueError(f"Unknown period: {p!r}")

    # 2) Custom from/to dates
    from_raw: Optional[str] = getattr(args, "from_date", None)
    to_raw: Optional[str] = getattr(args, "to_date", None)

    if from_raw or to_raw:
        start = date.fromisoformat(from_raw) if from_raw else date.min
        end = date.fromisoformat(to_raw) if to_raw else date.max

        if end < start:
            raise ValueError("Custom period end date cannot be before start date.")

        start_label = str(start) if from_raw else "..."
        end_label = str(end) if to_raw else "..."
        label = f"Custom period ({start_label} → {end_label})"
        return Period(start=start, end=end, label=label)

    # 3) Default: everything
    return None


def period_label(period: Optional[Period]) -> str:
    """Return the label to print for a period, `None` meaning all time."""
    return period.label if period is not None else "All time"


def filter_transactions_by_period(
    transactions: pd.DataFrame,
    period: Optional[Period],
) -> pd.DataFrame:
    """
    Filter a transactions DataFrame to keep only rows within the period.

    The `transactions` DataFrame is expected to contain a 'date' column of
    type datetime64[ns] (as produced by `db.load_transactions` or
    `io.read_transactions`).

    Parameters
    ----------
    transactions:
        DataFrame with at least a 'date' column.
    period:
        Period defining the [start, end] boundaries (inclusive). None keeps
        every row.

    Returns
    -------
    pandas.DataFrame
        Filtered copy of the DataFrame.
    """
    if period is None:
        return transactions.copy()

    dates = pd.to_datetime(transactions["date"])
    mask = pd.Series(True, index=transactions.index)
    if period.start > date.min:
        mask &= dates >= pd.Timestamp(period.start)
    if period.end < date.max:
        mask &= dates <= pd.Timestamp(period.end)
    return transactions.loc[mask].copy()
