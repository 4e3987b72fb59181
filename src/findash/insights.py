# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Rule-based financial insights for FinDash.

`generate_insights()` turns a transactions DataFrame into a short advisory
report, built only from aggregate figures computed by `metrics.py`:

1. Financial health: a verdict driven by the savings rate.
2. Three practical tips, chosen by rules over the largest expense
   category, the share of essential spending (housing and food) in income
   and the savings rate.
3. Concerning patterns: a single category dominating expenses, expenses
   exceeding income, expenses without any recorded income.
4. Recent activity: the last transactions, quoted for context.

The same input always produces the same report.
"""

from dataclasses import dataclass, field

import pandas as pd

from .metrics import (
    FinancialSummary,
    compute_summary,
    expenses_by_category,
    recent_transactions,
)
from .views import format_currency

ESSENTIAL_CATEGORIES = ("housing", "food")
ESSENTIALS_LIMIT_PCT = 50.0
CATEGORY_CONCENTRATION_PCT = 40.0
TARGET_SAVINGS_RATE_PCT = 20.0
WEAK_SAVINGS_RATE_PCT = 10.0

QUICK_TIP = (
    "Try to keep essential expenses (housing, food) below 50% of your income "
    "and set the rest aside for savings and growth."
)

_GENERIC_TIPS = (
    "Record every transaction, including small cash purchases, so that the "
    "monthly figures reflect reality.",
    "Review supplier balances every month and settle the oldest debts first.",
    "Compare each month with the previous one and investigate any category "
    "that grows without a clear reason.",
)


@dataclass(frozen=True)
class InsightReport:
    """
    Output of the insights generator.

    `health` is a single paragraph, `tips` always holds three items when
    there is data, `concerns` lists the detected patterns and `recent`
    holds one formatted line per quoted transaction.
    """

    summary: FinancialSummary
    health: str
    tips: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)
    recent: list[str] = field(default_factory=list)
    has_data: bool = True

    def to_markdown(self) -> str:
        """Render the report as Markdown text."""
        lines: list[str] = ["# Financial insights", ""]

        lines += ["## Financial health", "", self.health, ""]
        if not self.has_data:
            return "\n".join(lines).rstrip() + "\n"

        lines += ["## Practical tips", ""]
        lines += [f"{i}. {tip}" for i, tip in enumerate(self.tips, start=1)]
        lines.append("")

        lines += ["## Concerning patterns", ""]
        lines += [f"- {concern}" for concern in self.concerns]
        lines.append("")

        if self.recent:
            lines += ["## Recent transactions", ""]
            lines += [f"- {line}" for line in self.recent]
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"


def _health_assessment(summary: FinancialSummary, symbol: str) -> str:
    income = format_currency(summary.income, symbol)
    expense = format_currency(summary.expense, symbol)
    rate = f"{summary.savings_rate:.1f}%"

    if summary.income <= 0:
        return (
            f"No income was recorded while expenses reached {expense}. "
            "The business is consuming its reserves."
        )
    if summary.balance < 0:
        return (
            f"Expenses ({expense}) exceed income ({income}), leaving a deficit "
            f"of {format_currency(-summary.balance, symbol)}. "
            "The current spending level is not sustainable."
        )
    if summary.savings_rate < WEAK_SAVINGS_RATE_PCT:
        return (
            f"Income ({income}) barely covers expenses ({expense}): the savings "
            f"rate is {rate}. There is very little margin for unexpected costs."
        )
    if summary.savings_rate < TARGET_SAVINGS_RATE_PCT:
        return (
            f"Finances are stable with a savings rate of {rate} "
            f"({income} in, {expense} out), below the {TARGET_SAVINGS_RATE_PCT:.0f}% "
            "target."
        )
    return (
        f"Finances are healthy: {rate} of income is kept "
        f"({income} in, {expense} out)."
    )


def _essentials_share(
    by_category: pd.DataFrame,
    summary: FinancialSummary,
) -> tuple[float, float]:
    """Return (essential expenses, share of income in percent)."""
    if by_category.empty:
        return 0.0, 0.0
    mask = by_category["category"].str.lower().isin(ESSENTIAL_CATEGORIES)
    essentials = round(float(by_category.loc[mask, "amount"].sum()), 2)
    if summary.income <= 0:
        return essentials, 0.0
    return essentials, essentials / summary.income * 100.0


def _tips(
    summary: FinancialSummary,
    by_category: pd.DataFrame,
    symbol: str,
) -> list[str]:
    tips: list[str] = []

    if not by_category.empty:
        top = by_category.iloc[0]
        tips.append(
            f"Your largest expense category is {top['category']} "
            f"({format_currency(float(top['amount']), symbol)}, "
            f"{float(top['share']):.1f}% of expenses). Review it first when "
            "looking for savings."
        )

    essentials, essentials_pct = _essentials_share(by_category, summary)
    if summary.income > 0 and essentials > 0:
        if essentials_pct > ESSENTIALS_LIMIT_PCT:
            tips.append(
                f"Essential expenses (housing, food) take {essentials_pct:.1f}% of "
                f"income, above the {ESSENTIALS_LIMIT_PCT:.0f}% guideline. Look for "
                "cheaper suppliers or renegotiate fixed costs."
            )
        else:
            tips.append(
                f"Essential expenses (housing, food) take {essentials_pct:.1f}% of "
                f"income, within the {ESSENTIALS_LIMIT_PCT:.0f}% guideline."
            )

    if summary.income > 0:
        if summary.savings_rate < TARGET_SAVINGS_RATE_PCT:
            target = summary.income * TARGET_SAVINGS_RATE_PCT / 100.0
            gap = target - max(summary.balance, 0.0)
            tips.append(
                f"Aim to save at least {TARGET_SAVINGS_RATE_PCT:.0f}% of income: "
                f"cutting expenses by {format_currency(gap, symbol)} would reach "
                "that target."
            )
        else:
            tips.append(
                "Keep the current savings pace and build a reserve covering "
                f"three months of expenses ({format_currency(summary.expense * 3, symbol)})."
            )

    for generic in _GENERIC_TIPS:
        if len(tips) >= 3:
            break
        tips.append(generic)

    return tips[:3]


def _concerns(
    summary: FinancialSummary,
    by_category: pd.DataFrame,
    symbol: str,
) -> list[str]:
    concerns: list[str] = []

    if not by_category.empty:
        dominant = by_category[by_category["share"] > CATEGORY_CONCENTRATION_PCT]
        for _, row in dominant.iterrows():
            concerns.append(
                f"{row['category']} alone accounts for {float(row['share']):.1f}% of "
                f"expenses (more than {CATEGORY_CONCENTRATION_PCT:.0f}%)."
            )

    if summary.income <= 0 and summary.expense > 0:
        concerns.append("Expenses were recorded without any income.")
    elif summary.expense > summary.income:
        concerns.append(
            f"Expenses exceed income by "
            f"{format_currency(summary.expense - summary.income, symbol)}."
        )

    if not concerns:
        concerns.append("No concerning pattern detected.")
    return concerns


def _format_recent_line(row: pd.Series, symbol: str) -> str:
    sign = "+" if row["type"] == "income" else "-"
    day = pd.Timestamp(row["date"]).date().isoformat()
    amount = format_currency(float(row["amount"]), symbol)
    return f"{day} {row['title']} ({row['category']}): {sign}{amount}"


def generate_insights(
    transactions: pd.DataFrame,
    currency_symbol: str,
    recent_count: int = 10,
) -> InsightReport:
    """
    Build the insights report for a set of transactions.

    Parameters
    ----------
    transactions:
        Transactions DataFrame (date, title, type, category, amount).
    currency_symbol:
        Symbol used when quoting amounts.
    recent_count:
        Number of recent transactions quoted at the end of the report.

    Returns
    -------
    InsightReport
        With `has_data=False` and an explanatory health paragraph when
        there is no transaction.
    """
    summary = compute_summary(transactions)

    if transactions.empty:
        return InsightReport(
            summary=summary,
            health=(
                "Not enough data to analyse yet. Record some income and "
                "expenses to get personalised insights."
            ),
            has_data=False,
        )

    by_category = expenses_by_category(transactions)
    recent = recent_transactions(transactions, recent_count)

    return InsightReport(
        summary=summary,
        health=_health_assessment(summary, currency_symbol),
        tips=_tips(summary, by_category, currency_symbol),
        concerns=_concerns(summary, by_category, currency_symbol),
        recent=[_format_recent_line(row, currency_symbol) for _, row in recent.iterrows()],
    )
