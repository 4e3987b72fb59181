import pandas as pd

from findash.demo import DEMO_TRANSACTIONS
from findash.insights import QUICK_TIP, generate_insights


def make_transactions(rows) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=["date", "title", "type", "category", "amount"])
    df["date"] = pd.to_datetime(df["date"])
    return df


def test_insights_on_demo_data() -> None:
    """Healthy finances with one dominant expense category."""
    report = generate_insights(make_transactions(DEMO_TRANSACTIONS), "Kz")

    assert report.has_data is True
    assert report.health.startswith("Finances are healthy: 55.5% of income is kept")
    assert len(report.tips) == 3
    assert report.tips[0].startswith("Your largest expense category is Housing")
    assert "41.7% of income, within the 50% guideline" in report.tips[1]
    assert report.concerns == [
        "Housing alone accounts for 72.2% of expenses (more than 40%)."
    ]
    assert len(report.recent) == 10
    assert report.recent[0] == "2023-11-12 Groceries (Food): -Kz 62,000.00"
    assert report.recent[2] == "2023-11-05 Monthly salary (Salary): +Kz 500,000.00"


def test_insights_recent_count_is_respected() -> None:
    report = generate_insights(make_transactions(DEMO_TRANSACTIONS), "Kz", recent_count=3)
    assert len(report.recent) == 3


def test_insights_flag_deficit() -> None:
    report = generate_insights(
        make_transactions(
            [
                ("2025-01-01", "Sales", "income", "Sales", 100.0),
                ("2025-01-02", "Stock", "expense", "Food", 200.0),
            ]
        ),
        "Kz",
    )

    assert "deficit of Kz 100.00" in report.health
    assert "Expenses exceed income by Kz 100.00." in report.concerns
    assert len(report.tips) == 3


def test_insights_expenses_without_income() -> None:
    report = generate_insights(
        make_transactions([("2025-01-02", "Rent", "expense", "Housing", 50.0)]),
        "$",
    )

    assert report.health.startswith("No income was recorded")
    assert "Expenses were recorded without any income." in report.concerns
    assert len(report.tips) == 3


def test_insights_balanced_budget_has_no_concern() -> None:
    report = generate_insights(
        make_transactions(
            [
                ("2025-01-01", "Salary", "income", "Salary", 1000.0),
                ("2025-01-02", "Rent", "expense", "Housing", 300.0),
                ("2025-01-03", "Food", "expense", "Food", 250.0),
                ("2025-01-04", "Bus", "expense", "Transport", 260.0),
            ]
        ),
        "Kz",
    )

    assert report.concerns == ["No concerning pattern detected."]
    assert "Aim to save at least 20% of income" in report.tips[2]


def test_insights_without_data() -> None:
    report = generate_insights(make_transactions([]), "Kz")

    assert report.has_data is False
    assert report.tips == []
    markdown = report.to_markdown()
    assert "Not enough data to analyse yet" in markdown
    assert "## Practical tips" not in markdown


def test_insights_markdown_layout_is_deterministic() -> None:
    df = make_transactions(DEMO_TRANSACTIONS)

    first = generate_insights(df, "Kz").to_markdown()
    second = generate_insights(df, "Kz").to_markdown()

    assert first == second
    assert first.startswith("# Financial insights\n")
    for heading in (
        "## Financial health",
        "## Practical tips",
        "## Concerning patterns",
        "## Recent transactions",
    ):
        assert heading in first
    assert "\n1. Your largest expense category is Housing" in first
    assert "\n- Housing alone accounts for 72.2%" in first


def test_quick_tip_mentions_essentials() -> None:
    assert "50%" in QUICK_TIP
