# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Sample data for a first look at the dashboard.

`load_demo_data` fills an empty database with two months of household
style transactions and two warehouse products.
"""

import logging
from dataclasses import dataclass
from datetime import date

import pandas as pd

from .config import AppConfig
from .db import NewProduct, insert_product, insert_transactions, is_empty

logger = logging.getLogger(__name__)

DEMO_TRANSACTIONS = [
    ("2023-10-05", "Monthly salary", "income", "Salary", 500000.0),
    ("2023-10-10", "Rent", "expense", "Housing", 180000.0),
    ("2023-10-12", "Weekly groceries", "expense", "Food", 45000.0),
    ("2023-10-15", "Freelance design", "income", "Freelance", 120000.0),
    ("2023-10-16", "Taxi", "expense", "Transport", 4500.0),
    ("2023-10-18", "Cinema and dinner", "expense", "Leisure", 18000.0),
    ("2023-10-20", "Pharmacy", "expense", "Health", 8900.0),
    ("2023-11-05", "Monthly salary", "income", "Salary", 500000.0),
    ("2023-11-10", "Rent", "expense", "Housing", 180000.0),
    ("2023-11-12", "Groceries", "expense", "Food", 62000.0),
]

DEMO_PRODUCTS = [
    NewProduct(
        name="Rice",
        unit="Bag 25kg",
        quantity=50,
        purchase_price=12000.0,
        selling_price=15000.0,
        discount=0.0,
        tax=14.0,
        duty=2.0,
    ),
    NewProduct(
        name="Vegetable oil",
        unit="Box 12x1L",
        quantity=30,
        purchase_price=18000.0,
        selling_price=24000.0,
        discount=5.0,
        tax=14.0,
        duty=0.0,
    ),
]


@dataclass(frozen=True)
class DemoResult:
    transactions: int
    products: int


def load_demo_data(app_config: AppConfig, *, force: bool = False) -> DemoResult:
    """
    Seed the sample transactions and products.

    Parameters
    ----------
    app_config:
        Global application configuration.
    force:
        Seed even if the database already holds data.

    Returns
    -------
    DemoResult
        Number of rows inserted. Both counts are 0 when the database was
        not empty and `force` is False.
    """
    cfg = app_config.database
    if not force and not is_empty(cfg):
        logger.warning("Database %s is not empty, demo data not loaded", cfg.path)
        return DemoResult(transactions=0, products=0)

    df = pd.DataFrame(
        DEMO_TRANSACTIONS,
        columns=["date", "title", "type", "category", "amount"],
    )
    df["date"] = df["date"].map(date.fromisoformat)
    inserted = insert_transactions(cfg, df)

    for product in DEMO_PRODUCTS:
        insert_product(cfg, product)

    logger.info("Loaded demo data: %d transactions, %d products", inserted, len(DEMO_PRODUCTS))
    return DemoResult(transactions=inserted, products=len(DEMO_PRODUCTS))
