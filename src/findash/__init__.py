# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
FinDash
-------

A Python-based financial dashboard for small businesses. FinDash keeps the
day-to-day books of a shop in a single SQLite database and exposes them
through a command-line interface.

Main capabilities:
- income / expense transaction tracking with categories,
- warehouse management (products, stock levels, purchase / selling prices,
  discount, tax and duty percentages, product categories with images),
- a point-of-sale workflow that decrements stock and records the sale as
  income in the same database transaction,
- a cash register view over sale transactions,
- supplier contracts with payments and a derived debt status,
- derived metrics (balance, savings rate, monthly cash flow, expenses per
  category),
- a deterministic, rule-based financial insights report.

FinDash separates storage (db), business rules (services), metrics and
presentation (CLI), making it suitable for scripting as well as for a
future Web UI.


Version: 0.2.0

Usage:
    python -m findash.cli --help
"""

__all__ = ["db", "metrics", "insights", "views", "io"]

__version__ = "0.2.0"
