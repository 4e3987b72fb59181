# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
Supplier debt tracking.

A supplier has a contracted total value and an amount already paid. What
remains to pay and the resulting status ("paid" or "debt") are always
derived from those two figures by `db.compute_debt_status`.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

import pandas as pd

from .config import AppConfig
from .db import NewSupplier, Supplier, SupplierUpdate, to_cents
from .db import (
    add_supplier_payment as _db_add_supplier_payment,
)
from .db import (
    delete_supplier as _db_delete_supplier,
)
from .db import (
    get_supplier_by_id as _db_get_supplier_by_id,
)
from .db import (
    insert_supplier as _db_insert_supplier,
)
from .db import (
    list_suppliers as _db_list_suppliers,
)
from .db import (
    update_supplier as _db_update_supplier,
)
from .errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DebtSummary:
    """Totals over all suppliers."""

    supplier_count: int
    suppliers_in_debt: int
    total_value: float
    total_paid: float
    outstanding_debt: float


def _check_amounts(total_value: Optional[float], amount_paid: Optional[float]) -> None:
    if total_value is not None and total_value < 0:
        raise ValidationError(f"Supplier total value cannot be negative, got {total_value}.")
    if amount_paid is not None and amount_paid < 0:
        raise ValidationError(f"Supplier amount paid cannot be negative, got {amount_paid}.")


def add_supplier(app_config: AppConfig, new_supplier: NewSupplier) -> Supplier:
    """
    Register a supplier.

    Raises
    ------
    ValidationError
        If the name or the product supplied is empty, or an amount is
        negative.
    """
    name = new_supplier.name.strip()
    product_supplied = new_supplier.product_supplied.strip()
    if not name:
        raise ValidationError("Supplier name cannot be empty.")
    if not product_supplied:
        raise ValidationError("Supplier product cannot be empty.")
    _check_amounts(new_supplier.total_value, new_supplier.amount_paid)

    created = _db_insert_supplier(
        app_config.database,
        NewSupplier(
            name=name,
            product_supplied=product_supplied,
            total_value=new_supplier.total_value,
            amount_paid=new_supplier.amount_paid,
        ),
    )
    logger.info("Added supplier #%d %r (%s)", created.id, created.name, created.status)
    return created


def record_payment(app_config: AppConfig, supplier_id: int, amount: float) -> Supplier:
    """
    Add a payment to a supplier.

    Paying more than what is owed is accepted; the supplier is then
    reported as paid with no remaining debt.

    Raises
    ------
    ValidationError
        If the amount is not positive.
    NotFoundError
        If the supplier does not exist.
    """
    if amount <= 0 or to_cents(amount) <= 0:
        raise ValidationError(f"Payment amount must be positive, got {amount}.")

    updated = _db_add_supplier_payment(app_config.database, supplier_id, amount)
    if updated.amount_paid > updated.total_value:
        logger.warning(
            "Supplier #%d %r has been overpaid by %.2f",
            updated.id,
            updated.name,
            updated.amount_paid - updated.total_value,
        )
    return updated


def edit_supplier(
    app_config: AppConfig,
    supplier_id: int,
    update: SupplierUpdate,
) -> Supplier:
    """Edit a supplier using a partial update."""
    if update.name is not None and not update.name.strip():
        raise ValidationError("Supplier name cannot be empty.")
    if update.product_supplied is not None and not update.product_supplied.strip():
        raise ValidationError("Supplier product cannot be empty.")
    _check_amounts(update.total_value, update.amount_paid)
    if update.name is not None:
        update = replace(update, name=update.name.strip())
    if update.product_supplied is not None:
        update = replace(update, product_supplied=update.product_supplied.strip())

    return _db_update_supplier(app_config.database, supplier_id, update)


def remove_supplier(app_config: AppConfig, supplier_id: int) -> Supplier:
    deleted = _db_delete_supplier(app_config.database, supplier_id)
    logger.info("Deleted supplier #%d %r", deleted.id, deleted.name)
    return deleted


def load_supplier(app_config: AppConfig, supplier_id: int) -> Optional[Supplier]:
    return _db_get_supplier_by_id(app_config.database, supplier_id)


def list_suppliers(app_config: AppConfig, status: Optional[str] = None) -> pd.DataFrame:
    """List suppliers, optionally only those with the given status."""
    return _db_list_suppliers(app_config.database, status=status)


def debt_summary(app_config: AppConfig) -> DebtSummary:
    """Total contracted, paid and still owed across all suppliers."""
    df = list_suppliers(app_config)
    if df.empty:
        return DebtSummary(
            supplier_count=0,
            suppliers_in_debt=0,
            total_value=0.0,
            total_paid=0.0,
            outstanding_debt=0.0,
        )

    return DebtSummary(
        supplier_count=int(len(df)),
        suppliers_in_debt=int((df["status"] == "debt").sum()),
        total_value=round(float(df["total_value"].sum()), 2),
        total_paid=round(float(df["amount_paid"].sum()), 2),
        outstanding_debt=round(float(df["remaining_debt"].sum()), 2),
    )
