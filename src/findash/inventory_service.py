# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
High-level services for the warehouse: products and product categories.

Responsibilities
----------------
1) Products
   - Create products after validating names, quantities, prices and
     percentages (discount, tax, duty).
   - Edit, delete, load and list products.

2) Warehouse summary
   - Stock value at purchase price, potential revenue at selling price,
     product counts.

3) Categories
   - Create categories and assign the selected products in one step.
   - Assign products to an existing category, list and delete categories.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Optional

import pandas as pd

from .config import AppConfig
from .db import (
    Category,
    DatabaseConfig,
    NewCategory,
    NewProduct,
    Product,
    ProductUpdate,
)
from .db import (
    assign_products_to_category as _db_assign_products_to_category,
)
from .db import (
    delete_category as _db_delete_category,
)
from .db import (
    delete_product as _db_delete_product,
)
from .db import (
    get_product_by_id as _db_get_product_by_id,
)
from .db import (
    insert_category as _db_insert_category,
)
from .db import (
    insert_product as _db_insert_product,
)
from .db import (
    list_categories as _db_list_categories,
)
from .db import (
    list_products as _db_list_products,
)
from .db import (
    update_product as _db_update_product,
)
from .errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WarehouseSummary:
    """
    Aggregate view of the warehouse.

    Attributes
    ----------
    product_count:
        Number of products, in stock or not.
    available_count:
        Products with at least one unit in stock.
    out_of_stock_count:
        Products with an empty stock.
    total_units:
        Sum of quantities.
    stock_value:
        Sum of purchase price x quantity.
    potential_revenue:
        Sum of selling price x quantity.
    """

    product_count: int
    available_count: int
    out_of_stock_count: int
    total_units: int
    stock_value: float
    potential_revenue: float

    @property
    def potential_margin(self) -> float:
        return round(self.potential_revenue - self.stock_value, 2)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _get_db_config(app_config: AppConfig) -> DatabaseConfig:
    return app_config.database


def _required_text(value: str, label: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"Product {label} cannot be empty.")
    return cleaned


def _check_non_negative(value: float, label: str) -> None:
    if value < 0:
        raise ValidationError(f"Product {label} cannot be negative, got {value}.")


def _check_percentage(value: float, label: str) -> None:
    if not 0 <= value <= 100:
        raise ValidationError(
            f"Product {label} must be a percentage between 0 and 100, got {value}."
        )


def _check_quantity(value: int) -> None:
    if int(value) != value:
        raise ValidationError(f"Product quantity must be a whole number, got {value}.")
    _check_non_negative(value, "quantity")


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def add_product(app_config: AppConfig, new_product: NewProduct) -> Product:
    """
    Add a product to the warehouse.

    Raises
    ------
    ValidationError
        If the name or unit is empty, the quantity or a price is negative,
        or a percentage is outside [0, 100].
    NotFoundError
        If the category does not exist.
    """
    _check_quantity(new_product.quantity)
    _check_non_negative(new_product.purchase_price, "purchase price")
    _check_non_negative(new_product.selling_price, "selling price")
    _check_percentage(new_product.discount, "discount")
    _check_percentage(new_product.tax, "tax")
    _check_percentage(new_product.duty, "duty")

    cleaned = NewProduct(
        name=_required_text(new_product.name, "name"),
        unit=_required_text(new_product.unit, "unit"),
        quantity=int(new_product.quantity),
        purchase_price=new_product.purchase_price,
        selling_price=new_product.selling_price,
        discount=new_product.discount,
        tax=new_product.tax,
        duty=new_product.duty,
        image=new_product.image,
        category_id=new_product.category_id,
    )

    created = _db_insert_product(_get_db_config(app_config), cleaned)
    logger.info("Added product #%d %r (%d units)", created.id, created.name, created.quantity)
    return created


def edit_product(
    app_config: AppConfig,
    product_id: int,
    update: ProductUpdate,
) -> Product:
    """
    Edit an existing product using a partial update.

    The same rules as `add_product` apply to the updated fields.

    Raises
    ------
    ValidationError
        If an updated value is invalid.
    ValueError
        If no fields are provided for update.
    NotFoundError
        If the product or the category does not exist.
    """
    if update.name is not None:
        update = replace(update, name=_required_text(update.name, "name"))
    if update.unit is not None:
        update = replace(update, unit=_required_text(update.unit, "unit"))
    if update.quantity is not None:
        _check_quantity(update.quantity)
    if update.purchase_price is not None:
        _check_non_negative(update.purchase_price, "purchase price")
    if update.selling_price is not None:
        _check_non_negative(update.selling_price, "selling price")
    for label, value in (
        ("discount", update.discount),
        ("tax", update.tax),
        ("duty", update.duty),
    ):
        if value is not None:
            _check_percentage(value, label)

    return _db_update_product(_get_db_config(app_config), product_id, update)


def remove_product(app_config: AppConfig, product_id: int) -> Product:
    """Delete a product; raises NotFoundError if it does not exist."""
    deleted = _db_delete_product(_get_db_config(app_config), product_id)
    logger.info("Deleted product #%d %r", deleted.id, deleted.name)
    return deleted


def load_product(app_config: AppConfig, product_id: int) -> Optional[Product]:
    return _db_get_product_by_id(_get_db_config(app_config), product_id)


def list_products(
    app_config: AppConfig,
    *,
    category_id: Optional[int] = None,
    in_stock_only: bool = False,
) -> pd.DataFrame:
    """List products, most recently added first."""
    return _db_list_products(
        _get_db_config(app_config),
        category_id=category_id,
        in_stock_only=in_stock_only,
    )


def warehouse_summary(app_config: AppConfig) -> WarehouseSummary:
    """Compute stock value and potential revenue over all products."""
    df = list_products(app_config)
    if df.empty:
        return WarehouseSummary(
            product_count=0,
            available_count=0,
            out_of_stock_count=0,
            total_units=0,
            stock_value=0.0,
            potential_revenue=0.0,
        )

    quantities = df["quantity"].astype(int)
    stock_value = float((df["purchase_price"] * quantities).sum())
    potential_revenue = float((df["selling_price"] * quantities).sum())
    available = int((quantities > 0).sum())

    return WarehouseSummary(
        product_count=int(len(df)),
        available_count=available,
        out_of_stock_count=int(len(df)) - available,
        total_units=int(quantities.sum()),
        stock_value=round(stock_value, 2),
        potential_revenue=round(potential_revenue, 2),
    )


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def add_category(
    app_config: AppConfig,
    name: str,
    description: Optional[str] = None,
    image: Optional[str] = None,
    product_ids: Iterable[int] = (),
) -> Category:
    """
    Create a product category and assign the selected products to it.

    Raises
    ------
    ValidationError
        If the name is empty or already used.
    NotFoundError
        If one of the products does not exist. The category is not created.
    """
    cleaned_name = name.strip()
    if not cleaned_name:
        raise ValidationError("Category name cannot be empty.")

    cleaned_description = description.strip() if description else None
    created = _db_insert_category(
        _get_db_config(app_config),
        NewCategory(
            name=cleaned_name,
            description=cleaned_description or None,
            image=image,
        ),
        product_ids,
    )
    logger.info(
        "Added category #%d %r with %d product(s)",
        created.id,
        created.name,
        created.product_count,
    )
    return created


def assign_products(
    app_config: AppConfig,
    category_id: int,
    product_ids: Iterable[int],
) -> Category:
    """Move the given products into a category."""
    return _db_assign_products_to_category(
        _get_db_config(app_config),
        category_id,
        product_ids,
    )


def list_categories(app_config: AppConfig) -> pd.DataFrame:
    """List categories with their product counts, by name."""
    return _db_list_categories(_get_db_config(app_config))


def remove_category(app_config: AppConfig, category_id: int) -> Category:
    """
    Delete a category. Its products are kept, without category.

    Raises
    ------
    NotFoundError
        If the category does not exist.
    """
    deleted = _db_delete_category(_get_db_config(app_config), category_id)
    logger.info("Deleted category #%d %r", deleted.id, deleted.name)
    return deleted
