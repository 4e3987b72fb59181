from datetime import date

import pytest

from findash.config import AppConfig
from findash.db import DatabaseConfig, NewProduct
from findash.errors import InsufficientStockError, NotFoundError, ValidationError
from findash.inventory_service import add_product, load_product
from findash.periods import Period
from findash.sales_service import (
    available_products,
    clear_sales_history,
    sales_history,
    sales_total,
    sell_product,
)
from findash.transactions_service import add_transaction, list_transactions


def make_app_config(tmp_path) -> AppConfig:
    return AppConfig(
        business_name="Test",
        currency="AOA",
        currency_symbol="Kz",
        database=DatabaseConfig(engine="sqlite", path=tmp_path / "test.sqlite"),
    )


def add_rice(app_config: AppConfig, quantity: int = 50):
    return add_product(
        app_config,
        NewProduct(
            name="Rice",
            unit="Bag 25kg",
            quantity=quantity,
            purchase_price=12000.0,
            selling_price=15000.0,
            discount=10.0,
            tax=14.0,
        ),
    )


def test_sell_product_records_income_and_decrements_stock(tmp_path) -> None:
    """The sale total is selling price x quantity; percentages are ignored."""
    app_config = make_app_config(tmp_path)
    rice = add_rice(app_config)

    receipt = sell_product(app_config, rice.id, 3, sold_on=date(2025, 6, 1))

    assert receipt.quantity == 3
    assert receipt.total == pytest.approx(45000.0)
    assert receipt.product.quantity == 47
    assert receipt.transaction.title == "Sale: Rice"
    assert receipt.transaction.category == "Sales"
    assert receipt.transaction.type == "income"
    assert load_product(app_config, rice.id).quantity == 47

    ledger = list_transactions(app_config)
    assert len(ledger) == 1
    assert ledger.iloc[0]["product_name"] == "Rice"


def test_sell_whole_stock_then_product_is_unavailable(tmp_path) -> None:
    app_config = make_app_config(tmp_path)
    rice = add_rice(app_config, quantity=2)

    assert available_products(app_config)["name"].tolist() == ["Rice"]

    receipt = sell_product(app_config, rice.id, 2)

    assert receipt.product.quantity == 0
    assert available_products(app_config).empty
    with pytest.raises(InsufficientStockError):
        sell_product(app_config, rice.id, 1)


def test_oversell_leaves_everything_unchanged(tmp_path) -> None:
    app_config = make_app_config(tmp_path)
    rice = add_rice(app_config, quantity=5)

    with pytest.raises(InsufficientStockError, match="Insufficient stock"):
        sell_product(app_config, rice.id, 6)

    assert load_product(app_config, rice.id).quantity == 5
    assert sales_history(app_config).empty


@pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
def test_sell_product_rejects_invalid_quantity(tmp_path, quantity) -> None:
    app_config = make_app_config(tmp_path)
    rice = add_rice(app_config)
    with pytest.raises(ValidationError):
        sell_product(app_config, rice.id, quantity)


def test_sell_unknown_product(tmp_path) -> None:
    with pytest.raises(NotFoundError):
        sell_product(make_app_config(tmp_path), 99, 1)


def test_sales_history_contains_only_sales(tmp_path) -> None:
    """Manual income filed under the sales category counts as a sale."""
    app_config = make_app_config(tmp_path)
    rice = add_rice(app_config)
    sell_product(app_config, rice.id, 1, sold_on=date(2025, 6, 1))
    sell_product(app_config, rice.id, 2, sold_on=date(2025, 6, 3))
    add_transaction(app_config, "Counter sale", 500.0, "income", "Sales", date(2025, 6, 2))
    add_transaction(app_config, "Salary", 1000.0, "income", "Salary", date(2025, 6, 2))
    add_transaction(app_config, "Rent", 300.0, "expense", "Housing", date(2025, 6, 2))

    history = sales_history(app_config)

    assert history["title"].tolist() == ["Sale: Rice", "Counter sale", "Sale: Rice"]
    assert sales_total(app_config) == pytest.approx(45500.0)

    first_days = Period(start=date(2025, 6, 1), end=date(2025, 6, 2), label="")
    assert sales_total(app_config, first_days) == pytest.approx(15500.0)
    assert len(sales_history(app_config, limit=1)) == 1


def test_clear_sales_history_keeps_stock_and_other_transactions(tmp_path) -> None:
    app_config = make_app_config(tmp_path)
    rice = add_rice(app_config)
    sell_product(app_config, rice.id, 4)
    add_transaction(app_config, "Salary", 1000.0, "income", "Salary")

    assert clear_sales_history(app_config) == 1

    assert sales_history(app_config).empty
    assert sales_total(app_config) == 0.0
    assert load_product(app_config, rice.id).quantity == 46
    assert list_transactions(app_config)["title"].tolist() == ["Salary"]
