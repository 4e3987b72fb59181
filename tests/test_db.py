import sqlite3
from datetime import date

import pandas as pd
import pytest

from findash.db import (
    DatabaseConfig,
    NewCategory,
    NewProduct,
    NewSupplier,
    NewTransaction,
    ProductUpdate,
    TransactionsFilter,
    TransactionUpdate,
    add_supplier_payment,
    compute_debt_status,
    delete_category,
    delete_sales_transactions,
    delete_transaction,
    get_product_by_id,
    get_transaction_by_id,
    init_database,
    insert_category,
    insert_product,
    insert_supplier,
    insert_transaction,
    insert_transactions,
    is_empty,
    list_categories,
    list_products,
    list_suppliers,
    load_transactions,
    record_sale,
    remaining_debt,
    search_transactions,
    update_product,
    update_transaction,
)
from findash.errors import InsufficientStockError, NotFoundError, ValidationError


def make_tmp_db_cfg(tmp_path) -> DatabaseConfig:
    """Helper to build a DatabaseConfig pointing to a temporary SQLite file."""
    db_path = tmp_path / "test_db.sqlite"
    return DatabaseConfig(engine="sqlite", path=db_path)


def make_rice() -> NewProduct:
    return NewProduct(
        name="Rice",
        unit="Bag 25kg",
        quantity=50,
        purchase_price=12000.0,
        selling_price=15000.0,
        tax=14.0,
        duty=2.0,
    )


def test_init_database_creates_file_and_schema(tmp_path):
    """init_database should create the SQLite file and an empty schema."""
    cfg = make_tmp_db_cfg(tmp_path)

    assert not cfg.path.exists()
    init_database(cfg)
    assert cfg.path.exists()
    assert is_empty(cfg) is True

    # Idempotent
    init_database(cfg)
    assert is_empty(cfg) is True


def test_unsupported_engine_is_rejected(tmp_path):
    cfg = DatabaseConfig(engine="postgres", path=tmp_path / "x.sqlite")
    with pytest.raises(ValueError):
        init_database(cfg)


def test_migration_adds_missing_columns_and_keeps_rows(tmp_path):
    """A database created before sale metadata and product categories existed
    is upgraded in place."""
    cfg = make_tmp_db_cfg(tmp_path)
    conn = sqlite3.connect(cfg.path)
    conn.execute(
        """
        CREATE TABLE transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            date TEXT NOT NULL,
            title TEXT NOT NULL,
            type TEXT NOT NULL,
            category TEXT NOT NULL,
            amount_cents INTEGER NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE products (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            unit TEXT NOT NULL,
            quantity INTEGER NOT NULL DEFAULT 0,
            purchase_price_cents INTEGER NOT NULL DEFAULT 0,
            selling_price_cents INTEGER NOT NULL DEFAULT 0,
            discount REAL NOT NULL DEFAULT 0,
            tax REAL NOT NULL DEFAULT 0,
            duty REAL NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT
        )
        """
    )
    conn.execute(
        "INSERT INTO transactions (date, title, type, category, amount_cents, "
        "created_at) VALUES ('2024-01-05', 'Rent', 'expense', 'Housing', 1800000, "
        "'2024-01-05T10:00:00+00:00')"
    )
    conn.execute(
        "INSERT INTO products (name, unit, quantity, purchase_price_cents, "
        "selling_price_cents, created_at) VALUES ('Oil', 'Box', 3, 100, 200, "
        "'2024-01-05T10:00:00+00:00')"
    )
    conn.commit()
    conn.close()

    init_database(cfg)

    conn = sqlite3.connect(cfg.path)
    tx_columns = {row[1] for row in conn.execute("PRAGMA table_info(transactions)")}
    product_columns = {row[1] for row in conn.execute("PRAGMA table_info(products)")}
    conn.close()

    assert {"product_id", "product_name", "quantity"} <= tx_columns
    assert {"image", "category_id"} <= product_columns

    tx = get_transaction_by_id(cfg, 1)
    assert tx is not None
    assert tx.amount == 18000.0
    assert tx.product_name is None

    product = get_product_by_id(cfg, 1)
    assert product is not None
    assert product.category_id is None
    assert product.image is None


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def test_insert_and_reload_transaction_amount_in_cents(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)

    tx = insert_transaction(
        cfg,
        NewTransaction(
            date=date(2025, 1, 3),
            title="Pharmacy",
            type="expense",
            category="Health",
            amount=8900.1,
        ),
    )

    assert tx.id == 1
    assert tx.amount == pytest.approx(8900.1)
    assert tx.signed_amount == pytest.approx(-8900.1)
    assert tx.updated_at is None
    assert is_empty(cfg) is False


def test_insert_transaction_rejects_unknown_type(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    with pytest.raises(ValueError):
        insert_transaction(
            cfg,
            NewTransaction(
                date=date(2025, 1, 3),
                title="X",
                type="transfer",
                category="Other",
                amount=1.0,
            ),
        )


def test_amounts_below_one_cent_are_rejected(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    with pytest.raises(ValueError):
        insert_transaction(
            cfg,
            NewTransaction(
                date=date(2025, 1, 3),
                title="Tiny",
                type="expense",
                category="Other",
                amount=0.004,
            ),
        )
    assert is_empty(cfg)

    tx = insert_transaction(
        cfg,
        NewTransaction(
            date=date(2025, 1, 3),
            title="Coin",
            type="expense",
            category="Other",
            amount=0.01,
        ),
    )
    assert tx.amount == pytest.approx(0.01)
    with pytest.raises(ValueError):
        update_transaction(cfg, tx.id, TransactionUpdate(amount=0.004))
    assert get_transaction_by_id(cfg, tx.id).amount == pytest.approx(0.01)


def test_insert_transactions_bulk_and_load_for_period(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    df = pd.DataFrame(
        [
            {"date": date(2025, 1, 1), "title": "Salary", "type": "income",
             "category": "Salary", "amount": 1000.0},
            {"date": date(2025, 1, 15), "title": "Rent", "type": "expense",
             "category": "Housing", "amount": 300.0},
            {"date": date(2025, 2, 2), "title": "Taxi", "type": "expense",
             "category": "Transport", "amount": 12.5},
        ]
    )

    assert insert_transactions(cfg, df) == 3

    january = load_transactions(cfg, date(2025, 1, 1), date(2025, 1, 31))
    assert list(january.columns) == [
        "date",
        "title",
        "type",
        "category",
        "amount",
        "product_name",
        "quantity",
    ]
    assert len(january) == 2
    assert pd.api.types.is_datetime64_any_dtype(january["date"])

    everything = load_transactions(cfg)
    assert len(everything) == 3
    assert everything["amount"].tolist() == [1000.0, 300.0, 12.5]


def test_insert_transactions_requires_columns(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    with pytest.raises(ValueError, match="missing required column"):
        insert_transactions(cfg, pd.DataFrame([{"date": date(2025, 1, 1)}]))


def test_update_and_delete_transaction(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    tx = insert_transaction(
        cfg,
        NewTransaction(
            date=date(2025, 3, 1),
            title="Groceries",
            type="expense",
            category="Food",
            amount=45.0,
        ),
    )

    updated = update_transaction(cfg, tx.id, TransactionUpdate(amount=50.0, title="Market"))
    assert updated.amount == 50.0
    assert updated.title == "Market"
    assert updated.category == "Food"
    assert updated.updated_at is not None

    with pytest.raises(ValueError):
        update_transaction(cfg, tx.id, TransactionUpdate())
    with pytest.raises(NotFoundError):
        update_transaction(cfg, 999, TransactionUpdate(title="Nope"))

    deleted = delete_transaction(cfg, tx.id)
    assert deleted.title == "Market"
    assert get_transaction_by_id(cfg, tx.id) is None
    with pytest.raises(NotFoundError):
        delete_transaction(cfg, tx.id)


def test_search_transactions_filters_and_order(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    for day, title, tx_type, category, amount in [
        (date(2025, 1, 1), "Salary", "income", "Salary", 1000.0),
        (date(2025, 1, 10), "Rent", "expense", "Housing", 400.0),
        (date(2025, 1, 12), "Supermarket", "expense", "Food", 80.0),
        (date(2025, 1, 20), "Market", "expense", "Food", 20.0),
    ]:
        insert_transaction(
            cfg,
            NewTransaction(
                date=day,
                title=title,
                type=tx_type,
                category=category,
                amount=amount,
            ),
        )

    newest_first = search_transactions(cfg, TransactionsFilter())
    assert newest_first["title"].tolist() == ["Market", "Supermarket", "Rent", "Salary"]

    food = search_transactions(cfg, TransactionsFilter(category="Food"))
    assert set(food["title"]) == {"Market", "Supermarket"}

    market = search_transactions(cfg, TransactionsFilter(title_contains="MARKET"))
    assert len(market) == 2

    expenses_over_50 = search_transactions(
        cfg,
        TransactionsFilter(type="expense", min_amount=50.0),
        order_by=("amount", "ASC"),
    )
    assert expenses_over_50["title"].tolist() == ["Supermarket", "Rent"]

    window = search_transactions(
        cfg,
        TransactionsFilter(start=date(2025, 1, 10), end=date(2025, 1, 12)),
    )
    assert len(window) == 2

    paged = search_transactions(cfg, TransactionsFilter(), limit=1, offset=1)
    assert paged["title"].tolist() == ["Supermarket"]

    with pytest.raises(ValueError):
        search_transactions(cfg, TransactionsFilter(), order_by=("code", "ASC"))


def test_search_transactions_empty_result_has_columns(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    df = search_transactions(cfg, TransactionsFilter(category="Nothing"))
    assert df.empty
    assert "amount" in df.columns
    assert "product_name" in df.columns


# ---------------------------------------------------------------------------
# Products & categories
# ---------------------------------------------------------------------------


def test_insert_update_and_list_products(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    rice = insert_product(cfg, make_rice())
    oil = insert_product(
        cfg,
        NewProduct(
            name="Oil",
            unit="Box 12x1L",
            quantity=0,
            purchase_price=18000.0,
            selling_price=24000.0,
            discount=5.0,
        ),
    )

    assert rice.stock_value == 600000.0
    assert rice.potential_revenue == 750000.0
    assert rice.in_stock is True
    assert oil.in_stock is False

    df = list_products(cfg)
    assert df["name"].tolist() == ["Oil", "Rice"]
    assert df["selling_price"].tolist() == [24000.0, 15000.0]

    in_stock = list_products(cfg, in_stock_only=True)
    assert in_stock["name"].tolist() == ["Rice"]

    updated = update_product(cfg, oil.id, ProductUpdate(quantity=12, image="data:x"))
    assert updated.quantity == 12
    assert updated.image == "data:x"

    cleared = update_product(cfg, oil.id, ProductUpdate(clear_image=True))
    assert cleared.image is None

    with pytest.raises(NotFoundError):
        update_product(cfg, 42, ProductUpdate(quantity=1))


def test_insert_product_with_unknown_category_fails(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    with pytest.raises(NotFoundError):
        insert_product(
            cfg,
            NewProduct(
                name="Rice",
                unit="Bag",
                quantity=1,
                purchase_price=1.0,
                selling_price=2.0,
                category_id=7,
            ),
        )


def test_insert_product_integrity_error_without_category_is_not_masked(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    with pytest.raises(sqlite3.IntegrityError):
        insert_product(
            cfg,
            NewProduct(
                name=None,
                unit="Bag",
                quantity=1,
                purchase_price=1.0,
                selling_price=2.0,
            ),
        )
    assert list_products(cfg).empty


def test_insert_category_assigns_products(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    rice = insert_product(cfg, make_rice())

    category = insert_category(
        cfg,
        NewCategory(name="Grains", description="Dry goods"),
        product_ids=[rice.id],
    )

    assert category.product_count == 1
    reloaded = get_product_by_id(cfg, rice.id)
    assert reloaded.category_id == category.id
    assert reloaded.category_name == "Grains"

    categories = list_categories(cfg)
    assert categories["name"].tolist() == ["Grains"]
    assert categories["product_count"].tolist() == [1]


def test_insert_category_with_missing_product_writes_nothing(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    rice = insert_product(cfg, make_rice())

    with pytest.raises(NotFoundError):
        insert_category(cfg, NewCategory(name="Grains"), product_ids=[rice.id, 99])

    assert list_categories(cfg).empty
    assert get_product_by_id(cfg, rice.id).category_id is None


def test_duplicate_category_name_is_rejected(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    insert_category(cfg, NewCategory(name="Drinks"))
    with pytest.raises(ValidationError):
        insert_category(cfg, NewCategory(name="Drinks"))


def test_delete_category_keeps_products_uncategorized(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    rice = insert_product(cfg, make_rice())
    category = insert_category(cfg, NewCategory(name="Grains"), product_ids=[rice.id])

    deleted = delete_category(cfg, category.id)

    assert deleted.name == "Grains"
    product = get_product_by_id(cfg, rice.id)
    assert product is not None
    assert product.category_id is None
    assert list_categories(cfg).empty


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------


def test_record_sale_decrements_stock_and_records_income(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    rice = insert_product(cfg, make_rice())

    record = record_sale(cfg, rice.id, 3, sold_on=date(2025, 4, 2), category="Sales")

    assert record.product.quantity == 47
    tx = record.transaction
    assert tx.type == "income"
    assert tx.title == "Sale: Rice"
    assert tx.category == "Sales"
    assert tx.amount == 45000.0
    assert tx.product_id == rice.id
    assert tx.product_name == "Rice"
    assert tx.quantity == 3
    assert tx.date == date(2025, 4, 2)


def test_record_sale_with_insufficient_stock_changes_nothing(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    rice = insert_product(cfg, make_rice())

    with pytest.raises(InsufficientStockError) as exc_info:
        record_sale(cfg, rice.id, 51, sold_on=date(2025, 4, 2), category="Sales")

    assert exc_info.value.requested == 51
    assert exc_info.value.available == 50
    assert get_product_by_id(cfg, rice.id).quantity == 50
    assert load_transactions(cfg).empty


def test_record_sale_unknown_product_and_bad_quantity(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    with pytest.raises(NotFoundError):
        record_sale(cfg, 1, 1, sold_on=date(2025, 4, 2), category="Sales")
    with pytest.raises(ValueError):
        record_sale(cfg, 1, 0, sold_on=date(2025, 4, 2), category="Sales")


def test_delete_sales_transactions_only_removes_sales(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    rice = insert_product(cfg, make_rice())
    record_sale(cfg, rice.id, 2, sold_on=date(2025, 4, 2), category="Sales")
    insert_transaction(
        cfg,
        NewTransaction(
            date=date(2025, 4, 3),
            title="Counter sale",
            type="income",
            category="Sales",
            amount=100.0,
        ),
    )
    insert_transaction(
        cfg,
        NewTransaction(
            date=date(2025, 4, 3),
            title="Salary",
            type="income",
            category="Salary",
            amount=1000.0,
        ),
    )

    assert delete_sales_transactions(cfg, "Sales") == 2

    remaining = load_transactions(cfg)
    assert remaining["title"].tolist() == ["Salary"]
    assert get_product_by_id(cfg, rice.id).quantity == 48


# ---------------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------------


def test_debt_status_helpers():
    assert remaining_debt(100.0, 40.0) == 60.0
    assert remaining_debt(100.0, 150.0) == 0.0
    assert compute_debt_status(100.0, 40.0) == "debt"
    assert compute_debt_status(100.0, 100.0) == "paid"
    assert compute_debt_status(100.0, 99.99) == "paid"
    assert compute_debt_status(100.0, 99.98) == "debt"
    assert compute_debt_status(100.0, 120.0) == "paid"


def test_debt_remainder_is_rounded_to_the_cent():
    assert remaining_debt(100.0, 99.99) == 0.01
    assert remaining_debt(100.01, 100.0) == 0.01
    assert compute_debt_status(100.01, 100.0) == "paid"
    assert compute_debt_status(100.02, 100.0) == "debt"


def test_supplier_payment_and_listing(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    supplier = insert_supplier(
        cfg,
        NewSupplier(name="Agro Lda", product_supplied="Rice", total_value=1000.0),
    )
    assert supplier.status == "debt"
    assert supplier.remaining_debt == 1000.0

    partial = add_supplier_payment(cfg, supplier.id, 400.0)
    assert partial.amount_paid == 400.0
    assert partial.status == "debt"

    paid = add_supplier_payment(cfg, supplier.id, 600.0)
    assert paid.status == "paid"
    assert paid.remaining_debt == 0.0

    insert_supplier(
        cfg,
        NewSupplier(name="Oil Co", product_supplied="Oil", total_value=500.0),
    )

    df = list_suppliers(cfg)
    assert df["name"].tolist() == ["Oil Co", "Agro Lda"]
    assert df["status"].tolist() == ["debt", "paid"]

    in_debt = list_suppliers(cfg, status="debt")
    assert in_debt["name"].tolist() == ["Oil Co"]

    with pytest.raises(NotFoundError):
        add_supplier_payment(cfg, 99, 1.0)
