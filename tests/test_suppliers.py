import logging

import pytest

from findash.config import AppConfig
from findash.db import DatabaseConfig, NewSupplier, SupplierUpdate
from findash.errors import NotFoundError, ValidationError
from findash.suppliers_service import (
    add_supplier,
    debt_summary,
    edit_supplier,
    list_suppliers,
    load_supplier,
    record_payment,
    remove_supplier,
)


def make_app_config(tmp_path) -> AppConfig:
    return AppConfig(
        business_name="Test",
        currency="AOA",
        currency_symbol="Kz",
        database=DatabaseConfig(engine="sqlite", path=tmp_path / "test.sqlite"),
    )


def test_new_supplier_owes_total_value(tmp_path) -> None:
    app_config = make_app_config(tmp_path)

    supplier = add_supplier(
        app_config,
        NewSupplier(name=" Agro Lda ", product_supplied="Rice", total_value=250000.0),
    )

    assert supplier.name == "Agro Lda"
    assert supplier.amount_paid == 0.0
    assert supplier.remaining_debt == 250000.0
    assert supplier.status == "debt"


def test_fully_paid_supplier_at_creation(tmp_path) -> None:
    app_config = make_app_config(tmp_path)
    supplier = add_supplier(
        app_config,
        NewSupplier(
            name="Oil Co",
            product_supplied="Oil",
            total_value=1000.0,
            amount_paid=1000.0,
        ),
    )
    assert supplier.status == "paid"
    assert supplier.remaining_debt == 0.0


@pytest.mark.parametrize(
    "new_supplier",
    [
        NewSupplier(name="", product_supplied="Rice", total_value=10.0),
        NewSupplier(name="Agro", product_supplied="  ", total_value=10.0),
        NewSupplier(name="Agro", product_supplied="Rice", total_value=-1.0),
        NewSupplier(name="Agro", product_supplied="Rice", total_value=10.0, amount_paid=-5.0),
    ],
)
def test_add_supplier_validation(tmp_path, new_supplier) -> None:
    app_config = make_app_config(tmp_path)
    with pytest.raises(ValidationError):
        add_supplier(app_config, new_supplier)


def test_payments_settle_the_debt(tmp_path) -> None:
    app_config = make_app_config(tmp_path)
    supplier = add_supplier(
        app_config,
        NewSupplier(name="Agro", product_supplied="Rice", total_value=1000.0),
    )

    after_first = record_payment(app_config, supplier.id, 250.0)
    assert after_first.amount_paid == 250.0
    assert after_first.remaining_debt == 750.0
    assert after_first.status == "debt"

    settled = record_payment(app_config, supplier.id, 750.0)
    assert settled.status == "paid"
    assert settled.remaining_debt == 0.0

    with pytest.raises(ValidationError):
        record_payment(app_config, supplier.id, 0.0)
    with pytest.raises(ValidationError):
        record_payment(app_config, supplier.id, 0.004)
    assert load_supplier(app_config, supplier.id).amount_paid == 1000.0
    with pytest.raises(NotFoundError):
        record_payment(app_config, 404, 10.0)


def test_overpayment_is_accepted_and_logged(tmp_path, caplog) -> None:
    app_config = make_app_config(tmp_path)
    supplier = add_supplier(
        app_config,
        NewSupplier(name="Agro", product_supplied="Rice", total_value=100.0),
    )

    with caplog.at_level(logging.WARNING, logger="findash"):
        updated = record_payment(app_config, supplier.id, 150.0)

    assert updated.status == "paid"
    assert updated.remaining_debt == 0.0
    assert "overpaid" in caplog.text


def test_edit_list_and_remove_suppliers(tmp_path) -> None:
    app_config = make_app_config(tmp_path)
    agro = add_supplier(
        app_config,
        NewSupplier(name="Agro", product_supplied="Rice", total_value=1000.0),
    )
    add_supplier(
        app_config,
        NewSupplier(
            name="Oil Co",
            product_supplied="Oil",
            total_value=500.0,
            amount_paid=500.0,
        ),
    )

    edited = edit_supplier(app_config, agro.id, SupplierUpdate(amount_paid=1000.0))
    assert edited.status == "paid"

    assert list_suppliers(app_config, status="debt").empty
    assert len(list_suppliers(app_config, status="paid")) == 2
    with pytest.raises(ValueError):
        list_suppliers(app_config, status="late")

    remove_supplier(app_config, agro.id)
    assert load_supplier(app_config, agro.id) is None
    assert list_suppliers(app_config)["name"].tolist() == ["Oil Co"]


def test_debt_summary(tmp_path) -> None:
    app_config = make_app_config(tmp_path)
    assert debt_summary(app_config).supplier_count == 0

    add_supplier(
        app_config,
        NewSupplier(name="Agro", product_supplied="Rice", total_value=1000.0, amount_paid=400.0),
    )
    add_supplier(
        app_config,
        NewSupplier(name="Oil Co", product_supplied="Oil", total_value=500.0, amount_paid=500.0),
    )

    summary = debt_summary(app_config)

    assert summary.supplier_count == 2
    assert summary.suppliers_in_debt == 1
    assert summary.total_value == pytest.approx(1500.0)
    assert summary.total_paid == pytest.approx(900.0)
    assert summary.outstanding_debt == pytest.approx(600.0)


def test_edit_supplier_strips_text_fields(tmp_path) -> None:
    app_config = make_app_config(tmp_path)
    supplier = add_supplier(
        app_config,
        NewSupplier(name="Agro", product_supplied="Rice", total_value=1000.0),
    )

    edited = edit_supplier(
        app_config,
        supplier.id,
        SupplierUpdate(name="  Agro Lda ", product_supplied=" Rice 25kg "),
    )

    assert edited.name == "Agro Lda"
    assert edited.product_supplied == "Rice 25kg"
