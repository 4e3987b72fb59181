import logging
from pathlib import Path

import pytest

from findash.config import DEFAULT_EXPENSE_CATEGORIES, load_app_config
from findash.logger import setup_logging


def write_config(tmp_path, content: str) -> Path:
    cfg_path = tmp_path / "findash_config.toml"
    cfg_path.write_text(content, encoding="utf-8")
    return cfg_path


def test_load_app_config_full_file(tmp_path) -> None:
    """Every section is read and paths are resolved next to the TOML file."""
    cfg_path = write_config(
        tmp_path,
        """
[business]
name = "Mercado Lda"
currency = "USD"
currency_symbol = "$"

[database]
path = "db/app.sqlite"

[categories]
expense = ["Stock", "Rent"]
income = ["Sales", "Services"]
sales = "Shop"

[display]
mode = "both"
decimals = 0
recent_count = 6

[insights]
recent_count = 5

[logging]
level = "info"
file = "logs/findash.log"
""",
    )

    config = load_app_config(str(cfg_path))

    assert config.business_name == "Mercado Lda"
    assert config.currency == "USD"
    assert config.currency_symbol == "$"
    assert config.database.engine == "sqlite"
    assert config.database.path == (tmp_path / "db" / "app.sqlite").resolve()
    assert config.categories.expense == ("Stock", "Rent")
    assert config.categories.income == ("Sales", "Services")
    assert config.categories.sales == "Shop"
    assert config.display_mode == "both"
    assert config.decimals == 0
    assert config.recent_count == 6
    assert config.insights_recent_count == 5
    assert config.log_level == "INFO"
    assert config.log_file == (tmp_path / "logs" / "findash.log").resolve()


def test_load_app_config_defaults_without_file(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_app_config()

    assert config.business_name == "My Business"
    assert config.currency_symbol == "Kz"
    assert config.database.path == (tmp_path / "data" / "db" / "findash.sqlite").resolve()
    assert config.categories.expense == DEFAULT_EXPENSE_CATEGORIES
    assert config.categories.sales == "Sales"
    assert config.display_mode == "table"
    assert config.log_file is None


def test_load_app_config_missing_explicit_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_app_config(str(tmp_path / "missing.toml"))


@pytest.mark.parametrize(
    "content",
    [
        "[display]\nmode = 'pdf'\n",
        "[display]\ndecimals = -1\n",
        "[insights]\nrecent_count = 'ten'\n",
        "[categories]\nexpense = 'Food'\n",
        "[business\nname = 'broken'\n",
    ],
)
def test_load_app_config_invalid_values(tmp_path, content) -> None:
    cfg_path = write_config(tmp_path, content)
    with pytest.raises(ValueError):
        load_app_config(str(cfg_path))


def test_setup_logging_replaces_handlers(tmp_path) -> None:
    log_file = tmp_path / "logs" / "findash.log"

    logger = setup_logging("debug", log_file)
    assert logger.name == "findash"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    logging.getLogger("findash.db").debug("hello from the db layer")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from the db layer" in log_file.read_text(encoding="utf-8")

    logger = setup_logging("WARNING")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
