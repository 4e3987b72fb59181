# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for FinDash.

This module is responsible for:
- loading the application configuration from a TOML file,
- falling back to built-in defaults when no configuration file exists,
- exposing typed dataclasses used by the rest of the application.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

from .db import DatabaseConfig

DEFAULT_CONFIG_FILENAME = "findash_config.toml"
DISPLAY_MODES = ("table", "csv", "both")

DEFAULT_EXPENSE_CATEGORIES = (
    "Food",
    "Housing",
    "Transport",
    "Leisure",
    "Health",
    "Other",
)
DEFAULT_INCOME_CATEGORIES = (
    "Salary",
    "Freelance",
    "Investments",
    "Gift",
    "Other",
)


@dataclass(frozen=True)
class CategoriesConfig:
    """
    Transaction categories offered to the user.

    `sales` is the category under which point-of-sale income is recorded
    and from which the cash register history is built.
    """

    expense: tuple[str, ...] = DEFAULT_EXPENSE_CATEGORIES
    income: tuple[str, ...] = DEFAULT_INCOME_CATEGORIES
    sales: str = "Sales"


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for FinDash.

    This aggregates:
    - the business identity and currency used for display,
    - the database configuration (where every record is stored),
    - the suggested transaction categories and the sales category,
    - display options for tables and CSV exports,
    - insights and logging options.
    """

    business_name: str
    currency: str
    currency_symbol: str
    database: DatabaseConfig
    categories: CategoriesConfig = field(default_factory=CategoriesConfig)
    display_mode: str = "table"
    decimals: int = 2
    recent_count: int = 4
    insights_recent_count: int = 10
    log_level: str = "WARNING"
    log_file: Optional[Path] = None


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Return a top-level table, or an empty mapping if absent or malformed."""
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _parse_category_list(value: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default
    if not isinstance(value, (list, tuple)):
        raise ValueError("Category lists must be arrays of strings.")
    names = tuple(str(v).strip() for v in value if str(v).strip())
    return names or default


def _parse_int(value: Any, default: int, key: str) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for {key!r} in the configuration. Expected an integer."
        ) from exc
    if parsed < 0:
        raise ValueError(f"Invalid value for {key!r}: must be >= 0.")
    return parsed


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the FinDash application configuration from a TOML file.

    Expected top-level sections in the TOML file
    --------------------------------------------
    [business]
        Business name, currency code and the symbol used when printing
        amounts (e.g. "AOA" / "Kz").

    [database]
        Database engine and SQLite file path.

    [categories]
        Suggested `expense` and `income` category lists and the `sales`
        category used by the point of sale.

    [display]
        `mode` ("table", "csv" or "both"), `decimals` and `recent_count`
        (number of recent transactions on the dashboard).

    [insights]
        `recent_count`: number of transactions quoted in the insights report.

    [logging]
        `level` and optional `file` (rotating log file).

    Notes
    -----
    - All file paths in the TOML are resolved relative to the directory of
      the TOML file itself.
    - When `config_path` is None and no `findash_config.toml` exists in the
      working directory, built-in defaults are used and the database lives
      in `data/db/findash.sqlite` under the working directory.

    Parameters
    ----------
    config_path : str, optional
        Path to the TOML configuration file.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.

    Raises
    ------
    FileNotFoundError
        If `config_path` is given and does not exist.
    ValueError
        If the file cannot be parsed or holds invalid values.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILENAME).resolve()
        raw = _load_toml(config_file) if config_file.is_file() else {}
    else:
        config_file = Path(config_path).resolve()
        raw = _load_toml(config_file)

    base_dir = config_file.parent

    # 1) Business section
    business_section = _section(raw, "business")
    business_name = str(business_section.get("name") or "My Business")
    currency = str(business_section.get("currency") or "AOA")
    currency_symbol = str(business_section.get("currency_symbol") or "Kz")

    # 2) Database section
    database_section = _section(raw, "database")
    db_engine = str(database_section.get("engine") or "sqlite")
    db_path_raw = database_section.get("path") or "data/db/findash.sqlite"
    db_path = (base_dir / str(db_path_raw)).resolve()

    database_config = DatabaseConfig(engine=db_engine, path=db_path)

    # 3) Categories
    categories_section = _section(raw, "categories")
    categories = CategoriesConfig(
        expense=_parse_category_list(
            categories_section.get("expense"), DEFAULT_EXPENSE_CATEGORIES
        ),
        income=_parse_category_list(
            categories_section.get("income"), DEFAULT_INCOME_CATEGORIES
        ),
        sales=str(categories_section.get("sales") or "Sales"),
    )

    # 4) Display options
    display_section = _section(raw, "display")
    display_mode = str(display_section.get("mode", "table"))
    if display_mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid display mode {display_mode!r}. "
            f"Expected one of: {', '.join(DISPLAY_MODES)}."
        )
    decimals = _parse_int(display_section.get("decimals"), 2, "display.decimals")
    recent_count = _parse_int(
        display_section.get("recent_count"), 4, "display.recent_count"
    )

    # 5) Insights
    insights_section = _section(raw, "insights")
    insights_recent_count = _parse_int(
        insights_section.get("recent_count"), 10, "insights.recent_count"
    )

    # 6) Logging
    logging_section = _section(raw, "logging")
    log_level = str(logging_section.get("level") or "WARNING").upper()
    log_file_raw = logging_section.get("file")
    log_file = (base_dir / str(log_file_raw)).resolve() if log_file_raw else None

    return AppConfig(
        business_name=business_name,
        currency=currency,
        currency_symbol=currency_symbol,
        database=database_config,
        categories=categories,
        display_mode=display_mode,
        decimals=decimals,
        recent_count=recent_count,
        insights_recent_count=insights_recent_count,
        log_level=log_level,
        log_file=log_file,
    )
