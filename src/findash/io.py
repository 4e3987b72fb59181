# FinDash - Financial Dashboard & Inventory application for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for FinDash.

This module handles reading transactions from a CSV file and normalizing
them into the structure stored by the database layer, and encoding image
files into the data URLs used for product and category pictures.

Expected input formats
----------------------

Two canonical input formats are supported (column names are case-insensitive):

1) Typed format
   ------------
       date, title, type, category, amount

   - ``date``:     date of the transaction (YYYY-MM-DD)
   - ``title``:    free text label
   - ``type``:     "income" or "expense" (case-insensitive)
   - ``category``: category name
   - ``amount``:   positive amount

2) Signed amount format
   --------------------
       date, title, category, amount

   - ``amount`` is a signed number: positive values are incomes, negative
     values are expenses.

Title alias
-----------
The column ``description`` is accepted as an alias for ``title``, so that
bank exports can be imported without renaming columns.

Output schema
-------------
Regardless of the input format, `read_transactions` returns a pandas
DataFrame with the following columns:

    - ``date``     (datetime64[ns])
    - ``title``    (str)
    - ``type``     (str, "income" | "expense")
    - ``category`` (str)
    - ``amount``   (float, positive)

Any other columns present in the input file are ignored.

If the CSV structure does not match one of the supported formats, a clear
ValueError is raised.
"""

import base64
import mimetypes
import os
from pathlib import Path
from typing import Union

import pandas as pd

OUTPUT_COLUMNS = ["date", "title", "type", "category", "amount"]


def _parse_dates(d: pd.DataFrame) -> None:
    # Invalid dates should fail loudly
    try:
        d["date"] = pd.to_datetime(d["date"], errors="raise")
    except (ValueError, TypeError) as exc:
        raise ValueError("Invalid values in 'date' column.") from exc


def _parse_amounts(d: pd.DataFrame) -> None:
    d["amount"] = pd.to_numeric(d["amount"], errors="coerce")
    if d["amount"].isna().any():
        raise ValueError("Invalid numeric values in 'amount' column.")


def _finalize(d: pd.DataFrame) -> pd.DataFrame:
    out = d[OUTPUT_COLUMNS].copy()
    out["title"] = out["title"].fillna("").astype(str).str.strip()
    out["category"] = out["category"].fillna("Other").astype(str).str.strip()
    out.loc[out["category"] == "", "category"] = "Other"
    if (out["title"] == "").any():
        raise ValueError("Empty values in 'title' column.")
    return out.reset_index(drop=True)


def read_transactions(path: Union[str, "os.PathLike[str]"]) -> pd.DataFrame:
    """
    Read transactions from a CSV file and normalize them.

    Parameters
    ----------
    path:
        Path to the CSV file containing transactions.

    Supported input formats (case-insensitive column names)
    -------------------------------------------------------

    1) Typed format
           date, title, type, category, amount

    2) Signed amount format
           date, title, category, amount

    The column name ``description`` is accepted as an alias for ``title``.

    Returns
    -------
    pandas.DataFrame
        A DataFrame with exactly these columns:

            - date     (datetime64[ns])
            - title    (str)
            - type     (str)
            - category (str)
            - amount   (float, positive)

    Raises
    ------
    ValueError
        If the CSV does not contain one of the supported column sets, if
        numeric/date parsing fails, if a type is unknown or an amount is
        zero.
    """
    df = pd.read_csv(path)

    # Normalize column names to lowercase (to make the check case-insensitive)
    df.columns = [c.lower().strip() for c in df.columns]
    cols = set(df.columns)

    if "description" in cols and "title" not in cols:
        df = df.rename(columns={"description": "title"})
        cols = set(df.columns)

    required_typed = {"date", "title", "type", "category", "amount"}
    required_signed = {"date", "title", "category", "amount"}

    # ----- Case 1: typed format ---------------------------------------------
    if required_typed.issubset(cols):
        d = df.copy()
        _parse_dates(d)
        _parse_amounts(d)

        d["type"] = d["type"].astype(str).str.strip().str.lower()
        invalid = sorted(set(d["type"]) - {"income", "expense"})
        if invalid:
            raise ValueError(
                f"Invalid values in 'type' column: {', '.join(invalid)}. "
                "Expected 'income' or 'expense'."
            )
        if (d["amount"] <= 0).any():
            raise ValueError("Amounts must be positive when a 'type' column is given.")

        return _finalize(d)

    # ----- Case 2: signed amount format -------------------------------------
    if required_signed.issubset(cols):
        d = df.copy()
        _parse_dates(d)
        _parse_amounts(d)

        if (d["amount"] == 0).any():
            raise ValueError("Zero values in 'amount' column.")

        d["type"] = d["amount"].map(lambda v: "income" if v > 0 else "expense")
        d["amount"] = d["amount"].abs()

        return _finalize(d)

    # ----- Invalid structure → raise with clear message ---------------------
    raise ValueError(
        "Invalid transactions structure. Expected either:\n"
        "  - date, title, type, category, amount\n"
        "  - date, title, category, amount (signed amounts)\n"
        "(column names are case-insensitive; 'description' is accepted as an "
        "alias for 'title')."
    )


def encode_image_file(path: Union[str, "os.PathLike[str]"]) -> str:
    """
    Read an image file and return it as a base64 ``data:`` URL.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file type cannot be recognized as an image.
    """
    image_path = Path(path)
    if not image_path.is_file():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    mime_type, _ = mimetypes.guess_type(image_path.name)
    if mime_type is None or not mime_type.startswith("image/"):
        raise ValueError(f"Not an image file: {image_path}")

    encoded = base64.b64encode(image_path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
