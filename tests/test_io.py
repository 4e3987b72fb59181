import pandas as pd
import pytest

from findash.io import encode_image_file, read_transactions


def write_csv(tmp_path, content: str, name: str = "transactions.csv"):
    csv_path = tmp_path / name
    csv_path.write_text(content, encoding="utf-8")
    return csv_path


def test_read_typed_format(tmp_path) -> None:
    """Typed CSVs keep their type column, normalized to lowercase."""
    csv_path = write_csv(
        tmp_path,
        "Date,Title,Type,Category,Amount\n"
        "2025-01-05,Salary,Income,Salary,1000\n"
        "2025-01-06,Rent,EXPENSE,Housing,300.5\n",
    )

    df = read_transactions(csv_path)

    assert list(df.columns) == ["date", "title", "type", "category", "amount"]
    assert df["type"].tolist() == ["income", "expense"]
    assert df["amount"].tolist() == [1000.0, 300.5]
    assert pd.api.types.is_datetime64_any_dtype(df["date"])


def test_read_signed_format_with_description_alias(tmp_path) -> None:
    """Negative amounts become expenses and 'description' acts as title."""
    csv_path = write_csv(
        tmp_path,
        "date,description,category,amount,account\n"
        "2025-02-01,Client invoice,Freelance,250,main\n"
        "2025-02-02,Taxi,,-12.5,main\n",
    )

    df = read_transactions(csv_path)

    assert df["title"].tolist() == ["Client invoice", "Taxi"]
    assert df["type"].tolist() == ["income", "expense"]
    assert df["amount"].tolist() == [250.0, 12.5]
    assert df["category"].tolist() == ["Freelance", "Other"]


def test_read_typed_format_rejects_unknown_type(tmp_path) -> None:
    csv_path = write_csv(
        tmp_path,
        "date,title,type,category,amount\n2025-01-05,Move,transfer,Other,10\n",
    )
    with pytest.raises(ValueError, match="transfer"):
        read_transactions(csv_path)


def test_read_typed_format_rejects_non_positive_amounts(tmp_path) -> None:
    csv_path = write_csv(
        tmp_path,
        "date,title,type,category,amount\n2025-01-05,Refund,expense,Other,-10\n",
    )
    with pytest.raises(ValueError, match="positive"):
        read_transactions(csv_path)


def test_read_signed_format_rejects_zero(tmp_path) -> None:
    csv_path = write_csv(
        tmp_path,
        "date,title,category,amount\n2025-01-05,Nothing,Other,0\n",
    )
    with pytest.raises(ValueError, match="Zero"):
        read_transactions(csv_path)


def test_read_rejects_invalid_structure(tmp_path) -> None:
    csv_path = write_csv(tmp_path, "when,what\n2025-01-05,Rent\n")
    with pytest.raises(ValueError, match="Invalid transactions structure"):
        read_transactions(csv_path)


def test_read_rejects_invalid_dates_and_amounts(tmp_path) -> None:
    bad_date = write_csv(
        tmp_path,
        "date,title,category,amount\nnot-a-date,Rent,Housing,-10\n",
        name="bad_date.csv",
    )
    bad_amount = write_csv(
        tmp_path,
        "date,title,category,amount\n2025-01-05,Rent,Housing,abc\n",
        name="bad_amount.csv",
    )

    with pytest.raises(ValueError, match="date"):
        read_transactions(bad_date)
    with pytest.raises(ValueError, match="amount"):
        read_transactions(bad_amount)


def test_encode_image_file_returns_data_url(tmp_path) -> None:
    image = tmp_path / "logo.png"
    image.write_bytes(b"\x89PNG\r\n")

    encoded = encode_image_file(image)

    assert encoded.startswith("data:image/png;base64,")
    assert encoded.endswith("iVBORw0K")


def test_encode_image_file_errors(tmp_path) -> None:
    text_file = tmp_path / "notes.txt"
    text_file.write_text("hello", encoding="utf-8")

    with pytest.raises(FileNotFoundError):
        encode_image_file(tmp_path / "missing.png")
    with pytest.raises(ValueError):
        encode_image_file(text_file)
