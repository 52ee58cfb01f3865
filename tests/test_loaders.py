import io

import pandas as pd
import pytest
from tabclean.errors import UnsupportedFormat
from tabclean.loaders import load_table, rows_to_csv, cleaned_filename

CSV = b"age,city\n10,NY\n12,N/A\n11,LA\n13,\n1000,NaN\n"

def test_load_csv():
    table = load_table("people.csv", CSV)
    assert table.columns == ["age", "city"]
    assert len(table.rows) == 5
    assert [r["age"] for r in table.rows] == [10, 12, 11, 13, 1000]
    assert not isinstance(table.rows[0]["age"], str)
    # only "" and "NaN" are read as absent
    assert table.rows[1]["city"] == "N/A"
    assert table.rows[3]["city"] is None
    assert table.rows[4]["city"] is None

def test_load_xlsx():
    buffer = io.BytesIO()
    pd.DataFrame({"score": [1.5, 2.5, None], "team": ["a", "b", "c"]}).to_excel(buffer, index=False)
    table = load_table("scores.xlsx", buffer.getvalue())
    assert table.columns == ["score", "team"]
    assert table.rows[0] == {"score": 1.5, "team": "a"}
    assert table.rows[2]["score"] is None

def test_unsupported_extension():
    with pytest.raises(UnsupportedFormat):
        load_table("notes.txt", b"hello")

def test_empty_csv():
    with pytest.raises(UnsupportedFormat):
        load_table("empty.csv", b"")

def test_corrupt_xlsx():
    with pytest.raises(UnsupportedFormat):
        load_table("broken.xlsx", b"not a workbook")

def test_xlsx_keeps_na_like_text():
    buffer = io.BytesIO()
    pd.DataFrame({"city": ["NY", "N/A", "LA", "NA", "null"]}).to_excel(buffer, index=False)
    table = load_table("cities.xlsx", buffer.getvalue())
    assert [r["city"] for r in table.rows] == ["NY", "N/A", "LA", "NA", "null"]

def test_corrupt_xls():
    with pytest.raises(UnsupportedFormat):
        load_table("legacy.xls", b"not a workbook")

def test_rows_to_csv_uses_column_order():
    rows = [{"b": 2, "a": 1}, {"a": 3}]
    assert rows_to_csv(rows, ["a", "b"]).splitlines() == ["a,b", "1,2", "3,"]

def test_cleaned_filename():
    assert cleaned_filename("people.csv") == "people_cleaned.csv"
    assert cleaned_filename("report.v2.xlsx") == "report.v2_cleaned.csv"
