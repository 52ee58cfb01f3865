"""
Turn uploaded CSV / Excel bytes into a `Table`, and cleaned rows back into CSV.

Only the empty string and the text "NaN" are read as absent, so a cell like
"N/A" reaches the pipeline as text, the same as any other label.
"""
import io
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import xlrd

from tabclean.errors import UnsupportedFormat
from tabclean.models import Table

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")
NA_VALUES = ["", "NaN"]
_EXCEL_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}


def dataframe_to_table(df: pd.DataFrame) -> Table:
    df = df.copy()
    df.columns = [str(c) for c in df.columns]
    # object dtype turns numpy scalars into Python ints/floats; NA becomes None
    records = df.astype(object).where(df.notna(), None).to_dict(orient="records")
    return Table(columns=list(df.columns), rows=records)


def _read_frame(extension: str, content: bytes) -> pd.DataFrame:
    buffer = io.BytesIO(content)
    if extension == ".csv":
        return pd.read_csv(buffer, keep_default_na=False, na_values=NA_VALUES, skip_blank_lines=True)
    return pd.read_excel(
        buffer,
        sheet_name=0,
        engine=_EXCEL_ENGINES[extension],
        keep_default_na=False,
        na_values=NA_VALUES,
    )


def load_table(filename: str, content: bytes) -> Table:
    extension = Path(filename or "").suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormat("Unsupported file format. Please upload a CSV or Excel file.")
    try:
        df = _read_frame(extension, content)
    except pd.errors.EmptyDataError as e:
        raise UnsupportedFormat(f"{filename} contains no data") from e
    except (pd.errors.ParserError, ValueError, OSError, zipfile.BadZipFile, xlrd.XLRDError) as e:
        raise UnsupportedFormat(f"could not parse {filename}: {e}") from e
    logger.info("loaded %s: %d rows, %d columns", filename, len(df), len(df.columns))
    return dataframe_to_table(df)


def rows_to_csv(rows: List[Dict[str, Any]], columns: List[str]) -> str:
    """CSV text of `rows` in column order; missing cells are written empty."""
    # object dtype keeps ints as ints instead of widening them to floats
    return pd.DataFrame(rows, columns=columns, dtype=object).to_csv(index=False)


def cleaned_filename(filename: str) -> str:
    return f"{Path(filename or 'data').stem}_cleaned.csv"
