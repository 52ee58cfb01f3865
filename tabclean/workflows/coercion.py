"""
Cell-level predicates shared by every stage.

`to_number` is the single definition of "numeric" used for type
classification, imputation, outlier detection and statistics, so the counts
reported in different sections of an analysis always agree with each other.
"""
import math
import re
from numbers import Real
from typing import Any, Dict, List, Optional

import numpy as np

MISSING_SENTINEL = "NaN"

# leading numeric portion of a text cell: "12abc" -> 12, " -.5e3 kg" -> -500
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_missing(value: Any) -> bool:
    """Absent, empty string or the literal text "NaN"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == "" or value == MISSING_SENTINEL
    # pandas hands absent cells over as float NaN
    return isinstance(value, float) and math.isnan(value)


def is_numeric_type(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, (bool, np.bool_))


def to_number(value: Any) -> Optional[float]:
    """
    Return the numeric value of a cell, or None when the cell is not numeric.

    Numbers must be finite; text is numeric when its leading numeric portion
    parses to a finite value. Missing cells are never numeric.
    """
    if is_missing(value):
        return None
    if is_numeric_type(value):
        try:
            finite = math.isfinite(value)
        except OverflowError:
            # an int beyond float range reads as infinity
            return None
        return value if finite else None
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value.lstrip())
        if match is None:
            return None
        number = float(match.group(0))
        return number if math.isfinite(number) else None
    return None


def is_numeric(value: Any) -> bool:
    return to_number(value) is not None


def column_cells(rows: List[Dict[str, Any]], column: str) -> List[Any]:
    # an absent key is a missing cell
    return [row.get(column) for row in rows]


def numeric_values(cells: List[Any]) -> List[float]:
    """Numeric-coerced values of a column, ascending."""
    coerced = [to_number(v) for v in cells]
    return sorted(v for v in coerced if v is not None)
