from typing import List, Dict, Any, Optional, Tuple
from collections import Counter

from tabclean.models import (
    Table, CleaningAction, NUMERIC, CATEGORICAL, IMPUTED_MISSING_VALUE, HANDLED_OUTLIER,
)
from tabclean.workflows.coercion import (
    is_missing, is_numeric, is_numeric_type, to_number, column_cells, numeric_values,
)

NUMERIC_FRACTION_THRESHOLD = 0.8
IQR_MULTIPLIER = 1.5
MIN_OUTLIER_POINTS = 4

Bounds = Tuple[float, float]

# ----------------------
# Column-level helpers
# ----------------------

def classify_column(cells: List[Any]) -> str:
    """numeric when strictly more than 80% of the cells are numeric-coercible."""
    if not cells:
        return CATEGORICAL
    numeric_count = sum(1 for v in cells if is_numeric(v))
    return NUMERIC if numeric_count > len(cells) * NUMERIC_FRACTION_THRESHOLD else CATEGORICAL


def lower_median(sorted_values: List[float]) -> float:
    # rank floor(n/2): the upper of the two middle values is never averaged in
    return sorted_values[len(sorted_values) // 2]


def iqr_bounds(sorted_values: List[float]) -> Optional[Bounds]:
    """
    Rank-indexed quartile fences. Returns None when there are fewer than four
    points, in which case nothing in the column is ever an outlier.
    """
    n = len(sorted_values)
    if n < MIN_OUTLIER_POINTS:
        return None
    q1 = sorted_values[n // 4]
    q3 = sorted_values[(3 * n) // 4]
    iqr = q3 - q1
    return (q1 - IQR_MULTIPLIER * iqr, q3 + IQR_MULTIPLIER * iqr)


def is_outlier(value: float, bounds: Optional[Bounds]) -> bool:
    if bounds is None:
        return False
    lower, upper = bounds
    return value < lower or value > upper


def cap_value(value: float, bounds: Bounds) -> float:
    lower, upper = bounds
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def find_outliers(cells: List[Any], bounds: Optional[Bounds]) -> List[float]:
    """Original (uncapped) outlier values, in row order."""
    if bounds is None:
        return []
    coerced = (to_number(v) for v in cells)
    return [v for v in coerced if v is not None and is_outlier(v, bounds)]


def impute_value(cells: List[Any]) -> Optional[Any]:
    """
    Replacement for a missing cell: lower median of the numeric values when the
    column has any, otherwise the most frequent text representation. Ties in
    the mode go to the value seen first in row order. None when the column has
    no observations at all.
    """
    present = [v for v in cells if not is_missing(v)]
    if not present:
        return None
    numbers = numeric_values(present)
    if numbers:
        return lower_median(numbers)
    # Counter keeps first-seen order and most_common is stable for equal counts
    frequency = Counter(str(v) for v in present)
    return frequency.most_common(1)[0][0]

# ----------------------
# Table-level transforms
# ----------------------

def classify_table(table: Table) -> Dict[str, str]:
    return {col: classify_column(column_cells(table.rows, col)) for col in table.columns}


def column_bounds(table: Table) -> Dict[str, Optional[Bounds]]:
    return {
        col: iqr_bounds(numeric_values(column_cells(table.rows, col)))
        for col in table.columns
    }


def clean_table(
    table: Table,
    bounds: Optional[Dict[str, Optional[Bounds]]] = None,
) -> Tuple[List[Dict[str, Any]], List[CleaningAction]]:
    """
    Impute missing cells and cap numeric outliers.

    Works on copies: the rows of `table` are never modified. Bounds always come
    from the original column values; pass precomputed ones to avoid sorting
    each column twice in a run.
    """
    if bounds is None:
        bounds = column_bounds(table)
    imputations = {col: impute_value(column_cells(table.rows, col)) for col in table.columns}

    cleaned: List[Dict[str, Any]] = []
    actions: List[CleaningAction] = []
    for index, row in enumerate(table.rows):
        cleaned_row: Dict[str, Any] = {}
        for col in table.columns:
            value = row.get(col)
            if is_missing(value):
                value = imputations[col]
                if value is not None:
                    actions.append(CleaningAction(kind=IMPUTED_MISSING_VALUE, column=col, row=index))
            # text cells that merely parse as numbers are left as they are
            if is_numeric_type(value) and is_numeric(value) and is_outlier(value, bounds[col]):
                value = cap_value(value, bounds[col])
                actions.append(CleaningAction(kind=HANDLED_OUTLIER, column=col, row=index))
            cleaned_row[col] = value
        cleaned.append(cleaned_row)
    return cleaned, actions
