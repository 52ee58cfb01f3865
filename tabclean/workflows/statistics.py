from typing import Dict, List, Optional

import numpy as np

from tabclean.models import Table, ColumnStatistics
from tabclean.workflows.cleaning import lower_median
from tabclean.workflows.coercion import is_missing, column_cells, numeric_values

DECIMALS = 4


def _rounded(value) -> float:
    return round(float(value), DECIMALS)


def missing_count(cells) -> int:
    """Cells that are absent, empty or the text "NaN"."""
    return sum(1 for v in cells if is_missing(v))


def column_statistics(cells: List, sorted_values: Optional[List[float]] = None) -> ColumnStatistics:
    """
    Descriptive statistics of the numeric cells of one column.

    With no numeric cells only the literal missing count is reported. With
    numeric cells, missingCount is the number of cells that are not numeric,
    which also counts unparseable text.
    """
    if sorted_values is None:
        sorted_values = numeric_values(cells)
    if not sorted_values:
        return ColumnStatistics(missing_count=missing_count(cells))

    values = np.asarray(sorted_values, dtype=float)
    return ColumnStatistics(
        mean=_rounded(values.mean()),
        median=_rounded(lower_median(sorted_values)),
        # population standard deviation
        std=_rounded(values.std(ddof=0)),
        min=sorted_values[0],
        max=sorted_values[-1],
        missing_count=len(cells) - len(sorted_values),
    )


def compute_statistics(
    table: Table,
    sorted_values: Optional[Dict[str, List[float]]] = None,
) -> Dict[str, ColumnStatistics]:
    sorted_values = sorted_values or {}
    return {
        col: column_statistics(column_cells(table.rows, col), sorted_values.get(col))
        for col in table.columns
    }
