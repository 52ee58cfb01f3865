import logging
from typing import List, Dict, Any

from tabclean.errors import UnsupportedInput
from tabclean.models import AnalysisState, Analysis, Summary, Table, NUMERIC
from tabclean.registry import register, list_stages, STAGES
from tabclean.engine.runner import Pipeline, run_pipeline
from tabclean.workflows import cleaning, statistics
from tabclean.workflows.coercion import column_cells, numeric_values

logger = logging.getLogger(__name__)

# ----------------------
# Stages
# ----------------------

@register("validate_table")
def validate_table(state: AnalysisState) -> AnalysisState:
    """
    Reject tables the pipeline cannot describe: no columns or duplicated
    column names. Blank names are ordinary keys; an empty row set is fine.
    """
    columns = state.table.columns
    if not columns:
        raise UnsupportedInput("table has no columns")
    duplicates = sorted({c for c in columns if columns.count(c) > 1})
    if duplicates:
        raise UnsupportedInput(f"duplicate column names: {', '.join(duplicates)}")
    return state


@register("classify_columns")
def classify_columns(state: AnalysisState) -> AnalysisState:
    return state.model_copy(update={"data_types": cleaning.classify_table(state.table)})


@register("profile_columns")
def profile_columns(state: AnalysisState) -> AnalysisState:
    """
    Missing counts, sorted numeric values, IQR bounds and outliers of the
    original columns. Later stages reuse the sorted values and bounds.
    """
    rows = state.table.rows
    missing: Dict[str, int] = {}
    values: Dict[str, List[float]] = {}
    bounds = {}
    outliers: Dict[str, List[float]] = {}
    for col in state.table.columns:
        cells = column_cells(rows, col)
        missing[col] = statistics.missing_count(cells)
        values[col] = numeric_values(cells)
        bounds[col] = cleaning.iqr_bounds(values[col])
        if state.data_types.get(col) == NUMERIC:
            outliers[col] = cleaning.find_outliers(cells, bounds[col])
        else:
            outliers[col] = []
    return state.model_copy(update={
        "missing_values": missing,
        "numeric_values": values,
        "bounds": bounds,
        "outliers": outliers,
    })


@register("clean_table")
def clean_table(state: AnalysisState) -> AnalysisState:
    cleaned, actions = cleaning.clean_table(state.table, state.bounds or None)
    return state.model_copy(update={"cleaned_data": cleaned, "cleaning_actions": actions})


@register("compute_statistics")
def compute_statistics(state: AnalysisState) -> AnalysisState:
    stats = statistics.compute_statistics(state.table, state.numeric_values)
    return state.model_copy(update={"statistics": stats})


@register("assemble_analysis")
def assemble_analysis(state: AnalysisState) -> AnalysisState:
    table = state.table
    summary = Summary(
        total_rows=len(table.rows),
        total_columns=len(table.columns),
        missing_values=state.missing_values,
        data_types=state.data_types,
        outliers=state.outliers,
        cleaning_actions=state.cleaning_actions,
    )
    analysis = Analysis(
        original_data=[dict(row) for row in table.rows],
        cleaned_data=[dict(row) for row in state.cleaned_data],
        summary=summary,
        statistics=state.statistics,
    )
    logger.info(
        "analyzed %d rows x %d columns: %d missing cells, %d outliers, %d cleaning actions",
        summary.total_rows,
        summary.total_columns,
        sum(summary.missing_values.values()),
        sum(len(v) for v in summary.outliers.values()),
        len(summary.cleaning_actions),
    )
    return state.model_copy(update={"analysis": analysis})

# ----------------------
# Entry points
# ----------------------

def build_pipeline() -> Pipeline:
    return Pipeline(list_stages(), dict(STAGES))


def initial_state(table: Table) -> AnalysisState:
    # snapshot the caller's rows so later mutation of their table cannot leak in
    snapshot = Table(columns=list(table.columns), rows=[dict(row) for row in table.rows])
    return AnalysisState(table=snapshot)


def analyze_with_log(table: Table):
    state, log = run_pipeline(build_pipeline(), initial_state(table))
    return state.analysis, log


def analyze(table: Table) -> Analysis:
    """
    Clean `table` and describe it. Raises UnsupportedInput for a structurally
    invalid table; every other input is handled by imputation and capping.
    """
    analysis, _ = analyze_with_log(table)
    return analysis


def analyze_records(rows: List[Dict[str, Any]], columns=None) -> Analysis:
    return analyze(Table.from_records(rows, columns))
