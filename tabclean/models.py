from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Dict, Any, Optional, Tuple, Literal, Union

NUMERIC = "numeric"
CATEGORICAL = "categorical"

IMPUTED_MISSING_VALUE = "imputed_missing_value"
HANDLED_OUTLIER = "handled_outlier"

_ACTION_MESSAGES = {
    IMPUTED_MISSING_VALUE: "Imputed missing value in column {column}",
    HANDLED_OUTLIER: "Handled outlier in column {column}",
}


class _CamelModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Table(BaseModel):
    columns: List[str] = []
    rows: List[Dict[str, Any]] = []

    @classmethod
    def from_records(cls, rows: List[Dict[str, Any]], columns: Optional[List[str]] = None) -> "Table":
        """
        Build a table from row mappings. When no column list is given the
        columns are the row keys in first-seen order.
        """
        if columns is None:
            seen: Dict[str, None] = {}
            for row in rows:
                for key in row:
                    seen.setdefault(key, None)
            columns = list(seen)
        return cls(columns=list(columns), rows=[dict(r) for r in rows])


class CleaningAction(_CamelModel):
    kind: Literal["imputed_missing_value", "handled_outlier"]
    column: str
    row: int

    @property
    def message(self) -> str:
        return _ACTION_MESSAGES[self.kind].format(column=self.column)


class ColumnProfile(_CamelModel):
    data_type: Literal["numeric", "categorical"]
    missing_count: int = 0
    outlier_values: List[float] = []


class ColumnStatistics(_CamelModel):
    mean: Optional[float] = None
    median: Optional[float] = None
    std: Optional[float] = None
    # native precision: ints stay ints
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    missing_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        # categorical / all-text columns serialize as {"missingCount": n} only
        return self.model_dump(by_alias=True, exclude_none=True)


class Summary(_CamelModel):
    total_rows: int = 0
    total_columns: int = 0
    missing_values: Dict[str, int] = {}
    data_types: Dict[str, str] = {}
    outliers: Dict[str, List[float]] = {}
    cleaning_actions: List[CleaningAction] = []

    def profile(self, column: str) -> ColumnProfile:
        return ColumnProfile(
            data_type=self.data_types[column],
            missing_count=self.missing_values[column],
            outlier_values=list(self.outliers.get(column, [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude={"cleaning_actions"})
        data["cleaningActions"] = [a.message for a in self.cleaning_actions]
        return data


class Analysis(_CamelModel):
    original_data: List[Dict[str, Any]]
    cleaned_data: List[Dict[str, Any]]
    summary: Summary
    statistics: Dict[str, ColumnStatistics]

    def to_dict(self) -> Dict[str, Any]:
        """
        Mapping-of-mappings form handed to the report layer. Rows are copied so
        the returned structure never aliases the analysis.
        """
        return {
            "originalData": [dict(r) for r in self.original_data],
            "cleanedData": [dict(r) for r in self.cleaned_data],
            "summary": self.summary.to_dict(),
            "statistics": {col: s.to_dict() for col, s in self.statistics.items()},
        }


class AnalysisState(BaseModel):
    """Intermediate results handed from one pipeline stage to the next."""
    table: Table
    data_types: Dict[str, str] = {}
    missing_values: Dict[str, int] = {}
    # sorted numeric values and IQR bounds per column, computed once per run
    numeric_values: Dict[str, List[float]] = {}
    bounds: Dict[str, Optional[Tuple[float, float]]] = {}
    outliers: Dict[str, List[float]] = {}
    cleaned_data: List[Dict[str, Any]] = []
    cleaning_actions: List[CleaningAction] = []
    statistics: Dict[str, ColumnStatistics] = {}
    analysis: Optional[Analysis] = None
