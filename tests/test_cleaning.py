import pytest
from tabclean.models import Table, NUMERIC, CATEGORICAL, HANDLED_OUTLIER, IMPUTED_MISSING_VALUE
from tabclean.workflows import cleaning

def test_classify_threshold_is_strict():
    # exactly 80% numeric stays categorical
    assert cleaning.classify_column([1, 2, 3, 4, "x"]) == CATEGORICAL
    assert cleaning.classify_column([1, 2, 3, 4, 5, "x"]) == NUMERIC
    assert cleaning.classify_column(["1", "2", "3", "4", "5"]) == NUMERIC

def test_classify_counts_missing_as_non_numeric():
    assert cleaning.classify_column([1, 2, 3, 4, None]) == CATEGORICAL
    assert cleaning.classify_column([]) == CATEGORICAL

def test_iqr_bounds_rank_indexed():
    assert cleaning.iqr_bounds([10, 11, 12, 13, 1000]) == (8.0, 16.0)

def test_iqr_bounds_need_four_points():
    assert cleaning.iqr_bounds([1, 2, 100]) is None
    assert cleaning.find_outliers([1, 2, 100], None) == []

def test_impute_numeric_lower_median():
    assert cleaning.impute_value(["3", "1", "", 2, "x"]) == 2
    # even count takes the upper middle rank, no averaging
    assert cleaning.impute_value([4, 1, 3, 2]) == 3

def test_impute_mode_and_tie_break():
    assert cleaning.impute_value(["NY", "NY", "LA", ""]) == "NY"
    assert cleaning.impute_value(["LA", "NY", "NY", "LA"]) == "LA"

def test_impute_nothing_available():
    assert cleaning.impute_value([None, "", "NaN"]) is None

def test_clean_table_caps_outlier(age_rows):
    table = Table.from_records(age_rows)
    cleaned, actions = cleaning.clean_table(table)
    assert [r["age"] for r in cleaned] == [10, 12, 11, 13, 16.0]
    assert len(actions) == 1
    assert actions[0].kind == HANDLED_OUTLIER
    assert actions[0].row == 4
    assert actions[0].message == "Handled outlier in column age"
    # the input is untouched
    assert table.rows[4]["age"] == 1000

def test_clean_table_imputes_missing():
    table = Table.from_records([{"age": v} for v in [10, "", 12, 11, 13]])
    cleaned, actions = cleaning.clean_table(table)
    assert cleaned[1]["age"] == 12
    assert [a.kind for a in actions] == [IMPUTED_MISSING_VALUE]

def test_clean_table_mode_imputation(city_rows):
    cleaned, actions = cleaning.clean_table(Table.from_records(city_rows))
    assert cleaned[3]["city"] == "NY"
    assert actions[0].message == "Imputed missing value in column city"

def test_numeric_text_is_not_capped():
    table = Table.from_records([{"v": s} for s in ["10", "11", "12", "13", "1000"]])
    cleaned, actions = cleaning.clean_table(table)
    assert cleaned[4]["v"] == "1000"
    assert actions == []

def test_column_without_observations_stays_missing():
    table = Table.from_records([{"a": "", "b": 1}, {"a": "NaN", "b": 2}])
    cleaned, actions = cleaning.clean_table(table)
    assert cleaned[0]["a"] is None
    assert cleaned[1]["a"] is None
    assert actions == []

def test_absent_key_is_imputed():
    table = Table(columns=["a", "b"], rows=[{"a": 1, "b": "x"}, {"a": 3}, {"a": 2, "b": "x"}])
    cleaned, _ = cleaning.clean_table(table)
    assert cleaned[1] == {"a": 3, "b": "x"}
