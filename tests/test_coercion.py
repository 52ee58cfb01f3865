import pytest
from tabclean.workflows.coercion import is_missing, to_number, is_numeric, numeric_values

@pytest.mark.parametrize("value", [None, "", "NaN", float("nan")])
def test_missing_forms(value):
    assert is_missing(value)
    assert not is_numeric(value)

@pytest.mark.parametrize("value", ["nan", " ", 0, "N/A"])
def test_not_missing(value):
    assert not is_missing(value)

def test_numbers_pass_through():
    assert to_number(5) == 5
    assert to_number(2.5) == 2.5

def test_text_uses_leading_numeric_portion():
    assert to_number("12abc") == 12.0
    assert to_number("  -3.5e2 kg") == -350.0
    assert to_number(".5") == 0.5
    assert to_number("7.") == 7.0

def test_non_finite_and_non_numbers_rejected():
    assert to_number("abc") is None
    assert to_number("Infinity") is None
    assert to_number("1e999") is None
    assert to_number(float("inf")) is None
    assert to_number(True) is None

def test_numeric_values_sorted():
    assert numeric_values(["3", None, 1, "x", 2.5]) == [1, 2.5, 3.0]

def test_int_beyond_float_range_is_not_numeric():
    huge = 10 ** 400
    assert to_number(huge) is None
    assert not is_numeric(huge)
    assert to_number("1" + "0" * 400) is None
