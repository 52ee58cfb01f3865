# tests/conftest.py
import os
import sys

import pytest

# Ensure the project root (one level up from tests/) is on sys.path
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def age_rows():
    return [{"age": v} for v in [10, 12, 11, 13, 1000]]


@pytest.fixture
def city_rows():
    return [{"city": v} for v in ["NY", "NY", "LA", ""]]
