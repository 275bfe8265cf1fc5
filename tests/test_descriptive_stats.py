import numpy as np
import pandas as pd
import pytest
from hypothesis import given
from hypothesis import strategies as st

from admission_grade_analysis.descriptive_stats import (
    sturges_bin_count,
    summarize_categorical,
    summarize_numeric,
)
from admission_grade_analysis.exceptions import StatisticalDegeneracyError
from admission_grade_analysis.feature_engineering import prepare_analysis_dataframe


@pytest.mark.parametrize("n, expected", [(1, 1), (2, 2), (3, 3), (8, 4), (9, 5), (100, 8), (4424, 14)])
def test_sturges_bin_count(n, expected):
    assert sturges_bin_count(np.arange(n)) == expected


def test_sturges_ignores_missing_values():
    assert sturges_bin_count([1.0, np.nan, 2.0, np.nan]) == 2


def test_sturges_no_values():
    with pytest.raises(StatisticalDegeneracyError):
        sturges_bin_count([np.nan, np.nan])
    with pytest.raises(StatisticalDegeneracyError):
        sturges_bin_count([])


@given(st.integers(min_value=1, max_value=5000), st.integers(min_value=0, max_value=5000))
def test_sturges_monotone_in_n(n, extra):
    assert sturges_bin_count(np.ones(n)) <= sturges_bin_count(np.ones(n + extra))


def test_summarize_numeric(three_students):
    summary = summarize_numeric(three_students).set_index("column")
    row = summary.loc["admission_grade"]
    assert row["n_missing"] == 0
    assert row["complete_rate"] == 1.0
    assert row["mean"] == pytest.approx(120.0)
    assert row["sd"] == pytest.approx(20.0)
    assert (row["p0"], row["p50"], row["p100"]) == (100.0, 120.0, 140.0)
    assert row["bins"] == 3


def test_summarize_numeric_counts_missing():
    df = pd.DataFrame({"a": [1.0, np.nan, 3.0, np.nan]})
    row = summarize_numeric(df).iloc[0]
    assert row["n_missing"] == 2
    assert row["complete_rate"] == 0.5
    assert row["bins"] == 2


def test_summarize_categorical(three_students):
    prepared = prepare_analysis_dataframe(three_students)
    summary = summarize_categorical(prepared).set_index("column")
    assert set(summary.index) == {"attendance_type", "gender", "scholarship_holder"}
    assert summary.loc["attendance_type", "n_unique"] == 2
    assert summary.loc["attendance_type", "top_counts"] == "daytime: 2, evening: 1"
    assert summary.loc["gender", "top_counts"] == "female: 2, male: 1"
