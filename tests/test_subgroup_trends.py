import numpy as np
import pandas as pd
import pytest

from admission_grade_analysis.data_preprocessing import load_and_clean
from admission_grade_analysis.feature_engineering import prepare_analysis_dataframe
from admission_grade_analysis.regression import fit_linear
from admission_grade_analysis.subgroup_trends import (
    compare_subgroup_trends,
    slope_difference_test,
    split_by_group,
)


@pytest.fixture
def students(csv_path):
    return prepare_analysis_dataframe(load_and_clean(csv_path))


@pytest.fixture
def diverging_slopes():
    """Two groups with clearly different admission-grade slopes."""
    rng = np.random.default_rng(5)
    x = rng.uniform(100, 180, size=80)
    group = np.where(np.arange(80) % 2 == 0, "yes", "no")
    slope = np.where(group == "yes", 0.10, 0.01)
    y = 2 + slope * x + rng.normal(0, 0.3, size=80)
    return pd.DataFrame({
        "admission_grade": x,
        "first_year_grade": y,
        "scholarship_holder": pd.Categorical(group, categories=["yes", "no"]),
    })


@pytest.mark.parametrize("key", ["gender", "scholarship_holder", "attendance_type"])
def test_split_partitions_the_table(students, key):
    parts = split_by_group(students, key)
    assert len(parts) == 2

    a, b = parts.values()
    assert set(a.index).isdisjoint(b.index)
    assert sorted(a.index.tolist() + b.index.tolist()) == students.index.tolist()


def test_split_keeps_declared_levels_even_if_empty(students):
    only_male = students[students["gender"] == "male"]
    parts = split_by_group(only_male, "gender")
    assert list(parts) == ["male", "female"]
    assert parts["female"].empty


def test_split_rejects_non_binary_key():
    df = pd.DataFrame({"k": ["a", "b", "c"], "v": [1, 2, 3]})
    with pytest.raises(ValueError, match="exactly two levels"):
        split_by_group(df, "k")


def test_compare_returns_two_groups_and_overall(students):
    comparison = compare_subgroup_trends(students, "gender")
    assert [level for level, _ in comparison.groups] == ["male", "female"]
    assert comparison.overall.n_obs == len(students)
    assert sum(fit.n_obs for _, fit in comparison.groups) == len(students)

    male = students[students["gender"] == "male"]
    expected = fit_linear(male, "first_year_grade", "admission_grade")
    assert comparison.groups[0][1].slope == pytest.approx(expected.slope)
    assert comparison.slope_difference is None


def test_empty_group_fit_is_none_and_rest_survive(students):
    only_male = students[students["gender"] == "male"]
    comparison = compare_subgroup_trends(only_male, "gender")

    fits = dict(comparison.groups)
    assert fits["female"] is None
    assert fits["male"].n_obs == len(only_male)
    assert comparison.overall is not None
    assert comparison.overall.n_obs == len(only_male)
    assert [f.name for f in comparison.failures] == ["subgroup:gender=female"]
    assert [level for level, _ in comparison.results()] == ["male", "overall"]


def test_slope_difference_detects_diverging_slopes(diverging_slopes):
    diff = slope_difference_test(diverging_slopes, "scholarship_holder")
    assert diff.term == "admission_grade:C(scholarship_holder)[T.no]"
    assert diff.estimate == pytest.approx(-0.09, abs=0.02)
    assert diff.p_value < 0.001


def test_slope_difference_matches_group_fits(diverging_slopes):
    comparison = compare_subgroup_trends(diverging_slopes, "scholarship_holder")
    diff = slope_difference_test(diverging_slopes, "scholarship_holder")
    slopes = dict(comparison.groups)
    assert diff.estimate == pytest.approx(slopes["no"].slope - slopes["yes"].slope)
