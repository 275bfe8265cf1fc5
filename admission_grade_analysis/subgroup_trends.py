# subgroup_trends.py

from typing import Dict, List

import pandas as pd
import statsmodels.formula.api as smf

from .data_model import ComputationFailure, SlopeDifference, SubgroupComparison
from .exceptions import StatisticalDegeneracyError
from .regression import fit_linear


def group_levels(series: pd.Series) -> List:
    """Declared categories of a Categorical, else the observed values in sorted order."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        return list(series.cat.categories)
    return sorted(series.dropna().unique().tolist())


def split_by_group(df: pd.DataFrame, key: str) -> Dict[str, pd.DataFrame]:
    """
    Split `df` into one sub-table per level of `key`.

    `key` must have exactly two levels. Each row lands in exactly one
    sub-table (original index kept), so together they rebuild `df`.
    """
    levels = group_levels(df[key])
    if len(levels) != 2:
        raise ValueError(f"'{key}' must have exactly two levels, found {levels}")
    return {level: df[df[key] == level] for level in levels}


def _fit_or_record(data, response, predictor, name, failures):
    try:
        return fit_linear(data, response, predictor)
    except StatisticalDegeneracyError as e:
        failures.append(ComputationFailure(name=name, reason=str(e)))
        return None


def compare_subgroup_trends(
    df: pd.DataFrame,
    key: str,
    response: str = "first_year_grade",
    predictor: str = "admission_grade",
) -> SubgroupComparison:
    """
    Fit `response ~ predictor` separately in both levels of `key` and once on
    the whole table (the overall trend). The comparison is descriptive only;
    see slope_difference_test for a formal check.

    Each of the three fits stands alone: a degenerate one is left as None and
    listed in `comparison.failures` ("subgroup:<key>=<level>" or
    "subgroup:<key>=overall"), the others are still reported.
    """
    failures = []
    groups = tuple(
        (str(level), _fit_or_record(sub, response, predictor, f"subgroup:{key}={level}", failures))
        for level, sub in split_by_group(df, key).items()
    )
    overall = _fit_or_record(df, response, predictor, f"subgroup:{key}=overall", failures)
    return SubgroupComparison(
        key=key, groups=groups, overall=overall, failures=tuple(failures)
    )


def slope_difference_test(
    df: pd.DataFrame,
    key: str,
    response: str = "first_year_grade",
    predictor: str = "admission_grade",
) -> SlopeDifference:
    """
    Fit `response ~ predictor * C(key)` and return the interaction term,
    i.e. how much the slope of the second level differs from the first.
    """
    sub = df[[response, predictor, key]].dropna()
    for level, part in split_by_group(sub, key).items():
        if len(part) <= 2 or part[predictor].nunique() < 2:
            raise StatisticalDegeneracyError(
                f"Slope difference by {key}: level '{level}' has too few distinct "
                f"{predictor} values to estimate a slope."
            )

    model = smf.ols(f"{response} ~ {predictor} * C({key})", data=sub).fit()
    if model.df_resid <= 0:
        raise StatisticalDegeneracyError(
            f"Slope difference by {key}: no residual degrees of freedom."
        )

    term = next(t for t in model.params.index if t.startswith(f"{predictor}:C({key})"))
    return SlopeDifference(
        key=key,
        term=term,
        estimate=float(model.params[term]),
        std_error=float(model.bse[term]),
        p_value=float(model.pvalues[term]),
    )
