# analysis_plan.py

"""
The fixed set of comparisons run over the transformed student table.

Every computation is independent: a StatisticalDegeneracyError in one of
them is recorded in AnalysisReport.failures and the rest still run.
"""

import logging
from dataclasses import replace

import pandas as pd

from .correlation import pearson_correlation
from .data_model import AnalysisReport, ComputationFailure
from .descriptive_stats import sturges_bin_count, summarize_categorical, summarize_numeric
from .exceptions import StatisticalDegeneracyError
from .feature_engineering import add_squared_term
from .regression import fit_linear, fit_quadratic
from .subgroup_trends import compare_subgroup_trends, slope_difference_test

logger = logging.getLogger(__name__)

HISTOGRAM_COLUMNS = (
    "admission_grade",
    "previous_qualification_grade",
    "first_sem_grade",
    "second_sem_grade",
)

# (x, y)
CORRELATION_PAIRS = (
    ("admission_grade", "first_sem_grade"),
    ("admission_grade", "second_sem_grade"),
    ("admission_grade", "previous_qualification_grade"),
)

# (response, predictor)
LINEAR_FITS = (
    ("first_year_grade", "admission_grade"),
    ("admission_grade", "previous_qualification_grade"),
)

QUADRATIC_FITS = (
    ("first_year_grade", "admission_grade_squared"),
)

SUBGROUP_KEYS = ("gender", "scholarship_holder", "attendance_type")


def run_analysis(df: pd.DataFrame, subgroup_slope_test: bool = True) -> AnalysisReport:
    """
    Run the whole plan over a table produced by prepare_analysis_dataframe.

    Returns an AnalysisReport; `report.data` carries the table with the
    squared admission grade added for the quadratic fits.
    """
    data = add_squared_term(df, "admission_grade")
    report = AnalysisReport(
        data=data,
        numeric_summary=summarize_numeric(df),
        categorical_summary=summarize_categorical(df),
    )

    def attempt(name, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except StatisticalDegeneracyError as e:
            logger.warning("%s skipped: %s", name, e)
            report.failures.append(ComputationFailure(name=name, reason=str(e)))
            return None

    # 1) Histogram bin counts
    for col in HISTOGRAM_COLUMNS:
        bins = attempt(f"bins:{col}", sturges_bin_count, data[col])
        if bins is not None:
            report.bin_counts[col] = bins

    # 2) Correlations
    for x, y in CORRELATION_PAIRS:
        result = attempt(f"correlation:{x}~{y}", pearson_correlation, data[x], data[y])
        if result is not None:
            report.correlations.append(result)

    # 3) Linear and single-term quadratic fits
    for response, predictor in LINEAR_FITS:
        fit = attempt(f"linear:{response}~{predictor}", fit_linear, data, response, predictor)
        if fit is not None:
            report.linear_fits.append(fit)

    for response, predictor in QUADRATIC_FITS:
        fit = attempt(f"quadratic:{response}~{predictor}", fit_quadratic, data, response, predictor)
        if fit is not None:
            report.quadratic_fits.append(fit)

    # 4) Subgroup trends (first_year_grade ~ admission_grade per level and overall);
    #    each of the three fits fails on its own
    for key in SUBGROUP_KEYS:
        comparison = compare_subgroup_trends(data, key)
        for failure in comparison.failures:
            logger.warning("%s skipped: %s", failure.name, failure.reason)
        report.failures.extend(comparison.failures)
        if subgroup_slope_test:
            diff = attempt(f"slope_difference:{key}", slope_difference_test, data, key)
            if diff is not None:
                comparison = replace(comparison, slope_difference=diff)
        report.subgroups[key] = comparison

    logger.info(
        "Analysis plan finished: %d correlations, %d fits, %d subgroup comparisons, %d failures",
        len(report.correlations),
        len(report.linear_fits) + len(report.quadratic_fits),
        len(report.subgroups),
        len(report.failures),
    )
    return report
