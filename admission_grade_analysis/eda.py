# eda.py

import logging
import os

import matplotlib.pyplot as plt

from .analysis_plan import HISTOGRAM_COLUMNS
from .plotting_utils import (
    plot_histogram_grid,
    plot_scatter_with_fit,
    plot_subgroup_trends,
)

logger = logging.getLogger(__name__)

LABELS = {
    "admission_grade": "Admission Grade",
    "previous_qualification_grade": "Previous Qualification Grade",
    "first_sem_grade": "1st Semester Grade",
    "second_sem_grade": "2nd Semester Grade",
    "first_year_grade": "First-Year Grade (mean of semesters)",
}


def _save(fig, out_dir, name, written):
    path = os.path.join(out_dir, name)
    fig.savefig(path, dpi=300)
    plt.close(fig)
    written.append(path)


def histogram_figure(report, out_dir, written):
    """
    Figure 1: 2x2 histograms of the four grade columns (Sturges bins).
    """
    columns = [c for c in HISTOGRAM_COLUMNS if c in report.bin_counts]
    if not columns:
        return
    fig = plot_histogram_grid(
        report.data, columns, report.bin_counts,
        titles={c: f"{LABELS[c]} (bins={report.bin_counts[c]})" for c in columns},
    )
    _save(fig, out_dir, "Figure1_histograms.png", written)


def regression_figures(report, out_dir, written):
    """
    Figures 2-4: scatter + fitted line for each fit in the plan that succeeded.
    """
    df = report.data

    # Figure 2: first-year grade vs admission grade
    fit = report.find_fit("first_year_grade", "admission_grade")
    if fit is not None:
        fig = plot_scatter_with_fit(
            df["admission_grade"], df["first_year_grade"], fit,
            xlabel=LABELS["admission_grade"], ylabel=LABELS["first_year_grade"],
            title="Figure 2: First-Year Grade vs. Admission Grade",
        )
        _save(fig, out_dir, "Figure2_first_year_vs_admission.png", written)

    # Figure 3: single-term quadratic fit, drawn over the unsquared axis
    fit = report.find_fit("first_year_grade", "admission_grade_squared")
    if fit is not None:
        fig = plot_scatter_with_fit(
            df["admission_grade"], df["first_year_grade"], fit,
            xlabel=LABELS["admission_grade"], ylabel=LABELS["first_year_grade"],
            title="Figure 3: First-Year Grade ~ Admission Grade²",
            square_x=True,
        )
        _save(fig, out_dir, "Figure3_quadratic_fit.png", written)

    # Figure 4: admission grade vs previous qualification grade
    fit = report.find_fit("admission_grade", "previous_qualification_grade")
    if fit is not None:
        fig = plot_scatter_with_fit(
            df["previous_qualification_grade"], df["admission_grade"], fit,
            xlabel=LABELS["previous_qualification_grade"], ylabel=LABELS["admission_grade"],
            title="Figure 4: Admission Grade vs. Previous Qualification Grade",
        )
        _save(fig, out_dir, "Figure4_admission_vs_previous.png", written)


def subgroup_figures(report, out_dir, written):
    """
    Figures 5-7: first-year grade vs admission grade coloured by gender,
    scholarship holder and attendance type.
    """
    for number, (key, comparison) in enumerate(report.subgroups.items(), start=5):
        if not comparison.results():
            continue
        title_key = key.replace("_", " ").title()
        fig = plot_subgroup_trends(
            report.data, comparison, "admission_grade", "first_year_grade",
            xlabel=LABELS["admission_grade"], ylabel=LABELS["first_year_grade"],
            title=f"Figure {number}: Trend by {title_key}",
        )
        _save(fig, out_dir, f"Figure{number}_{key}_trends.png", written)


def render_figures(report, out_dir="results"):
    """Write every figure for `report` under `out_dir`; returns the written paths."""
    os.makedirs(out_dir, exist_ok=True)
    written = []
    histogram_figure(report, out_dir, written)
    regression_figures(report, out_dir, written)
    subgroup_figures(report, out_dir, written)
    logger.info("Saved %d figures under %s", len(written), out_dir)
    return written
