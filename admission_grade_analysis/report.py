# report.py

import json
import logging
import os

import pandas as pd

from .correlation import correlation_strength

logger = logging.getLogger(__name__)

SIGNIFICANCE_LEVEL = 0.05


def correlation_table(report) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"x": c.x, "y": c.y, "r": c.r, "p_value": c.p_value, "n": c.n,
             "strength": correlation_strength(c.r)}
            for c in report.correlations
        ],
        columns=["x", "y", "r", "p_value", "n", "strength"],
    )


def regression_table(report) -> pd.DataFrame:
    """
    Coefficient table of every fit: plan fits first, then per-subgroup fits
    (`group` column: "<key>=<level>" or "<key>=overall"; empty for plan fits).
    """
    frames = []
    for fit in report.linear_fits + report.quadratic_fits:
        frames.append(fit.coefficient_table().assign(group=""))
    for key, comparison in report.subgroups.items():
        for level, fit in comparison.results():
            frames.append(fit.coefficient_table().assign(group=f"{key}={level}"))
    if not frames:
        return pd.DataFrame(columns=[
            "model", "kind", "term", "estimate", "std_error",
            "t_value", "p_value", "r_squared", "n_obs", "group",
        ])
    return pd.concat(frames, ignore_index=True)


def summary_dict(report) -> dict:
    return {
        "n_records": report.n_records,
        "bin_counts": dict(report.bin_counts),
        "r_squared": {
            fit.label: fit.r_squared
            for fit in report.linear_fits + report.quadratic_fits
        },
        "subgroup_slopes": {
            key: {level: fit.slope for level, fit in comparison.results()}
            for key, comparison in report.subgroups.items()
        },
        "slope_differences": {
            key: {
                "term": c.slope_difference.term,
                "estimate": c.slope_difference.estimate,
                "p_value": c.slope_difference.p_value,
            }
            for key, c in report.subgroups.items()
            if c.slope_difference is not None
        },
        "failures": [{"name": f.name, "reason": f.reason} for f in report.failures],
    }


def write_tables(report, out_dir="results"):
    """
    Save the computed tables:
      numeric_summary.csv, categorical_summary.csv, correlations.csv,
      regressions.csv, summary.json
    Returns the written paths.
    """
    os.makedirs(out_dir, exist_ok=True)
    tables = {
        "numeric_summary.csv": report.numeric_summary,
        "categorical_summary.csv": report.categorical_summary,
        "correlations.csv": correlation_table(report),
        "regressions.csv": regression_table(report),
    }
    written = []
    for name, table in tables.items():
        path = os.path.join(out_dir, name)
        table.to_csv(path, index=False)
        written.append(path)

    path = os.path.join(out_dir, "summary.json")
    with open(path, "w") as f:
        json.dump(summary_dict(report), f, indent=2)
    written.append(path)

    logger.info("Saved %d tables under %s", len(written), out_dir)
    return written


def _significance(p_value: float) -> str:
    if p_value < SIGNIFICANCE_LEVEL:
        return f"statistically significant (p = {p_value:.3g})"
    return f"not statistically significant (p = {p_value:.3g})"


def narrative_lines(report) -> list:
    """Plain-English reading of the report, one finding per line."""
    lines = [f"{report.n_records} students with positive grades were analysed."]

    for c in report.correlations:
        direction = "positive" if c.r > 0 else "negative"
        lines.append(
            f"{c.x} and {c.y} show a {correlation_strength(c.r)} {direction} "
            f"correlation (r = {c.r:.3f}, n = {c.n}), {_significance(c.p_value)}."
        )

    for fit in report.linear_fits + report.quadratic_fits:
        lines.append(
            f"{fit.kind.capitalize()} model {fit.label}: each unit of {fit.predictor} "
            f"changes {fit.response} by {fit.slope:.4f}, {_significance(fit.slope_p_value)}; "
            f"it explains {fit.r_squared:.1%} of the variance."
        )

    for key, comparison in report.subgroups.items():
        slopes = ", ".join(
            f"{level} {fit.slope:.3f}" if fit is not None else f"{level} n/a"
            for level, fit in comparison.groups
        )
        overall = "n/a" if comparison.overall is None else f"{comparison.overall.slope:.3f}"
        line = f"By {key}, the admission-grade slope is {slopes} (overall {overall})"
        diff = comparison.slope_difference
        if diff is not None:
            line += f"; the slope difference is {_significance(diff.p_value)}"
        lines.append(line + ".")

    for failure in report.failures:
        lines.append(f"Could not compute {failure.name}: {failure.reason}")

    return lines
