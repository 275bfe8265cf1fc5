# descriptive_stats.py

import math

import numpy as np
import pandas as pd

from .exceptions import StatisticalDegeneracyError


def sturges_bin_count(values) -> int:
    """
    Sturges' rule: ceil(1 + log2(n)), n = number of non-missing values.
    """
    n = int(pd.Series(values).notna().sum())
    if n == 0:
        raise StatisticalDegeneracyError("Sturges' rule needs at least one value (n = 0).")
    return int(math.ceil(1 + math.log2(n)))


def summarize_numeric(df: pd.DataFrame) -> pd.DataFrame:
    """
    One row per numeric column:
      n_missing, complete_rate, mean, sd, p0, p25, p50, p75, p100, bins
    `bins` is the Sturges bin count (0 when the column is entirely missing).
    """
    rows = []
    for col in df.select_dtypes(include=[np.number]).columns:
        s = df[col]
        present = s.dropna()
        q = present.quantile([0.0, 0.25, 0.5, 0.75, 1.0]) if len(present) else None
        rows.append({
            "column": col,
            "n_missing": int(s.isna().sum()),
            "complete_rate": float(s.notna().mean()) if len(s) else 0.0,
            "mean": present.mean(),
            "sd": present.std(ddof=1),
            "p0": q.iloc[0] if q is not None else np.nan,
            "p25": q.iloc[1] if q is not None else np.nan,
            "p50": q.iloc[2] if q is not None else np.nan,
            "p75": q.iloc[3] if q is not None else np.nan,
            "p100": q.iloc[4] if q is not None else np.nan,
            "bins": sturges_bin_count(s) if len(present) else 0,
        })
    return pd.DataFrame(rows, columns=[
        "column", "n_missing", "complete_rate", "mean", "sd",
        "p0", "p25", "p50", "p75", "p100", "bins",
    ])


def summarize_categorical(df: pd.DataFrame) -> pd.DataFrame:
    """
    One row per categorical / text column: n_missing, n_unique and
    top_counts ("daytime: 10, evening: 2"), most frequent level first.
    """
    rows = []
    for col in df.select_dtypes(include=["category", "object"]).columns:
        s = df[col]
        counts = s.value_counts(dropna=True)
        rows.append({
            "column": col,
            "n_missing": int(s.isna().sum()),
            "n_unique": int(s.nunique(dropna=True)),
            "top_counts": ", ".join(f"{level}: {int(n)}" for level, n in counts.items()),
        })
    return pd.DataFrame(rows, columns=["column", "n_missing", "n_unique", "top_counts"])
