# correlation.py

import numpy as np
import pandas as pd
from scipy import stats

from .data_model import CorrelationResult
from .exceptions import StatisticalDegeneracyError


def complete_pairs(x: pd.Series, y: pd.Series) -> pd.DataFrame:
    """Rows where both x and y are present (pairwise deletion)."""
    pair = pd.DataFrame({"x": np.asarray(x, dtype=float), "y": np.asarray(y, dtype=float)})
    return pair.dropna()


def pearson_correlation(x, y, x_name: str = None, y_name: str = None) -> CorrelationResult:
    """
    Pearson product-moment correlation over complete (x, y) pairs.

    Raises StatisticalDegeneracyError when fewer than 2 complete pairs
    remain or when either variable is constant over those pairs.
    """
    x_name = x_name or getattr(x, "name", None) or "x"
    y_name = y_name or getattr(y, "name", None) or "y"

    sub = complete_pairs(x, y)
    n = len(sub)
    if n < 2:
        raise StatisticalDegeneracyError(
            f"Correlation {x_name} vs {y_name} needs at least 2 complete pairs, got {n}."
        )
    for name, col in ((x_name, "x"), (y_name, "y")):
        if sub[col].nunique() < 2:
            raise StatisticalDegeneracyError(
                f"Correlation {x_name} vs {y_name} is undefined: {name} has zero variance."
            )

    r, p_val = stats.pearsonr(sub["x"], sub["y"])
    return CorrelationResult(x=x_name, y=y_name, r=float(r), p_value=float(p_val), n=n)


def correlation_strength(r: float) -> str:
    """Verbal band for |r|: negligible < 0.1 <= weak < 0.3 <= moderate < 0.5 <= strong."""
    a = abs(r)
    if a < 0.1:
        return "negligible"
    elif a < 0.3:
        return "weak"
    elif a < 0.5:
        return "moderate"
    return "strong"
