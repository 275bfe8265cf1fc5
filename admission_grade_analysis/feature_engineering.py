# feature_engineering.py

import logging

import numpy as np
import pandas as pd

from .data_model import (
    ATTENDANCE_LABELS,
    GENDER_LABELS,
    SCHOLARSHIP_LABELS,
    validate_records,
)
from .exceptions import RecodingError

logger = logging.getLogger(__name__)

# column -> (label for code 1, label for every other code)
BINARY_RECODES = {
    "attendance_type": ATTENDANCE_LABELS,
    "gender": GENDER_LABELS,
    "scholarship_holder": SCHOLARSHIP_LABELS,
}

EXPECTED_CODES = {0, 1}


def add_first_year_grade(df: pd.DataFrame) -> pd.DataFrame:
    """first_year_grade = mean of the two semester grades."""
    return df.assign(
        first_year_grade=(df["first_sem_grade"] + df["second_sem_grade"]) / 2
    )


def unexpected_codes(codes: pd.Series) -> list:
    """Codes outside {0, 1}, missing values included (as NaN)."""
    bad = codes[~codes.isin(EXPECTED_CODES)]
    return sorted(pd.unique(bad.dropna()).tolist()) + ([np.nan] if bad.isna().any() else [])


def recode_binary(codes: pd.Series, positive: str, default: str) -> pd.Series:
    """
    Map code 1 -> `positive`, anything else -> `default`.

    The result is an ordered two-level Categorical ([positive, default]).
    """
    labels = np.where(codes == 1, positive, default)
    return pd.Series(
        pd.Categorical(labels, categories=[positive, default]),
        index=codes.index,
        name=codes.name,
    )


def recode_categoricals(df: pd.DataFrame, strict: bool = False) -> pd.DataFrame:
    """
    Replace the numeric codes of attendance_type, gender and scholarship_holder
    with their two labels (see BINARY_RECODES).

    Default: any code other than 1 falls into the second label, and codes
    outside {0, 1} are logged as a warning.
    strict=True: codes outside {0, 1} raise RecodingError instead.
    """
    recoded = {}
    for col, (positive, default) in BINARY_RECODES.items():
        bad = unexpected_codes(df[col])
        if bad:
            msg = f"Column '{col}' holds codes outside {{0, 1}}: {bad}"
            if strict:
                raise RecodingError(msg)
            logger.warning("%s; mapping them to '%s'", msg, default)
        recoded[col] = recode_binary(df[col], positive, default)
    return df.assign(**recoded)


def add_squared_term(df: pd.DataFrame, column: str = "admission_grade") -> pd.DataFrame:
    """Add `<column>_squared`, the single predictor of the quadratic fit."""
    return df.assign(**{f"{column}_squared": df[column] ** 2})


def prepare_analysis_dataframe(df: pd.DataFrame, strict: bool = False) -> pd.DataFrame:
    """
    Orchestrates the row-wise transforms:
    - first_year_grade
    - categorical recodes
    then checks every typed record against the row invariants
    (RecordInvariantError on the first broken one).
    The squared admission grade is added later, only where the quadratic fit needs it.
    """
    df = add_first_year_grade(df)
    df = recode_categoricals(df, strict=strict)
    n = validate_records(df)
    logger.info("Validated %d student records", n)
    return df
