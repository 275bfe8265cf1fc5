# data_preprocessing.py

import csv
import logging
from pathlib import Path

import pandas as pd

from .exceptions import FilterExhaustionError, ParseError

logger = logging.getLogger(__name__)

# Source header -> identifier used everywhere downstream.
COLUMN_MAP = {
    "Daytime/evening attendance": "attendance_type",
    "Previous qualification (grade)": "previous_qualification_grade",
    "Admission grade": "admission_grade",
    "Gender": "gender",
    "Scholarship holder": "scholarship_holder",
    "Age at enrollment": "age_at_enrollment",
    "Curricular units 1st sem (grade)": "first_sem_grade",
    "Curricular units 2nd sem (grade)": "second_sem_grade",
}

POSITIVE_GRADE_COLUMNS = [
    "admission_grade",
    "previous_qualification_grade",
    "first_sem_grade",
    "second_sem_grade",
]


def check_field_counts(path: Path) -> None:
    """
    Every non-blank data line must have as many ';'-separated fields as the
    header. read_csv pads short rows with NaN and turns a uniformly longer
    row into an index, so the widths are checked before parsing.
    """
    with open(path, newline="") as f:
        rows = csv.reader(f, delimiter=";")
        header = next(rows, None)
        if not header:
            raise ParseError(f"{path} is empty.")
        width = len(header)
        for line_no, row in enumerate(rows, start=2):
            if row and len(row) != width:
                raise ParseError(
                    f"Line {line_no} of {path} has {len(row)} fields, "
                    f"the header has {width}."
                )


def load_raw_data(path) -> pd.DataFrame:
    """
    Load the semicolon-delimited student table.

    Header names are stripped of surrounding whitespace (the public file
    ships "Daytime/evening attendance\\t").

    Raises FileNotFoundError when `path` does not exist and ParseError when
    the file is empty or any row has a different number of fields than the
    header.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found at {path}.")

    check_field_counts(path)
    try:
        df = pd.read_csv(path, sep=";", index_col=False)
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"{path} is empty.") from e
    except pd.errors.ParserError as e:
        raise ParseError(f"Could not parse {path} as a ';'-delimited table: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    logger.info("Loaded %d rows x %d columns from %s", df.shape[0], df.shape[1], path)
    return df


def select_and_rename(df: pd.DataFrame) -> pd.DataFrame:
    """
    Project the eight analysis columns and rename them via COLUMN_MAP.
    Every selected column must be numeric (all eight are numeric codes or grades).
    """
    missing = [c for c in COLUMN_MAP if c not in df.columns]
    if missing:
        raise ParseError(f"Missing required columns: {missing}")

    out = df[list(COLUMN_MAP)].rename(columns=COLUMN_MAP)

    converted = {}
    for col in out.columns:
        try:
            converted[col] = pd.to_numeric(out[col])
        except (ValueError, TypeError) as e:
            raise ParseError(f"Column '{col}' holds non-numeric values: {e}") from e
    return out.assign(**converted)


def filter_positive_grades(df: pd.DataFrame) -> pd.DataFrame:
    """
    Keep only rows where every grade column in POSITIVE_GRADE_COLUMNS is > 0.
    Missing grades fail the predicate too. Row order is preserved.
    """
    keep = (df[POSITIVE_GRADE_COLUMNS] > 0).all(axis=1)
    out = df.loc[keep].reset_index(drop=True)

    if out.empty:
        raise FilterExhaustionError(
            f"All {len(df)} rows were removed by the positive-grade filter "
            f"on {POSITIVE_GRADE_COLUMNS}."
        )
    return out


def load_and_clean(path) -> pd.DataFrame:
    """load_raw_data -> select_and_rename -> filter_positive_grades."""
    raw = load_raw_data(path)
    selected = select_and_rename(raw)
    cleaned = filter_positive_grades(selected)
    logger.info(
        "Positive-grade filter kept %d of %d rows (%d dropped)",
        len(cleaned), len(selected), len(selected) - len(cleaned),
    )
    return cleaned
