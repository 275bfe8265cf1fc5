"""
admission_grade_analysis/data_model.py

Plain value types passed between the pipeline stages.

Nothing in here mutates a table or talks to disk: these are the structured
values the statistics engine hands to reporting (figures, tables, narrative).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from .exceptions import RecordInvariantError


ATTENDANCE_LABELS = ("daytime", "evening")
GENDER_LABELS = ("male", "female")
SCHOLARSHIP_LABELS = ("yes", "no")


@dataclass(frozen=True)
class StudentRecord:
    """One row of the transformed working table."""
    attendance_type: str
    previous_qualification_grade: float
    admission_grade: float
    gender: str
    scholarship_holder: str
    age_at_enrollment: Optional[int]
    first_sem_grade: float
    second_sem_grade: float
    first_year_grade: float
    admission_grade_squared: Optional[float] = None

    def violations(self) -> List[str]:
        """Broken row invariants of the working table, empty when the record is sound."""
        problems = []
        grades = {
            "admission_grade": self.admission_grade,
            "previous_qualification_grade": self.previous_qualification_grade,
            "first_sem_grade": self.first_sem_grade,
            "second_sem_grade": self.second_sem_grade,
        }
        for name, value in grades.items():
            if not value > 0:
                problems.append(f"{name} = {value} is not > 0")
        mean = (self.first_sem_grade + self.second_sem_grade) / 2
        if not math.isclose(self.first_year_grade, mean, rel_tol=1e-9, abs_tol=1e-12):
            problems.append(
                f"first_year_grade = {self.first_year_grade} is not the semester mean {mean}"
            )
        labels = (
            ("attendance_type", self.attendance_type, ATTENDANCE_LABELS),
            ("gender", self.gender, GENDER_LABELS),
            ("scholarship_holder", self.scholarship_holder, SCHOLARSHIP_LABELS),
        )
        for name, value, allowed in labels:
            if value not in allowed:
                problems.append(f"{name} = {value!r} is not one of {allowed}")
        return problems


def _optional_int(value) -> Optional[int]:
    return None if pd.isna(value) else int(value)


def iter_records(df: pd.DataFrame) -> Iterator[StudentRecord]:
    """
    Yield typed StudentRecord values from a transformed table.

    `admission_grade_squared` is only filled when the column is present
    (it is added lazily, right before the quadratic fits). A missing age
    becomes None.
    """
    has_squared = "admission_grade_squared" in df.columns
    for row in df.itertuples(index=False):
        yield StudentRecord(
            attendance_type=str(row.attendance_type),
            previous_qualification_grade=float(row.previous_qualification_grade),
            admission_grade=float(row.admission_grade),
            gender=str(row.gender),
            scholarship_holder=str(row.scholarship_holder),
            age_at_enrollment=_optional_int(row.age_at_enrollment),
            first_sem_grade=float(row.first_sem_grade),
            second_sem_grade=float(row.second_sem_grade),
            first_year_grade=float(row.first_year_grade),
            admission_grade_squared=(
                float(row.admission_grade_squared) if has_squared else None
            ),
        )


def validate_records(df: pd.DataFrame) -> int:
    """
    Check every record of a transformed table against the row invariants
    (positive grades, first_year_grade = semester mean, two-label categories).

    Returns the number of records checked; raises RecordInvariantError on the
    first broken record.
    """
    n = 0
    for position, record in enumerate(iter_records(df)):
        problems = record.violations()
        if problems:
            raise RecordInvariantError(f"Record {position}: " + "; ".join(problems))
        n += 1
    return n


@dataclass(frozen=True)
class CoefficientEstimate:
    term: str
    estimate: float
    std_error: float
    t_value: float
    p_value: float


@dataclass(frozen=True)
class RegressionResult:
    """
    Outcome of a one-predictor OLS fit.

    Attributes
    ----------
    response, predictor : str
        Column names of y and x. For a quadratic fit the predictor is the
        pre-squared column (e.g. "admission_grade_squared").
    kind : str
        "linear" or "quadratic".
    coefficients : tuple of CoefficientEstimate
        Intercept first, then the slope term.
    """
    response: str
    predictor: str
    kind: str
    coefficients: Tuple[CoefficientEstimate, ...]
    r_squared: float
    adj_r_squared: float
    n_obs: int
    df_resid: int

    @property
    def intercept(self) -> float:
        return self.coefficients[0].estimate

    @property
    def slope(self) -> float:
        return self.coefficients[1].estimate

    @property
    def slope_p_value(self) -> float:
        return self.coefficients[1].p_value

    @property
    def label(self) -> str:
        return f"{self.response} ~ {self.predictor}"

    def predict(self, x):
        """Fitted values for predictor values `x` (already squared for quadratic fits)."""
        return self.intercept + self.slope * np.asarray(x, dtype=float)

    def coefficient_table(self) -> pd.DataFrame:
        rows = [
            {
                "model": self.label,
                "kind": self.kind,
                "term": c.term,
                "estimate": c.estimate,
                "std_error": c.std_error,
                "t_value": c.t_value,
                "p_value": c.p_value,
                "r_squared": self.r_squared,
                "n_obs": self.n_obs,
            }
            for c in self.coefficients
        ]
        return pd.DataFrame(rows)


@dataclass(frozen=True)
class CorrelationResult:
    x: str
    y: str
    r: float
    p_value: float
    n: int

    @property
    def label(self) -> str:
        return f"{self.x} vs {self.y}"


@dataclass(frozen=True)
class SlopeDifference:
    """Interaction term of `response ~ predictor * C(key)`."""
    key: str
    term: str
    estimate: float
    std_error: float
    p_value: float


@dataclass(frozen=True)
class SubgroupComparison:
    """
    Per-level fits of one subgroup key plus the overall trend.

    A fit that could not be computed is None; `failures` says why.
    """
    key: str
    groups: Tuple[Tuple[str, Optional[RegressionResult]], ...]
    overall: Optional[RegressionResult]
    slope_difference: Optional[SlopeDifference] = None
    failures: Tuple[ComputationFailure, ...] = ()

    def results(self) -> List[Tuple[str, RegressionResult]]:
        """Group fits followed by the overall trend, skipping failed fits."""
        pairs = list(self.groups) + [("overall", self.overall)]
        return [(level, fit) for level, fit in pairs if fit is not None]


@dataclass(frozen=True)
class ComputationFailure:
    name: str
    reason: str


@dataclass
class AnalysisReport:
    """Everything one run of the analysis plan produced."""
    data: pd.DataFrame
    numeric_summary: pd.DataFrame
    categorical_summary: pd.DataFrame
    bin_counts: Dict[str, int] = field(default_factory=dict)
    correlations: List[CorrelationResult] = field(default_factory=list)
    linear_fits: List[RegressionResult] = field(default_factory=list)
    quadratic_fits: List[RegressionResult] = field(default_factory=list)
    subgroups: Dict[str, SubgroupComparison] = field(default_factory=dict)
    failures: List[ComputationFailure] = field(default_factory=list)

    @property
    def n_records(self) -> int:
        return int(len(self.data))

    def find_fit(self, response: str, predictor: str) -> Optional[RegressionResult]:
        for fit in self.linear_fits + self.quadratic_fits:
            if fit.response == response and fit.predictor == predictor:
                return fit
        return None
