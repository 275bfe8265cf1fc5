import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from admission_grade_analysis.data_preprocessing import COLUMN_MAP


def make_raw_table(n=60, seed=7, n_zero_grades=4):
    """
    Raw table in the public dataset's header format, with a few extra columns
    and `n_zero_grades` students whose 2nd-semester grade is 0.
    """
    rng = np.random.default_rng(seed)
    admission = np.round(rng.uniform(95, 190, size=n), 1)
    previous = np.round(np.clip(admission + rng.normal(0, 12, size=n), 95, 190), 1)
    sem1 = np.round(np.clip(6 + admission / 20 + rng.normal(0, 1.2, size=n), 10, 18.9), 2)
    sem2 = np.round(np.clip(6 + admission / 22 + rng.normal(0, 1.2, size=n), 10, 18.9), 2)
    sem2[:n_zero_grades] = 0

    idx = np.arange(n)
    return pd.DataFrame({
        "Marital status": 1,
        # trailing tab as in the published file
        "Daytime/evening attendance\t": (idx % 3 != 0).astype(int),
        "Previous qualification (grade)": previous,
        "Admission grade": admission,
        "Gender": (idx % 2).astype(int),
        "Scholarship holder": (idx % 4 == 0).astype(int),
        "Age at enrollment": 18 + idx % 7,
        "Curricular units 1st sem (grade)": sem1,
        "Curricular units 2nd sem (grade)": sem2,
        "Target": np.where(idx % 5 == 0, "Dropout", "Graduate"),
    })


@pytest.fixture
def raw_table():
    return make_raw_table()


@pytest.fixture
def csv_path(tmp_path, raw_table):
    path = tmp_path / "student_data.csv"
    raw_table.to_csv(path, sep=";", index=False)
    return path


@pytest.fixture
def selected_table(raw_table):
    table = raw_table.copy()
    table.columns = [c.strip() for c in table.columns]
    return table[list(COLUMN_MAP)].rename(columns=COLUMN_MAP)


@pytest.fixture
def three_students():
    """The three-row worked example (already selected and renamed)."""
    return pd.DataFrame({
        "attendance_type": [1, 0, 1],
        "previous_qualification_grade": [130.0, 150.0, 110.0],
        "admission_grade": [120.0, 140.0, 100.0],
        "gender": [1, 0, 0],
        "scholarship_holder": [0, 1, 0],
        "age_at_enrollment": [19, 20, 18],
        "first_sem_grade": [13.0, 15.0, 10.0],
        "second_sem_grade": [14.0, 15.0, 11.0],
    })
