"""
admission_grade_analysis

Exploratory analysis of how admission grades relate to first-year
performance in the public "predict students' dropout and academic success"
dataset (semicolon-delimited CSV).

Stages (run in order by run_all.py):
    data_preprocessing  -> load, select/rename, positivity filter
    feature_engineering -> derived grades, categorical recodes
    analysis_plan       -> summaries, correlations, regressions, subgroups
    eda / report        -> figures, tables, narrative
"""

__version__ = "0.1.0"
