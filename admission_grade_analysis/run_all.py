# run_all.py

"""
Runs the full admission-grade analysis in one pass.

Usage:
    admission-grade-analysis --data_path data/student_data.csv --output_dir results
    python -m admission_grade_analysis --data_path data/student_data.csv
"""

import argparse
import logging
import sys

from .analysis_plan import run_analysis
from .data_preprocessing import load_and_clean
from .eda import render_figures
from .exceptions import (
    FilterExhaustionError,
    ParseError,
    RecodingError,
    RecordInvariantError,
)
from .feature_engineering import prepare_analysis_dataframe
from .report import narrative_lines, write_tables

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Admission grade vs. first-year performance: EDA, correlations and OLS fits"
    )
    parser.add_argument(
        "--data_path",
        type=str,
        required=True,
        help="Path to the ';'-delimited student dataset"
    )
    parser.add_argument(
        "--output_dir",
        type=str,
        default="results",
        help="Directory to save all figures and summary tables"
    )
    parser.add_argument(
        "--no-figures",
        action="store_true",
        help="Only write tables and narrative, skip the PNG figures"
    )
    parser.add_argument(
        "--strict-codes",
        action="store_true",
        help="Fail on categorical codes other than 0/1 instead of mapping them to the default label"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # 1) Load, select, filter
    print("\n=== 1) Data Preprocessing ===")
    try:
        cleaned = load_and_clean(args.data_path)
    except (FileNotFoundError, ParseError, FilterExhaustionError) as e:
        logger.error("Aborting, no report written: %s", e)
        return 1

    # 2) Derived columns and recodes
    print("\n=== 2) Feature Engineering ===")
    try:
        prepared = prepare_analysis_dataframe(cleaned, strict=args.strict_codes)
    except (RecodingError, RecordInvariantError) as e:
        logger.error("Aborting, no report written: %s", e)
        return 1

    # 3) Summaries, correlations, regressions, subgroups
    print("\n=== 3) Statistical Analysis ===")
    report = run_analysis(prepared)

    # 4) Tables, figures, narrative
    print("\n=== 4) Reporting ===")
    write_tables(report, args.output_dir)
    if not args.no_figures:
        render_figures(report, args.output_dir)

    print()
    for line in narrative_lines(report):
        print(f"- {line}")

    print(f"\nAll steps completed. Check `{args.output_dir}/` for figures and tables.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
