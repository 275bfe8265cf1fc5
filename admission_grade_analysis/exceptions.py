# exceptions.py


class AnalysisError(Exception):
    """Base class for every error raised by the analysis pipeline."""


class ParseError(AnalysisError):
    """The input file could not be read as the expected semicolon table."""


class FilterExhaustionError(AnalysisError):
    """No record survived the positive-grade filter."""


class RecodingError(AnalysisError):
    """A categorical column held a code other than 0/1 (strict mode only)."""


class StatisticalDegeneracyError(AnalysisError):
    """
    A single statistic is undefined for the data it was given
    (too few observations, zero variance, singular design).

    Raised per computation; the analysis plan records it and moves on.
    """


class RecordInvariantError(AnalysisError):
    """A transformed record breaks a row invariant of the working table."""
