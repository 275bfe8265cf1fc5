# regression.py

import logging

import numpy as np
import pandas as pd
import statsmodels.api as sm

from .data_model import CoefficientEstimate, RegressionResult
from .exceptions import StatisticalDegeneracyError

logger = logging.getLogger(__name__)


def _design(data: pd.DataFrame, response: str, predictor: str) -> pd.DataFrame:
    """Complete (response, predictor) rows, cast to float."""
    sub = data[[response, predictor]].dropna().astype(float)
    label = f"{response} ~ {predictor}"

    if len(sub) <= 2:
        raise StatisticalDegeneracyError(
            f"OLS {label} needs more than 2 complete observations, got {len(sub)}."
        )
    if sub[predictor].nunique() < 2:
        raise StatisticalDegeneracyError(
            f"OLS {label} has a constant predictor (singular design matrix)."
        )
    if sub[response].nunique() < 2:
        raise StatisticalDegeneracyError(
            f"OLS {label} has a constant response (R-squared undefined)."
        )
    return sub


def _fit(data: pd.DataFrame, response: str, predictor: str, kind: str) -> RegressionResult:
    sub = _design(data, response, predictor)

    X = sm.add_constant(sub[[predictor]], has_constant="add")
    y = sub[response]
    try:
        model = sm.OLS(y, X).fit()
    except np.linalg.LinAlgError as e:
        raise StatisticalDegeneracyError(f"OLS {response} ~ {predictor} failed: {e}") from e

    coefficients = tuple(
        CoefficientEstimate(
            term="intercept" if term == "const" else term,
            estimate=float(model.params[term]),
            std_error=float(model.bse[term]),
            t_value=float(model.tvalues[term]),
            p_value=float(model.pvalues[term]),
        )
        for term in ("const", predictor)
    )

    result = RegressionResult(
        response=response,
        predictor=predictor,
        kind=kind,
        coefficients=coefficients,
        r_squared=float(model.rsquared),
        adj_r_squared=float(model.rsquared_adj),
        n_obs=int(model.nobs),
        df_resid=int(model.df_resid),
    )
    logger.debug(
        "%s fit %s: slope=%.4f p=%.3g R2=%.3f n=%d",
        kind, result.label, result.slope, result.slope_p_value, result.r_squared, result.n_obs,
    )
    return result


def fit_linear(data: pd.DataFrame, response: str, predictor: str) -> RegressionResult:
    """
    Ordinary least squares `response ~ predictor` with an intercept.

    Rows missing either variable are dropped. p-values are two-tailed t-tests
    on n - 2 residual degrees of freedom.

    Raises StatisticalDegeneracyError for n <= 2, a constant predictor or a
    constant response.
    """
    return _fit(data, response, predictor, kind="linear")


def fit_quadratic(data: pd.DataFrame, response: str, squared_predictor: str) -> RegressionResult:
    """
    `response ~ predictor^2` as a one-term model in the pre-squared column.

    No linear term: this is not poly(x, 2), and the reported R-squared
    belongs to the single-term model.
    """
    return _fit(data, response, squared_predictor, kind="quadratic")
