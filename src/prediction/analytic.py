"""Closed-form confidence and prediction intervals for comparison with simulation."""

from __future__ import annotations

import numpy as np
from scipy import stats

from .errors import DimensionMismatch, InvalidQuantileRange
from .links import LinkName, get_inverse_link
from .records import DesignMatrix, FitSummary, IntervalSummary
from .sampler import covariance_factor


def analytic_intervals(
    summary: FitSummary,
    design: DesignMatrix,
    link: LinkName = "identity",
    level: float = 0.95,
    include_residual: bool = False,
) -> IntervalSummary:
    """Wald intervals built on the link scale and mapped through the inverse link.

    The standard error of each row is ``sqrt(x Σ xᵀ)``. Student-t critical
    values are used when the fit reports residual degrees of freedom, normal
    ones otherwise. With ``include_residual`` (identity link only) the residual
    variance is added, giving an interval for a new observation.
    """
    if not 0.0 < level < 1.0:
        raise InvalidQuantileRange(f"level must fall within (0, 1), got {level}")
    if summary.n_params != design.n_columns:
        raise DimensionMismatch(
            f"Fit has {summary.n_params} estimates but the design has {design.n_columns} columns."
        )
    covariance_factor(summary.covariance, summary.n_params)
    inverse = get_inverse_link(link)

    X = design.values
    eta = X @ summary.estimates
    variance = np.einsum("ij,jk,ik->i", X, summary.covariance, X)
    if include_residual:
        if link != "identity":
            raise ValueError("Residual variance can only be added on the identity link.")
        if summary.residual_variance is None:
            raise ValueError("Fit summary does not report a residual variance.")
        variance = variance + summary.residual_variance
    se = np.sqrt(np.clip(variance, 0.0, None))

    alpha = 1.0 - level
    if summary.df_resid is not None and summary.df_resid > 0:
        critical = float(stats.t.ppf(1.0 - alpha / 2.0, summary.df_resid))
    else:
        critical = float(stats.norm.ppf(1.0 - alpha / 2.0))

    return IntervalSummary(
        estimate=inverse(eta),
        lower=inverse(eta - critical * se),
        upper=inverse(eta + critical * se),
        quantiles=(alpha / 2.0, 1.0 - alpha / 2.0),
    )


__all__ = ["analytic_intervals"]
