"""statsmodels-backed fits exposing coefficient estimates and their covariance."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf

from src.prediction.records import FitSummary, ParameterSample
from src.prediction.sampler import draw_parameter_sample

from .base import require_columns


class StatsmodelsFit:
    """Wrap an OLS, GLM or MixedLM results object as a parameter source."""

    def __init__(self, result: Any) -> None:
        self.result = result
        self._summary: Optional[FitSummary] = None

    @property
    def is_mixed(self) -> bool:
        return hasattr(self.result, "cov_re")

    def summary(self) -> FitSummary:
        """Fixed-effect estimates, their covariance and (for MixedLM) the group variance."""
        if self._summary is None:
            self._summary = self._mixed_summary() if self.is_mixed else self._fixed_summary()
        return self._summary

    def draw_parameters(self, sample_count: int, rng: np.random.Generator) -> ParameterSample:
        return draw_parameter_sample(self.summary(), sample_count, rng)

    def _fixed_summary(self) -> FitSummary:
        params = pd.Series(self.result.params)
        family = getattr(self.result, "family", None)
        gaussian = family is None or isinstance(family, sm.families.Gaussian)
        return FitSummary(
            estimates=params.to_numpy(dtype=float),
            covariance=np.asarray(self.result.cov_params(), dtype=float),
            names=tuple(str(name) for name in params.index),
            residual_variance=float(self.result.scale) if gaussian else None,
            df_resid=float(self.result.df_resid) if family is None else None,
        )

    def _mixed_summary(self) -> FitSummary:
        fe_params = pd.Series(self.result.fe_params)
        k_fe = len(fe_params)
        # MixedLM lists fixed effects first, followed by variance components.
        covariance = np.asarray(self.result.cov_params(), dtype=float)[:k_fe, :k_fe]
        cov_re = np.asarray(self.result.cov_re, dtype=float)
        if cov_re.shape != (1, 1):
            raise ValueError("Only random-intercept mixed models are supported.")
        return FitSummary(
            estimates=fe_params.to_numpy(dtype=float),
            covariance=covariance,
            names=tuple(str(name) for name in fe_params.index),
            group_variance=float(cov_re[0, 0]),
            group_labels=tuple(self.result.model.group_labels),
            residual_variance=float(self.result.scale),
        )


def fit_linear_model(data: pd.DataFrame, formula: str = "y ~ x") -> StatsmodelsFit:
    """Ordinary least squares fit of `formula`."""
    return StatsmodelsFit(smf.ols(formula, data=data).fit())


def fit_poisson_glm(data: pd.DataFrame, formula: str = "y ~ x") -> StatsmodelsFit:
    """Log-linked Poisson GLM fit of `formula`."""
    return StatsmodelsFit(smf.glm(formula, data=data, family=sm.families.Poisson()).fit())


def fit_linear_mixed_model(
    data: pd.DataFrame,
    formula: str = "y ~ x",
    group: str = "group",
    reml: bool = True,
) -> StatsmodelsFit:
    """Random-intercept linear mixed model grouped by the `group` column."""
    require_columns(data, [group])
    model = smf.mixedlm(formula, data=data, groups=data[group])
    return StatsmodelsFit(model.fit(reml=reml))


__all__ = ["StatsmodelsFit", "fit_linear_mixed_model", "fit_linear_model", "fit_poisson_glm"]
