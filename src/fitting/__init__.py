"""Model fitting adapters that expose estimates, covariance and parameter draws."""

from .base import FittedModel
from .bayesian import PosteriorFit, PriorConfig, fit_poisson_glmm
from .frequentist import StatsmodelsFit, fit_linear_mixed_model, fit_linear_model, fit_poisson_glm

__all__ = [
    "FittedModel",
    "PosteriorFit",
    "PriorConfig",
    "StatsmodelsFit",
    "fit_linear_mixed_model",
    "fit_linear_model",
    "fit_poisson_glm",
    "fit_poisson_glmm",
]
