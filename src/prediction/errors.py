"""Exception taxonomy for Monte Carlo prediction intervals."""

from __future__ import annotations


class PredictionError(ValueError):
    """Base class for precondition failures raised by the prediction pipeline."""


class InvalidCovariance(PredictionError):
    """Covariance matrix (or group variance) cannot be used for sampling."""


class InvalidSampleCount(PredictionError):
    """Requested number of Monte Carlo draws is not a positive integer."""


class UnknownTerm(PredictionError):
    """Covariate supplied for a term the model does not contain."""


class MissingCovariate(PredictionError):
    """A model term needs a covariate that was not supplied."""


class DimensionMismatch(PredictionError):
    """Parameter draws, design columns or group assignments do not line up."""


class EmptyEnsemble(PredictionError):
    """Interval summary requested for an ensemble without draws."""


class InvalidQuantileRange(PredictionError):
    """Quantile levels do not satisfy ``0 <= lower < upper <= 1``."""


class LinkClampWarning(UserWarning):
    """Linear predictors were clipped before applying an inverse link."""


__all__ = [
    "PredictionError",
    "InvalidCovariance",
    "InvalidSampleCount",
    "UnknownTerm",
    "MissingCovariate",
    "DimensionMismatch",
    "EmptyEnsemble",
    "InvalidQuantileRange",
    "LinkClampWarning",
]
