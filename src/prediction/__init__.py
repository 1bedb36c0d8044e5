"""Monte Carlo prediction intervals for linear and generalized linear mixed models."""

from .analytic import analytic_intervals
from .config import DEFAULT_QUANTILES, DEFAULT_SAMPLE_COUNT, PredictionConfig
from .design import ModelTerms, build_design_matrix
from .errors import (
    DimensionMismatch,
    EmptyEnsemble,
    InvalidCovariance,
    InvalidQuantileRange,
    InvalidSampleCount,
    LinkClampWarning,
    MissingCovariate,
    PredictionError,
    UnknownTerm,
)
from .linear import evaluate_linear_predictor
from .links import LinkName, apply_inverse_link
from .pipeline import MonteCarloPredictor, predict_intervals
from .records import DesignMatrix, FitSummary, IntervalSummary, ParameterSample, PredictionInterval
from .sampler import ParameterSource, draw_parameter_sample
from .summarize import summarize_ensemble

__all__ = [
    "DEFAULT_QUANTILES",
    "DEFAULT_SAMPLE_COUNT",
    "DesignMatrix",
    "DimensionMismatch",
    "EmptyEnsemble",
    "FitSummary",
    "IntervalSummary",
    "InvalidCovariance",
    "InvalidQuantileRange",
    "InvalidSampleCount",
    "LinkClampWarning",
    "LinkName",
    "MissingCovariate",
    "ModelTerms",
    "MonteCarloPredictor",
    "ParameterSample",
    "ParameterSource",
    "PredictionConfig",
    "PredictionError",
    "PredictionInterval",
    "UnknownTerm",
    "analytic_intervals",
    "apply_inverse_link",
    "build_design_matrix",
    "draw_parameter_sample",
    "evaluate_linear_predictor",
    "predict_intervals",
    "summarize_ensemble",
]
