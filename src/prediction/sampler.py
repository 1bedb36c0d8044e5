"""Multivariate-normal parameter sampler for fitted model summaries."""

from __future__ import annotations

import numbers
from typing import Protocol, runtime_checkable

import numpy as np

from .errors import InvalidCovariance, InvalidSampleCount
from .records import FitSummary, ParameterSample


@runtime_checkable
class ParameterSource(Protocol):
    """Fitted-model capability consumed by the prediction pipeline."""

    def summary(self) -> FitSummary: ...

    def draw_parameters(self, sample_count: int, rng: np.random.Generator) -> ParameterSample: ...


def check_sample_count(sample_count: object) -> int:
    """Return `sample_count` as an int, rejecting non-positive or non-integral values."""
    if isinstance(sample_count, bool) or not isinstance(sample_count, numbers.Integral):
        raise InvalidSampleCount(f"sample_count must be an integer, got {sample_count!r}")
    if sample_count <= 0:
        raise InvalidSampleCount(f"sample_count must be positive, got {sample_count}")
    return int(sample_count)


def covariance_factor(covariance: np.ndarray, n_params: int) -> np.ndarray:
    """Lower Cholesky factor of `covariance`, or `InvalidCovariance`.

    Singular (positive semi-definite only) matrices are rejected as well.
    """
    cov = np.asarray(covariance, dtype=np.float64)
    if cov.shape != (n_params, n_params):
        raise InvalidCovariance(f"Covariance must have shape {(n_params, n_params)}, got {cov.shape}")
    if not np.all(np.isfinite(cov)):
        raise InvalidCovariance("Covariance contains non-finite entries.")
    if not np.allclose(cov, cov.T, rtol=1e-10, atol=1e-12):
        raise InvalidCovariance("Covariance must be symmetric.")
    try:
        return np.linalg.cholesky(cov)
    except np.linalg.LinAlgError as exc:
        raise InvalidCovariance("Covariance is not positive definite.") from exc


def draw_parameter_sample(
    summary: FitSummary,
    sample_count: int,
    rng: np.random.Generator,
) -> ParameterSample:
    """Draw `sample_count` coefficient vectors (and group deviates) from `summary`.

    Fixed effects come from ``N(estimates, covariance)``. When the summary
    describes a random intercept, an independent ``N(0, group_variance)``
    deviate is drawn per group and per draw, after the fixed-effect block.
    """
    count = check_sample_count(sample_count)
    n_params = summary.n_params
    factor = covariance_factor(summary.covariance, n_params)

    standard = rng.standard_normal((count, n_params))
    draws = summary.estimates + standard @ factor.T

    if not summary.has_groups:
        return ParameterSample(draws=draws, names=summary.names)

    variance = float(summary.group_variance)  # type: ignore[arg-type]
    if not np.isfinite(variance) or variance < 0:
        raise InvalidCovariance(f"Group variance must be finite and non-negative, got {variance}")
    labels = tuple(summary.group_labels or ())
    group_draws = rng.normal(0.0, np.sqrt(variance), size=(count, len(labels)))
    return ParameterSample(draws=draws, names=summary.names, group_labels=labels, group_draws=group_draws)


__all__ = ["ParameterSource", "check_sample_count", "covariance_factor", "draw_parameter_sample"]
