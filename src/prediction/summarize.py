"""Column-wise summaries of response-scale prediction ensembles."""

from __future__ import annotations

import numpy as np

from .errors import EmptyEnsemble, InvalidQuantileRange
from .records import IntervalSummary


def check_quantile_range(lower: float, upper: float) -> None:
    """Require ``0 <= lower < upper <= 1``."""
    if not (np.isfinite(lower) and np.isfinite(upper)):
        raise InvalidQuantileRange(f"Quantile levels must be finite, got ({lower}, {upper})")
    if not 0.0 <= lower < upper <= 1.0:
        raise InvalidQuantileRange(f"Quantile levels must satisfy 0 <= lower < upper <= 1, got ({lower}, {upper})")


def summarize_ensemble(
    ensemble: np.ndarray,
    quantile_lower: float = 0.025,
    quantile_upper: float = 0.975,
) -> IntervalSummary:
    """Mean and interpolated quantile bounds across draws for every prediction point.

    Args:
        ensemble: Response-scale draws, shape (M draws × R prediction points).
        quantile_lower: Level of the lower bound.
        quantile_upper: Level of the upper bound.

    Returns:
        IntervalSummary with R entries. Only ``lower <= upper`` is guaranteed;
        under strong skew the mean may fall outside the bounds.
    """
    check_quantile_range(quantile_lower, quantile_upper)
    values = np.asarray(ensemble, dtype=np.float64)
    if values.ndim != 2 or values.shape[0] == 0:
        raise EmptyEnsemble(f"Ensemble must be a non-empty (draws × points) array, got shape {values.shape}")

    estimate = values.mean(axis=0)
    bounds = np.quantile(values, [quantile_lower, quantile_upper], axis=0, method="linear")
    return IntervalSummary(
        estimate=estimate,
        lower=bounds[0],
        upper=bounds[1],
        quantiles=(float(quantile_lower), float(quantile_upper)),
    )


__all__ = ["check_quantile_range", "summarize_ensemble"]
