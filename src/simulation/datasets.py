"""Scenario generators for a straight-line model and random-intercept models.

Each generator takes an explicit ``numpy.random.Generator`` and returns a
long-format DataFrame with columns ``x``, ``y`` and, for grouped data,
``group``.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
import pandas as pd


def _check_positive(**counts: int) -> None:
    for name, value in counts.items():
        if value < 1:
            raise ValueError(f"{name} must be at least 1, got {value}")


def _check_range(x_range: Tuple[float, float]) -> None:
    low, high = x_range
    if not low < high:
        raise ValueError(f"x_range must be increasing, got {x_range}")


def simulate_linear_data(
    rng: np.random.Generator,
    n: int = 100,
    intercept: float = 10.0,
    slope: float = 1.76,
    noise_sd: float = 5.0,
    x_range: Tuple[float, float] = (90.0, 140.0),
) -> pd.DataFrame:
    """``y = intercept + slope * x + N(0, noise_sd)`` with uniformly spread ``x``."""
    _check_positive(n=n)
    _check_range(x_range)
    if noise_sd < 0:
        raise ValueError("noise_sd must be non-negative.")
    x = rng.uniform(x_range[0], x_range[1], size=n)
    y = intercept + slope * x + rng.normal(0.0, noise_sd, size=n)
    return pd.DataFrame({"x": x, "y": y})


def _grouped_covariate(
    rng: np.random.Generator,
    n_groups: int,
    n_per_group: int,
    group_sd: float,
    x_range: Tuple[float, float],
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    _check_positive(n_groups=n_groups, n_per_group=n_per_group)
    _check_range(x_range)
    if group_sd < 0:
        raise ValueError("group_sd must be non-negative.")
    group = np.repeat(np.arange(n_groups), n_per_group)
    x = rng.uniform(x_range[0], x_range[1], size=group.shape[0])
    deviates = rng.normal(0.0, group_sd, size=n_groups)
    return group, x, deviates[group]


def simulate_linear_mixed_data(
    rng: np.random.Generator,
    n_groups: int = 10,
    n_per_group: int = 20,
    intercept: float = 10.0,
    slope: float = 1.76,
    group_sd: float = 3.0,
    noise_sd: float = 5.0,
    x_range: Tuple[float, float] = (90.0, 140.0),
) -> pd.DataFrame:
    """Gaussian random-intercept data: ``y = intercept + b[group] + slope * x + ε``."""
    group, x, offsets = _grouped_covariate(rng, n_groups, n_per_group, group_sd, x_range)
    if noise_sd < 0:
        raise ValueError("noise_sd must be non-negative.")
    y = intercept + offsets + slope * x + rng.normal(0.0, noise_sd, size=x.shape[0])
    return pd.DataFrame({"group": group, "x": x, "y": y})


def simulate_poisson_glmm_data(
    rng: np.random.Generator,
    n_groups: int = 10,
    n_per_group: int = 20,
    intercept: float = 5.0,
    slope: float = 1.0,
    group_sd: float = 0.3,
    x_range: Tuple[float, float] = (0.5, 1.0),
) -> pd.DataFrame:
    """Log-linked Poisson counts: ``y ~ Poisson(exp(intercept + b[group] + slope * x))``."""
    group, x, offsets = _grouped_covariate(rng, n_groups, n_per_group, group_sd, x_range)
    y = rng.poisson(np.exp(intercept + offsets + slope * x))
    return pd.DataFrame({"group": group, "x": x, "y": y})
