"""Observation-level noise for turning mean ensembles into predictive ensembles."""

from __future__ import annotations

from typing import Literal, Optional

import numpy as np

from .links import LinkName

Family = Literal["gaussian", "poisson", "binomial"]

FAMILY_FOR_LINK: dict[LinkName, Family] = {
    "identity": "gaussian",
    "log": "poisson",
    "logit": "binomial",
}


def family_for_link(link: LinkName) -> Family:
    try:
        return FAMILY_FOR_LINK[link]
    except KeyError as exc:
        raise ValueError(f"No response family registered for link '{link}'.") from exc


def simulate_observations(
    mean_ensemble: np.ndarray,
    family: Family,
    rng: np.random.Generator,
    residual_sd: Optional[float] = None,
) -> np.ndarray:
    """Draw one new observation per (draw, point) around the response-scale mean."""
    mu = np.asarray(mean_ensemble, dtype=np.float64)
    if family == "gaussian":
        if residual_sd is None:
            raise ValueError("Gaussian observation noise requires residual_sd.")
        if not np.isfinite(residual_sd) or residual_sd < 0:
            raise ValueError(f"residual_sd must be finite and non-negative, got {residual_sd}")
        return mu + rng.normal(0.0, residual_sd, size=mu.shape)
    if family == "poisson":
        if np.any(mu < 0):
            raise ValueError("Poisson means must be non-negative.")
        return rng.poisson(mu).astype(np.float64)
    if family == "binomial":
        if np.any((mu < 0) | (mu > 1)):
            raise ValueError("Binomial probabilities must fall within [0, 1].")
        return rng.binomial(1, mu).astype(np.float64)
    raise ValueError(f"Unknown family '{family}'.")


__all__ = ["FAMILY_FOR_LINK", "Family", "family_for_link", "simulate_observations"]
