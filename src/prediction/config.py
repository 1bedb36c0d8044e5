"""Configuration for Monte Carlo prediction intervals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .links import LinkName, get_inverse_link
from .sampler import check_sample_count
from .summarize import check_quantile_range

# Defaults used by the pipeline and the Typer CLI; callers may override these.
DEFAULT_SAMPLE_COUNT = 1000
DEFAULT_QUANTILES: Tuple[float, float] = (0.025, 0.975)


@dataclass
class PredictionConfig:
    """Options recognised by `MonteCarloPredictor`."""

    sample_count: int = DEFAULT_SAMPLE_COUNT
    quantile_lower: float = DEFAULT_QUANTILES[0]
    quantile_upper: float = DEFAULT_QUANTILES[1]
    link: LinkName = "identity"
    random_seed: Optional[int] = None
    # Summarise new observations instead of the expected response.
    observation_noise: bool = False
    residual_sd: Optional[float] = None

    def validate(self) -> None:
        check_sample_count(self.sample_count)
        check_quantile_range(self.quantile_lower, self.quantile_upper)
        get_inverse_link(self.link)
        if self.residual_sd is not None and not (np.isfinite(self.residual_sd) and self.residual_sd >= 0):
            raise ValueError("residual_sd must be a finite, non-negative number.")

    def make_rng(self) -> np.random.Generator:
        """Return a fresh generator seeded with `random_seed`."""
        return np.random.default_rng(self.random_seed)


__all__ = ["DEFAULT_SAMPLE_COUNT", "DEFAULT_QUANTILES", "PredictionConfig"]
