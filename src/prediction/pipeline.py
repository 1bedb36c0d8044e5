"""Monte Carlo prediction intervals: sample, propagate, transform, summarise."""

from __future__ import annotations

from typing import Optional, Union

import numpy as np

from .config import PredictionConfig
from .links import apply_inverse_link
from .linear import evaluate_linear_predictor
from .noise import family_for_link, simulate_observations
from .records import DesignMatrix, FitSummary, IntervalSummary, ParameterSample
from .sampler import ParameterSource, draw_parameter_sample
from .summarize import summarize_ensemble

SourceLike = Union[FitSummary, ParameterSource, ParameterSample]


class MonteCarloPredictor:
    """Simulation-based point predictions and quantile intervals.

    Every stage validates its own inputs and raises a `PredictionError`
    subclass instead of returning partial output.
    """

    def __init__(self, config: Optional[PredictionConfig] = None) -> None:
        self.config = config or PredictionConfig()
        self.config.validate()

    def sample(self, source: SourceLike, rng: np.random.Generator) -> ParameterSample:
        """Materialise parameter draws from `source`; ready samples pass through unchanged."""
        if isinstance(source, ParameterSample):
            return source
        if isinstance(source, FitSummary):
            return draw_parameter_sample(source, self.config.sample_count, rng)
        if isinstance(source, ParameterSource):
            return source.draw_parameters(self.config.sample_count, rng)
        raise TypeError(f"Cannot draw parameters from {type(source).__name__}.")

    def predict_ensemble(
        self,
        sample: ParameterSample,
        design: DesignMatrix,
        rng: Optional[np.random.Generator] = None,
        residual_sd: Optional[float] = None,
    ) -> np.ndarray:
        """Return the (M × R) response-scale ensemble for `sample` over `design`."""
        linear = evaluate_linear_predictor(sample, design)
        ensemble = apply_inverse_link(linear, self.config.link)
        if not self.config.observation_noise:
            return ensemble
        if rng is None:
            raise ValueError("Observation noise requires a random generator.")
        sd = self.config.residual_sd if self.config.residual_sd is not None else residual_sd
        return simulate_observations(ensemble, family_for_link(self.config.link), rng, residual_sd=sd)

    def predict(
        self,
        source: SourceLike,
        design: DesignMatrix,
        rng: Optional[np.random.Generator] = None,
    ) -> IntervalSummary:
        """Run the full pipeline and summarise each design row."""
        generator = rng if rng is not None else self.config.make_rng()
        sample = self.sample(source, generator)
        residual_sd = _residual_sd(source) if self.config.observation_noise else None
        ensemble = self.predict_ensemble(sample, design, generator, residual_sd=residual_sd)
        return summarize_ensemble(ensemble, self.config.quantile_lower, self.config.quantile_upper)


def _residual_sd(source: SourceLike) -> Optional[float]:
    if isinstance(source, ParameterSample):
        return None
    summary = source if isinstance(source, FitSummary) else source.summary()
    if summary.residual_variance is None:
        return None
    return float(np.sqrt(summary.residual_variance))


def predict_intervals(
    source: SourceLike,
    design: DesignMatrix,
    config: Optional[PredictionConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> IntervalSummary:
    """Build a `MonteCarloPredictor` and return interval summaries in one call."""
    return MonteCarloPredictor(config).predict(source, design, rng=rng)


__all__ = ["MonteCarloPredictor", "SourceLike", "predict_intervals"]
