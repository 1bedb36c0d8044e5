"""Straight-line model: simulate, fit with OLS, compare simulated and analytic intervals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from src.fitting import fit_linear_model
from src.prediction import (
    DEFAULT_QUANTILES,
    IntervalSummary,
    PredictionConfig,
    analytic_intervals,
    build_design_matrix,
    predict_intervals,
)
from src.simulation import simulate_linear_data

LM_PREDICTION_POINTS: Tuple[float, ...] = (100.0, 110.0, 120.0, 130.0)


@dataclass(frozen=True)
class ScenarioResult:
    observed: pd.DataFrame
    x_new: Tuple[float, ...]
    simulated: IntervalSummary
    analytic: IntervalSummary


def run_lm_intervals(
    sample_count: int = 1000,
    seed: int = 48460,
    quantiles: Tuple[float, float] = DEFAULT_QUANTILES,
    x_new: Sequence[float] = LM_PREDICTION_POINTS,
    observation_noise: bool = False,
) -> ScenarioResult:
    data = simulate_linear_data(np.random.default_rng(seed))
    fit = fit_linear_model(data, "y ~ x")
    design = build_design_matrix(list(x_new))

    config = PredictionConfig(
        sample_count=sample_count,
        quantile_lower=quantiles[0],
        quantile_upper=quantiles[1],
        link="identity",
        random_seed=seed,
        observation_noise=observation_noise,
    )
    simulated = predict_intervals(fit, design, config)
    analytic = analytic_intervals(
        fit.summary(),
        design,
        link="identity",
        level=quantiles[1] - quantiles[0],
        include_residual=observation_noise,
    )

    for x_value, sim, exact in zip(x_new, simulated, analytic):
        print(
            f"[lm] x={x_value:g} simulated={sim.estimate:.2f} [{sim.lower:.2f}, {sim.upper:.2f}] "
            f"analytic={exact.estimate:.2f} [{exact.lower:.2f}, {exact.upper:.2f}]"
        )
    return ScenarioResult(observed=data, x_new=tuple(x_new), simulated=simulated, analytic=analytic)
