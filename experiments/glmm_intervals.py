"""Poisson random-intercept model: simulate counts, fit, and predict on the count scale."""

from __future__ import annotations

from typing import Hashable, Literal, Optional, Sequence, Tuple

import numpy as np

from src.fitting import fit_poisson_glm, fit_poisson_glmm
from src.prediction import (
    DEFAULT_QUANTILES,
    PredictionConfig,
    analytic_intervals,
    build_design_matrix,
    predict_intervals,
)
from src.simulation import simulate_poisson_glmm_data

from experiments.lm_intervals import ScenarioResult

Backend = Literal["pymc", "glm"]

GLMM_PREDICTION_POINTS: Tuple[float, ...] = (0.6, 0.8, 1.0)


def run_glmm_intervals(
    sample_count: int = 1000,
    seed: int = 48460,
    quantiles: Tuple[float, float] = DEFAULT_QUANTILES,
    x_new: Sequence[float] = GLMM_PREDICTION_POINTS,
    backend: Backend = "pymc",
    group: Optional[Hashable] = None,
    draws: int = 1000,
    tune: int = 1000,
    chains: int = 2,
) -> ScenarioResult:
    """Predict expected counts at `x_new`.

    With ``backend="pymc"`` the random-intercept model is sampled and, when
    `group` is given, each prediction row carries that group's fitted
    posterior effect rather than a deviate for a new group.
    ``backend="glm"`` fits a pooled Poisson GLM with statsmodels instead.
    """
    data = simulate_poisson_glmm_data(np.random.default_rng(seed))

    if backend == "pymc":
        fit = fit_poisson_glmm(
            data,
            draws=draws,
            tune=tune,
            chains=chains,
            cores=1,
            random_seed=seed,
            conditional=group is not None,
        )
    elif backend == "glm":
        if group is not None:
            raise ValueError("The pooled GLM backend has no group-level effects.")
        fit = fit_poisson_glm(data, "y ~ x")
    else:
        raise ValueError(f"Unknown backend '{backend}'.")

    groups = [group] * len(x_new) if group is not None else None
    design = build_design_matrix(list(x_new), groups=groups)

    config = PredictionConfig(
        sample_count=sample_count,
        quantile_lower=quantiles[0],
        quantile_upper=quantiles[1],
        link="log",
        random_seed=seed,
    )
    simulated = predict_intervals(fit, design, config)
    analytic = analytic_intervals(fit.summary(), design, link="log", level=quantiles[1] - quantiles[0])

    for x_value, sim, exact in zip(x_new, simulated, analytic):
        print(
            f"[glmm:{backend}] x={x_value:g} simulated={sim.estimate:.1f} [{sim.lower:.1f}, {sim.upper:.1f}] "
            f"analytic={exact.estimate:.1f} [{exact.lower:.1f}, {exact.upper:.1f}]"
        )
    return ScenarioResult(observed=data, x_new=tuple(x_new), simulated=simulated, analytic=analytic)
