"""End-to-end tests for Monte Carlo prediction intervals and analytic comparisons."""

from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.fitting import fit_linear_model
from src.prediction import (
    DimensionMismatch,
    EmptyEnsemble,
    FitSummary,
    InvalidQuantileRange,
    InvalidSampleCount,
    ModelTerms,
    MonteCarloPredictor,
    ParameterSample,
    PredictionConfig,
    analytic_intervals,
    build_design_matrix,
    predict_intervals,
)
from src.simulation import simulate_linear_data


def _linear_summary() -> FitSummary:
    return FitSummary(
        estimates=[10.0, 1.76],
        covariance=np.diag([1e-2, 1e-6]),
        names=("Intercept", "x"),
    )


# ---------------------------------------------------------------------------
# Configuration


def test_config_validation() -> None:
    with pytest.raises(InvalidSampleCount):
        PredictionConfig(sample_count=0).validate()
    with pytest.raises(InvalidQuantileRange):
        PredictionConfig(quantile_lower=0.9, quantile_upper=0.1).validate()
    with pytest.raises(ValueError):
        PredictionConfig(link="probit").validate()  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        PredictionConfig(residual_sd=-1.0).validate()
    PredictionConfig().validate()


def test_predictor_validates_config_on_construction() -> None:
    with pytest.raises(InvalidSampleCount):
        MonteCarloPredictor(PredictionConfig(sample_count=0))


# ---------------------------------------------------------------------------
# Scenarios


def test_identity_link_scenario() -> None:
    design = build_design_matrix([100, 110, 120, 130])
    config = PredictionConfig(sample_count=1000, link="identity", random_seed=48460)
    summary = predict_intervals(_linear_summary(), design, config)

    assert len(summary) == 4
    assert summary.estimate == pytest.approx([186.0, 203.6, 221.2, 238.8], abs=0.05)
    assert np.all(summary.lower < summary.estimate)
    assert np.all(summary.estimate < summary.upper)


def test_log_link_scenario() -> None:
    fit = FitSummary(estimates=[5.0, 1.0], covariance=np.diag([1e-4, 1e-4]))
    design = build_design_matrix([0.6, 0.8, 1.0])
    config = PredictionConfig(sample_count=1000, link="log", random_seed=48460)
    summary = predict_intervals(fit, design, config)

    assert summary.estimate == pytest.approx([270.4, 330.3, 403.4], rel=0.01)
    assert np.all(np.diff(summary.estimate) > 0)
    assert np.all(summary.lower <= summary.upper)


def test_logit_link_stays_in_unit_interval() -> None:
    fit = FitSummary(estimates=[-1.0, 2.0], covariance=np.diag([0.05, 0.05]))
    design = build_design_matrix([-1.0, 0.0, 1.0, 2.0])
    summary = predict_intervals(fit, design, PredictionConfig(sample_count=500, link="logit", random_seed=1))
    assert np.all((summary.lower >= 0.0) & (summary.upper <= 1.0))


def test_mean_converges_to_analytic_point_prediction() -> None:
    fit = _linear_summary()
    design = build_design_matrix([100, 115, 130])
    expected = design.values @ fit.estimates
    summary = predict_intervals(fit, design, PredictionConfig(sample_count=1000, random_seed=11))
    assert np.max(np.abs(summary.estimate - expected)) < 0.05


def test_same_seed_is_bit_identical() -> None:
    design = build_design_matrix([100, 110, 120, 130])
    config = PredictionConfig(sample_count=300, random_seed=48460)
    first = predict_intervals(_linear_summary(), design, config)
    second = predict_intervals(_linear_summary(), design, config)
    assert np.array_equal(first.estimate, second.estimate)
    assert np.array_equal(first.lower, second.lower)
    assert np.array_equal(first.upper, second.upper)


def test_explicit_generator_controls_draws() -> None:
    design = build_design_matrix([100, 110])
    predictor = MonteCarloPredictor(PredictionConfig(sample_count=200, random_seed=1))
    first = predictor.predict(_linear_summary(), design, rng=np.random.default_rng(99))
    second = predictor.predict(_linear_summary(), design, rng=np.random.default_rng(99))
    third = predictor.predict(_linear_summary(), design, rng=np.random.default_rng(100))
    assert np.array_equal(first.estimate, second.estimate)
    assert not np.array_equal(first.estimate, third.estimate)


def test_empty_design_yields_empty_summary() -> None:
    summary = predict_intervals(_linear_summary(), build_design_matrix([]), PredictionConfig(random_seed=0))
    assert len(summary) == 0


def test_two_parameter_draws_against_three_columns() -> None:
    sample = ParameterSample(draws=np.ones((10, 2)))
    design = build_design_matrix({"x": [1.0, 2.0], "z": [0.0, 1.0]}, ModelTerms(("x", "z")))
    with pytest.raises(DimensionMismatch):
        predict_intervals(sample, design)


def test_group_rows_need_random_effects() -> None:
    design = build_design_matrix([100.0], groups=["site-7"])
    with pytest.raises(DimensionMismatch):
        predict_intervals(_linear_summary(), design, PredictionConfig(random_seed=0))


def test_parameter_sample_without_draws() -> None:
    sample = ParameterSample(draws=np.empty((0, 2)))
    with pytest.raises(EmptyEnsemble):
        predict_intervals(sample, build_design_matrix([1.0]))


def test_ready_sample_passes_through() -> None:
    sample = ParameterSample(draws=[[0.0, 1.0], [2.0, 1.0]], names=("Intercept", "x"))
    config = PredictionConfig(quantile_lower=0.0, quantile_upper=1.0)
    summary = predict_intervals(sample, build_design_matrix([5.0]), config)
    assert summary.estimate == pytest.approx([6.0])
    assert summary.lower == pytest.approx([5.0])
    assert summary.upper == pytest.approx([7.0])


def test_random_intercept_widens_intervals() -> None:
    base = _linear_summary()
    grouped = FitSummary(
        estimates=base.estimates,
        covariance=base.covariance,
        names=base.names,
        group_variance=9.0,
        group_labels=("a", "b"),
    )
    design_fixed = build_design_matrix([120.0])
    design_group = build_design_matrix([120.0], groups=["a"])
    config = PredictionConfig(sample_count=2000, random_seed=5)

    fixed = predict_intervals(grouped, design_fixed, config)
    with_group = predict_intervals(grouped, design_group, config)

    assert (with_group.upper - with_group.lower)[0] > 5 * (fixed.upper - fixed.lower)[0]
    assert with_group.estimate[0] == pytest.approx(221.2, abs=0.5)


def test_observation_noise_requires_residual_sd() -> None:
    config = PredictionConfig(sample_count=100, random_seed=0, observation_noise=True)
    with pytest.raises(ValueError):
        predict_intervals(_linear_summary(), build_design_matrix([100.0]), config)


def test_observation_noise_uses_fit_residual_variance() -> None:
    fit = FitSummary(
        estimates=[10.0, 1.76],
        covariance=np.diag([1e-2, 1e-6]),
        residual_variance=25.0,
    )
    design = build_design_matrix([100.0, 130.0])
    mean_only = predict_intervals(fit, design, PredictionConfig(sample_count=2000, random_seed=3))
    observed = predict_intervals(
        fit, design, PredictionConfig(sample_count=2000, random_seed=3, observation_noise=True)
    )
    width = observed.upper - observed.lower
    assert np.all(width > 10 * (mean_only.upper - mean_only.lower))
    # A N(0, 5) draw spans roughly 2 × 1.96 × 5 between the 2.5% and 97.5% quantiles.
    assert width == pytest.approx([19.6, 19.6], rel=0.1)


def test_poisson_observation_noise_gives_counts() -> None:
    fit = FitSummary(estimates=[2.0, 0.5], covariance=np.diag([1e-3, 1e-3]))
    predictor = MonteCarloPredictor(PredictionConfig(sample_count=500, link="log", observation_noise=True))
    rng = np.random.default_rng(4)
    sample = predictor.sample(fit, rng)
    ensemble = predictor.predict_ensemble(sample, build_design_matrix([0.0, 1.0]), rng)
    assert ensemble.shape == (500, 2)
    assert np.array_equal(ensemble, np.round(ensemble))


class _StubSource:
    """Minimal ParameterSource implementation."""

    def __init__(self) -> None:
        self.requested: list[int] = []

    def summary(self) -> FitSummary:
        return _linear_summary()

    def draw_parameters(self, sample_count: int, rng: np.random.Generator) -> ParameterSample:
        self.requested.append(sample_count)
        return ParameterSample(draws=np.tile([10.0, 1.76], (sample_count, 1)))


def test_parameter_source_protocol() -> None:
    source = _StubSource()
    summary = predict_intervals(source, build_design_matrix([100.0]), PredictionConfig(sample_count=25))
    assert source.requested == [25]
    assert summary.estimate == pytest.approx([186.0])
    assert summary.lower == pytest.approx([186.0])


def test_unsupported_source_type() -> None:
    with pytest.raises(TypeError):
        predict_intervals([10.0, 1.76], build_design_matrix([1.0]))  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Analytic intervals


@pytest.fixture(scope="module")
def ols_fit():
    data = simulate_linear_data(np.random.default_rng(48460))
    return fit_linear_model(data, "y ~ x")


def test_analytic_intervals_match_statsmodels(ols_fit) -> None:
    x_new = [100.0, 110.0, 120.0, 130.0]
    design = build_design_matrix(x_new)
    frame = ols_fit.result.get_prediction(pd.DataFrame({"x": x_new})).summary_frame(alpha=0.05)

    confidence = analytic_intervals(ols_fit.summary(), design)
    assert confidence.estimate == pytest.approx(frame["mean"].to_numpy())
    assert confidence.lower == pytest.approx(frame["mean_ci_lower"].to_numpy())
    assert confidence.upper == pytest.approx(frame["mean_ci_upper"].to_numpy())

    prediction = analytic_intervals(ols_fit.summary(), design, include_residual=True)
    assert prediction.lower == pytest.approx(frame["obs_ci_lower"].to_numpy())
    assert prediction.upper == pytest.approx(frame["obs_ci_upper"].to_numpy())


def test_simulated_and_analytic_intervals_agree(ols_fit) -> None:
    design = build_design_matrix([100.0, 115.0, 130.0])
    simulated = predict_intervals(ols_fit, design, PredictionConfig(sample_count=4000, random_seed=48460))
    analytic = analytic_intervals(ols_fit.summary(), design)

    assert simulated.estimate == pytest.approx(analytic.estimate, rel=1e-3)
    sim_width = simulated.upper - simulated.lower
    exact_width = analytic.upper - analytic.lower
    assert sim_width == pytest.approx(exact_width, rel=0.15)


def test_analytic_intervals_validation() -> None:
    design = build_design_matrix([1.0])
    with pytest.raises(InvalidQuantileRange):
        analytic_intervals(_linear_summary(), design, level=1.0)
    with pytest.raises(ValueError):
        analytic_intervals(_linear_summary(), design, include_residual=True)
    with pytest.raises(ValueError):
        analytic_intervals(_linear_summary(), design, link="log", include_residual=True)
    short = FitSummary(estimates=[1.0], covariance=[[1.0]])
    with pytest.raises(DimensionMismatch):
        analytic_intervals(short, design)


def test_analytic_log_link_bounds_are_transformed() -> None:
    fit = FitSummary(estimates=[5.0, 1.0], covariance=np.diag([1e-2, 1e-2]))
    summary = analytic_intervals(fit, build_design_matrix([0.6, 0.8, 1.0]), link="log")
    assert summary.estimate == pytest.approx(np.exp([5.6, 5.8, 6.0]))
    assert np.all(summary.lower < summary.estimate)
    # Back-transformed Wald bounds are asymmetric around the estimate.
    assert np.all(summary.upper - summary.estimate > summary.estimate - summary.lower)
