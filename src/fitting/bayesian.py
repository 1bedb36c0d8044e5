"""PyMC Poisson random-intercept model whose posterior feeds the prediction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Optional, Sequence, cast

import arviz as az
import numpy as np
import pandas as pd
import pymc as pm
import xarray as xr

from src.prediction.design import ModelTerms, build_design_matrix
from src.prediction.records import FitSummary, ParameterSample
from src.prediction.sampler import check_sample_count

from .base import require_columns, require_finite


@dataclass(frozen=True)
class PriorConfig:
    """Prior hyper-parameters for the Poisson random-intercept model."""

    intercept_mean: float = 0.0
    intercept_sigma: float = 10.0
    slope_sigma: float = 5.0
    group_scale: float = 1.0

    def validate(self) -> None:
        if self.intercept_sigma <= 0 or self.slope_sigma <= 0 or self.group_scale <= 0:
            raise ValueError("Prior scales must be strictly positive.")


@dataclass(frozen=True)
class GroupedCountDataset:
    design: np.ndarray
    counts: np.ndarray
    group_ids: np.ndarray
    group_labels: Sequence[Hashable]
    coef_names: Sequence[str]


def build_dataset(
    data: pd.DataFrame,
    response: str = "y",
    terms: Optional[ModelTerms] = None,
    group: str = "group",
) -> GroupedCountDataset:
    """Convert a long-format DataFrame into arrays ready for PyMC."""
    model_terms = terms or ModelTerms()
    require_columns(data, [response, group, *model_terms.variables])
    if data.empty:
        raise ValueError("No observations supplied for fitting.")

    counts = require_finite(data[response].to_numpy(), name=response)
    if np.any(counts < 0) or np.any(counts != np.round(counts)):
        raise ValueError(f"{response} must hold non-negative integer counts.")

    design = build_design_matrix({name: data[name].to_numpy() for name in model_terms.variables}, model_terms)
    labels = sorted(pd.unique(data[group]).tolist())
    index = {label: idx for idx, label in enumerate(labels)}
    group_ids = np.asarray([index[label] for label in data[group].tolist()], dtype=int)

    return GroupedCountDataset(
        design=np.asarray(design.values),
        counts=counts.astype(int),
        group_ids=group_ids,
        group_labels=labels,
        coef_names=design.column_names,
    )


def build_model(dataset: GroupedCountDataset, priors: PriorConfig) -> pm.Model:
    """Create the PyMC model ``y ~ Poisson(exp(X β + b[group]))``."""
    priors.validate()
    coords = {"coef": list(dataset.coef_names), "group": list(dataset.group_labels)}
    n_coef = len(dataset.coef_names)
    beta_mu = np.zeros(n_coef)
    beta_mu[0] = priors.intercept_mean
    beta_sigma = np.full(n_coef, priors.slope_sigma)
    beta_sigma[0] = priors.intercept_sigma

    with pm.Model(coords=coords) as model:
        beta = pm.Normal("beta", mu=beta_mu, sigma=beta_sigma, dims="coef")
        sigma_group = pm.HalfNormal("sigma_group", sigma=priors.group_scale)
        # Non-centred parameterisation keeps NUTS stable for small group variances.
        z_group = pm.Normal("z_group", mu=0.0, sigma=1.0, dims="group")
        group_effect = pm.Deterministic("group_effect", z_group * sigma_group, dims="group")

        eta = pm.math.dot(dataset.design, beta) + group_effect[dataset.group_ids]
        pm.Poisson("observations", mu=pm.math.exp(eta), observed=dataset.counts)
    return model


class PosteriorFit:
    """Fits the Poisson GLMM with NUTS and serves posterior parameter draws."""

    def __init__(
        self,
        priors: Optional[PriorConfig] = None,
        draws: int = 1000,
        tune: int = 1000,
        target_accept: float = 0.9,
        chains: int = 4,
        cores: Optional[int] = None,
        random_seed: Optional[int] = None,
        conditional: bool = False,
    ) -> None:
        self.priors = priors or PriorConfig()
        self.draws = draws
        self.tune = tune
        self.target_accept = target_accept
        self.chains = chains
        self.cores = cores
        self.random_seed = random_seed
        self.conditional = conditional
        self._idata: Optional[Any] = None
        self._coef_names: Sequence[str] = ()
        self._group_labels: Sequence[Hashable] = ()

    @classmethod
    def from_inference_data(
        cls,
        idata: Any,
        coef_names: Sequence[str],
        group_labels: Sequence[Hashable],
        conditional: bool = False,
    ) -> "PosteriorFit":
        """Wrap an existing posterior holding ``beta``, ``sigma_group`` and ``group_effect``."""
        fit = cls(conditional=conditional)
        fit._idata = idata
        fit._coef_names = tuple(coef_names)
        fit._group_labels = tuple(group_labels)
        return fit

    def fit(
        self,
        data: pd.DataFrame,
        response: str = "y",
        terms: Optional[ModelTerms] = None,
        group: str = "group",
    ) -> "PosteriorFit":
        """Sample the posterior of the model for `data`."""
        dataset = build_dataset(data, response=response, terms=terms, group=group)
        model = build_model(dataset, self.priors)
        with model:
            self._idata = pm.sample(
                draws=self.draws,
                tune=self.tune,
                target_accept=self.target_accept,
                chains=self.chains,
                cores=self.cores,
                random_seed=self.random_seed,
                return_inferencedata=True,
                progressbar=False,
            )
        self._coef_names = tuple(dataset.coef_names)
        self._group_labels = tuple(dataset.group_labels)
        return self

    def summary(self) -> FitSummary:
        """Posterior means and covariance of the coefficients plus the mean group variance."""
        beta = self._stacked("beta", "coef")
        sigma = self._stacked("sigma_group")
        return FitSummary(
            estimates=beta.mean(axis=0),
            covariance=np.atleast_2d(np.cov(beta, rowvar=False)),
            names=tuple(self._coef_names),
            group_variance=float(np.mean(sigma**2)),
            group_labels=tuple(self._group_labels),
        )

    def draw_parameters(self, sample_count: int, rng: np.random.Generator) -> ParameterSample:
        """Resample posterior draws; group deviates are new ``N(0, σ_m)`` draws unless `conditional`."""
        count = check_sample_count(sample_count)
        beta = self._stacked("beta", "coef")
        picks = rng.integers(0, beta.shape[0], size=count)

        if self.conditional:
            group_draws = self._stacked("group_effect", "group")[picks]
        else:
            sigma = self._stacked("sigma_group")[picks]
            group_draws = rng.standard_normal((count, len(self._group_labels))) * sigma[:, None]

        return ParameterSample(
            draws=beta[picks],
            names=tuple(self._coef_names),
            group_labels=tuple(self._group_labels),
            group_draws=group_draws,
        )

    def _stacked(self, var_name: str, dim: Optional[str] = None) -> np.ndarray:
        if self._idata is None:
            raise RuntimeError("PosteriorFit.fit() must be called before drawing parameters.")
        try:
            posterior = cast(xr.DataArray, az.extract(self._idata, group="posterior", var_names=var_name))
        except KeyError as exc:
            raise RuntimeError(f"Posterior does not contain the expected '{var_name}' variable.") from exc

        order = ("sample", dim) if dim else ("sample",)
        return np.asarray(posterior.transpose(*order), dtype=float)

    @property
    def inference_data(self) -> Optional[Any]:
        return self._idata


def fit_poisson_glmm(
    data: pd.DataFrame,
    response: str = "y",
    terms: Optional[ModelTerms] = None,
    group: str = "group",
    priors: Optional[PriorConfig] = None,
    draws: int = 1000,
    tune: int = 1000,
    chains: int = 4,
    cores: Optional[int] = None,
    random_seed: Optional[int] = None,
    conditional: bool = False,
) -> PosteriorFit:
    """Fit the Poisson random-intercept model and return the posterior source in one call."""
    fit = PosteriorFit(
        priors=priors,
        draws=draws,
        tune=tune,
        chains=chains,
        cores=cores,
        random_seed=random_seed,
        conditional=conditional,
    )
    return fit.fit(data, response=response, terms=terms, group=group)


__all__ = [
    "GroupedCountDataset",
    "PosteriorFit",
    "PriorConfig",
    "build_dataset",
    "build_model",
    "fit_poisson_glmm",
]
