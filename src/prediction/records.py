"""Shared data records for parameter draws, design matrices and interval summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterator, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import DimensionMismatch


def _frozen_array(values: object, *, name: str, ndim: int) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    if arr.ndim != ndim:
        raise ValueError(f"{name} must be {ndim}-D, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class FitSummary:
    """Point estimates and sampling covariance reported by a fitted model.

    ``group_variance`` and ``group_labels`` describe a single random-intercept
    grouping factor; both are ``None`` for models without grouping structure.
    ``residual_variance`` and ``df_resid`` are only used by the analytic
    intervals and by observation-level noise.
    """

    estimates: np.ndarray
    covariance: np.ndarray
    names: Optional[Tuple[str, ...]] = None
    group_variance: Optional[float] = None
    group_labels: Optional[Tuple[Hashable, ...]] = None
    residual_variance: Optional[float] = None
    df_resid: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "estimates", _frozen_array(self.estimates, name="estimates", ndim=1))
        object.__setattr__(self, "covariance", _frozen_array(self.covariance, name="covariance", ndim=2))
        if self.names is not None:
            object.__setattr__(self, "names", tuple(self.names))
            if len(self.names) != self.estimates.shape[0]:
                raise DimensionMismatch("names must provide one label per estimate.")
        if self.group_labels is not None:
            object.__setattr__(self, "group_labels", tuple(self.group_labels))

    @property
    def n_params(self) -> int:
        return int(self.estimates.shape[0])

    @property
    def has_groups(self) -> bool:
        return self.group_variance is not None and bool(self.group_labels)


@dataclass(frozen=True)
class ParameterSample:
    """M parameter draws (rows) over P fixed-effect coefficients (columns)."""

    draws: np.ndarray
    names: Optional[Tuple[str, ...]] = None
    group_labels: Optional[Tuple[Hashable, ...]] = None
    group_draws: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        draws = _frozen_array(self.draws, name="draws", ndim=2)
        object.__setattr__(self, "draws", draws)
        if self.names is not None:
            object.__setattr__(self, "names", tuple(self.names))
            if len(self.names) != draws.shape[1]:
                raise DimensionMismatch(
                    f"names has {len(self.names)} labels but draws have {draws.shape[1]} columns."
                )

        if (self.group_labels is None) != (self.group_draws is None):
            raise ValueError("group_labels and group_draws must be supplied together.")
        if self.group_labels is not None:
            labels = tuple(self.group_labels)
            group_draws = _frozen_array(self.group_draws, name="group_draws", ndim=2)
            if group_draws.shape != (draws.shape[0], len(labels)):
                raise DimensionMismatch(
                    f"group_draws must have shape {(draws.shape[0], len(labels))}, got {group_draws.shape}"
                )
            if len(set(labels)) != len(labels):
                raise ValueError("group_labels must be unique.")
            object.__setattr__(self, "group_labels", labels)
            object.__setattr__(self, "group_draws", group_draws)

    @property
    def sample_count(self) -> int:
        return int(self.draws.shape[0])

    @property
    def n_params(self) -> int:
        return int(self.draws.shape[1])

    @property
    def has_random_effects(self) -> bool:
        return self.group_draws is not None

    def group_index(self, group: Hashable) -> int:
        """Column of `group_draws` holding the deviates for `group`."""
        if self.group_labels is None:
            raise DimensionMismatch("Sample does not carry random-effect draws.")
        try:
            return self.group_labels.index(group)
        except ValueError as exc:
            raise DimensionMismatch(f"Group {group!r} is absent from the random-effect sample.") from exc

    def random_effect(self, group: Hashable) -> np.ndarray:
        """Return the M random-effect deviates drawn for `group`."""
        idx = self.group_index(group)
        if self.group_draws is None:
            raise DimensionMismatch("Sample does not carry random-effect draws.")
        return self.group_draws[:, idx]


@dataclass(frozen=True)
class DesignMatrix:
    """Prediction rows × model terms, with a leading intercept column."""

    values: np.ndarray
    column_names: Tuple[str, ...]
    groups: Optional[Tuple[Hashable, ...]] = None

    def __post_init__(self) -> None:
        values = _frozen_array(self.values, name="values", ndim=2)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "column_names", tuple(self.column_names))
        if len(self.column_names) != values.shape[1]:
            raise DimensionMismatch(
                f"{len(self.column_names)} column names supplied for {values.shape[1]} columns."
            )
        if self.groups is not None:
            object.__setattr__(self, "groups", tuple(self.groups))
            if len(self.groups) != values.shape[0]:
                raise DimensionMismatch(
                    f"groups has {len(self.groups)} entries but the design has {values.shape[0]} rows."
                )

    @property
    def n_rows(self) -> int:
        return int(self.values.shape[0])

    @property
    def n_columns(self) -> int:
        return int(self.values.shape[1])


@dataclass(frozen=True)
class PredictionInterval:
    """Summary for a single prediction point."""

    estimate: float
    lower: float
    upper: float


@dataclass(frozen=True)
class IntervalSummary:
    """Point estimates and bounds, one entry per design row."""

    estimate: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    quantiles: Tuple[float, float]

    def __post_init__(self) -> None:
        for field_name in ("estimate", "lower", "upper"):
            object.__setattr__(self, field_name, _frozen_array(getattr(self, field_name), name=field_name, ndim=1))
        if not self.estimate.shape == self.lower.shape == self.upper.shape:
            raise DimensionMismatch("estimate, lower and upper must share a length.")

    def __len__(self) -> int:
        return int(self.estimate.shape[0])

    def __iter__(self) -> Iterator[PredictionInterval]:
        for estimate, lower, upper in zip(self.estimate, self.lower, self.upper):
            yield PredictionInterval(estimate=float(estimate), lower=float(lower), upper=float(upper))

    def rows(self) -> Sequence[PredictionInterval]:
        return list(self)

    def to_frame(self, covariate: Optional[Sequence[float]] = None, name: str = "x") -> pd.DataFrame:
        """Export as a DataFrame, optionally with the covariate the rows were built from."""
        columns: dict[str, object] = {}
        if covariate is not None:
            if len(covariate) != len(self):
                raise DimensionMismatch("covariate must align with the summary rows.")
            columns[name] = list(covariate)
        columns.update({"estimate": self.estimate, "lower": self.lower, "upper": self.upper})
        return pd.DataFrame(columns)


__all__ = [
    "DesignMatrix",
    "FitSummary",
    "IntervalSummary",
    "ParameterSample",
    "PredictionInterval",
]
