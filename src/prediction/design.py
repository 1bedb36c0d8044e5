"""Prediction design matrices built from covariate values and a term list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import DimensionMismatch, MissingCovariate, UnknownTerm
from .records import DesignMatrix

INTERCEPT = "Intercept"
INTERACTION_SEP = ":"

CovariateInput = Union[Sequence[float], np.ndarray, Mapping[str, Sequence[float]]]


@dataclass(frozen=True)
class ModelTerms:
    """Ordered model terms; ``"x:z"`` denotes the product of ``x`` and ``z``."""

    terms: Tuple[str, ...] = ("x",)

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", tuple(self.terms))
        for term in self.terms:
            if not term or any(not part for part in term.split(INTERACTION_SEP)):
                raise ValueError(f"Malformed term {term!r}.")
            if term == INTERCEPT:
                raise ValueError("The intercept column is always included; do not list it as a term.")
        if len(set(self.terms)) != len(self.terms):
            raise ValueError("Model terms must be unique.")

    @property
    def variables(self) -> Tuple[str, ...]:
        """Distinct covariate names referenced by the terms, in first-seen order."""
        seen: Dict[str, None] = {}
        for term in self.terms:
            for part in term.split(INTERACTION_SEP):
                seen.setdefault(part, None)
        return tuple(seen)

    @property
    def column_names(self) -> Tuple[str, ...]:
        return (INTERCEPT, *self.terms)


def build_design_matrix(
    covariates: CovariateInput,
    terms: Optional[ModelTerms] = None,
    groups: Optional[Sequence[Hashable]] = None,
) -> DesignMatrix:
    """Evaluate `terms` at each prediction point.

    Args:
        covariates: A sequence of values for a single-predictor model, or a
            mapping from covariate name to one value per prediction point.
            For an intercept-only model any sequence works and only its
            length is used.
        terms: Model term specification; defaults to a single ``x`` slope.
        groups: Optional group identifier per prediction point for mixed models.

    Returns:
        DesignMatrix whose first column is 1.0 followed by one column per term.
    """
    model_terms = terms or ModelTerms()
    columns = _resolve_covariates(covariates, model_terms)
    if columns:
        n_rows = len(next(iter(columns.values())))
    elif isinstance(covariates, Mapping):
        n_rows = 0
    else:
        n_rows = len(covariates)

    values = np.empty((n_rows, len(model_terms.column_names)), dtype=np.float64)
    values[:, 0] = 1.0
    for col, term in enumerate(model_terms.terms, start=1):
        product = np.ones(n_rows, dtype=np.float64)
        for part in term.split(INTERACTION_SEP):
            product = product * columns[part]
        values[:, col] = product

    if groups is not None and len(groups) != n_rows:
        raise DimensionMismatch(f"groups has {len(groups)} entries for {n_rows} prediction points.")
    return DesignMatrix(values=values, column_names=model_terms.column_names, groups=groups)


def _resolve_covariates(covariates: CovariateInput, model_terms: ModelTerms) -> Dict[str, np.ndarray]:
    variables = model_terms.variables
    if isinstance(covariates, Mapping):
        unknown = [name for name in covariates if name not in variables]
        if unknown:
            raise UnknownTerm(f"Terms {unknown} are not part of the model (known: {list(variables)}).")
        missing = [name for name in variables if name not in covariates]
        if missing:
            raise MissingCovariate(f"No values supplied for {missing}.")
        raw = {name: covariates[name] for name in variables}
    else:
        if not variables:
            return {}
        if len(variables) > 1:
            raise MissingCovariate(
                f"A bare value sequence only fits single-predictor models; supply a mapping for {list(variables)}."
            )
        raw = {variables[0]: covariates}

    columns: Dict[str, np.ndarray] = {}
    for name, values in raw.items():
        arr = np.asarray(values, dtype=np.float64)
        if arr.ndim != 1:
            raise ValueError(f"Covariate {name!r} must be 1-D, got shape {arr.shape}")
        columns[name] = arr

    lengths = {name: arr.shape[0] for name, arr in columns.items()}
    if len(set(lengths.values())) > 1:
        raise DimensionMismatch(f"Covariate sequences differ in length: {lengths}")
    return columns


__all__ = ["INTERCEPT", "CovariateInput", "ModelTerms", "build_design_matrix"]
