"""Common fitting interfaces and DataFrame checks shared by the adapters."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from src.prediction.sampler import ParameterSource

# Adapters satisfy the pipeline's ParameterSource protocol.
FittedModel = ParameterSource


def require_columns(data: pd.DataFrame, columns: Iterable[str], *, name: str = "data") -> None:
    """Raise ValueError if `data` lacks any of `columns`."""
    missing = [column for column in columns if column not in data.columns]
    if missing:
        raise ValueError(f"{name} is missing columns {missing}; available: {list(data.columns)}")


def require_finite(values: np.ndarray, *, name: str) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        raise ValueError(f"{name} cannot be empty")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains non-finite entries.")
    return arr


__all__ = ["FittedModel", "require_columns", "require_finite"]
