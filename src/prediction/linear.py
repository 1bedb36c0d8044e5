"""Propagate parameter draws through a design matrix."""

from __future__ import annotations

import numpy as np

from .errors import DimensionMismatch
from .records import DesignMatrix, ParameterSample


def evaluate_linear_predictor(sample: ParameterSample, design: DesignMatrix) -> np.ndarray:
    """Return the (M × R) linear-predictor ensemble for `sample` over `design`.

    Entry ``(m, r)`` is the dot product of draw ``m`` with row ``r``; when the
    design assigns a group to every row, the row's group deviate for draw ``m``
    is added. Such a design needs a sample carrying random-effect draws.
    """
    if sample.n_params != design.n_columns:
        raise DimensionMismatch(
            f"Parameter draws have {sample.n_params} entries but the design has {design.n_columns} columns."
        )
    if sample.names is not None and sample.names != design.column_names:
        raise DimensionMismatch(
            f"Parameter order {list(sample.names)} does not match design columns {list(design.column_names)}."
        )

    linear = sample.draws @ design.values.T

    if design.groups is None:
        return linear
    if sample.group_draws is None:
        raise DimensionMismatch("Design rows name groups but the sample carries no random-effect draws.")
    columns = np.fromiter(
        (sample.group_index(group) for group in design.groups),
        dtype=np.intp,
        count=design.n_rows,
    )
    return linear + sample.group_draws[:, columns]


__all__ = ["evaluate_linear_predictor"]
