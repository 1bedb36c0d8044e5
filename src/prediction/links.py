"""Inverse link functions mapping linear predictors to the response scale."""

from __future__ import annotations

import warnings
from typing import Callable, Literal

import numpy as np

from .errors import LinkClampWarning

LinkName = Literal["identity", "log", "logit"]
InverseLink = Callable[[np.ndarray], np.ndarray]

# exp(±700) stays inside float64 range; beyond it the logistic transform saturates anyway.
LOGIT_CLAMP = 700.0


def _identity(linear: np.ndarray) -> np.ndarray:
    return np.array(linear, dtype=np.float64)


def _exp(linear: np.ndarray) -> np.ndarray:
    return np.exp(linear)


def _logistic(linear: np.ndarray) -> np.ndarray:
    n_clamped = int(np.count_nonzero(np.abs(linear) > LOGIT_CLAMP))
    clipped = np.clip(linear, -LOGIT_CLAMP, LOGIT_CLAMP)
    if n_clamped:
        warnings.warn(
            f"{n_clamped} linear predictor value(s) exceeded |{LOGIT_CLAMP}| and were clamped "
            "before the logistic transform.",
            LinkClampWarning,
            stacklevel=3,
        )
    return 1.0 / (1.0 + np.exp(-clipped))


INVERSE_LINKS: dict[LinkName, InverseLink] = {
    "identity": _identity,
    "log": _exp,
    "logit": _logistic,
}


def get_inverse_link(name: LinkName) -> InverseLink:
    """Return the inverse link registered under `name`."""
    try:
        return INVERSE_LINKS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown link '{name}'. Available: {list(INVERSE_LINKS)}") from exc


def apply_inverse_link(linear: np.ndarray, link: LinkName = "identity") -> np.ndarray:
    """Transform a linear-predictor ensemble element-wise to the response scale."""
    return get_inverse_link(link)(np.asarray(linear, dtype=np.float64))


__all__ = ["INVERSE_LINKS", "LOGIT_CLAMP", "InverseLink", "LinkName", "apply_inverse_link", "get_inverse_link"]
