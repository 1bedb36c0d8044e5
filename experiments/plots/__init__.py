"""Plotting utilities for experiment results."""

from .prediction_bands import plot_prediction_bands
from .save_config import PlotSaveConfig, PlotTarget

__all__ = [
    "plot_prediction_bands",
    "PlotSaveConfig",
    "PlotTarget",
]
