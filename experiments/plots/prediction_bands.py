"""Observed data with Monte Carlo and analytic prediction bands."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

import pandas as pd
import plotly.express as px

from src.prediction.records import IntervalSummary
from .save_config import PlotTarget

__all__ = ["plot_prediction_bands"]


def plot_prediction_bands(
    observed: pd.DataFrame,
    x_new: Sequence[float],
    intervals: Mapping[str, IntervalSummary],
    title: str,
    x: str = "x",
    y: str = "y",
    save_to: Optional[PlotTarget] = None,
) -> None:
    """Scatter the observations and overlay one estimate line plus bounds per method."""
    if observed.empty and not intervals:
        return

    frames = []
    for method, summary in intervals.items():
        df = summary.to_frame(covariate=x_new, name=x)
        df["method"] = method
        frames.append(df)

    fig = px.scatter(observed, x=x, y=y, opacity=0.4, title=title)
    fig.update_traces(marker=dict(color="grey"), name="observed", showlegend=True)

    if frames:
        bands = pd.concat(frames, ignore_index=True)
        palette = px.colors.qualitative.Plotly
        for idx, (method, df) in enumerate(bands.groupby("method", sort=False)):
            colour = palette[idx % len(palette)]
            fig.add_scatter(
                x=df[x],
                y=df["estimate"],
                mode="lines+markers",
                name=f"{method} estimate",
                line=dict(color=colour),
            )
            for bound in ("lower", "upper"):
                fig.add_scatter(
                    x=df[x],
                    y=df[bound],
                    mode="lines",
                    name=f"{method} {bound}",
                    line=dict(color=colour, dash="dash"),
                )

    if save_to:
        save_to.write(fig)
    else:
        fig.show()
