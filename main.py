from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from experiments.glmm_intervals import GLMM_PREDICTION_POINTS, run_glmm_intervals
from experiments.lm_intervals import LM_PREDICTION_POINTS, ScenarioResult, run_lm_intervals
from experiments.plots import PlotSaveConfig, plot_prediction_bands
from src.prediction import DEFAULT_QUANTILES, DEFAULT_SAMPLE_COUNT

app = typer.Typer()


def _save_config(plots_root: Optional[Path], scenario: str, plots_tag: Optional[str], save_static: bool, save_html: bool):
    if not plots_root:
        return None
    tag = plots_tag or datetime.now().strftime("%Y%m%d-%H%M%S")
    base_dir = plots_root / scenario
    print(f"[plots] Saving figures under {base_dir / tag}")
    return PlotSaveConfig(base_dir=base_dir, run_tag=tag, save_static=save_static, save_html=save_html)


def _plot(result: ScenarioResult, title: str, slug: str, save_config: Optional[PlotSaveConfig], show: bool) -> None:
    if not show and save_config is None:
        return
    plot_prediction_bands(
        result.observed,
        result.x_new,
        {"simulated": result.simulated, "analytic": result.analytic},
        title=title,
        save_to=save_config.for_plot(slug) if save_config else None,
    )


@app.command()
def lm(
    samples: int = typer.Option(DEFAULT_SAMPLE_COUNT, "--samples", help="Number of Monte Carlo draws."),
    seed: int = typer.Option(48460, "--seed", help="Seed for simulation and sampling."),
    lower: float = typer.Option(DEFAULT_QUANTILES[0], "--lower", help="Lower quantile level."),
    upper: float = typer.Option(DEFAULT_QUANTILES[1], "--upper", help="Upper quantile level."),
    x_new: List[float] = typer.Option(
        list(LM_PREDICTION_POINTS),
        "--x",
        help="Covariate values to predict at (repeat the option).",
        show_default=True,
    ),
    observation_noise: bool = typer.Option(
        False,
        "--observation-noise",
        help="Summarise new observations instead of the expected response.",
    ),
    plots_root: Optional[Path] = typer.Option(None, "--plots-root", help="Directory where plots should be saved."),
    plots_tag: Optional[str] = typer.Option(None, "--plots-tag", help="Folder suffix for this run (defaults to timestamp)."),
    save_static: bool = typer.Option(True, help="Write static PNG snapshots when saving plots."),
    save_html: bool = typer.Option(True, help="Write interactive HTML plots when saving."),
    show: bool = typer.Option(False, "--show", help="Open the figure in a browser when not saving."),
) -> None:
    """
    Simulate a straight-line dataset, fit OLS and print simulated vs analytic intervals.
    """
    try:
        result = run_lm_intervals(
            sample_count=samples,
            seed=seed,
            quantiles=(lower, upper),
            x_new=x_new,
            observation_noise=observation_noise,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    save_config = _save_config(plots_root, "lm", plots_tag, save_static, save_html)
    _plot(result, "Linear model – prediction intervals", "lm_intervals", save_config, show)


@app.command()
def glmm(
    samples: int = typer.Option(DEFAULT_SAMPLE_COUNT, "--samples", help="Number of Monte Carlo draws."),
    seed: int = typer.Option(48460, "--seed", help="Seed for simulation, MCMC and sampling."),
    lower: float = typer.Option(DEFAULT_QUANTILES[0], "--lower", help="Lower quantile level."),
    upper: float = typer.Option(DEFAULT_QUANTILES[1], "--upper", help="Upper quantile level."),
    x_new: List[float] = typer.Option(
        list(GLMM_PREDICTION_POINTS),
        "--x",
        help="Covariate values to predict at (repeat the option).",
        show_default=True,
    ),
    backend: str = typer.Option("pymc", "--backend", help="Fitting backend (pymc or glm)."),
    group: Optional[int] = typer.Option(None, "--group", help="Predict for this group instead of a new one."),
    draws: int = typer.Option(1000, "--draws", help="Posterior draws per chain (pymc backend)."),
    tune: int = typer.Option(1000, "--tune", help="Tuning steps per chain (pymc backend)."),
    chains: int = typer.Option(2, "--chains", help="Number of MCMC chains (pymc backend)."),
    plots_root: Optional[Path] = typer.Option(None, "--plots-root", help="Directory where plots should be saved."),
    plots_tag: Optional[str] = typer.Option(None, "--plots-tag", help="Folder suffix for this run (defaults to timestamp)."),
    save_static: bool = typer.Option(True, help="Write static PNG snapshots when saving plots."),
    save_html: bool = typer.Option(True, help="Write interactive HTML plots when saving."),
    show: bool = typer.Option(False, "--show", help="Open the figure in a browser when not saving."),
) -> None:
    """
    Simulate Poisson random-intercept counts, fit them and print count-scale intervals.
    """
    if backend not in ("pymc", "glm"):
        raise typer.BadParameter(f"Unknown backend '{backend}'. Choose pymc or glm.")
    try:
        result = run_glmm_intervals(
            sample_count=samples,
            seed=seed,
            quantiles=(lower, upper),
            x_new=x_new,
            backend=backend,  # type: ignore[arg-type]
            group=group,
            draws=draws,
            tune=tune,
            chains=chains,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    save_config = _save_config(plots_root, f"glmm_{backend}", plots_tag, save_static, save_html)
    _plot(result, f"Poisson GLMM ({backend}) – prediction intervals", "glmm_intervals", save_config, show)


if __name__ == "__main__":
    app()
