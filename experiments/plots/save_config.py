"""Where and how experiment figures are written to disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Tuple

PlotFormat = Literal["png", "html"]


@dataclass(frozen=True)
class PlotTarget:
    """Output files for a single figure."""

    directory: Path
    slug: str
    formats: Tuple[PlotFormat, ...] = ("png", "html")

    def path_for(self, fmt: PlotFormat) -> Path:
        return self.directory / f"{self.slug}.{fmt}"

    def write(self, fig: Any) -> Tuple[Path, ...]:
        """Write `fig` in every requested format and return the written paths."""
        self.directory.mkdir(parents=True, exist_ok=True)
        written = []
        for fmt in self.formats:
            path = self.path_for(fmt)
            if fmt == "png":
                fig.write_image(str(path), engine="kaleido")
            else:
                fig.write_html(str(path), include_plotlyjs="cdn", full_html=True)
            written.append(path)
        return tuple(written)


@dataclass(frozen=True)
class PlotSaveConfig:
    """Groups a run's figures under ``base_dir / run_tag``."""

    base_dir: Path
    run_tag: str
    save_static: bool = True
    save_html: bool = True

    def for_plot(self, slug: str) -> PlotTarget:
        formats: Tuple[PlotFormat, ...] = tuple(
            fmt for fmt, enabled in (("png", self.save_static), ("html", self.save_html)) if enabled
        )
        return PlotTarget(directory=self.base_dir / self.run_tag, slug=slug, formats=formats)


__all__ = ["PlotFormat", "PlotSaveConfig", "PlotTarget"]
