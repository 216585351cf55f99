"""
Function plotter drawn on a matplotlib Figure laid out in pixel coordinates.

The figure is exactly width x height pixels with (0, 0) in the top-left
corner, so the drawing maths match a plain 2D canvas. The GUI embeds the
figure with FigureCanvasTkAgg; tests can use it headless.
"""
import logging
import math
from typing import Callable, List, Optional

import numpy as np
from matplotlib.figure import Figure

from calcplot.backend.engine import CalculatorEngine
from calcplot.backend.theme import ThemeManager

logger = logging.getLogger(__name__)

PLOT_SCALE = 40  # pixels per unit
CANVAS_WIDTH = 400
CANVAS_HEIGHT = 300
CANVAS_DPI = 100


def grid_offsets(origin: float, extent: int, scale: int) -> List[float]:
    """Grid line positions every `scale` pixels outward from origin, both directions."""
    offsets = []
    for i in range(scale, extent, scale):
        offsets.append(origin + i)
        offsets.append(origin - i)
    return offsets


class GraphPlotter:
    def __init__(self, engine: CalculatorEngine, theme: ThemeManager,
                 width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT,
                 scale: int = PLOT_SCALE, dpi: int = CANVAS_DPI):
        self.engine = engine
        self.theme = theme
        self.width = width
        self.height = height
        self.scale = scale
        self.formula = ""

        self.fig = Figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        self.ax = self.fig.add_axes([0, 0, 1, 1])

    @property
    def origin(self):
        return self.width / 2, self.height / 2

    def _line_width(self, pixels: float) -> float:
        # matplotlib widths are in points
        return pixels * 72.0 / self.fig.dpi

    def sample_path(self, formula: str) -> List[np.ndarray]:
        """
        Sample the formula once per pixel column and split the curve into
        segments of (px, py) rows. A column whose value is undefined or
        non-finite ends the current segment, so the curve is never joined
        across an asymptote or a gap.
        """
        origin_x, origin_y = self.origin
        segments: List[np.ndarray] = []
        points = []
        xs = (np.arange(self.width) - origin_x) / self.scale
        for px, x in enumerate(xs):
            y = self.engine.evaluate_for_x(formula, float(x))
            py = origin_y - y * self.scale if y is not None else math.nan
            if px == 0 or not math.isfinite(py):
                # move-to: close what we have and start over
                if points:
                    segments.append(np.array(points, dtype=float))
                points = []
            if math.isfinite(py):
                points.append((px, py))
        if points:
            segments.append(np.array(points, dtype=float))
        return segments

    def _draw_background(self, colors):
        width, height = self.width, self.height
        origin_x, origin_y = self.origin

        self.fig.set_facecolor(colors["background"])
        self.ax.clear()
        self.ax.set_axis_off()
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)

        self.ax.vlines(grid_offsets(origin_x, width, self.scale), 0, height,
                       colors=colors["grid"], linewidth=self._line_width(1))
        self.ax.hlines(grid_offsets(origin_y, height, self.scale), 0, width,
                       colors=colors["grid"], linewidth=self._line_width(1))

        self.ax.axhline(origin_y, color=colors["axis"], linewidth=self._line_width(2))
        self.ax.axvline(origin_x, color=colors["axis"], linewidth=self._line_width(2))

    def draw(self, formula: Optional[str] = None) -> List[np.ndarray]:
        """
        Redraw grid, axes and (if a formula is set) the curve in the current
        theme colours. Without an argument the last formula is redrawn.
        Returns the plotted segments.
        """
        if formula is not None:
            self.formula = formula.strip()
        colors = self.theme.colors
        self._draw_background(colors)

        if not self.formula:
            return []

        segments = self.sample_path(self.formula)
        for segment in segments:
            self.ax.plot(segment[:, 0], segment[:, 1], color=colors["function"],
                         linewidth=self._line_width(2))
        if not segments:
            logger.info("Nothing to plot for f(x) = %s", self.formula)
        return segments

    def follow_theme(self, on_redraw: Optional[Callable[[], None]] = None):
        """Redraw in the new colours whenever the theme is applied."""
        def redraw(theme: str):
            self.draw()
            if on_redraw is not None:
                on_redraw()

        self.theme.subscribe(redraw)

    def export_png(self, path: str):
        self.fig.savefig(path, dpi=self.fig.dpi, facecolor=self.fig.get_facecolor())
        logger.info("Saved plot to %s", path)
