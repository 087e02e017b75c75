from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from .data_model import Dataset, Series
from .scales import ChartScales, SurfaceSize
from .surface import ImageSurface

logger = logging.getLogger(__name__)

DEFAULT_STROKE = "steelblue"
DIM_STROKE = "#ddd"
LINE_WIDTH = 1.5
TICK_SIZE = 6
TICK_PADDING = 3
FONT_SIZE = 10
AXIS_COLOR = "black"

PATH_STYLE = {
    "stroke": DEFAULT_STROKE,
    "width": LINE_WIDTH,
    "capstyle": "round",
    "joinstyle": "round",
    "blend": "multiply",
}


def series_tag(i: int) -> str:
    return f"series-{i}"


def path_runs(series: Series, dates: np.ndarray, scales: ChartScales) -> List[List[Tuple[float, float]]]:
    """Pixel polylines for one series; every NaN breaks the line."""
    runs: List[List[Tuple[float, float]]] = []
    cur: List[Tuple[float, float]] = []
    for t, v in zip(dates, series.values):
        if not np.isfinite(v):
            if cur:
                runs.append(cur)
                cur = []
            continue
        cur.append((scales.x.value_to_px(float(t)), scales.y.value_to_px(float(v))))
    if cur:
        runs.append(cur)
    return runs


class ChartRenderer:
    """
    Draws the chart into a surface it owns, and applies the hover styling.

    ``draw`` always clears the surface first, so repeated calls never stack
    stale axes or paths.
    """

    def __init__(self, surface) -> None:
        self.surface = surface
        self.dataset: Optional[Dataset] = None
        self.scales: Optional[ChartScales] = None
        self.size: Optional[SurfaceSize] = None

    # ---------- full redraw ----------
    def draw(self, dataset: Dataset, scales: ChartScales, size: SurfaceSize) -> None:
        self.dataset, self.scales, self.size = dataset, scales, size
        s = self.surface
        s.clear()
        s.resize(size.width, size.height)
        self._draw_x_axis()
        self._draw_y_axis()
        self._draw_paths()
        self._draw_marker()
        logger.debug("draw: %d series at %gx%g", len(dataset.series), size.width, size.height)

    def _draw_x_axis(self) -> None:
        s, x, size = self.surface, self.scales.x, self.size
        y0 = size.height - size.margins.bottom
        tags = ("axis", "x-axis")
        # tickSizeOuter(0): the domain line has no end caps
        s.line([(x.p0, y0), (x.p1, y0)], tags=tags, stroke=AXIS_COLOR, width=1)
        count = size.width / 80
        for t in x.ticks(count):
            px = x.value_to_px(t)
            s.line([(px, y0), (px, y0 + TICK_SIZE)], tags=tags, stroke=AXIS_COLOR, width=1)
            s.text(px, y0 + TICK_SIZE + TICK_PADDING, x.tick_format(t, count),
                   tags=tags, anchor="n", font_size=FONT_SIZE, fill=AXIS_COLOR)

    def _draw_y_axis(self) -> None:
        s, y, size = self.surface, self.scales.y, self.size
        x0 = size.margins.left
        tags = ("axis", "y-axis")
        ticks = y.ticks()
        for v in ticks:
            py = y.value_to_px(v)
            s.line([(x0 - TICK_SIZE, py), (x0, py)], tags=tags, stroke=AXIS_COLOR, width=1)
            s.text(x0 - TICK_SIZE - TICK_PADDING, py, y.tick_format(v),
                   tags=tags, anchor="e", font_size=FONT_SIZE, fill=AXIS_COLOR)
        if ticks:
            # unit label beside the top tick
            py = y.value_to_px(ticks[-1])
            s.text(x0 + 3, py, self.dataset.label, tags=tags + ("unit-label",),
                   anchor="w", font_size=FONT_SIZE, font_weight="bold", fill=AXIS_COLOR)

    def _draw_paths(self) -> None:
        s, ds = self.surface, self.dataset
        for i, series in enumerate(ds.series):
            for run in path_runs(series, ds.dates, self.scales):
                if len(run) == 1:
                    # an isolated observation still shows as a round-capped dot
                    run = run * 2
                s.line(run, tags=("path", series_tag(i)), **PATH_STYLE)

    def _draw_marker(self) -> None:
        s = self.surface
        s.circle(0, 0, 2.5, tags=("marker", "marker-dot"), fill="black", hidden=True)
        s.text(0, -8, "", tags=("marker", "marker-label"), anchor="s",
               font_size=FONT_SIZE, fill="black", hidden=True)

    # ---------- hover styling ----------
    def dim_all(self) -> None:
        self.surface.restyle("path", stroke=DIM_STROKE, blend=None)

    def highlight(self, i: int) -> None:
        s = self.surface
        s.restyle("path", stroke=DIM_STROKE, blend=None)
        s.restyle(series_tag(i), stroke=DEFAULT_STROKE)
        s.raise_tag(series_tag(i))
        s.raise_tag("marker")

    def reset(self) -> None:
        self.surface.restyle("path", stroke=DEFAULT_STROKE, blend="multiply")

    def move_marker(self, x: float, y: float, label: str) -> None:
        s = self.surface
        s.place("marker", x, y)
        s.set_text("marker-label", label)

    def set_marker_visible(self, visible: bool) -> None:
        self.surface.set_hidden("marker", not visible)

    # ---------- export ----------
    def export_png(self, path: str) -> None:
        if self.dataset is None:
            raise ValueError("Nothing to export: no dataset has been drawn.")
        render_image(self.dataset, self.scales, self.size).save(path)
        logger.info("exported chart to %s", path)


def render_image(dataset: Dataset, scales: ChartScales, size: SurfaceSize) -> Image.Image:
    """Draw the chart off-screen and return it as a Pillow image."""
    surface = ImageSurface(int(size.width), int(size.height))
    ChartRenderer(surface).draw(dataset, scales, size)
    return surface.render()
