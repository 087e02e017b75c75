from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .data_model import Dataset
from .hit_test import bisect_center, nearest_series
from .renderer import ChartRenderer
from .scales import ChartScales

logger = logging.getLogger(__name__)


class PointerState(str, Enum):
    IDLE = "idle"
    ENTERED = "entered"


@dataclass(frozen=True)
class HighlightState:
    index: int          # date-index nearest the pointer
    series: int         # index of the nearest series
    date: float         # pointer x inverted to unix seconds
    value: float        # pointer y inverted to data units


class HoverController:
    """
    Hover-to-highlight over a drawn chart.

    Every pointer move inverts the pointer through the scales, snaps to the
    nearest date, picks the series closest to the pointer there and restyles
    the renderer's paths accordingly.
    """

    def __init__(self, dataset: Dataset, scales: ChartScales, renderer: ChartRenderer) -> None:
        self.dataset = dataset
        self.scales = scales
        self.renderer = renderer
        self.state = PointerState.IDLE
        self.highlight: Optional[HighlightState] = None

    def pointer_enter(self) -> None:
        self.renderer.dim_all()
        self.renderer.set_marker_visible(True)
        self.state = PointerState.ENTERED

    def pointer_move(self, px: float, py: float) -> Optional[HighlightState]:
        if self.state is PointerState.IDLE:
            self.pointer_enter()

        ds, sc = self.dataset, self.scales
        date = sc.x.px_to_value(px)
        value = sc.y.px_to_value(py)
        i = bisect_center(ds.dates, date)
        s = nearest_series(ds, i, value)
        if s is None:
            self.highlight = None
            self.renderer.dim_all()
            self.renderer.set_marker_visible(False)
            return None

        self.renderer.highlight(s)
        self.renderer.set_marker_visible(True)
        series = ds.series[s]
        self.renderer.move_marker(
            sc.x.value_to_px(float(ds.dates[i])),
            sc.y.value_to_px(float(series.values[i])),
            series.name,
        )
        self.highlight = HighlightState(index=i, series=s, date=date, value=value)
        return self.highlight

    def pointer_leave(self) -> None:
        self.renderer.reset()
        self.renderer.set_marker_visible(False)
        self.highlight = None
        self.state = PointerState.IDLE

    # ---------- Tk wiring ----------
    def bind(self, canvas) -> None:
        canvas.bind("<Enter>", self._on_enter)
        canvas.bind("<Motion>", self._on_motion)
        canvas.bind("<Leave>", self._on_leave)

    def _on_enter(self, _event) -> None:
        self.pointer_enter()

    def _on_motion(self, event) -> None:
        # coordinates come from the widget that raised the event
        w = event.widget
        self.pointer_move(w.canvasx(event.x), w.canvasy(event.y))

    def _on_leave(self, _event) -> None:
        self.pointer_leave()
