from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

from .data_model import Dataset
from .date_utils import add_months, format_date, month_floor, to_datetime


@dataclass(frozen=True)
class Margins:
    top: float = 20
    right: float = 20
    bottom: float = 30
    left: float = 30


@dataclass(frozen=True)
class SurfaceSize:
    width: float
    height: float
    margins: Margins = field(default_factory=Margins)


def tick_step(start: float, stop: float, count: float) -> float:
    """Step of the form 1, 2 or 5 x 10^k that splits [start, stop] into about ``count`` parts."""
    span = abs(stop - start)
    if count <= 0 or span == 0 or not math.isfinite(span):
        return 0.0
    step = span / count
    power = math.floor(math.log10(step))
    error = step / (10 ** power)
    if error >= math.sqrt(50):
        factor = 10
    elif error >= math.sqrt(10):
        factor = 5
    elif error >= math.sqrt(2):
        factor = 2
    else:
        factor = 1
    return factor * (10 ** power)


@dataclass
class LinearScale:
    # value anchors
    v0: float
    v1: float
    # pixel anchors
    p0: float
    p1: float

    # Inputs outside [v0, v1] / [p0, p1] extrapolate linearly; nothing is clamped.
    def value_to_px(self, v: float) -> float:
        if self.v0 == self.v1:
            return (self.p0 + self.p1) / 2
        t = (v - self.v0) / (self.v1 - self.v0)
        return self.p0 + t * (self.p1 - self.p0)

    def px_to_value(self, p: float) -> float:
        if self.p0 == self.p1 or self.v0 == self.v1:
            return self.v0
        t = (p - self.p0) / (self.p1 - self.p0)
        return self.v0 + t * (self.v1 - self.v0)

    def nice(self, count: int = 10) -> "LinearScale":
        """Extend the value domain outward to round tick multiples."""
        lo, hi = sorted((self.v0, self.v1))
        prev = None
        for _ in range(10):
            step = tick_step(lo, hi, count)
            if step == 0 or step == prev:
                break
            lo = math.floor(lo / step) * step
            hi = math.ceil(hi / step) * step
            prev = step
        if self.v0 <= self.v1:
            self.v0, self.v1 = lo, hi
        else:
            self.v0, self.v1 = hi, lo
        return self

    def ticks(self, count: int = 10) -> List[float]:
        lo, hi = sorted((self.v0, self.v1))
        step = tick_step(lo, hi, count)
        if step == 0:
            return [lo]
        i0 = math.ceil(lo / step - 1e-9)
        i1 = math.floor(hi / step + 1e-9)
        return [round(i * step, 12) for i in range(i0, i1 + 1)]

    def tick_format(self, v: float, count: int = 10) -> str:
        lo, hi = sorted((self.v0, self.v1))
        step = tick_step(lo, hi, count)
        if step == 0 or step >= 1:
            return f"{v:.0f}"
        decimals = max(0, -math.floor(math.log10(step)))
        return f"{v:.{decimals}f}"


# Candidate tick intervals for the time axis, in months.
TIME_INTERVALS = (1, 3, 6, 12, 24, 60, 120, 240, 600)
_SECONDS_PER_MONTH = 30.436875 * 86400


@dataclass
class TimeScale(LinearScale):
    """Linear scale over UTC unix seconds with calendar-aligned ticks."""

    def interval_months(self, count: float) -> int:
        lo, hi = sorted((self.v0, self.v1))
        months = (hi - lo) / _SECONDS_PER_MONTH
        if count <= 0 or months <= 0:
            return TIME_INTERVALS[0]
        return min(TIME_INTERVALS, key=lambda m: abs(months / m - count))

    def ticks(self, count: int = 10) -> List[float]:
        lo, hi = sorted((self.v0, self.v1))
        step = self.interval_months(count)
        start = month_floor(to_datetime(lo))
        index = start.year * 12 + start.month - 1
        start = add_months(start, (-index) % step)
        if start.timestamp() < lo:
            start = add_months(start, step)
        out: List[float] = []
        cur = start
        while cur.timestamp() <= hi:
            out.append(cur.timestamp())
            cur = add_months(cur, step)
        return out

    def tick_format(self, v: float, count: int = 10) -> str:
        dt = to_datetime(v)
        if dt.month == 1:
            return format_date(v, "%Y")
        return format_date(v, "%b")


@dataclass
class ChartScales:
    x: TimeScale
    y: LinearScale


def build_scales(dataset: Dataset, surface: SurfaceSize) -> ChartScales:
    m = surface.margins
    d0, d1 = dataset.date_extent()
    x = TimeScale(v0=d0, v1=d1, p0=m.left, p1=surface.width - m.right)

    ymax = dataset.value_max()
    if not ymax > 0:
        # nothing observed above zero; keep a unit domain so the axis still reads
        ymax = 1.0
    y = LinearScale(v0=0.0, v1=ymax, p0=surface.height - m.bottom, p1=m.top).nice()
    return ChartScales(x=x, y=y)
