from __future__ import annotations

import bisect
from typing import Optional, Sequence

import numpy as np

from .data_model import Dataset


def bisect_center(dates: Sequence[float], t: float) -> int:
    """
    Index of the element of sorted ``dates`` closest to ``t``.

    Exact midpoints resolve to the lower index; queries outside the range
    resolve to the first or last index.
    """
    n = len(dates)
    if n == 0:
        raise ValueError("bisect_center needs at least one date.")
    i = bisect.bisect_left(dates, t)
    if i <= 0:
        return 0
    if i >= n:
        return n - 1
    if t - dates[i - 1] <= dates[i] - t:
        return i - 1
    return i


def nearest_series(dataset: Dataset, i: int, value: float) -> Optional[int]:
    """
    Index of the series whose value at date-index ``i`` is closest to ``value``.

    NaN entries never win; ties go to the lowest series index. Returns None
    when no series has an observation at ``i``.
    """
    col = dataset.column(i)
    if col.size == 0:
        return None
    dist = np.abs(col - value)
    if not np.any(np.isfinite(dist)):
        return None
    # nanargmin returns the first minimum
    dist[~np.isfinite(dist)] = np.nan
    return int(np.nanargmin(dist))
