import math

import pytest

from line_chart.data_model import Dataset, Series
from line_chart.hit_test import bisect_center, nearest_series

from .conftest import months


def test_bisect_center_tie_prefers_earlier_index():
    dates = months("2000-01", "2000-02", "2000-03")
    mid = (dates[0] + dates[1]) / 2
    assert bisect_center(dates, mid) == 0
    assert bisect_center(dates, mid + 1) == 1


def test_bisect_center_exact_and_out_of_range():
    dates = months("2000-01", "2000-02", "2000-03")
    assert bisect_center(dates, dates[2]) == 2
    assert bisect_center(dates, dates[0] - 1e6) == 0
    assert bisect_center(dates, dates[2] + 1e6) == 2


def test_bisect_center_empty():
    with pytest.raises(ValueError):
        bisect_center([], 1.0)


def _ds(*columns):
    dates = months(*[f"2000-{m:02d}" for m in range(1, len(columns[0]) + 1)])
    return Dataset(label="x", dates=dates, series=tuple(Series(f"s{i}", c) for i, c in enumerate(columns)))


def test_nearest_series_unambiguous():
    ds = _ds([2.0], [8.0])
    assert nearest_series(ds, 0, 2.1) == 0
    assert nearest_series(ds, 0, 7.0) == 1


def test_nearest_series_tie_goes_to_lowest_index():
    ds = _ds([1.0], [3.0])
    assert nearest_series(ds, 0, 2.0) == 0


def test_nearest_series_skips_nan():
    ds = _ds([math.nan], [8.0])
    assert nearest_series(ds, 0, 0.0) == 1


def test_nearest_series_all_nan_or_empty():
    assert nearest_series(_ds([math.nan], [math.nan]), 0, 1.0) is None
    empty = Dataset(label="x", dates=months("2000-01"), series=())
    assert nearest_series(empty, 0, 1.0) is None
