from .data_model import Dataset, Series, LoadError, InvalidDateError
from .parse_tsv import parse_tsv, short_name
from .scales import Margins, SurfaceSize, LinearScale, TimeScale, ChartScales, build_scales
from .hit_test import bisect_center, nearest_series
from .renderer import ChartRenderer
from .interaction import HoverController, HighlightState, PointerState

__all__ = [
    "Dataset",
    "Series",
    "LoadError",
    "InvalidDateError",
    "parse_tsv",
    "short_name",
    "Margins",
    "SurfaceSize",
    "LinearScale",
    "TimeScale",
    "ChartScales",
    "build_scales",
    "bisect_center",
    "nearest_series",
    "ChartRenderer",
    "HoverController",
    "HighlightState",
    "PointerState",
]
