from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np


class LoadError(RuntimeError):
    """The data source could not be fetched or its content could not be parsed."""


class InvalidDateError(ValueError):
    """A header date is malformed, or the date axis is not strictly increasing."""


@dataclass(frozen=True, eq=False)
class Series:
    name: str
    # float64, NaN marks a missing observation
    values: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        arr = np.array(self.values, dtype=np.float64)
        arr.setflags(write=False)
        object.__setattr__(self, "values", arr)

    def __len__(self) -> int:
        return int(self.values.shape[0])


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    A set of named series sharing one ordered date axis.

    ``dates`` holds UTC unix seconds and must be finite and strictly increasing.
    Every series carries exactly one value per date.
    """
    label: str
    dates: np.ndarray = field(repr=False)
    series: Tuple[Series, ...] = ()

    def __post_init__(self) -> None:
        dates = np.array(self.dates, dtype=np.float64)
        if dates.ndim != 1 or dates.size == 0:
            raise InvalidDateError("Dataset needs at least one date.")
        if not np.all(np.isfinite(dates)):
            raise InvalidDateError("Dataset dates must all be valid.")
        if dates.size > 1 and not np.all(np.diff(dates) > 0):
            raise InvalidDateError("Dataset dates must be strictly increasing.")
        dates.setflags(write=False)
        object.__setattr__(self, "dates", dates)

        series = tuple(self.series)
        for s in series:
            if len(s) != dates.size:
                raise ValueError(
                    f"Series {s.name!r} has {len(s)} values for {dates.size} dates."
                )
        object.__setattr__(self, "series", series)

    def __len__(self) -> int:
        return int(self.dates.size)

    def date_extent(self) -> Tuple[float, float]:
        return float(self.dates[0]), float(self.dates[-1])

    def value_max(self) -> float:
        """Max over every series ignoring NaN; 0.0 when nothing is observed."""
        if not self.series:
            return 0.0
        stacked = np.vstack([s.values for s in self.series])
        if not np.any(np.isfinite(stacked)):
            return 0.0
        return float(np.nanmax(stacked))

    def column(self, i: int) -> np.ndarray:
        """Values of every series at date-index ``i``, in series order."""
        if not self.series:
            return np.empty(0, dtype=np.float64)
        return np.array([s.values[i] for s in self.series], dtype=np.float64)
