from __future__ import annotations

import csv
import io
import logging
import math
import re
from typing import List

import numpy as np

from .data_model import Dataset, LoadError, Series
from .date_utils import MONTH_FORMAT, parse_month

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "% Unemployment"

# "Bethesda-Rockville-Frederick, MD Met Div" -> "Bethesda-Rockville-Frederick MD"
_NAME_TAIL = re.compile(r", ([\w-]+).*")
# plain decimals only: no inf, nan, hex or digit separators
_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def short_name(label: str) -> str:
    return _NAME_TAIL.sub(r" \1", label or "", count=1)


def _to_float(cell: str) -> float:
    cell = (cell or "").strip()
    if not _DECIMAL.fullmatch(cell):
        return math.nan
    v = float(cell)
    # "1e999" is decimal but overflows
    return v if math.isfinite(v) else math.nan


def parse_tsv(text: str, *, label: str = DEFAULT_LABEL, date_format: str = MONTH_FORMAT) -> Dataset:
    """
    Parse tab-separated text into a Dataset.

    The header row is ``[label-column, date1, date2, ...]``; every other row is
    ``[series-label, v1, v2, ...]``. Cells that are not numbers become NaN.
    Header dates that do not parse raise InvalidDateError.
    """
    reader = csv.reader(io.StringIO(text), delimiter="\t", quoting=csv.QUOTE_NONE)
    rows = [r for r in reader if any(c.strip() for c in r)]
    if not rows:
        raise LoadError("Data file is empty.")

    header = rows[0]
    columns = header[1:]
    if not columns:
        raise LoadError("Data file has no date columns.")
    dates = [parse_month(c, date_format) for c in columns]

    n = len(dates)
    series: List[Series] = []
    bad_cells = 0
    for row in rows[1:]:
        cells = row[1:1 + n]
        values = np.full(n, np.nan, dtype=np.float64)
        for i, cell in enumerate(cells):
            v = _to_float(cell)
            if math.isnan(v) and cell.strip():
                bad_cells += 1
            values[i] = v
        series.append(Series(name=short_name(row[0]), values=values))

    if bad_cells:
        logger.debug("parse_tsv: %d non-numeric cells read as NaN", bad_cells)
    logger.debug("parse_tsv: %d series x %d dates", len(series), n)
    return Dataset(label=label, dates=np.array(dates, dtype=np.float64), series=tuple(series))
