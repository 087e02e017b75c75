from __future__ import annotations

import numpy as np
import pytest

from line_chart.data_model import Dataset, Series
from line_chart.date_utils import parse_month
from line_chart.scales import SurfaceSize

SAMPLE_TSV = (
    "name\t2000-01\t2000-02\t2000-03\t2000-04\n"
    "Akron, OH Metropolitan Statistical Area\t4.1\t4.3\t4.0\t3.9\n"
    "Bethesda-Rockville-Frederick, MD Met Div\t2.1\t\t2.3\t2.2\n"
    "Boston, MA\t2.8\tn/a\t2.9\t3.0\n"
)


def months(*labels: str) -> np.ndarray:
    return np.array([parse_month(s) for s in labels], dtype=np.float64)


@pytest.fixture
def sample_tsv() -> str:
    return SAMPLE_TSV


@pytest.fixture
def two_series() -> Dataset:
    return Dataset(
        label="% Unemployment",
        dates=months("2000-01", "2000-02", "2000-03"),
        series=(
            Series("A", [2.0, 2.0, 2.0]),
            Series("B", [8.0, 8.0, 8.0]),
        ),
    )


@pytest.fixture
def size() -> SurfaceSize:
    return SurfaceSize(width=400, height=300)
