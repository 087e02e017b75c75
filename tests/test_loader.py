import pytest
import requests

from line_chart import loader
from line_chart.config import ChartSettings
from line_chart.data_model import InvalidDateError, LoadError


class FakeResponse:
    def __init__(self, text, status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def sleeps(monkeypatch):
    delays = []
    monkeypatch.setattr(loader.time, "sleep", delays.append)
    return delays


def test_fetch_local_file(tmp_path, sample_tsv):
    path = tmp_path / "data.tsv"
    path.write_text(sample_tsv, encoding="utf-8")
    assert loader.fetch_text(str(path)) == sample_tsv


def test_fetch_url_retries_with_backoff(monkeypatch, sleeps, sample_tsv):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        if len(calls) < 3:
            raise requests.ConnectionError("down")
        return FakeResponse(sample_tsv)

    monkeypatch.setattr(loader.requests, "get", fake_get)
    text = loader.fetch_text("https://example.org/u.tsv", retries=3, backoff=0.5, timeout=2)
    assert text == sample_tsv
    assert calls == [("https://example.org/u.tsv", 2)] * 3
    assert sleeps == [0.5, 1.0]


def test_fetch_gives_up_with_load_error(monkeypatch, sleeps):
    monkeypatch.setattr(loader.requests, "get", lambda url, timeout: FakeResponse("", status=404))
    with pytest.raises(LoadError, match="404"):
        loader.fetch_text("http://example.org/missing.tsv", retries=2, backoff=0.1)
    assert sleeps == [0.1]


def test_missing_local_file(tmp_path, sleeps):
    with pytest.raises(LoadError):
        loader.fetch_text(str(tmp_path / "nope.tsv"), retries=1)
    assert sleeps == []


def test_load_dataset_uses_settings_label(tmp_path, sample_tsv):
    path = tmp_path / "data.tsv"
    path.write_text(sample_tsv, encoding="utf-8")
    ds = loader.load_dataset(str(path), ChartSettings(label="Rate"))
    assert ds.label == "Rate"
    assert len(ds.series) == 3


def test_load_dataset_bad_header(tmp_path):
    path = tmp_path / "bad.tsv"
    path.write_text("name\tJanuary\nA\t1\n", encoding="utf-8")
    with pytest.raises(InvalidDateError):
        loader.load_dataset(str(path))


def test_unreadable_path_becomes_load_error(sleeps):
    with pytest.raises(LoadError, match="null"):
        loader.fetch_text("bad\x00path.tsv", retries=1)


def test_bad_retry_settings_become_load_error(tmp_path, sample_tsv):
    path = tmp_path / "data.tsv"
    path.write_text(sample_tsv, encoding="utf-8")
    with pytest.raises(LoadError, match="retry settings"):
        loader.fetch_text(str(path), retries="three")
