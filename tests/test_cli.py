from PIL import Image

import multiline
from line_chart.config import SOURCE_ENV, load_settings


def test_png_export(tmp_path, sample_tsv, monkeypatch):
    monkeypatch.delenv(SOURCE_ENV, raising=False)
    monkeypatch.setattr("line_chart.config.CONFIG_PATH", tmp_path / "cfg.json")
    src = tmp_path / "u.tsv"
    src.write_text(sample_tsv, encoding="utf-8")
    out = tmp_path / "u.png"

    rc = multiline.main([str(src), "--png", str(out), "--width", "320", "--height", "200"])
    assert rc == 0
    with Image.open(out) as img:
        assert img.size == (320, 200)


def test_png_export_reports_load_failure(tmp_path, monkeypatch):
    monkeypatch.delenv(SOURCE_ENV, raising=False)
    monkeypatch.setattr("line_chart.config.CONFIG_PATH", tmp_path / "cfg.json")
    monkeypatch.setattr("line_chart.loader.time.sleep", lambda _s: None)
    rc = multiline.main([str(tmp_path / "missing.tsv"), "--png", str(tmp_path / "x.png")])
    assert rc == 1


def test_save_remembers_source(tmp_path, sample_tsv, monkeypatch):
    monkeypatch.delenv(SOURCE_ENV, raising=False)
    cfg = tmp_path / "cfg.json"
    monkeypatch.setattr("line_chart.config.CONFIG_PATH", cfg)
    src = tmp_path / "u.tsv"
    src.write_text(sample_tsv, encoding="utf-8")

    rc = multiline.main([str(src), "--label", "Rate", "--save", "--png", str(tmp_path / "u.png")])
    assert rc == 0
    saved = load_settings(cfg)
    assert (saved.source, saved.label) == (str(src), "Rate")
