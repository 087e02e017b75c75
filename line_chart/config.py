from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .parse_tsv import DEFAULT_LABEL
from .scales import Margins

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".multiline_chart.json"
SOURCE_ENV = "MULTILINE_SOURCE"


@dataclass
class ChartSettings:
    source: str = "unemployment.tsv"
    label: str = DEFAULT_LABEL
    viewport_fraction: float = 0.8
    margin_top: float = 20.0
    margin_right: float = 20.0
    margin_bottom: float = 30.0
    margin_left: float = 30.0
    retries: int = 3
    backoff: float = 0.5
    timeout: float = 10.0

    def margins(self) -> Margins:
        return Margins(
            top=self.margin_top,
            right=self.margin_right,
            bottom=self.margin_bottom,
            left=self.margin_left,
        )


def _same_kind(value, default) -> bool:
    if isinstance(default, bool) or isinstance(value, bool):
        return type(value) is type(default)
    if isinstance(default, float):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))


def load_settings(path: Optional[Path] = None) -> ChartSettings:
    """
    Settings from the JSON config file, with ``MULTILINE_SOURCE`` overriding the source.
    A missing or corrupt file yields defaults; unknown keys and values of the wrong type are ignored.
    """
    path = path or CONFIG_PATH
    settings = ChartSettings()
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # a broken config must not keep the app from starting
            logger.warning("ignoring unreadable config %s: %s", path, e)
            data = {}
        if isinstance(data, dict):
            defaults = asdict(settings)
            merged = dict(defaults)
            for k, v in data.items():
                if k not in defaults:
                    continue
                if not _same_kind(v, defaults[k]):
                    logger.warning("ignoring config %s=%r: expected %s", k, v, type(defaults[k]).__name__)
                    continue
                merged[k] = v
            settings = ChartSettings(**merged)

    env_source = os.environ.get(SOURCE_ENV, "").strip()
    if env_source:
        settings.source = env_source
    return settings


def save_settings(settings: ChartSettings, path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
