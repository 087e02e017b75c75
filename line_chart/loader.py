from __future__ import annotations

import logging
import time
from pathlib import Path

import requests

from .config import ChartSettings
from .data_model import Dataset, InvalidDateError, LoadError
from .parse_tsv import parse_tsv

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def _read_once(source: str, timeout: float) -> str:
    if _is_url(source):
        resp = requests.get(source, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    return Path(source).read_text(encoding="utf-8")


def fetch_text(source: str, *, retries: int = 3, backoff: float = 0.5, timeout: float = 10.0) -> str:
    """
    Raw text of a local file or an http(s) URL.

    Failed attempts are retried with exponential backoff; LoadError is raised
    once ``retries`` attempts have failed.
    """
    try:
        attempts = max(1, int(retries))
        backoff = float(backoff)
    except (TypeError, ValueError) as e:
        raise LoadError(f"Bad retry settings for {source}: {e}") from e
    last: Exception | None = None
    for attempt in range(attempts):
        try:
            return _read_once(source, timeout)
        except (requests.RequestException, OSError, ValueError, TypeError) as e:
            # ValueError covers undecodable bytes and paths with NUL characters
            last = e
            logger.warning("fetch %s failed (attempt %d/%d): %s", source, attempt + 1, attempts, e)
            if attempt + 1 < attempts:
                time.sleep(backoff * (2 ** attempt))
    raise LoadError(f"Could not load {source}: {last}") from last


def load_dataset(source: str, settings: ChartSettings | None = None) -> Dataset:
    settings = settings or ChartSettings()
    text = fetch_text(source, retries=settings.retries, backoff=settings.backoff, timeout=settings.timeout)
    return parse_text(text, source, settings)


def parse_text(text: str, source: str, settings: ChartSettings) -> Dataset:
    try:
        return parse_tsv(text, label=settings.label)
    except (InvalidDateError, LoadError):
        raise
    except ValueError as e:
        raise LoadError(f"Could not parse {source}: {e}") from e
