"""
Reading the changelog document.

The source is either a local file path or an http(s) URL. Any failure to
produce text (missing file, permission error, bad encoding, HTTP error) is
reported as a SourceError so the runner can fall back to the previous output.
"""

from __future__ import annotations

import logging
from pathlib import Path
import time

import httpx

from ..config import SourceConfig


logger = logging.getLogger(__name__)


class SourceError(Exception):
    """The changelog document could not be read."""

    def __init__(self, location: str, reason: str):
        super().__init__(f"Cannot read changelog from {location}: {reason}")
        self.location = location
        self.reason = reason


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def read_source(cfg: SourceConfig) -> str:
    """Return the changelog text described by ``cfg``.

    Raises:
        SourceError: if the document is missing or unreadable
    """
    if is_url(cfg.path):
        return fetch_source(cfg.path, cfg.timeout_seconds, cfg.retries)
    return read_file(Path(cfg.path))


def read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceError(str(path), f"{type(exc).__name__}: {exc}") from exc


def fetch_source(url: str, timeout: float, retries: int) -> str:
    """Fetch the changelog over HTTP, retrying with a linear backoff."""
    last_error = "no attempt made"
    for attempt in range(retries + 1):
        try:
            with httpx.Client(timeout=timeout, follow_redirects=True) as client:
                resp = client.get(url)
                resp.raise_for_status()
                logger.info("Fetched changelog from %s (%d chars)", url, len(resp.text))
                # match the BOM and newline handling of local reads
                return resp.text.lstrip("\ufeff").replace("\r\n", "\n")
        except httpx.HTTPError as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            logger.warning("Fetching %s failed (attempt %d): %s", url, attempt + 1, last_error)
            if attempt < retries:
                time.sleep(0.5 * (attempt + 1))
    raise SourceError(url, last_error)
