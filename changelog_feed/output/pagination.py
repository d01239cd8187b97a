"""
Loading materialized entries back and computing their list/detail routes.

The site lists entries newest first, ``page_size`` per page. Each entry
carries a link back to the list page that contains it, and a permalink to
its detail page (``/changelog/YYYY/MM/DD/<version>``).
"""

from __future__ import annotations

import logging
from pathlib import Path
import re

import yaml

from changelog_feed.core.types import LoadedEntry


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"\A---\n(?P<meta>.*?)\n---\n(?P<body>.*)\Z", re.DOTALL)
DATED_NAME_RE = re.compile(r"^(?P<y>\d{4})-(?P<m>\d{2})-(?P<d>\d{2})-(?P<slug>.+)$")


def join_route(*parts: str) -> str:
    """Join URL path segments with single slashes, always rooted at "/"."""
    segments = [part.strip("/") for part in parts if part and part.strip("/")]
    return "/" + "/".join(segments)


def list_page_link(position: int, page_size: int, route_base_path: str) -> str:
    """Return the list page route for the entry at ``position`` (0-based)."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    page_index = position // page_size
    if page_index == 0:
        return join_route(route_base_path)
    return join_route(route_base_path, "page", str(page_index + 1))


def permalink(path: Path, route_base_path: str) -> str:
    """Return the detail route for an entry file named ``YYYY-MM-DD-<slug>.md``."""
    match = DATED_NAME_RE.match(path.stem)
    if match is None:
        return join_route(route_base_path, path.stem)
    return join_route(
        route_base_path, match.group("y"), match.group("m"), match.group("d"), match.group("slug")
    )


def parse_entry(path: Path, text: str, route_base_path: str = "/changelog") -> LoadedEntry | None:
    """Parse one entry file. Returns None when the frontmatter is unusable."""
    match = FRONTMATTER_RE.match(text)
    if match is None:
        return None
    try:
        meta = yaml.safe_load(match.group("meta")) or {}
    except yaml.YAMLError:
        return None
    if not isinstance(meta, dict) or "date" not in meta or "version" not in meta:
        return None

    return LoadedEntry(
        path=path,
        date=str(meta["date"]),
        version=str(meta["version"]),
        tags=[str(tag) for tag in meta.get("tags") or []],
        authors=[str(alias) for alias in meta.get("authors") or []],
        body=match.group("body").lstrip("\n"),
        permalink=permalink(path, route_base_path),
        frontmatter=meta,
    )


def load_entries(generate_dir: Path, route_base_path: str = "/changelog") -> list[LoadedEntry]:
    """Load every entry in ``generate_dir``, newest first.

    Files that cannot be parsed are skipped with a warning. A missing
    directory yields no entries.
    """
    if not generate_dir.is_dir():
        return []

    entries: list[LoadedEntry] = []
    for path in sorted(generate_dir.glob("*.md")):
        entry = parse_entry(path, path.read_text(encoding="utf-8"), route_base_path)
        if entry is None:
            logger.warning("Skipping entry with unreadable frontmatter: %s", path.name)
            continue
        entries.append(entry)

    entries.sort(key=lambda e: (e.date, e.path.name), reverse=True)
    return entries


def annotate_pagination(
    entries: list[LoadedEntry], page_size: int, route_base_path: str = "/changelog"
) -> list[LoadedEntry]:
    """Set ``list_page_link`` on every entry from its position in ``entries``.

    Must be re-run whenever the entry list changes: the link depends on
    position and total ordering, not on the entry itself.
    """
    for position, entry in enumerate(entries):
        entry.list_page_link = list_page_link(position, page_size, route_base_path)
    return entries


def latest_entry(entries: list[LoadedEntry]) -> LoadedEntry | None:
    """Return the newest entry, or None for an empty store."""
    if not entries:
        return None
    return max(entries, key=lambda e: (e.date, e.path.name))
