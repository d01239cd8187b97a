"""
Contributor parsing and the per-run author registry.

Committers blocks are written by hand (or by lerna-changelog) in a few
slightly different shapes:

    - Jane Doe ([@jane](https://github.com/jane))
    - Jane (@jane)(https://github.com/jane))
    - [@jane](https://github.com/jane)

All of them carry an alias and a profile URL; the display name is optional.
"""

from __future__ import annotations

import json
import re
from typing import Iterable

from .types import ContributorEntry


COMMITTERS_HEADING_RE = re.compile(r"^#{2,4} Committers: \d+.*$", re.MULTILINE)
CONTRIBUTOR_RE = re.compile(
    r"^-\s+(?:(?P<name>.*?)\s*\()?\[?@(?P<alias>[^\s\[\]()]+)[\])]?\((?P<url>[^()\s]+)\)\)?"
)


def avatar_url(alias: str, host: str = "github.com") -> str:
    return f"https://{host}/{alias}.png"


def parse_contributor_line(line: str, avatar_host: str = "github.com") -> ContributorEntry | None:
    """Parse one Committers list item.

    Returns None for lines that do not carry an alias and profile URL.
    """
    match = CONTRIBUTOR_RE.match(line.strip())
    if match is None:
        return None
    alias = match.group("alias")
    name = (match.group("name") or "").strip() or alias
    return ContributorEntry(
        alias=alias,
        name=name,
        url=match.group("url"),
        image_url=avatar_url(alias, avatar_host),
    )


def extract_committers(body: str) -> tuple[str, list[str]]:
    """Split a section body into (body without Committers block, list item lines).

    The block is the Committers heading plus the list items and blank lines
    that follow it. Anything after the first other line stays in the body.
    """
    match = COMMITTERS_HEADING_RE.search(body)
    if match is None:
        return body, []

    items: list[str] = []
    end = match.end()
    rest = body[end:]
    consumed = 0
    for line in rest.splitlines(keepends=True):
        stripped = line.strip()
        if stripped.startswith("- "):
            items.append(stripped)
        elif stripped:
            break
        consumed += len(line)

    remaining = body[: match.start()] + rest[consumed:]
    return remaining, items


class AuthorRegistry:
    """Alias -> ContributorEntry mapping shared by all sections of one run.

    A new registry must be created for every run; it is never carried over.
    Registering an alias twice keeps the last record.
    """

    def __init__(self) -> None:
        self._authors: dict[str, ContributorEntry] = {}

    def register(self, contributor: ContributorEntry) -> None:
        self._authors[contributor.alias] = contributor

    def register_all(self, contributors: Iterable[ContributorEntry]) -> None:
        for contributor in contributors:
            self.register(contributor)

    def get(self, alias: str) -> ContributorEntry | None:
        return self._authors.get(alias)

    def aliases(self) -> list[str]:
        return list(self._authors)

    def __contains__(self, alias: object) -> bool:
        return alias in self._authors

    def __len__(self) -> int:
        return len(self._authors)

    def to_json(self) -> dict[str, dict[str, str]]:
        return {alias: entry.to_json() for alias, entry in self._authors.items()}

    def dumps(self) -> str:
        return json.dumps(self.to_json(), indent=2, ensure_ascii=False)
