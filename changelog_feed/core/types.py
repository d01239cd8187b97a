"""
Core data types for the changelog feed.

This module defines the data structures passed between pipeline stages:
- RawSection: One heading-delimited slice of the source changelog
- ContributorEntry: One committer listed under a release
- ParsedSection: A release with extracted title, date and rewritten body
- SectionParse: Outcome of parsing one section (parsed or rejected)
- LoadedEntry: A materialized entry read back from the content store
- RunResult: Summary of one pipeline run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any


@dataclass
class RawSection:
    """A contiguous slice of the changelog starting at a release heading.

    Attributes:
        index: 0-based position of the section in the document
        text: Section text, verbatim, heading line included
    """
    index: int
    text: str


@dataclass
class ContributorEntry:
    """A contributor parsed from a release's Committers block.

    Attributes:
        alias: Stable handle used as the registry key
        name: Display name, defaults to the alias when absent
        url: Profile URL
        image_url: Avatar URL derived from the alias
    """
    alias: str
    name: str
    url: str
    image_url: str

    def to_json(self) -> dict[str, str]:
        return {
            "name": self.name,
            "url": self.url,
            "alias": self.alias,
            "imageURL": self.image_url,
        }


@dataclass
class ParsedSection:
    """A release section after parsing.

    Attributes:
        title: Release title (version), parenthetical date removed
        date: Calendar date of the release
        body: Rewritten markdown body without heading or Committers block
        authors: Contributor aliases, ordered and de-duplicated
        index: Position of the source section in the document
        timestamp: Synthetic "YYYY-MM-DDTHH:00" slot, set by the allocator
    """
    title: str
    date: date
    body: str
    authors: list[str] = field(default_factory=list)
    index: int = 0
    timestamp: str | None = None


@dataclass
class SectionParse:
    """Outcome of parsing one RawSection.

    Exactly one of ``section`` and ``reason`` is set.
    """
    section: ParsedSection | None = None
    reason: str | None = None
    heading: str | None = None

    @property
    def ok(self) -> bool:
        return self.section is not None


@dataclass
class SkippedSection:
    index: int
    heading: str | None
    reason: str


@dataclass
class LoadedEntry:
    """A materialized entry loaded back from the content store.

    Attributes:
        path: Entry file path
        date: Frontmatter ``date`` value
        version: Frontmatter ``version`` value
        tags: Frontmatter ``tags`` list
        authors: Frontmatter ``authors`` list (empty when absent)
        body: Markdown after the frontmatter block
        permalink: Detail page route for the entry
        list_page_link: Route of the list page containing the entry
    """
    path: Path
    date: str
    version: str
    tags: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    body: str = ""
    permalink: str = ""
    list_page_link: str | None = None
    frontmatter: dict[str, Any] = field(default_factory=dict)


@dataclass
class RunResult:
    """Summary of one pipeline run.

    Attributes:
        written: Paths of entries written this run (empty on fallback)
        skipped: Sections dropped during parsing or time allocation
        fallback: True when the source could not be read and the previous
            store contents were reused
        entries: Entries loaded back from the store, paginated
        error: Source error message when ``fallback`` is True
    """
    written: list[Path] = field(default_factory=list)
    skipped: list[SkippedSection] = field(default_factory=list)
    fallback: bool = False
    entries: list[LoadedEntry] = field(default_factory=list)
    error: str | None = None
