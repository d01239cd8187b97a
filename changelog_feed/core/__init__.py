"""
Core domain models and parsing logic.

This package contains the data types and the per-section parsing steps,
independent of where the changelog comes from or where entries are written.
"""

from .authors import AuthorRegistry, parse_contributor_line
from .links import LinkRewriter
from .publish_time import PublishTimeRegistry
from .sections import parse_section
from .splitter import split_sections
from .types import (
    ContributorEntry,
    LoadedEntry,
    ParsedSection,
    RawSection,
    RunResult,
    SectionParse,
    SkippedSection,
)

__all__ = [
    "AuthorRegistry",
    "ContributorEntry",
    "LinkRewriter",
    "LoadedEntry",
    "ParsedSection",
    "PublishTimeRegistry",
    "RawSection",
    "RunResult",
    "SectionParse",
    "SkippedSection",
    "parse_contributor_line",
    "parse_section",
    "split_sections",
]
