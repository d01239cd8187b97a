"""
Release section parsing.

Turns one RawSection into a ParsedSection:
- "## 2.1.0 (2024-01-05)" gives the title "2.1.0" and the date 2024-01-05
- short issue references are rewritten into links
- the Committers block is registered into the run's AuthorRegistry and
  removed from the body
- "####" sub-headings are promoted to "##"

Sections without a title or a valid date are rejected rather than guessed.
"""

from __future__ import annotations

from datetime import date
import logging
import re

from .authors import AuthorRegistry, extract_committers, parse_contributor_line
from .links import LinkRewriter
from .types import ContributorEntry, ParsedSection, RawSection, SectionParse


logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^##[ \t]+(?P<heading>.*?)[ \t]*$", re.MULTILINE)
TITLE_DATE_RE = re.compile(r"^(?P<title>.*?)\s*\((?P<date>[^()]*)\)$")
H4_RE = re.compile(r"^####(?=\s)", re.MULTILINE)

# Emoji shortcode that the site's emoji set does not ship.
EMOJI_RENAMES = {"running_woman": "running"}

MISSING_TITLE = "missing_title"
MISSING_DATE = "missing_date"
INVALID_DATE = "invalid_date"


def split_heading(heading: str) -> tuple[str, str | None]:
    """Split "2.1.0 (2024-01-05)" into ("2.1.0", "2024-01-05")."""
    match = TITLE_DATE_RE.match(heading)
    if match is None:
        return heading.strip(), None
    return match.group("title").strip(), match.group("date").strip()


def parse_section(
    section: RawSection,
    links: LinkRewriter,
    authors: AuthorRegistry,
    avatar_host: str = "github.com",
) -> SectionParse:
    heading_match = HEADING_RE.search(section.text)
    if heading_match is None:
        return SectionParse(reason=MISSING_TITLE)

    heading = heading_match.group("heading")
    title, date_text = split_heading(heading)
    if not title:
        return SectionParse(reason=MISSING_TITLE, heading=heading)
    if not date_text:
        return SectionParse(reason=MISSING_DATE, heading=heading)
    try:
        release_date = date.fromisoformat(date_text)
    except ValueError:
        return SectionParse(reason=INVALID_DATE, heading=heading)

    body = section.text[: heading_match.start()] + section.text[heading_match.end():]
    body = links.rewrite(body)

    body, item_lines = extract_committers(body)
    contributors = _parse_contributors(item_lines, avatar_host)
    authors.register_all(contributors)

    for old, new in EMOJI_RENAMES.items():
        body = body.replace(old, new)
    body = H4_RE.sub("##", body)

    return SectionParse(
        section=ParsedSection(
            title=title,
            date=release_date,
            body=body.strip(),
            authors=list(dict.fromkeys(c.alias for c in contributors)),
            index=section.index,
        ),
        heading=heading,
    )


def _parse_contributors(lines: list[str], avatar_host: str) -> list[ContributorEntry]:
    contributors: list[ContributorEntry] = []
    for line in lines:
        contributor = parse_contributor_line(line, avatar_host)
        if contributor is None:
            logger.debug("Skipping malformed contributor line: %s", line)
            continue
        contributors.append(contributor)
    contributors.sort(key=lambda c: c.url)
    return contributors
