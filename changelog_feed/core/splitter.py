"""Split a changelog document into release sections."""

from __future__ import annotations

import re

from .types import RawSection


# "## 2.1.0 (2024-01-05)" starts a release; "## Committers: 3" belongs to one.
RELEASE_HEADING_RE = re.compile(r"^## (?!Committers:)", re.MULTILINE)


def split_sections(text: str) -> list[RawSection]:
    """Split the document at every release heading.

    Content before the first heading is front matter and is dropped. Each
    section runs up to (not including) the next release heading, verbatim.
    """
    starts = [match.start() for match in RELEASE_HEADING_RE.finditer(text)]
    sections: list[RawSection] = []
    for index, start in enumerate(starts):
        end = starts[index + 1] if index + 1 < len(starts) else len(text)
        sections.append(RawSection(index=index, text=text[start:end]))
    return sections
