"""Entry materializer for the generated changelog content store.

Every parsed release becomes one markdown file with YAML frontmatter, named
``{date}-{title}.md``, inside a single generate directory. The author registry
is written next to the entries as ``authors.json``.

The generate directory is rebuilt from scratch on every run: the complete set
of files is written into a staging directory beside it and then swapped into
place, so entries for removed releases disappear and an interrupted run never
leaves a half-cleared store behind.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
import os
from pathlib import Path
import re
import shutil
import tempfile

import yaml

from changelog_feed.core.authors import AuthorRegistry
from changelog_feed.core.types import ParsedSection


logger = logging.getLogger(__name__)

CHANGELOG_TAG = "changelog"
_UNSAFE_FILENAME_RE = re.compile(r"[\\/]")


def entry_filename(section: ParsedSection) -> str:
    """Return the deterministic file name for a section.

    Args:
        section: The parsed release section

    Returns:
        ``{date}-{title}.md`` with path separators in the title replaced
    """
    title = _UNSAFE_FILENAME_RE.sub("-", section.title)
    return f"{section.date.isoformat()}-{title}.md"


def render_frontmatter(section: ParsedSection) -> str:
    """Render the YAML frontmatter block (without the ``---`` fences).

    Fields, in order: ``date`` (synthetic timestamp), ``version``, ``tags``
    and ``authors`` when the release lists contributors.
    """
    data: dict[str, object] = {
        "date": section.timestamp or section.date.isoformat(),
        "version": section.title,
        "tags": [section.title, CHANGELOG_TAG],
    }
    if section.authors:
        data["authors"] = list(section.authors)
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


def render_entry(section: ParsedSection) -> str:
    """Render the full entry file: frontmatter, title heading and body."""
    parts = ["---\n", render_frontmatter(section), "---\n", "\n", f"# {section.title}\n"]
    if section.body:
        parts.append("\n")
        parts.append(f"{section.body}\n")
    return "".join(parts)


class EntryMaterializer:
    """Writes parsed sections and the author registry into the content store.

    Attributes:
        generate_dir: Directory fully owned and regenerated by the pipeline
        authors_filename: File name of the registry inside generate_dir
        write_concurrency: Number of threads used to write entry files
    """

    def __init__(
        self,
        generate_dir: Path,
        authors_filename: str = "authors.json",
        write_concurrency: int = 4,
    ):
        self.generate_dir = Path(generate_dir)
        self.authors_filename = authors_filename
        self.write_concurrency = max(1, int(write_concurrency))

    @property
    def authors_path(self) -> Path:
        """Returns path to the author registry file.

        Returns:
            Path object for authors.json inside the generate directory
        """
        return self.generate_dir / self.authors_filename

    def entry_path(self, section: ParsedSection) -> Path:
        """Returns the destination path of a section's entry file."""
        return self.generate_dir / entry_filename(section)

    def render(self, sections: list[ParsedSection], registry: AuthorRegistry) -> dict[str, str]:
        """Render the complete desired store contents in memory.

        Args:
            sections: Parsed sections with timestamps assigned, document order
            registry: Author registry for this run

        Returns:
            Mapping of file name to file content, entries first then registry
        """
        files: dict[str, str] = {}
        for section in sections:
            name = entry_filename(section)
            if name in files:
                logger.warning(
                    "Duplicate entry %s for release %s; keeping the first one", name, section.title
                )
                continue
            files[name] = render_entry(section)
        files[self.authors_filename] = f"{registry.dumps()}\n"
        return files

    def materialize(self, sections: list[ParsedSection], registry: AuthorRegistry) -> list[Path]:
        """Replace the store with entries for ``sections`` and the registry.

        Write failures propagate. The existing store is only replaced after
        every file has been written successfully.

        Returns:
            Paths of the written entry files (registry excluded)
        """
        files = self.render(sections, registry)
        parent = self.generate_dir.parent
        parent.mkdir(parents=True, exist_ok=True)

        staging = Path(tempfile.mkdtemp(prefix=f".{self.generate_dir.name}-new-", dir=parent))
        try:
            os.chmod(staging, 0o755)
            self._write_files(staging, files)
            self._swap(staging)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        logger.info("Materialized %d entries into %s", len(files) - 1, self.generate_dir)
        return [self.generate_dir / name for name in files if name != self.authors_filename]

    def _write_files(self, directory: Path, files: dict[str, str]) -> None:
        def _write(item: tuple[str, str]) -> None:
            name, content = item
            (directory / name).write_text(content, encoding="utf-8", newline="\n")

        if self.write_concurrency == 1:
            for item in files.items():
                _write(item)
            return

        with ThreadPoolExecutor(max_workers=self.write_concurrency) as executor:
            # list() re-raises the first write error
            list(executor.map(_write, files.items()))

    def _swap(self, staging: Path) -> None:
        target = self.generate_dir
        if not target.exists():
            os.replace(staging, target)
            return

        backup_root = Path(tempfile.mkdtemp(prefix=f".{target.name}-old-", dir=target.parent))
        backup = backup_root / target.name
        try:
            os.replace(target, backup)
        except OSError:
            shutil.rmtree(backup_root, ignore_errors=True)
            raise

        try:
            os.replace(staging, target)
        except OSError:
            # If the restore fails too, backup_root keeps the only copy.
            os.replace(backup, target)
            shutil.rmtree(backup_root, ignore_errors=True)
            raise
        shutil.rmtree(backup_root, ignore_errors=True)
